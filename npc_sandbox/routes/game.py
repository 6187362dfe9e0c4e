"""Turn-advance and whisper (message-injection) endpoints."""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request

from npc_sandbox import storage
from npc_sandbox.pipeline import run_turn

from .models import WhisperBody

logger = logging.getLogger(__name__)

router = APIRouter()

# One turn at a time per process; the world singleton is read-modify-write.
_turn_lock = asyncio.Lock()


@router.post("/turn")
async def advance_turn(request: Request):
    """Resolve one full turn for every alive NPC."""
    if _turn_lock.locked():
        raise HTTPException(409, "A turn is already in progress")

    async with _turn_lock:
        config = storage.get_config()
        try:
            return await asyncio.wait_for(
                run_turn(request.app.state.llm, config),
                timeout=config["turn_timeout"],
            )
        except asyncio.TimeoutError:
            logger.error("Turn exceeded %ss and was abandoned", config["turn_timeout"])
            raise HTTPException(504, "Turn timed out")
        except Exception:
            logger.exception("Turn failed")
            raise HTTPException(500, "Turn failed")


@router.post("/whisper")
async def whisper(body: WhisperBody):
    """Plant a maximum-importance memory in one NPC's head."""
    if not body.npc_id or not body.message or not body.message.strip():
        raise HTTPException(400, "Missing parameters")

    npc = storage.get_npc(body.npc_id)
    if not npc:
        raise HTTPException(404, "NPC not found")

    try:
        storage.add_whisper(npc["name"], body.message.strip())
    except OSError:
        logger.exception("Whisper failed")
        raise HTTPException(500, "Failed to whisper")

    return {"success": True}
