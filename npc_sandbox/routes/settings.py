"""Health check and settings endpoints."""

from fastapi import APIRouter, HTTPException, Request

from npc_sandbox import storage

from .models import UpdateSettings

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/settings")
async def get_settings():
    """Get LLM tier settings and turn policy. API keys are never returned."""
    return storage.get_config()


@router.patch("/settings")
async def update_settings(body: UpdateSettings, request: Request):
    """Update settings (partial merge) and hand new tier settings to the gateway."""
    fields = body.model_dump(exclude_none=True)
    try:
        config = storage.update_config(fields)
    except ValueError as e:
        raise HTTPException(400, str(e))
    request.app.state.llm.configure(config["tiers"])
    return config
