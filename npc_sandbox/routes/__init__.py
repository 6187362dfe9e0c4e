"""FastAPI API endpoints under /api.

Endpoint groups: settings (health, settings), game (turn advance, whisper),
state (world, npcs, memories, locations, items, logs). The dashboard polls
the state group and posts to the game group.
"""

from fastapi import APIRouter

from .game import router as game_router
from .settings import router as settings_router
from .state import router as state_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(game_router)
router.include_router(state_router)
