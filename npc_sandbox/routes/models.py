"""Pydantic request/response models for API endpoints."""

from typing import Literal

from pydantic import BaseModel


class WhisperBody(BaseModel):
    # Optional here so missing values get a 400 from the route, not a 422.
    npc_id: str | None = None
    npc_name: str | None = None  # accepted from the dashboard; the stored name wins
    message: str | None = None


class TierSettings(BaseModel):
    url: str | None = None
    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    json_mode: bool | None = None
    timeout: float | None = None


class UpdateSettings(BaseModel):
    tiers: dict[Literal["fast", "deep"], TierSettings] | None = None
    base_location: str | None = None
    decision_fallback: Literal["passthrough", "defaults"] | None = None
    narrate_turns: bool | None = None
    turn_timeout: float | None = None
    memory_limit: int | None = None
    log_limit: int | None = None
