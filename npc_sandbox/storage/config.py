"""Global game configuration (LLM tiers, base location, turn policy).

Credential pools are never stored here; they come from the FAST_KEYS and
DEEP_KEYS environment variables (see npc_sandbox.llm).
"""

import json
from pathlib import Path
from typing import Any

from .core import data_dir

_CONFIG_DEFAULTS: dict[str, Any] = {
    "tiers": {
        "fast": {
            "url": "https://api.groq.com/openai/v1/chat/completions",
            "model": "llama3-8b-8192",
            "temperature": 0.7,
            "max_tokens": 800,
            "json_mode": True,
            "timeout": 30,
        },
        "deep": {
            "url": "https://api.siliconflow.cn/v1/chat/completions",
            "model": "deepseek-ai/DeepSeek-V3",
            "temperature": 0.7,
            "max_tokens": 2000,
            "json_mode": False,
            "timeout": 50,
        },
    },
    "base_location": "camp",
    "decision_fallback": "passthrough",  # "passthrough" | "defaults"
    "narrate_turns": True,
    "turn_timeout": 60,
    "memory_limit": 3,
    "log_limit": 50,
}

_SCALAR_KEYS = (
    "base_location",
    "decision_fallback",
    "narrate_turns",
    "turn_timeout",
    "memory_limit",
    "log_limit",
)


def _config_path() -> Path:
    return data_dir() / "config.json"


def _merge_tiers(target: dict[str, Any], tiers: dict[str, Any]) -> None:
    for tier, vals in tiers.items():
        if tier in target and isinstance(vals, dict):
            target[tier].update(vals)


def get_config() -> dict[str, Any]:
    """Read config, returning defaults merged with stored values."""
    config: dict[str, Any] = json.loads(json.dumps(_CONFIG_DEFAULTS))
    path = _config_path()
    if path.is_file():
        stored = json.loads(path.read_text())
        if "tiers" in stored:
            _merge_tiers(config["tiers"], stored["tiers"])
        for key in _SCALAR_KEYS:
            if key in stored:
                config[key] = stored[key]
    return config


def update_config(fields: dict[str, Any]) -> dict[str, Any]:
    """Merge fields into config and persist. Returns full config."""
    config = get_config()
    if "tiers" in fields:
        _merge_tiers(config["tiers"], fields["tiers"])
    for key in _SCALAR_KEYS:
        if key in fields:
            config[key] = fields[key]
    if config["decision_fallback"] not in ("passthrough", "defaults"):
        raise ValueError(f"Unknown decision_fallback: {config['decision_fallback']!r}")
    _config_path().write_text(json.dumps(config, indent=2))
    return config
