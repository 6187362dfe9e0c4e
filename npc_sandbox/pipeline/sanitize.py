"""Best-effort cleanup of model text into something json.loads() accepts."""

import json
import re

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)

EMPTY_OBJECT = "{}"


def strip_fences(text: str) -> str:
    """Remove ```json / ``` markers and surrounding whitespace."""
    return _FENCE_RE.sub("", text).strip()


def has_object(text: str) -> bool:
    """True when the text holds a "{" with a "}" somewhere after it."""
    first = text.find("{")
    return first != -1 and text.rfind("}") > first


def sanitize(text: str | None) -> str:
    """Strip code fences and cut the outermost {...} span out of model output.

    Lossy on purpose: prose outside the first "{" and last "}" is dropped and
    nesting is not balance-checked, so two top-level objects come back as one
    (invalid) slice. Returns "{}" when there is nothing brace-shaped to keep.
    Never raises.
    """
    if not text:
        return EMPTY_OBJECT
    cleaned = strip_fences(text)
    try:
        json.loads(cleaned)
        return cleaned
    except ValueError:
        pass
    if not has_object(cleaned):
        return EMPTY_OBJECT
    return cleaned[cleaned.find("{"):cleaned.rfind("}") + 1]
