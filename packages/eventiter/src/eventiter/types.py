"""
Core type definitions — result and option models.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel

DEFAULT_ERROR_EVENT = "error"


# ─── Results ──────────────────────────────────────────────────────────────────

class IterResult(BaseModel):
    """Outcome of a pull request: the payload (``value``) or the end marker (``done``)."""
    value: Any = None
    done: bool = False

    model_config = {"frozen": True}


DONE = IterResult(value=None, done=True)


# ─── Options ──────────────────────────────────────────────────────────────────

class ListenerOptions(BaseModel):
    once: bool = False


class OnOptions(BaseModel):
    """Options for on() / once()."""
    error_event: str = DEFAULT_ERROR_EVENT
    loop: Any | None = None  # asyncio.AbstractEventLoop; defaults to the running loop

    model_config = {"arbitrary_types_allowed": True}
