"""Event handler composition.

A widget wires its own handler to an interactive element, and the consumer
may want to attach one to the same event.  :func:`call_all` joins them so
neither is lost.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

HANDLER_PREFIX = "on_"

Handler = Callable[..., Any]


def is_handler_key(key: str) -> bool:
    """Return ``True`` for prop names that carry event handlers (``on_click``...)."""
    return key.startswith(HANDLER_PREFIX) and len(key) > len(HANDLER_PREFIX)


def call_all(*handlers: Handler | None) -> Callable[..., None]:
    """Compose *handlers* into one, skipping ``None`` entries.

    The composed handler calls each remaining handler in order with the
    same arguments.  The first exception aborts the rest and propagates.
    """
    active = tuple(handler for handler in handlers if handler is not None)

    def composed(*args: Any, **kwargs: Any) -> None:
        for handler in active:
            handler(*args, **kwargs)

    return composed
