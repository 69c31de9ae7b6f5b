from __future__ import annotations

from typing import Any, Dict, List, Optional


class DelveError(Exception):
    """Base error for delve domain exceptions."""


class InvalidDungeonConfig(DelveError, ValueError):
    """Raised when a dungeon configuration is malformed.

    Generation refuses to start with a bad config rather than producing a
    partially built layout. ``errors`` holds the individual problems as
    ``{"loc": ..., "msg": ...}`` dictionaries.
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_human(self) -> str:
        parts = [str(self)]
        for e in self.errors:
            loc = ".".join(str(p) for p in e.get("loc", ())) or "<root>"
            parts.append(f" - at {loc}: {e.get('msg', '')}")
        return "\n".join(parts)
