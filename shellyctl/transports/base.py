"""Transport interfaces."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

DEFAULT_TIMEOUT_S = 5.0


class Transport(Protocol):
    envelope: bool

    def execute(self, method: str, params: Mapping[str, Any]) -> bytes:
        """Run one request/reply exchange and return the raw reply body."""
