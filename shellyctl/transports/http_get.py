"""Legacy HTTP GET transport with query-string parameters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from shellyctl.core.encoding import legacy_path
from shellyctl.core.model import DeviceAddress
from shellyctl.transports.base import DEFAULT_TIMEOUT_S
from shellyctl.transports.exchange import exchange


class HttpGetTransport:
    envelope = False

    def __init__(
        self,
        address: DeviceAddress,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.address = address
        self.timeout_s = timeout_s
        self._http_transport = http_transport

    def url_for(self, method: str, params: Mapping[str, Any]) -> str:
        return f"{self.address.base_url}/rpc/{legacy_path(method, params)}"

    def execute(self, method: str, params: Mapping[str, Any]) -> bytes:
        return exchange(
            "GET",
            self.url_for(method, params),
            timeout_s=self.timeout_s,
            http_transport=self._http_transport,
        )
