"""JSON-RPC over HTTP POST transport."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from shellyctl.core.encoding import encode_call
from shellyctl.core.model import DeviceAddress
from shellyctl.transports.base import DEFAULT_TIMEOUT_S
from shellyctl.transports.exchange import exchange


class RpcTransport:
    envelope = True

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

    @property
    def endpoint(self) -> str:
        return f"{self.address.base_url}/rpc"

    def execute(self, method: str, params: Mapping[str, Any]) -> bytes:
        return exchange(
            "POST",
            self.endpoint,
            content=encode_call(method, params),
            headers={"Content-Type": "application/json"},
            timeout_s=self.timeout_s,
            http_transport=self._http_transport,
        )
