"""Operation dispatch used by the public client and the CLI."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from shellyctl.core.catalog import Operation, bind_params
from shellyctl.core.decoding import decode_reply
from shellyctl.core.errors import ConstructionError
from shellyctl.core.model import DeviceAddress
from shellyctl.transports.base import DEFAULT_TIMEOUT_S, Transport
from shellyctl.transports.http_get import HttpGetTransport
from shellyctl.transports.rpc import RpcTransport

TRANSPORTS: dict[str, type] = {"rpc": RpcTransport, "http": HttpGetTransport}
LOGGER = logging.getLogger(__name__)


def build_transport(
    address: DeviceAddress,
    kind: str,
    *,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    http_transport: httpx.BaseTransport | None = None,
) -> Transport:
    transport_cls = TRANSPORTS.get(kind)
    if transport_cls is None:
        available = ", ".join(sorted(TRANSPORTS))
        raise ConstructionError(f"Unknown transport '{kind}'. Available: {available}")
    if timeout_s <= 0:
        raise ConstructionError(f"Timeout must be positive, got {timeout_s}")
    return transport_cls(address, timeout_s=timeout_s, http_transport=http_transport)


class DeviceService:
    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def call(self, operation: Operation, values: Mapping[str, Any]) -> Any:
        params = bind_params(operation, values)
        LOGGER.debug("Calling %s with %s", operation.method, params)
        raw = self.transport.execute(operation.method, params)
        return decode_reply(raw, operation.result, envelope=self.transport.envelope)
