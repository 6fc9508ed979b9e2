"""Typed client for a single Shelly relay device.

`Client` exposes one method per catalog operation and returns the decoded
record. Errors and records are re-exported here so callers need no imports
from `shellyctl.core`.
"""

from __future__ import annotations

from typing import Any

import httpx

from shellyctl.core.catalog import (
    CATALOG,
    COUNTER_TYPES,
    DEVICE_GET_INFO,
    SWITCH_GET_CONFIG,
    SWITCH_GET_STATUS,
    SWITCH_OFF,
    SWITCH_ON,
    SWITCH_ON_WITH_TIMER,
    SWITCH_RESET_COUNTERS,
    SWITCH_TOGGLE,
    Operation,
    counter_types_literal,
    get_operation,
)
from shellyctl.core.errors import (
    CallParameterError,
    ConfigError,
    ConstructionError,
    DeviceError,
    ProtocolError,
    ShellyctlError,
    TransportConnectError,
    TransportError,
    TransportStatusError,
    TransportTimeoutError,
)
from shellyctl.core.model import (
    CounterTotal,
    DeviceAddress,
    DeviceInfo,
    EnergyCounter,
    SwitchConfig,
    SwitchCounters,
    SwitchStatus,
    SwitchWasOn,
    Temperature,
)
from shellyctl.core.service import DeviceService, build_transport
from shellyctl.transports.base import DEFAULT_TIMEOUT_S, Transport

__all__ = [
    "ShellyctlError",
    "CallParameterError",
    "ConfigError",
    "ConstructionError",
    "DeviceError",
    "ProtocolError",
    "TransportError",
    "TransportConnectError",
    "TransportStatusError",
    "TransportTimeoutError",
    "CounterTotal",
    "DeviceAddress",
    "DeviceInfo",
    "EnergyCounter",
    "SwitchConfig",
    "SwitchCounters",
    "SwitchStatus",
    "SwitchWasOn",
    "Temperature",
    "CATALOG",
    "Operation",
    "Transport",
    "Client",
]


def _check_index(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CallParameterError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise CallParameterError(f"{name} must be non-negative, got {value}")
    return value


class Client:
    """Public client for one device.

    The address and transport are fixed at construction. Each method performs
    exactly one exchange and returns a typed record or raises a
    `ShellyctlError`; nothing is cached between calls.
    """

    def __init__(
        self,
        address: DeviceAddress | str,
        *,
        transport: str | Transport = "rpc",
        timeout_s: float = DEFAULT_TIMEOUT_S,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.address = address if isinstance(address, DeviceAddress) else DeviceAddress.parse(address)
        if isinstance(transport, str):
            transport = build_transport(
                self.address,
                transport,
                timeout_s=timeout_s,
                http_transport=http_transport,
            )
        self._service = DeviceService(transport)

    @property
    def transport(self) -> Transport:
        return self._service.transport

    def call(self, operation: Operation | str, **values: Any) -> Any:
        if isinstance(operation, str):
            operation = get_operation(operation)
        return self._service.call(operation, values)

    def switch_on(self, relay: int) -> SwitchWasOn:
        return self.call(SWITCH_ON, id=_check_index("relay", relay), on=True)

    def switch_on_with_timer(self, relay: int, delay: int) -> SwitchWasOn:
        return self.call(
            SWITCH_ON_WITH_TIMER,
            id=_check_index("relay", relay),
            on=True,
            toggle_after=_check_index("delay", delay),
        )

    def switch_off(self, relay: int) -> SwitchWasOn:
        return self.call(SWITCH_OFF, id=_check_index("relay", relay), on=False)

    def switch_toggle(self, relay: int) -> SwitchWasOn:
        return self.call(SWITCH_TOGGLE, id=_check_index("relay", relay))

    def switch_get_status(self, relay: int) -> SwitchStatus:
        return self.call(SWITCH_GET_STATUS, id=_check_index("relay", relay))

    def switch_get_config(self, relay: int) -> SwitchConfig:
        return self.call(SWITCH_GET_CONFIG, id=_check_index("relay", relay))

    def switch_reset_counters(self, relay: int) -> SwitchCounters:
        return self.call(
            SWITCH_RESET_COUNTERS,
            id=_check_index("relay", relay),
            type=counter_types_literal(COUNTER_TYPES),
        )

    def get_device_info(self) -> DeviceInfo:
        return self.call(DEVICE_GET_INFO)
