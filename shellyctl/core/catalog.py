"""Fixed table of supported device operations."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from shellyctl.core.errors import CallParameterError
from shellyctl.core.model import DeviceInfo, SwitchConfig, SwitchCounters, SwitchStatus, SwitchWasOn

COUNTER_TYPES = ("aenergy", "ret_aenergy")

_KIND_TYPES: dict[str, type] = {"int": int, "bool": bool, "str": str}


@dataclass(frozen=True)
class Param:
    name: str
    kind: str
    required: bool = True


@dataclass(frozen=True)
class Operation:
    name: str
    method: str
    params: tuple[Param, ...]
    result: type


def counter_types_literal(types: Sequence[str]) -> str:
    """Render counter types the way the device parses them: ['a','b']."""
    return "[" + ",".join(f"'{item}'" for item in types) + "]"


_ID = Param("id", "int")
_ON = Param("on", "bool")

SWITCH_ON = Operation(
    name="switch_on",
    method="Switch.Set",
    params=(_ID, _ON, Param("toggle_after", "int", required=False)),
    result=SwitchWasOn,
)
SWITCH_ON_WITH_TIMER = Operation(
    name="switch_on_with_timer",
    method="Switch.Set",
    params=(_ID, _ON, Param("toggle_after", "int")),
    result=SwitchWasOn,
)
SWITCH_OFF = Operation(
    name="switch_off",
    method="Switch.Set",
    params=(_ID, _ON),
    result=SwitchWasOn,
)
SWITCH_TOGGLE = Operation(
    name="switch_toggle",
    method="Switch.Toggle",
    params=(_ID,),
    result=SwitchWasOn,
)
SWITCH_GET_STATUS = Operation(
    name="switch_get_status",
    method="Switch.GetStatus",
    params=(_ID,),
    result=SwitchStatus,
)
SWITCH_GET_CONFIG = Operation(
    name="switch_get_config",
    method="Switch.GetConfig",
    params=(_ID,),
    result=SwitchConfig,
)
SWITCH_RESET_COUNTERS = Operation(
    name="switch_reset_counters",
    method="Switch.ResetCounters",
    params=(_ID, Param("type", "str")),
    result=SwitchCounters,
)
DEVICE_GET_INFO = Operation(
    name="device_get_info",
    method="Shelly.GetDeviceInfo",
    params=(),
    result=DeviceInfo,
)

CATALOG: dict[str, Operation] = {
    op.name: op
    for op in (
        SWITCH_ON,
        SWITCH_ON_WITH_TIMER,
        SWITCH_OFF,
        SWITCH_TOGGLE,
        SWITCH_GET_STATUS,
        SWITCH_GET_CONFIG,
        SWITCH_RESET_COUNTERS,
        DEVICE_GET_INFO,
    )
}


def get_operation(name: str) -> Operation:
    operation = CATALOG.get(name)
    if operation is None:
        available = ", ".join(sorted(CATALOG))
        raise CallParameterError(f"Unknown operation '{name}'. Available: {available}")
    return operation


def bind_params(operation: Operation, values: Mapping[str, Any]) -> dict[str, Any]:
    """Build call parameters in the operation's declared order.

    Optional parameters given as None are left out. Unknown names, missing
    required parameters and values of the wrong kind raise CallParameterError.
    """
    declared = {param.name for param in operation.params}
    unknown = sorted(set(values) - declared)
    if unknown:
        raise CallParameterError(
            f"Operation '{operation.name}' does not accept parameter(s): {', '.join(unknown)}"
        )

    bound: dict[str, Any] = {}
    for param in operation.params:
        value = values.get(param.name)
        if value is None:
            if param.required:
                raise CallParameterError(
                    f"Operation '{operation.name}' requires parameter '{param.name}'"
                )
            continue
        expected = _KIND_TYPES[param.kind]
        # bool is an int subclass; keep the two kinds apart.
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise CallParameterError(
                f"Parameter '{param.name}' of '{operation.name}' must be {param.kind}, "
                f"got {type(value).__name__}"
            )
        bound[param.name] = value
    return bound
