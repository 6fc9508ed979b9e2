from __future__ import annotations

import pytest

from shellyctl.core.catalog import (
    CATALOG,
    SWITCH_OFF,
    SWITCH_ON_WITH_TIMER,
    SWITCH_RESET_COUNTERS,
    bind_params,
    get_operation,
)
from shellyctl.core.errors import CallParameterError
from shellyctl.core.model import SwitchCounters, SwitchWasOn


def test_catalog_lists_every_operation() -> None:
    assert set(CATALOG) == {
        "switch_on",
        "switch_on_with_timer",
        "switch_off",
        "switch_toggle",
        "switch_get_status",
        "switch_get_config",
        "switch_reset_counters",
        "device_get_info",
    }
    assert CATALOG["switch_on"].method == "Switch.Set"
    assert CATALOG["device_get_info"].params == ()
    assert SWITCH_OFF.result is SwitchWasOn
    assert SWITCH_RESET_COUNTERS.result is SwitchCounters


def test_bind_params_orders_by_declaration() -> None:
    bound = bind_params(SWITCH_ON_WITH_TIMER, {"toggle_after": 5, "on": True, "id": 2})
    assert list(bound) == ["id", "on", "toggle_after"]


def test_bind_params_requires_timer_delay() -> None:
    with pytest.raises(CallParameterError, match="toggle_after"):
        bind_params(SWITCH_ON_WITH_TIMER, {"id": 0, "on": True})


def test_bind_params_rejects_unknown_parameter() -> None:
    with pytest.raises(CallParameterError, match="does not accept"):
        bind_params(SWITCH_OFF, {"id": 0, "on": False, "toggle_after": 3})


def test_bind_params_keeps_bool_and_int_apart() -> None:
    with pytest.raises(CallParameterError):
        bind_params(SWITCH_OFF, {"id": True, "on": False})
    with pytest.raises(CallParameterError):
        bind_params(SWITCH_OFF, {"id": 0, "on": 0})


def test_unknown_operation_lists_available() -> None:
    with pytest.raises(CallParameterError) as exc:
        get_operation("switch_explode")
    assert "switch_on" in str(exc.value)
