from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from shellyctl import cli
from shellyctl.core.errors import TransportConnectError
from shellyctl.core.model import DeviceInfo, SwitchConfig, SwitchStatus, SwitchWasOn


class FakeClient:
    instances: list[FakeClient] = []

    def __init__(self, address: Any, *, transport: str = "rpc", timeout_s: float = 5.0) -> None:
        self.address = address
        self.transport = transport
        self.timeout_s = timeout_s
        self.calls: list[tuple[str, tuple[int, ...]]] = []
        FakeClient.instances.append(self)

    def switch_on(self, relay: int) -> SwitchWasOn:
        self.calls.append(("switch_on", (relay,)))
        return SwitchWasOn(was_on=False)

    def switch_on_with_timer(self, relay: int, delay: int) -> SwitchWasOn:
        self.calls.append(("switch_on_with_timer", (relay, delay)))
        return SwitchWasOn(was_on=True)

    def switch_off(self, relay: int) -> SwitchWasOn:
        self.calls.append(("switch_off", (relay,)))
        return SwitchWasOn(was_on=True)

    def switch_toggle(self, relay: int) -> SwitchWasOn:
        self.calls.append(("switch_toggle", (relay,)))
        return SwitchWasOn(was_on=True)

    def switch_get_status(self, relay: int) -> SwitchStatus:
        self.calls.append(("switch_get_status", (relay,)))
        return SwitchStatus(id=relay, output=True, apower=12.5)

    def switch_get_config(self, relay: int) -> SwitchConfig:
        self.calls.append(("switch_get_config", (relay,)))
        return SwitchConfig(id=relay, name="Lamp")

    def switch_reset_counters(self, relay: int) -> Any:
        raise TransportConnectError("Could not reach 10.0.0.9: Connection refused")

    def get_device_info(self) -> DeviceInfo:
        self.calls.append(("get_device_info", ()))
        return DeviceInfo(id="shellyplus1pm-a8", gen=2)


runner = CliRunner()


@pytest.fixture(autouse=True)
def _fake_client(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    FakeClient.instances = []
    monkeypatch.setattr(cli, "Client", FakeClient)


def test_switch_on_prints_record() -> None:
    result = runner.invoke(cli.app, ["--ip", "10.0.0.9", "switch", "on"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"was_on": False}
    assert FakeClient.instances[0].calls == [("switch_on", (0,))]


def test_switch_on_with_off_delay_uses_timer() -> None:
    result = runner.invoke(cli.app, ["-i", "10.0.0.9", "-r", "1", "switch", "on", "--off-delay", "10"])
    assert result.exit_code == 0
    assert FakeClient.instances[0].calls == [("switch_on_with_timer", (1, 10))]


def test_switch_without_subcommand_prints_config() -> None:
    result = runner.invoke(cli.app, ["--ip", "10.0.0.9", "switch"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["name"] == "Lamp"


def test_status_renders_nested_records() -> None:
    result = runner.invoke(cli.app, ["--ip", "10.0.0.9", "--relay", "2", "switch", "status"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["id"] == 2
    assert payload["temperature"] == {"t_c": 0.0, "t_f": 0.0}
    assert payload["aenergy"]["by_minute"] == []


def test_off_toggle_and_info() -> None:
    for args, call in (
        (["switch", "off"], "switch_off"),
        (["switch", "toggle"], "switch_toggle"),
        (["info"], "get_device_info"),
    ):
        result = runner.invoke(cli.app, ["--ip", "10.0.0.9", *args])
        assert result.exit_code == 0
        assert FakeClient.instances[-1].calls[0][0] == call


def test_transport_and_timeout_options_reach_client() -> None:
    result = runner.invoke(cli.app, ["--ip", "10.0.0.9", "-t", "http", "--timeout", "2", "info"])
    assert result.exit_code == 0
    client = FakeClient.instances[0]
    assert client.transport == "http"
    assert client.timeout_s == 2.0
    assert client.address.host == "10.0.0.9"


def test_configured_device_name_resolves(tmp_path: Path) -> None:
    config = tmp_path / "cfg" / "shellyctl" / "config.yaml"
    config.parent.mkdir(parents=True)
    config.write_text(
        "default_device: porch\ndevices:\n  porch:\n    host: 192.168.1.44\n    transport: http\n",
        encoding="utf-8",
    )

    result = runner.invoke(cli.app, ["switch", "toggle"])
    assert result.exit_code == 0
    client = FakeClient.instances[0]
    assert client.address.host == "192.168.1.44"
    assert client.transport == "http"


def test_error_is_clean() -> None:
    result = runner.invoke(cli.app, ["--ip", "10.0.0.9", "switch", "reset"])
    assert result.exit_code == 1
    assert "Error: Could not reach 10.0.0.9" in result.stderr
    assert "Traceback" not in result.stdout
    assert "Traceback" not in result.stderr


def test_missing_device_is_clean_error() -> None:
    result = runner.invoke(cli.app, ["switch", "status"])
    assert result.exit_code == 1
    assert "No device given" in result.stderr


def test_invalid_address_is_clean_error() -> None:
    result = runner.invoke(cli.app, ["--ip", "http://10.0.0.9", "info"])
    assert result.exit_code == 1
    assert "Error:" in result.stderr
