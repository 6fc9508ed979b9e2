"""Core data models shared by catalog, decoder, client and CLI."""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass, field

from shellyctl.core.errors import ConstructionError

DEFAULT_PORT = 80
_HOSTNAME_RE = re.compile(r"^(?=.{1,253}$)[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*$")


@dataclass(frozen=True)
class DeviceAddress:
    host: str
    port: int = DEFAULT_PORT

    @classmethod
    def parse(cls, text: str) -> DeviceAddress:
        """Parse `host`, `host:port`, `[v6]` or `[v6]:port`."""
        value = text.strip() if isinstance(text, str) else ""
        if not value:
            raise ConstructionError("Device address must not be empty")
        if "://" in value or "/" in value or any(ch.isspace() for ch in value):
            raise ConstructionError(f"Device address '{text}' must be a bare host, not a URL")

        port_text: str | None = None
        if value.startswith("["):
            host, sep, rest = value[1:].partition("]")
            if not sep:
                raise ConstructionError(f"Device address '{text}' has an unterminated IPv6 literal")
            if rest:
                if not rest.startswith(":"):
                    raise ConstructionError(f"Device address '{text}' is malformed")
                port_text = rest[1:]
            _require_ip(host, text, version=6)
        elif value.count(":") == 1:
            host, port_text = value.split(":")
            _require_host(host, text)
        elif ":" in value:
            host = value
            _require_ip(host, text, version=6)
        else:
            host = value
            _require_host(host, text)

        port = DEFAULT_PORT
        if port_text is not None:
            if not port_text.isdigit() or not 0 < int(port_text) < 65536:
                raise ConstructionError(f"Device address '{text}' has an invalid port")
            port = int(port_text)
        return cls(host=host, port=port)

    @property
    def base_url(self) -> str:
        return f"http://{self}"

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return host if self.port == DEFAULT_PORT else f"{host}:{self.port}"


def _require_ip(host: str, text: str, *, version: int) -> None:
    try:
        parsed = ipaddress.ip_address(host)
    except ValueError as exc:
        raise ConstructionError(f"Device address '{text}' is not a valid IP address") from exc
    if parsed.version != version:
        raise ConstructionError(f"Device address '{text}' is not a valid IPv{version} address")


def _require_host(host: str, text: str) -> None:
    if not _HOSTNAME_RE.match(host):
        raise ConstructionError(f"Device address '{text}' is not a valid host name or IPv4 address")


# Result records. Missing members decode to the defaults below; `key` metadata
# holds the wire name where it differs from the attribute.


@dataclass(frozen=True)
class SwitchWasOn:
    was_on: bool = False


@dataclass(frozen=True)
class EnergyCounter:
    total: float = 0.0
    by_minute: tuple[float, ...] = ()
    minute_ts: int = 0


@dataclass(frozen=True)
class Temperature:
    t_c: float = field(default=0.0, metadata={"key": "tC"})
    t_f: float = field(default=0.0, metadata={"key": "tF"})


@dataclass(frozen=True)
class SwitchStatus:
    id: int = 0
    source: str = ""
    output: bool = False
    apower: float = 0.0
    voltage: float = 0.0
    current: float = 0.0
    freq: float = 0.0
    pf: float = 0.0
    aenergy: EnergyCounter = field(default_factory=EnergyCounter)
    ret_aenergy: EnergyCounter = field(default_factory=EnergyCounter)
    temperature: Temperature = field(default_factory=Temperature)
    timer_started_at: float = 0.0
    timer_duration: float = 0.0


@dataclass(frozen=True)
class SwitchConfig:
    id: int = 0
    name: str | None = None
    mode: str = ""
    initial_state: str = ""
    auto_on: bool = False
    auto_on_delay: float = 0.0
    auto_off: bool = False
    auto_off_delay: float = 0.0
    autorecover_voltage_errors: bool = False
    power_limit: float = 0.0
    current_limit: float = 0.0
    undervoltage_limit: float = 0.0
    voltage_limit: float = 0.0


@dataclass(frozen=True)
class CounterTotal:
    total: float = 0.0


@dataclass(frozen=True)
class SwitchCounters:
    aenergy: CounterTotal = field(default_factory=CounterTotal)
    ret_aenergy: CounterTotal = field(default_factory=CounterTotal)


@dataclass(frozen=True)
class DeviceInfo:
    id: str = ""
    mac: str = ""
    model: str = ""
    gen: int = 0
    fw_id: str = ""
    ver: str = ""
    app: str = ""
    name: str | None = None
    auth_en: bool = False
    auth_domain: str | None = None
