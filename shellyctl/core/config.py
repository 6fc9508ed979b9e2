"""Configuration file loading and device name resolution."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from shellyctl.core.errors import ConfigError, ConstructionError
from shellyctl.core.model import DeviceAddress
from shellyctl.transports.base import DEFAULT_TIMEOUT_S

DEFAULT_TRANSPORT = "rpc"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class DeviceEntry:
    name: str
    address: DeviceAddress
    transport: str = DEFAULT_TRANSPORT
    timeout_s: float = DEFAULT_TIMEOUT_S
    configured: bool = False


@dataclass(frozen=True)
class Config:
    devices: dict[str, DeviceEntry] = field(default_factory=dict)
    default_device: str | None = None


def _load_schema_validator() -> Any:
    schema_text = resources.files("shellyctl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "shellyctl/config.yaml"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at root")
    return loaded


def _build_config(doc: dict[str, Any], source: Path) -> Config:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    devices: dict[str, DeviceEntry] = {}
    for name, spec in doc.get("devices", {}).items():
        try:
            address = DeviceAddress.parse(spec["host"])
        except ConstructionError as exc:
            raise ConfigError(f"Device '{name}' in {source}: {exc}") from exc
        devices[name] = DeviceEntry(
            name=name,
            address=address,
            transport=spec.get("transport", DEFAULT_TRANSPORT),
            timeout_s=float(spec.get("timeout_s", DEFAULT_TIMEOUT_S)),
            configured=True,
        )

    default_device = doc.get("default_device")
    if default_device is not None and default_device not in devices:
        raise ConfigError(f"default_device '{default_device}' in {source} is not a configured device")
    return Config(devices=devices, default_device=default_device)


def load_config(path: Path | None = None) -> Config:
    """Load the config file, or return an empty Config when none exists."""
    source = path or config_path()
    if not source.exists():
        LOGGER.debug("No config file at %s", source)
        return Config()
    return _build_config(_read_yaml(source), source)


def resolve_device(config: Config, hint: str | None) -> DeviceEntry:
    """Map a device name or bare address to a DeviceEntry.

    Configured names win over addresses; without a hint the default device is
    used.
    """
    if hint is None:
        if config.default_device is None:
            raise ConfigError("No device given. Pass --ip or set default_device in the config file.")
        return config.devices[config.default_device]

    entry = config.devices.get(hint)
    if entry is not None:
        return entry
    return DeviceEntry(name=hint, address=DeviceAddress.parse(hint))


def apply_overrides(
    entry: DeviceEntry,
    *,
    transport: str | None = None,
    timeout_s: float | None = None,
) -> DeviceEntry:
    """Return `entry` with command-line transport/timeout applied.

    Overriding a value that came from the config file is logged at WARNING.
    """
    changes: dict[str, Any] = {}
    if transport is not None and transport != entry.transport:
        changes["transport"] = transport
    if timeout_s is not None and timeout_s != entry.timeout_s:
        changes["timeout_s"] = timeout_s
    if not changes:
        return entry
    if entry.configured:
        for key, value in changes.items():
            LOGGER.warning(
                "Overriding configured %s=%s for device '%s' with %s",
                key,
                getattr(entry, key),
                entry.name,
                value,
            )
    return replace(entry, **changes)
