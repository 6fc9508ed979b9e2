"""Reply decoding into typed result records.

Replies are checked with a JSON schema derived from the record dataclass, so a
member of the wrong JSON type is reported with its path instead of surfacing
later as a bad attribute. Unknown members pass, missing or null members keep the
record's defaults.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import types
import typing
from functools import lru_cache
from typing import Any, TypeVar

from jsonschema import ValidationError, validators

from shellyctl.core.errors import DeviceError, ProtocolError

_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"
_JSON_TYPES: dict[type, str] = {bool: "boolean", int: "integer", float: "number", str: "string"}
LOGGER = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


def _is_optional(tp: Any) -> bool:
    return typing.get_origin(tp) in (types.UnionType, typing.Union) and type(None) in typing.get_args(tp)


def _unwrap_optional(tp: Any) -> Any:
    if _is_optional(tp):
        return next(arg for arg in typing.get_args(tp) if arg is not type(None))
    return tp


def _schema_for_type(tp: Any) -> dict[str, Any]:
    tp = _unwrap_optional(tp)
    if typing.get_origin(tp) is tuple:
        item_type = typing.get_args(tp)[0]
        return {"type": "array", "items": _schema_for_type(item_type)}
    if dataclasses.is_dataclass(tp):
        return _object_schema(tp)
    try:
        return {"type": _JSON_TYPES[tp]}
    except KeyError as exc:
        raise TypeError(f"No JSON schema mapping for field type {tp!r}") from exc


def _nullable(schema: dict[str, Any]) -> dict[str, Any]:
    return {**schema, "type": [schema["type"], "null"]}


def _object_schema(record_type: type) -> dict[str, Any]:
    hints = typing.get_type_hints(record_type)
    # A null member decodes to the field default, like a missing one.
    properties = {
        field.metadata.get("key", field.name): _nullable(_schema_for_type(hints[field.name]))
        for field in dataclasses.fields(record_type)
    }
    return {"type": "object", "properties": properties}


def schema_for(record_type: type) -> dict[str, Any]:
    """Return the JSON schema a reply must satisfy to decode into `record_type`."""
    schema = _object_schema(record_type)
    schema["$schema"] = _SCHEMA_DIALECT
    schema["title"] = record_type.__name__
    return schema


@lru_cache(maxsize=None)
def _validator_for(record_type: type) -> Any:
    schema = schema_for(record_type)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _convert(tp: Any, value: Any) -> Any:
    tp = _unwrap_optional(tp)
    if typing.get_origin(tp) is tuple:
        item_type = typing.get_args(tp)[0]
        return tuple(_convert(item_type, item) for item in value)
    if dataclasses.is_dataclass(tp):
        return _build(tp, value)
    if tp is float:
        return float(value)
    if tp is int:
        return int(value)
    return value


def _build(record_type: Any, data: dict[str, Any]) -> Any:
    hints = typing.get_type_hints(record_type)
    kwargs: dict[str, Any] = {}
    for field in dataclasses.fields(record_type):
        key = field.metadata.get("key", field.name)
        if data.get(key) is None:
            continue
        kwargs[field.name] = _convert(hints[field.name], data[key])
    return record_type(**kwargs)


def parse_json(raw: bytes) -> Any:
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ProtocolError(f"Reply is not valid JSON: {exc}") from exc


def unwrap_envelope(document: Any) -> Any:
    """Return the `result` member of a JSON-RPC reply.

    An `error` member becomes a DeviceError carrying the device's code and
    message.
    """
    if not isinstance(document, dict):
        raise ProtocolError("JSON-RPC reply must be an object")
    error = document.get("error")
    if error is not None:
        if isinstance(error, dict):
            code = error.get("code")
            raise DeviceError(
                code if isinstance(code, int) and not isinstance(code, bool) else None,
                str(error.get("message", "unknown error")),
            )
        raise DeviceError(None, str(error))
    if "result" not in document:
        raise ProtocolError("JSON-RPC reply carries neither 'result' nor 'error'")
    return document["result"]


def decode_payload(payload: Any, record_type: type[RecordT]) -> RecordT:
    try:
        _validator_for(record_type).validate(payload)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.absolute_path)
        where = f" ({path})" if path else ""
        LOGGER.debug("Rejected %s payload: %r", record_type.__name__, payload)
        raise ProtocolError(
            f"Reply does not match {record_type.__name__}{where}: {exc.message}"
        ) from exc
    return _build(record_type, payload)


def decode_reply(raw: bytes, record_type: type[RecordT], *, envelope: bool) -> RecordT:
    document = parse_json(raw)
    payload = unwrap_envelope(document) if envelope else document
    return decode_payload(payload, record_type)
