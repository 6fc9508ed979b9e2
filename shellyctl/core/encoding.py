"""Request encoding for the JSON-RPC and legacy query transports."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from shellyctl.core.catalog import counter_types_literal
from shellyctl.core.errors import CallParameterError

JSONRPC_VERSION = "2.0"
REQUEST_ID = 1
_QUERY_RESERVED = "&#="


def encode_call(method: str, params: Mapping[str, Any]) -> bytes:
    """Encode one JSON-RPC call object. Params pass through unchanged."""
    call: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "id": REQUEST_ID, "method": method}
    if params:
        call["params"] = dict(params)
    return json.dumps(call, separators=(",", ":")).encode("utf-8")


def encode_value(name: str, value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        if any(ch in value for ch in _QUERY_RESERVED):
            raise CallParameterError(
                f"Parameter '{name}' contains a query delimiter (one of {_QUERY_RESERVED}): {value!r}"
            )
        return value
    if isinstance(value, (list, tuple)):
        return counter_types_literal(value)
    raise CallParameterError(f"Cannot encode parameter '{name}' of type {type(value).__name__}")


def encode_query(params: Mapping[str, Any]) -> str:
    """Encode params as key=value pairs in mapping order, skipping None."""
    return "&".join(
        f"{name}={encode_value(name, value)}"
        for name, value in params.items()
        if value is not None
    )


def legacy_path(method: str, params: Mapping[str, Any]) -> str:
    query = encode_query(params)
    return f"{method}?{query}" if query else method
