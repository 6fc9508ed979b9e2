"""Domain-specific errors for shellyctl."""

from __future__ import annotations


class ShellyctlError(Exception):
    """Base error for shellyctl."""


class ConstructionError(ShellyctlError):
    """Raised when a client cannot be built from the given address or transport."""


class CallParameterError(ShellyctlError):
    """Raised when caller arguments do not fit an operation's parameter schema."""


class ConfigError(ShellyctlError):
    """Raised when the configuration file cannot be read or fails validation."""


class TransportError(ShellyctlError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised when the device cannot be reached."""


class TransportTimeoutError(TransportError):
    """Raised when an exchange exceeds the per-call timeout."""


class TransportStatusError(TransportError):
    """Raised when the device answers with a non-success HTTP status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(ShellyctlError):
    """Raised when a reply does not match the expected record shape."""


class DeviceError(ProtocolError):
    """Raised when the device reports an operation-level failure."""

    def __init__(self, code: int | None, message: str) -> None:
        super().__init__(f"Device error {code}: {message}" if code is not None else f"Device error: {message}")
        self.code = code
        self.device_message = message
