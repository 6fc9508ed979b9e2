"""Single HTTP exchange shared by both transport variants."""

from __future__ import annotations

import logging

import httpx

from shellyctl.core.errors import (
    TransportConnectError,
    TransportError,
    TransportStatusError,
    TransportTimeoutError,
)

LOGGER = logging.getLogger(__name__)


def exchange(
    method: str,
    url: str,
    *,
    timeout_s: float,
    content: bytes | None = None,
    headers: dict[str, str] | None = None,
    http_transport: httpx.BaseTransport | None = None,
) -> bytes:
    """Run one request on a connection scoped to this call and return the body.

    Anything but HTTP 200 is a TransportStatusError; the body is not parsed.
    """
    with httpx.Client(timeout=timeout_s, transport=http_transport) as client:
        request = client.build_request(method, url, content=content, headers=headers)
        host = request.url.host
        LOGGER.debug("%s %s", method, request.url)
        try:
            response = client.send(request)
        except httpx.TimeoutException as exc:
            LOGGER.warning("Timed out after %gs talking to %s", timeout_s, host)
            raise TransportTimeoutError(f"Request to {host} timed out after {timeout_s:g}s") from exc
        except httpx.TransportError as exc:
            LOGGER.warning("Could not reach %s: %s", host, exc)
            raise TransportConnectError(f"Could not reach {host}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"HTTP exchange with {host} failed: {exc}") from exc

    LOGGER.debug("HTTP %s from %s (%d bytes)", response.status_code, host, len(response.content))
    if response.status_code != httpx.codes.OK:
        detail = response.text.strip()
        suffix = f": {detail}" if detail else ""
        raise TransportStatusError(
            f"Device {host} answered HTTP {response.status_code}{suffix}",
            status_code=response.status_code,
        )
    return response.content
