"""Outbound HTTP client for handlers that call other services.

A thin wrapper over ``httpx.AsyncClient`` with a fixed 15-second timeout
and optional TLS trust overrides. Every call returns the raw response
bytes and status code; transport failures raise ``ClientError``, which
the dispatcher answers with a generic 500 if the handler lets it
propagate.

Usage::

    async with HTTPClient() as client:
        body, status = await client.post(
            "https://billing.internal/charges",
            {"amount": 100},
            headers={"Authorization": basic_auth_header("api", "s3cret")},
        )
        if not is_success(status):
            raise InternalError(f"billing returned {status}")
"""

from __future__ import annotations

import json
import ssl
from collections.abc import Mapping
from typing import Any

import httpx

from charon.errors import ClientError, InvalidInputError

DEFAULT_TIMEOUT = 15.0


def build_url(protocol: str, host: str, port: str = "", path: str = "") -> str:
    """Join URL parts, defaulting the path to ``/``.

    Raises:
        InvalidInputError: Unsupported protocol or empty host.
    """
    if protocol not in ("http", "https"):
        raise InvalidInputError("Invalid protocol")
    if not host:
        raise InvalidInputError("No value for host provided")
    url = f"{protocol}://{host}"
    if port:
        url += f":{port}"
    return url + (path or "/")


def _verify(insecure: bool, ca_file: str | None) -> ssl.SSLContext | bool:
    if insecure:
        return False
    if ca_file is None:
        return True
    context = ssl.create_default_context()
    try:
        context.load_verify_locations(cafile=ca_file)
    except (OSError, ssl.SSLError) as exc:
        msg = f"cannot load CA bundle {ca_file}: {exc}"
        raise ClientError(msg) from exc
    return context


def _encode(body: Any) -> bytes | None:
    if body is None or isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body).encode("utf-8")


class HTTPClient:
    """Async HTTP client with a fixed timeout.

    Args:
        insecure: Skip TLS certificate verification.
        ca_file: PEM bundle trusted in addition to the system store.
        timeout: Seconds before a call is abandoned.
        transport: Custom httpx transport (e.g. ``httpx.MockTransport``
            in tests).
    """

    __slots__ = ("_client",)

    def __init__(
        self,
        *,
        insecure: bool = False,
        ca_file: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            verify=_verify(insecure, ca_file),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> HTTPClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> tuple[bytes, int]:
        """Send a request and return ``(body, status)``.

        Non-bytes bodies are sent as JSON (``str`` as UTF-8 text).
        """
        content = _encode(body)
        merged = dict(headers or {})
        if content is not None and not isinstance(body, (bytes, str)):
            merged.setdefault("Content-Type", "application/json")
        try:
            response = await self._client.request(
                method, url, params=params, content=content, headers=merged
            )
        except httpx.HTTPError as exc:
            raise ClientError(f"{method} {url}: {exc}") from exc
        return response.content, response.status_code

    async def get(
        self,
        url: str,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> tuple[bytes, int]:
        """GET *url*, sending *params* as the query string."""
        return await self.request("GET", url, params=params, headers=headers)

    async def post(
        self, url: str, body: Any = None, headers: Mapping[str, str] | None = None
    ) -> tuple[bytes, int]:
        return await self.request("POST", url, body=body, headers=headers)

    async def put(
        self, url: str, body: Any = None, headers: Mapping[str, str] | None = None
    ) -> tuple[bytes, int]:
        return await self.request("PUT", url, body=body, headers=headers)

    async def patch(
        self, url: str, body: Any = None, headers: Mapping[str, str] | None = None
    ) -> tuple[bytes, int]:
        return await self.request("PATCH", url, body=body, headers=headers)
