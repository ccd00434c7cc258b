"""The outbound response produced by a response writer.

Immutable; each ``with_*`` call returns a modified copy, so a writer can
start from a base response and refine it::

    Response(body).with_status(201).with_header("X-Request-Id", request_id)
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True, slots=True)
class Response:
    """Status, content type, extra headers and body of one response.

    ``Content-Type`` and ``Content-Length`` are emitted from
    ``content_type`` and the body; setting them in ``headers`` has no
    effect on the wire.
    """

    body: str | bytes = b""
    status: int = 200
    content_type: str = JSON_CONTENT_TYPE
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    def with_header(self, name: str, value: str) -> Response:
        """Append one header; earlier values for *name* are kept."""
        return self.with_headers({name: value})

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        return replace(self, headers=self.headers + tuple(headers.items()))

    def get_header(self, name: str, default: str | None = None) -> str | None:
        """First value of header *name*, matched case-insensitively."""
        wanted = name.lower()
        return next((value for key, value in self.headers if key.lower() == wanted), default)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body

    def json(self) -> Any:
        return json_module.loads(self.body_bytes)
