"""Carrier moving trace propagation headers into a request header."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .messages import RequestHeader, RPCTInfo


@dataclass
class RequestTracePropagator:
    """Reads and writes trace headers in a request header's trace info."""

    request_header: Optional[RequestHeader] = None

    def get(self, key: str) -> str:
        """Return the header value for `key`, or an empty string."""
        header = self.request_header
        if header is None or header.trace_info is None:
            return ""
        return header.trace_info.headers.get(key, "")

    def set(self, key: str, value: str) -> None:
        """Store a header value, creating the trace info when needed."""
        header = self.request_header
        if header is None:
            return
        if header.trace_info is None:
            header.trace_info = RPCTInfo(headers={})
        header.trace_info.headers[key] = value

    def keys(self) -> list[str]:
        """Return the names of all stored headers."""
        header = self.request_header
        if header is None or header.trace_info is None:
            return []
        return list(header.trace_info.headers)