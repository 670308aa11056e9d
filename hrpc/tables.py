"""Calls listing tables and moving regions between region servers."""

from __future__ import annotations

import re

from .call import Call, Option, apply_options
from .messages import (
    GetTableNamesRequest,
    MoveRegionRequest,
    RegionSpecifier,
    RegionSpecifierType,
    Response,
    ServerName,
)

_DIGITS = re.compile(r"[0-9]+")
_MAX_UINT32 = 0xFFFFFFFF
_MAX_UINT64 = 0xFFFFFFFFFFFFFFFF


class ListTableNames(Call):
    """Lists the names of tables, by default all user tables."""

    def __init__(self, *args: Option) -> None:
        super().__init__(b"", b"")
        self.regex = ".*"
        self.include_sys_tables = False
        self.namespace = ""
        apply_options(self, *args)

    def name(self) -> str:
        return "GetTableNames"

    def to_proto(self) -> GetTableNamesRequest:
        return GetTableNamesRequest(
            regex=self.regex,
            include_sys_tables=self.include_sys_tables,
            namespace=self.namespace,
        )

    def new_response(self) -> Response:
        return Response(kind="GetTableNamesResponse")


def _listing(call: Call, option_name: str) -> ListTableNames:
    if not isinstance(call, ListTableNames):
        raise ValueError(f"{option_name} option can only be used with ListTableNames")
    return call


def list_regex(regex: str) -> Option:
    """Only list tables whose names match `regex`."""

    def apply(call: Call) -> None:
        _listing(call, "ListRegex").regex = regex

    return apply


def list_namespace(namespace: str) -> Option:
    """Only list tables of the given namespace."""

    def apply(call: Call) -> None:
        _listing(call, "ListNamespace").namespace = namespace

    return apply


def list_sys_tables(include: bool) -> Option:
    """Include or exclude system tables from the listing."""

    def apply(call: Call) -> None:
        _listing(call, "ListSysTables").include_sys_tables = include

    return apply


class MoveRegion(Call):
    """Moves a region, given by its encoded name, to another region server."""

    def __init__(self, region_name: bytes, *args: Option) -> None:
        super().__init__(b"", b"")
        self.request = MoveRegionRequest(
            region=RegionSpecifier(
                type=RegionSpecifierType.ENCODED_REGION_NAME, value=region_name
            )
        )
        apply_options(self, *args)

    def name(self) -> str:
        return "MoveRegion"

    def to_proto(self) -> MoveRegionRequest:
        return self.request

    def new_response(self) -> Response:
        return Response(kind="MoveRegionResponse")


def _parse_unsigned(text: str, limit: int) -> int:
    if not _DIGITS.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    value = int(text)
    if value > limit:
        raise ValueError(f"parsing {text!r}: value out of range")
    return value


def with_destination_region_server(server_name: str) -> Option:
    """Move the region to the server named "<host>,<port>,<startcode>"."""

    def apply(call: Call) -> None:
        if not isinstance(call, MoveRegion):
            raise ValueError(
                "WithDestinationRegionServer option can only be used with MoveRegion"
            )
        parts = server_name.split(",", 2)
        if len(parts) != 3:
            raise ValueError(
                "invalid server name, needs to be of format <host>,<port>,<startcode>"
            )
        host, port_text, start_code_text = parts
        try:
            port = _parse_unsigned(port_text, _MAX_UINT32)
        except ValueError as exc:
            raise ValueError(f"failed to parse port: {exc}") from exc
        try:
            start_code = _parse_unsigned(start_code_text, _MAX_UINT64)
        except ValueError as exc:
            raise ValueError(f"failed to parse startcode: {exc}") from exc
        call.request.dest_server_name = ServerName(
            host_name=host, port=port, start_code=start_code
        )

    return apply