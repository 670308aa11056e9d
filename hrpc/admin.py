"""Administrative calls addressed to the HBase master."""

from __future__ import annotations

from typing import Callable, Iterable, Mapping, Optional, Union

from .call import Call
from .messages import (
    BytesBytesPair,
    ColumnFamilySchema,
    CreateTableRequest,
    DeleteTableRequest,
    DisableTableRequest,
    EnableTableRequest,
    GetClusterStatusRequest,
    GetProcedureResultRequest,
    Response,
    SetBalancerRunningRequest,
    TableName,
    TableSchema,
)

DEFAULT_NAMESPACE = b"default"

DEFAULT_FAMILY_ATTRIBUTES: dict[str, str] = {
    "BLOOMFILTER": "ROW",
    "VERSIONS": "3",
    "IN_MEMORY": "false",
    "KEEP_DELETED_CELLS": "false",
    "DATA_BLOCK_ENCODING": "FAST_DIFF",
    "TTL": "2147483647",
    "COMPRESSION": "NONE",
    "MIN_VERSIONS": "0",
    "BLOCKCACHE": "true",
    "BLOCKSIZE": "65536",
    "REPLICATION_SCOPE": "0",
}

CreateTableOption = Callable[["CreateTable"], None]


def _as_bytes(value: Union[str, bytes, None]) -> bytes:
    if value is None:
        return b""
    return value.encode() if isinstance(value, str) else value


def _table_name(table: bytes) -> TableName:
    return TableName(namespace=DEFAULT_NAMESPACE, qualifier=table)


def _pairs(attributes: Mapping[str, str]) -> list[BytesBytesPair]:
    return [
        BytesBytesPair(first=key.encode(), second=value.encode())
        for key, value in attributes.items()
    ]


class CreateTable(Call):
    """Creates a table with the given column families."""

    def __init__(
        self,
        table: Union[str, bytes],
        families_map: Optional[Mapping[str, Mapping[str, str]]],
        *args: CreateTableOption,
    ) -> None:
        super().__init__(_as_bytes(table), b"")
        self.attributes: dict[str, str] = {}
        self.split_keys: list[bytes] = []
        for option in args:
            option(self)
        self.families: dict[str, dict[str, str]] = {
            family: {
                name: (attrs or {}).get(name, default)
                for name, default in DEFAULT_FAMILY_ATTRIBUTES.items()
            }
            for family, attrs in (families_map or {}).items()
        }

    def name(self) -> str:
        return "CreateTable"

    def to_proto(self) -> CreateTableRequest:
        column_families = [
            ColumnFamilySchema(name=family.encode(), attributes=_pairs(attrs))
            for family, attrs in self.families.items()
        ]
        schema = TableSchema(
            table_name=_table_name(self.table),
            attributes=_pairs(self.attributes),
            column_families=column_families,
        )
        return CreateTableRequest(table_schema=schema, split_keys=list(self.split_keys))

    def new_response(self) -> Response:
        return Response(kind="CreateTableResponse")


def split_keys(keys: Optional[Iterable[bytes]]) -> CreateTableOption:
    """Option setting the split keys of the created table."""
    chosen = list(keys or [])

    def apply(call: CreateTable) -> None:
        call.split_keys = chosen

    return apply


def table_attributes(attributes: Optional[Mapping[str, str]]) -> CreateTableOption:
    """Option setting attributes on the created table."""
    chosen = dict(attributes or {})

    def apply(call: CreateTable) -> None:
        call.attributes = chosen

    return apply


class DeleteTable(Call):
    """Deletes a table."""

    def __init__(self, table: Union[str, bytes]) -> None:
        super().__init__(_as_bytes(table), b"")

    def name(self) -> str:
        return "DeleteTable"

    def to_proto(self) -> DeleteTableRequest:
        return DeleteTableRequest(table_name=_table_name(self.table))

    def new_response(self) -> Response:
        return Response(kind="DeleteTableResponse")


class DisableTable(Call):
    """Disables a table."""

    def __init__(self, table: Union[str, bytes]) -> None:
        super().__init__(_as_bytes(table), b"")

    def name(self) -> str:
        return "DisableTable"

    def to_proto(self) -> DisableTableRequest:
        return DisableTableRequest(table_name=_table_name(self.table))

    def new_response(self) -> Response:
        return Response(kind="DisableTableResponse")


class EnableTable(Call):
    """Enables a table."""

    def __init__(self, table: Union[str, bytes]) -> None:
        super().__init__(_as_bytes(table), b"")

    def name(self) -> str:
        return "EnableTable"

    def to_proto(self) -> EnableTableRequest:
        return EnableTableRequest(table_name=_table_name(self.table))

    def new_response(self) -> Response:
        return Response(kind="EnableTableResponse")


class GetProcedureState(Call):
    """Asks for the state of a master procedure."""

    def __init__(self, proc_id: int) -> None:
        super().__init__(b"", b"")
        self.proc_id = proc_id

    def name(self) -> str:
        return "getProcedureResult"

    def to_proto(self) -> GetProcedureResultRequest:
        return GetProcedureResultRequest(proc_id=self.proc_id)

    def new_response(self) -> Response:
        return Response(kind="GetProcedureResultResponse")


class ClusterStatus(Call):
    """Asks for the status of the cluster."""

    def __init__(self) -> None:
        super().__init__(b"", b"")

    def name(self) -> str:
        return "GetClusterStatus"

    def to_proto(self) -> GetClusterStatusRequest:
        return GetClusterStatusRequest()

    def new_response(self) -> Response:
        return Response(kind="GetClusterStatusResponse")


class SetBalancer(Call):
    """Turns the region balancer on or off."""

    def __init__(self, enabled: bool) -> None:
        super().__init__(b"", b"")
        self.request = SetBalancerRunningRequest(on=enabled)

    def name(self) -> str:
        return "SetBalancerRunning"

    def to_proto(self) -> SetBalancerRunningRequest:
        return self.request

    def new_response(self) -> Response:
        return Response(kind="SetBalancerRunningResponse")