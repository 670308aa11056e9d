"""Mutations of a single row: put, delete, append and increment."""

from __future__ import annotations

import struct
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any, Iterable, Optional, Union

from .call import Batchable, Call, Option, apply_options
from .call import deserialize_cell_blocks as _decode_cells
from .messages import (
    ColumnValue,
    DeleteType,
    Durability,
    MutateRequest,
    MutateResponse,
    MutationProto,
    MutationType,
    NameBytesPair,
    QualifierValue,
)
from .query import MAX_TIMESTAMP

Values = dict[str, Optional[dict[str, Optional[bytes]]]]

ATTRIBUTE_NAME_TTL = "_ttl"

_PUT_TYPE = 4
_DELETE_TYPE = 8
_DELETE_FAMILY_VERSION_TYPE = 10
_DELETE_COLUMN_TYPE = 12
_DELETE_FAMILY_TYPE = 14

_LATEST_TIMESTAMP = 0x7FFFFFFFFFFFFFFF
_U64 = 0xFFFFFFFFFFFFFFFF
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_EMPTY_QUALIFIER: dict[str, Optional[bytes]] = {"": None}

_CELL_HEADER = struct.Struct(">IIIH")
_UINT64 = struct.Struct(">Q")


class DurabilityType(IntEnum):
    """Durability requested for a mutation."""

    USE_DEFAULT = 0
    SKIP_WAL = 1
    ASYNC_WAL = 2
    SYNC_WAL = 3
    FSYNC_WAL = 4


def _as_bytes(value: Union[str, bytes, None]) -> Optional[bytes]:
    return value.encode() if isinstance(value, str) else value


def _truncated_millis(micros: int) -> int:
    return micros // 1000 if micros >= 0 else -((-micros) // 1000)


def _cell_block_len(row_len: int, family_len: int, qualifier_len: int, value_len: int) -> int:
    key_length = 2 + row_len + 1 + family_len + qualifier_len + 8 + 1
    return 4 + 4 + 4 + key_length + value_len


def _cell_block(
    row: bytes, family: str, qualifier: str, value: Optional[bytes], ts: int, cell_type: int
) -> bytes:
    family_b = family.encode()
    qualifier_b = qualifier.encode()
    value_b = value or b""
    key_length = 2 + len(row) + 1 + len(family_b) + len(qualifier_b) + 8 + 1
    key_value_length = 4 + 4 + key_length + len(value_b)
    return b"".join(
        (
            _CELL_HEADER.pack(key_value_length, key_length, len(value_b), len(row)),
            row,
            bytes((len(family_b),)),
            family_b,
            qualifier_b,
            _UINT64.pack(ts),
            bytes((cell_type,)),
            value_b,
        )
    )


class Mutate(Call, Batchable):
    """A mutation of one row of a table."""

    def __init__(
        self,
        table: Union[str, bytes, None] = None,
        key: Union[str, bytes, None] = None,
        values: Optional[Values] = None,
        *args: Option,
        mutation_type: MutationType = MutationType.APPEND,
    ) -> None:
        Call.__init__(self, _as_bytes(table), _as_bytes(key))
        self.mutation_type = mutation_type
        self.values: Optional[Values] = values
        self.ttl: bytes = b""
        self.timestamp: int = MAX_TIMESTAMP
        self.durability: DurabilityType = DurabilityType.USE_DEFAULT
        self.delete_one_version: bool = False
        self.skip_batch = False
        apply_options(self, *args)

    def name(self) -> str:
        return "Mutate"

    def description(self) -> str:
        return MutationType(self.mutation_type).name

    def _delete_scope(self, qualifiers: Optional[dict]) -> tuple[bool, Optional[dict]]:
        """Return whether the whole family is deleted and the qualifiers to emit."""
        if qualifiers:
            return False, qualifiers
        return True, _EMPTY_QUALIFIER if qualifiers is None else qualifiers

    def _values_to_proto(self, ts: Optional[int]) -> list[ColumnValue]:
        columns = []
        for family, qualifiers in (self.values or {}).items():
            delete_type: Optional[DeleteType] = None
            if self.mutation_type == MutationType.DELETE:
                whole_family, qualifiers = self._delete_scope(qualifiers)
                if whole_family:
                    delete_type = (
                        DeleteType.DELETE_FAMILY_VERSION
                        if self.delete_one_version
                        else DeleteType.DELETE_FAMILY
                    )
                else:
                    delete_type = (
                        DeleteType.DELETE_ONE_VERSION
                        if self.delete_one_version
                        else DeleteType.DELETE_MULTIPLE_VERSIONS
                    )
            columns.append(
                ColumnValue(
                    family=family.encode(),
                    qualifier_value=[
                        QualifierValue(
                            qualifier=qualifier.encode(),
                            value=value,
                            timestamp=ts,
                            delete_type=delete_type,
                        )
                        for qualifier, value in (qualifiers or {}).items()
                    ],
                )
            )
        return columns

    def _values_to_cell_blocks(self) -> tuple[bytes, int, int]:
        if not self.values:
            return b"", 0, 0
        row = self.key or b""
        expected_len = 0
        count = 0
        for family, qualifiers in self.values.items():
            qualifiers = _EMPTY_QUALIFIER if qualifiers is None else qualifiers
            count += len(qualifiers)
            for qualifier, value in qualifiers.items():
                expected_len += _cell_block_len(
                    len(row), len(family.encode()), len(qualifier.encode()), len(value or b"")
                )

        ts = _LATEST_TIMESTAMP if self.timestamp == MAX_TIMESTAMP else self.timestamp
        blocks = []
        for family, qualifiers in self.values.items():
            if self.mutation_type == MutationType.DELETE:
                whole_family, qualifiers = self._delete_scope(qualifiers)
                if whole_family:
                    cell_type = (
                        _DELETE_FAMILY_VERSION_TYPE
                        if self.delete_one_version
                        else _DELETE_FAMILY_TYPE
                    )
                else:
                    cell_type = _DELETE_TYPE if self.delete_one_version else _DELETE_COLUMN_TYPE
            else:
                cell_type = _PUT_TYPE
            blocks.extend(
                _cell_block(row, family, qualifier, value, ts, cell_type)
                for qualifier, value in (qualifiers or {}).items()
            )
        data = b"".join(blocks)
        if len(data) != expected_len:
            raise RuntimeError("cellblocks len mismatch")
        return data, count, len(data)

    def _build(
        self, use_cell_blocks: bool, blocks: Optional[Iterable[bytes]]
    ) -> tuple[MutateRequest, list[bytes], int]:
        ts = None if self.timestamp == MAX_TIMESTAMP else self.timestamp
        out_blocks = list(blocks or [])
        size = 0
        mutation = MutationProto(
            row=self.key,
            mutate_type=self.mutation_type,
            durability=Durability(int(self.durability)),
            timestamp=ts,
        )
        if use_cell_blocks:
            data, count, size = self._values_to_cell_blocks()
            mutation.associated_cell_count = count
            if size > 0:
                out_blocks.append(data)
        else:
            mutation.column_value = self._values_to_proto(ts)
        if self.ttl:
            mutation.attribute.append(NameBytesPair(name=ATTRIBUTE_NAME_TTL, value=self.ttl))
        request = MutateRequest(region=self.region_specifier(), mutation=mutation)
        return request, out_blocks, size

    def to_proto(self) -> MutateRequest:
        request, _, _ = self._build(False, None)
        return request

    def new_response(self) -> MutateResponse:
        return MutateResponse()

    def deserialize_cell_blocks(self, message: MutateResponse, data: bytes) -> int:
        """Append cells decoded from `data` to the reply; return the bytes read."""
        result = message.result
        if result is None:
            return 0
        cells, read = _decode_cells(data, result.associated_cell_count or 0)
        result.cells.extend(cells)
        return read

    def serialize_cell_blocks(
        self, blocks: Optional[Iterable[bytes]]
    ) -> tuple[MutateRequest, list[bytes], int]:
        """Build the request with values sent as cell blocks appended to `blocks`."""
        return self._build(True, blocks)

    def cell_blocks_enabled(self) -> bool:
        return True


def _mutate(call: Call, option_name: str) -> Mutate:
    if not isinstance(call, Mutate):
        raise ValueError(f"'{option_name}' option can only be used with mutation queries")
    return call


def ttl(seconds: Union[timedelta, float]) -> Option:
    """Set a time-to-live on the mutation, at millisecond resolution."""
    if isinstance(seconds, timedelta):
        micros = seconds // timedelta(microseconds=1)
    else:
        micros = int(seconds * 1_000_000)
    encoded = _UINT64.pack(_truncated_millis(micros) & _U64)

    def apply(call: Call) -> None:
        _mutate(call, "TTL").ttl = encoded

    return apply


def timestamp(moment: datetime) -> Option:
    """Set the mutation timestamp, rounded to milliseconds."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    millis = _truncated_millis((moment - _EPOCH) // timedelta(microseconds=1)) & _U64

    def apply(call: Call) -> None:
        _mutate(call, "Timestamp").timestamp = millis

    return apply


def timestamp_uint64(ts: int) -> Option:
    """Set the mutation timestamp as a raw integer."""

    def apply(call: Call) -> None:
        _mutate(call, "TimestampUint64").timestamp = ts

    return apply


def durability(level: Union[DurabilityType, int]) -> Option:
    """Set the write-ahead-log durability of the mutation."""

    def apply(call: Call) -> None:
        mutate = _mutate(call, "Durability")
        if not DurabilityType.USE_DEFAULT <= level <= DurabilityType.FSYNC_WAL:
            raise ValueError("invalid durability value")
        mutate.durability = DurabilityType(level)

    return apply


def delete_one_version() -> Option:
    """Delete only one version of the given qualifiers or families."""

    def apply(call: Call) -> None:
        _mutate(call, "DeleteOneVersion").delete_one_version = True

    return apply


def new_put(
    table: Union[str, bytes, None], key: Union[str, bytes, None], values: Optional[Values],
    *args: Option,
) -> Mutate:
    """Insert the given values into a row."""
    return Mutate(table, key, values, *args, mutation_type=MutationType.PUT)


def new_del(
    table: Union[str, bytes, None], key: Union[str, bytes, None], values: Optional[Values],
    *args: Option,
) -> Mutate:
    """Delete a row, some of its families, or some of its qualifiers."""
    mutate = Mutate(table, key, values, *args, mutation_type=MutationType.DELETE)
    if not mutate.values and mutate.delete_one_version:
        raise ValueError(
            "'DeleteOneVersion' option cannot be specified for delete entire row request"
        )
    return mutate


def new_app(
    table: Union[str, bytes, None], key: Union[str, bytes, None], values: Optional[Values],
    *args: Option,
) -> Mutate:
    """Append the given values to existing cells of a row."""
    return Mutate(table, key, values, *args, mutation_type=MutationType.APPEND)


def new_inc(
    table: Union[str, bytes, None], key: Union[str, bytes, None], values: Optional[Values],
    *args: Option,
) -> Mutate:
    """Increment cells of a row by the given encoded amounts."""
    return Mutate(table, key, values, *args, mutation_type=MutationType.INCREMENT)


def new_inc_single(
    table: Union[str, bytes, None],
    key: Union[str, bytes, None],
    family: str,
    qualifier: str,
    amount: int,
    *args: Option,
) -> Mutate:
    """Increment a single cell by `amount`."""
    encoded = _UINT64.pack(amount & _U64)
    return new_inc(table, key, {family: {qualifier: encoded}}, *args)


__all__: list[Any] = [
    "ATTRIBUTE_NAME_TTL",
    "DurabilityType",
    "Mutate",
    "delete_one_version",
    "durability",
    "new_app",
    "new_del",
    "new_inc",
    "new_inc_single",
    "new_put",
    "timestamp",
    "timestamp_uint64",
    "ttl",
]