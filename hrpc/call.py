"""Base call type, call options and cell block decoding."""

from __future__ import annotations

import queue
import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .messages import Cell, CellType, RegionSpecifier, RegionSpecifierType, Result

Option = Callable[["Call"], None]

_U32 = 0xFFFFFFFF
_KV_LEN = struct.Struct(">I")
_HEADER = struct.Struct(">IIIH")
_TIMESTAMP = struct.Struct(">Q")


class CellBlockError(ValueError):
    """Raised when a cell block cannot be decoded."""


@dataclass
class RPCResult:
    """Outcome of an RPC: the reply message or the error it failed with."""

    msg: Any = None
    error: Optional[BaseException] = None


class Call(ABC):
    """An RPC call to HBase."""

    def __init__(self, table: bytes = b"", key: bytes = b"") -> None:
        self.table = table
        self.key = key
        self.options: list[Option] = []
        self.region: Any = None
        self.result_queue: queue.Queue = queue.Queue(maxsize=1)

    @abstractmethod
    def name(self) -> str:
        """Name of the RPC method."""

    def description(self) -> str:
        """Label used for tracing and metrics."""
        return self.name()

    @abstractmethod
    def to_proto(self) -> Any:
        """Build the request message."""

    @abstractmethod
    def new_response(self) -> Any:
        """Return an empty message to read the reply into."""

    def region_specifier(self) -> RegionSpecifier:
        """Identify the region this call is addressed to."""
        if self.region is None:
            raise ValueError("call has no region assigned")
        custom = getattr(self.region, "region_specifier", None)
        if callable(custom):
            return custom()
        return RegionSpecifier(type=RegionSpecifierType.REGION_NAME, value=self.region.name)


class Batchable:
    """Mixin for calls that may be grouped into a multi-request."""

    skip_batch: bool = False


def skip_batch() -> Option:
    """Option making a Get or Mutate bypass batching."""

    def apply(call: Call) -> None:
        if not isinstance(call, Batchable):
            raise ValueError("'SkipBatch' option only works with Get and Mutate requests")
        call.skip_batch = True

    return apply


def apply_options(call: Call, *args: Option) -> None:
    """Record the options on the call and apply them in order."""
    call.options = list(args)
    for option in args:
        option(call)


def cell_from_cell_block(data: bytes) -> tuple[Cell, int]:
    """Decode one cell from the start of a cell block; return it and the bytes used."""
    data = bytes(data)
    size = len(data)
    if size < 4:
        raise CellBlockError(f"buffer is too small: expected 4, got {size}")
    (kv_len,) = _KV_LEN.unpack_from(data)
    if size < kv_len + 4:
        raise CellBlockError(f"buffer is too small: expected {kv_len + 4}, got {size}")
    if size < _HEADER.size:
        raise CellBlockError(f"buffer is too small: expected {_HEADER.size}, got {size}")

    _, row_key_len, value_len, key_len = _HEADER.unpack_from(data)
    pos = _HEADER.size
    if pos + key_len >= size:
        raise CellBlockError("cell block is truncated")
    key = data[pos:pos + key_len]
    pos += key_len
    family_len = data[pos]
    pos += 1
    family = data[pos:pos + family_len]
    pos += family_len

    qualifier_len = (row_key_len - key_len - family_len - 2 - 1 - 8 - 1) & _U32
    declared = (4 + 4 + 2 + key_len + 1 + family_len + qualifier_len + 8 + 1 + value_len) & _U32
    if declared != kv_len:
        raise CellBlockError(
            f"HBase has lied about KeyValue length: expected {kv_len}, got {declared}"
        )
    if pos + qualifier_len + 8 + 1 + value_len > size:
        raise CellBlockError("cell block is truncated")

    qualifier = data[pos:pos + qualifier_len]
    pos += qualifier_len
    (timestamp,) = _TIMESTAMP.unpack_from(data, pos)
    pos += _TIMESTAMP.size
    raw_type = data[pos]
    pos += 1
    value = data[pos:pos + value_len]

    try:
        cell_type: int = CellType(raw_type)
    except ValueError:
        cell_type = raw_type

    cell = Cell(
        row=key,
        family=family,
        qualifier=qualifier,
        timestamp=timestamp,
        value=value,
        cell_type=cell_type,
    )
    return cell, kv_len + 4


def deserialize_cell_blocks(data: bytes, count: int) -> tuple[list[Cell], int]:
    """Decode `count` consecutive cells; return them and the bytes consumed."""
    data = bytes(data)
    cells: list[Cell] = []
    read = 0
    for _ in range(count):
        cell, used = cell_from_cell_block(data[read:])
        cells.append(cell)
        read += used
    return cells, read


@dataclass
class LocalResult:
    """Cells of a row together with flags describing the reply."""

    cells: list[Cell] = field(default_factory=list)
    stale: bool = False
    partial: bool = False
    exists: Optional[bool] = None

    def __str__(self) -> str:
        return (
            f"cells:{self.cells} stale:{str(self.stale).lower()} "
            f"partial:{str(self.partial).lower()} exists:{self.exists} "
        )


def to_local_result(result: Optional[Result]) -> LocalResult:
    """Convert a reply's result message into a LocalResult."""
    if result is None:
        return LocalResult()
    return LocalResult(
        cells=result.cells,
        stale=bool(result.stale),
        partial=bool(result.partial),
        exists=result.exists,
    )