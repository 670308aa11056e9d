"""The Get call: read a single row."""

from __future__ import annotations

from typing import Optional, Union

from .call import Batchable, Call, Option, apply_options
from .call import deserialize_cell_blocks as _decode_cells
from .messages import Column, GetMessage, GetRequest, GetResponse, TimeRange
from .query import (
    DEFAULT_CACHE_BLOCKS,
    DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY,
    DEFAULT_MAX_VERSIONS,
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    BaseQuery,
    ConsistencyType,
)


def _as_bytes(value: Union[str, bytes, None]) -> Optional[bytes]:
    return value.encode() if isinstance(value, str) else value


def families_to_column(families_map: Optional[dict[str, list[str]]]) -> list[Column]:
    """Turn a family-to-qualifiers mapping into column messages."""
    if not families_map:
        return []
    return [
        Column(family=family.encode(), qualifier=[q.encode() for q in qualifiers])
        for family, qualifiers in families_map.items()
    ]


class Get(Call, BaseQuery, Batchable):
    """Reads one row of a table."""

    def __init__(
        self, table: Union[str, bytes, None], key: Union[str, bytes, None], *args: Option
    ) -> None:
        Call.__init__(self, _as_bytes(table), _as_bytes(key))
        BaseQuery.__init__(self)
        self.existence_only = False
        self.skip_batch = False
        apply_options(self, *args)

    def name(self) -> str:
        return "Get"

    def exists_only(self) -> None:
        """Only report whether the row exists, returning no cells."""
        self.existence_only = True

    def to_proto(self) -> GetRequest:
        message = GetMessage(
            row=self.key,
            column=families_to_column(self.families),
            time_range=TimeRange(),
        )
        if self.store_limit != DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY:
            message.store_limit = self.store_limit
        if self.store_offset != 0:
            message.store_offset = self.store_offset
        if self.max_versions != DEFAULT_MAX_VERSIONS:
            message.max_versions = self.max_versions
        if self.from_timestamp != MIN_TIMESTAMP:
            message.time_range.from_ = self.from_timestamp
        if self.to_timestamp != MAX_TIMESTAMP:
            message.time_range.to = self.to_timestamp
        if self.existence_only:
            message.existence_only = True
        if self.cache_blocks != DEFAULT_CACHE_BLOCKS:
            message.cache_blocks = self.cache_blocks
        if self.consistency != ConsistencyType.DEFAULT:
            message.consistency = self.consistency.to_proto()
        message.filter = self.filter
        return GetRequest(region=self.region_specifier(), get=message)

    def new_response(self) -> GetResponse:
        return GetResponse()

    def deserialize_cell_blocks(self, message: GetResponse, data: bytes) -> int:
        """Append cells decoded from `data` to the reply; return the bytes read."""
        result = message.result
        if result is None:
            return 0
        cells, read = _decode_cells(data, result.associated_cell_count or 0)
        result.cells.extend(cells)
        return read