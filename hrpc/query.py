"""Options and shared state for querying calls (Get and Scan)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any, Optional

from .call import Call, Option
from .messages import Consistency

DEFAULT_MAX_VERSIONS = 1
MIN_TIMESTAMP = 0
MAX_TIMESTAMP = 0xFFFFFFFFFFFFFFFF
DEFAULT_MAX_RESULT_SIZE = 2097152
DEFAULT_NUMBER_OF_ROWS = 0x7FFFFFFF
DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY = 0x7FFFFFFF
DEFAULT_CACHE_BLOCKS = True

_MAX_INT32 = 0x7FFFFFFF
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ConsistencyType(IntEnum):
    """Consistency of data a query asks for."""

    DEFAULT = 0
    STRONG = 1
    TIMELINE = 2

    def to_proto(self) -> Consistency:
        """Return the wire value; the default has none and raises."""
        if self is ConsistencyType.TIMELINE:
            return Consistency.TIMELINE
        if self is ConsistencyType.STRONG:
            return Consistency.STRONG
        raise ValueError("default consistency depends on context")


class BaseQuery:
    """Settings shared by Get and Scan requests."""

    def __init__(self) -> None:
        self.families: Optional[dict[str, list[str]]] = None
        self.filter: Any = None
        self.from_timestamp: int = MIN_TIMESTAMP
        self.to_timestamp: int = MAX_TIMESTAMP
        self.max_versions: int = DEFAULT_MAX_VERSIONS
        self.store_limit: int = DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY
        self.store_offset: int = 0
        self.cache_blocks: bool = DEFAULT_CACHE_BLOCKS
        self.consistency: ConsistencyType = ConsistencyType.DEFAULT


def _query(call: Call, option_name: str) -> BaseQuery:
    if not isinstance(call, BaseQuery):
        raise ValueError(f"'{option_name}' option can only be used with Get or Scan request")
    return call


def families(families_map: dict[str, list[str]]) -> Option:
    """Restrict a Get or Scan to the given families and qualifiers."""

    def apply(call: Call) -> None:
        _query(call, "Families").families = families_map

    return apply


def filters(query_filter: Any) -> Option:
    """Attach a filter to a Get or Scan."""

    def apply(call: Call) -> None:
        query = _query(call, "Filters")
        build = getattr(query_filter, "construct_pb_filter", None)
        query.filter = build() if callable(build) else query_filter

    return apply


def _to_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return ((moment - _EPOCH) // timedelta(milliseconds=1)) & MAX_TIMESTAMP


def time_range(start: datetime, end: datetime) -> Option:
    """Limit a Get or Scan to cells in [start, end), at millisecond resolution."""
    return time_range_uint64(_to_millis(start), _to_millis(end))


def time_range_uint64(start: int, end: int) -> Option:
    """Limit a Get or Scan to timestamps in [start, end), in milliseconds."""

    def apply(call: Call) -> None:
        if not isinstance(call, BaseQuery):
            raise ValueError("'TimeRange' option can only be used with Get or Scan request")
        if start >= end:
            raise ValueError("'from' timestamp is greater or equal to 'to' timestamp")
        call.from_timestamp = start
        call.to_timestamp = end

    return apply


def max_versions(versions: int) -> Option:
    """Set how many versions of each cell to return."""

    def apply(call: Call) -> None:
        query = _query(call, "MaxVersions")
        if versions > _MAX_INT32:
            raise ValueError("'MaxVersions' exceeds supported number of versions")
        query.max_versions = versions

    return apply


def max_results_per_column_family(max_results: int) -> Option:
    """Set the maximum number of cells returned per column family in a row."""

    def apply(call: Call) -> None:
        query = _query(call, "MaxResultsPerColumnFamily")
        if max_results > _MAX_INT32:
            raise ValueError(
                "'MaxResultsPerColumnFamily' exceeds supported number of value results"
            )
        query.store_limit = max_results

    return apply


def result_offset(offset: int) -> Option:
    """Set the offset of cells returned within a column family."""

    def apply(call: Call) -> None:
        query = _query(call, "ResultOffset")
        if offset > _MAX_INT32:
            raise ValueError("'ResultOffset' exceeds supported offset value")
        query.store_offset = offset

    return apply


def cache_blocks(enabled: bool) -> Option:
    """Enable or disable the block cache for a Get or Scan."""

    def apply(call: Call) -> None:
        _query(call, "CacheBlocks").cache_blocks = enabled

    return apply


def consistency(level: ConsistencyType) -> Option:
    """Request the given consistency of data for a Get or Scan."""

    def apply(call: Call) -> None:
        if not isinstance(call, BaseQuery):
            raise ValueError("'Consistency' option can only be used with Get or Scan requests")
        call.consistency = level

    return apply