"""Message types exchanged with HBase region servers and masters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional


class CellType(IntEnum):
    """Kind of a cell as stored by HBase."""

    MINIMUM = 0
    PUT = 4
    DELETE = 8
    DELETE_FAMILY_VERSION = 10
    DELETE_COLUMN = 12
    DELETE_FAMILY = 14
    MAXIMUM = 255


@dataclass
class Cell:
    """A single cell: one value under a row, family and qualifier."""

    row: Optional[bytes] = None
    family: Optional[bytes] = None
    qualifier: Optional[bytes] = None
    timestamp: Optional[int] = None
    cell_type: Optional[int] = None
    value: Optional[bytes] = None
    tags: Optional[bytes] = None


class RegionSpecifierType(IntEnum):
    """How a region is identified in a request."""

    REGION_NAME = 1
    ENCODED_REGION_NAME = 2


@dataclass
class RegionSpecifier:
    """Identifies the region a request is meant for."""

    type: Optional[RegionSpecifierType] = None
    value: Optional[bytes] = None


@dataclass
class TimeRange:
    """Half-open range of timestamps, in milliseconds."""

    from_: Optional[int] = None
    to: Optional[int] = None


@dataclass
class Column:
    """A column family with an optional list of qualifiers."""

    family: Optional[bytes] = None
    qualifier: list[bytes] = field(default_factory=list)


@dataclass
class NameBytesPair:
    """A named binary value."""

    name: Optional[str] = None
    value: Optional[bytes] = None


@dataclass
class BytesBytesPair:
    """A pair of binary values."""

    first: Optional[bytes] = None
    second: Optional[bytes] = None


class Consistency(IntEnum):
    """Read consistency requested from the server."""

    STRONG = 0
    TIMELINE = 1


@dataclass
class Result:
    """Cells of one row, as returned by the server."""

    cells: list[Cell] = field(default_factory=list)
    associated_cell_count: Optional[int] = None
    exists: Optional[bool] = None
    stale: Optional[bool] = None
    partial: Optional[bool] = None


@dataclass
class GetMessage:
    """Body of a get request."""

    row: Optional[bytes] = None
    column: list[Column] = field(default_factory=list)
    attribute: list[NameBytesPair] = field(default_factory=list)
    filter: Any = None
    time_range: Optional[TimeRange] = None
    max_versions: Optional[int] = None
    cache_blocks: Optional[bool] = None
    store_limit: Optional[int] = None
    store_offset: Optional[int] = None
    existence_only: Optional[bool] = None
    consistency: Optional[Consistency] = None


@dataclass
class GetRequest:
    """A get addressed to a region."""

    region: Optional[RegionSpecifier] = None
    get: Optional[GetMessage] = None


@dataclass
class GetResponse:
    """Reply to a get request."""

    result: Optional[Result] = None


@dataclass
class ScanMessage:
    """Body of a scan request opening a new scanner."""

    column: list[Column] = field(default_factory=list)
    attribute: list[NameBytesPair] = field(default_factory=list)
    start_row: Optional[bytes] = None
    stop_row: Optional[bytes] = None
    filter: Any = None
    time_range: Optional[TimeRange] = None
    max_versions: Optional[int] = None
    cache_blocks: Optional[bool] = None
    max_result_size: Optional[int] = None
    store_limit: Optional[int] = None
    store_offset: Optional[int] = None
    reversed: Optional[bool] = None
    consistency: Optional[Consistency] = None


@dataclass
class ScanRequest:
    """A scan addressed to a region, opening or continuing a scanner."""

    region: Optional[RegionSpecifier] = None
    scan: Optional[ScanMessage] = None
    scanner_id: Optional[int] = None
    number_of_rows: Optional[int] = None
    close_scanner: Optional[bool] = None
    client_handles_partials: Optional[bool] = None
    client_handles_heartbeats: Optional[bool] = None


@dataclass
class ScanResponse:
    """Reply to a scan request."""

    cells_per_result: list[int] = field(default_factory=list)
    scanner_id: Optional[int] = None
    more_results: Optional[bool] = None
    ttl: Optional[int] = None
    results: list[Result] = field(default_factory=list)
    stale: Optional[bool] = None
    partial_flag_per_result: list[bool] = field(default_factory=list)
    more_results_in_region: Optional[bool] = None
    heartbeat_message: Optional[bool] = None


class MutationType(IntEnum):
    """Kind of a mutation."""

    APPEND = 0
    INCREMENT = 1
    PUT = 2
    DELETE = 3


class DeleteType(IntEnum):
    """Scope of a delete."""

    DELETE_ONE_VERSION = 0
    DELETE_MULTIPLE_VERSIONS = 1
    DELETE_FAMILY = 2
    DELETE_FAMILY_VERSION = 3


class Durability(IntEnum):
    """Write-ahead-log behaviour of a mutation."""

    USE_DEFAULT = 0
    SKIP_WAL = 1
    ASYNC_WAL = 2
    SYNC_WAL = 3
    FSYNC_WAL = 4


@dataclass
class QualifierValue:
    """A qualifier and its value within a mutated column family."""

    qualifier: Optional[bytes] = None
    value: Optional[bytes] = None
    timestamp: Optional[int] = None
    delete_type: Optional[DeleteType] = None
    tags: Optional[bytes] = None


@dataclass
class ColumnValue:
    """A column family with the qualifiers a mutation touches."""

    family: Optional[bytes] = None
    qualifier_value: list[QualifierValue] = field(default_factory=list)


@dataclass
class MutationProto:
    """A mutation of a single row."""

    row: Optional[bytes] = None
    mutate_type: Optional[MutationType] = None
    column_value: list[ColumnValue] = field(default_factory=list)
    timestamp: Optional[int] = None
    attribute: list[NameBytesPair] = field(default_factory=list)
    durability: Optional[Durability] = None
    time_range: Optional[TimeRange] = None
    associated_cell_count: Optional[int] = None
    nonce: Optional[int] = None


@dataclass
class MutateRequest:
    """A mutation addressed to a region, optionally guarded by a condition."""

    region: Optional[RegionSpecifier] = None
    mutation: Optional[MutationProto] = None
    condition: Any = None
    nonce_group: Optional[int] = None


@dataclass
class MutateResponse:
    """Reply to a mutate request."""

    result: Optional[Result] = None
    processed: Optional[bool] = None


@dataclass
class TableName:
    """Fully qualified table name."""

    namespace: Optional[bytes] = None
    qualifier: Optional[bytes] = None


@dataclass
class ColumnFamilySchema:
    """Name and attributes of a column family."""

    name: Optional[bytes] = None
    attributes: list[BytesBytesPair] = field(default_factory=list)
    configuration: list[BytesBytesPair] = field(default_factory=list)


@dataclass
class TableSchema:
    """Schema of a table."""

    table_name: Optional[TableName] = None
    attributes: list[BytesBytesPair] = field(default_factory=list)
    column_families: list[ColumnFamilySchema] = field(default_factory=list)


@dataclass
class CreateTableRequest:
    """Asks the master to create a table."""

    table_schema: Optional[TableSchema] = None
    split_keys: list[bytes] = field(default_factory=list)


@dataclass
class DeleteTableRequest:
    """Asks the master to delete a table."""

    table_name: Optional[TableName] = None


@dataclass
class DisableTableRequest:
    """Asks the master to disable a table."""

    table_name: Optional[TableName] = None


@dataclass
class EnableTableRequest:
    """Asks the master to enable a table."""

    table_name: Optional[TableName] = None


@dataclass
class GetProcedureResultRequest:
    """Asks the master for the state of a procedure."""

    proc_id: Optional[int] = None


@dataclass
class GetClusterStatusRequest:
    """Asks the master for the cluster status."""


@dataclass
class SetBalancerRunningRequest:
    """Turns the region balancer on or off."""

    on: Optional[bool] = None
    synchronous: Optional[bool] = None


@dataclass
class GetTableNamesRequest:
    """Asks the master for table names."""

    regex: Optional[str] = None
    include_sys_tables: Optional[bool] = None
    namespace: Optional[str] = None


@dataclass
class ServerName:
    """Host, port and start code of a region server."""

    host_name: Optional[str] = None
    port: Optional[int] = None
    start_code: Optional[int] = None


@dataclass
class MoveRegionRequest:
    """Asks the master to move a region."""

    region: Optional[RegionSpecifier] = None
    dest_server_name: Optional[ServerName] = None


class SnapshotType(IntEnum):
    """How a snapshot is taken."""

    DISABLED = 0
    FLUSH = 1
    SKIPFLUSH = 2


@dataclass
class SnapshotDescription:
    """Describes a table snapshot."""

    name: Optional[str] = None
    table: Optional[str] = None
    creation_time: Optional[int] = None
    type: Optional[SnapshotType] = None
    version: Optional[int] = None
    owner: Optional[str] = None


@dataclass
class SnapshotRequest:
    """Wraps a snapshot description for snapshot-related calls."""

    snapshot: Optional[SnapshotDescription] = None


@dataclass
class GetCompletedSnapshotsRequest:
    """Asks the master for completed snapshots."""


@dataclass
class RPCTInfo:
    """Tracing information carried in a request header."""

    trace_id: Optional[int] = None
    parent_id: Optional[int] = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class RequestHeader:
    """Header preceding every request on the wire."""

    call_id: Optional[int] = None
    trace_info: Optional[RPCTInfo] = None
    method_name: Optional[str] = None
    request_param: Optional[bool] = None
    cell_block_meta: Any = None
    priority: Optional[int] = None
    timeout: Optional[int] = None


@dataclass
class Response:
    """A reply message whose contents this package does not interpret."""

    kind: str
    fields: dict[str, Any] = field(default_factory=dict)