"""The Scan call: read rows of a table sequentially."""

from __future__ import annotations

from typing import Any, Optional, Union

from .call import Call, Option, apply_options
from .call import deserialize_cell_blocks as _decode_cells
from .get import families_to_column
from .messages import (
    NameBytesPair,
    Result,
    ScanMessage,
    ScanRequest,
    ScanResponse,
    TimeRange,
)
from .query import (
    DEFAULT_CACHE_BLOCKS,
    DEFAULT_MAX_RESULT_SIZE,
    DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY,
    DEFAULT_MAX_VERSIONS,
    DEFAULT_NUMBER_OF_ROWS,
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    BaseQuery,
    ConsistencyType,
)

_NO_SCANNER = 0xFFFFFFFFFFFFFFFF


def _as_bytes(value: Union[str, bytes, None]) -> Optional[bytes]:
    return value.encode() if isinstance(value, str) else value


def _quote(value: Optional[bytes]) -> str:
    """Render bytes as a double-quoted, escaped string."""
    parts = ['"']
    for byte in value or b"":
        char = chr(byte)
        if char == '"':
            parts.append('\\"')
        elif char == "\\":
            parts.append("\\\\")
        elif char == "\n":
            parts.append("\\n")
        elif char == "\t":
            parts.append("\\t")
        elif char == "\r":
            parts.append("\\r")
        elif 0x20 <= byte < 0x7F:
            parts.append(char)
        else:
            parts.append(f"\\x{byte:02x}")
    parts.append('"')
    return "".join(parts)


def _format_families(families_map: Optional[dict[str, list[str]]]) -> str:
    entries = " ".join(
        f"{family}:[{' '.join(families_map[family])}]" for family in sorted(families_map or {})
    )
    return f"map[{entries}]"


class Scan(Call, BaseQuery):
    """Scanner over a table, optionally limited to a key range."""

    def __init__(self, table: Union[str, bytes, None], *args: Option) -> None:
        Call.__init__(self, _as_bytes(table), None)
        BaseQuery.__init__(self)
        self.start_row: Optional[bytes] = None
        self.stop_row: Optional[bytes] = None
        self.scanner_id: int = _NO_SCANNER
        self.max_result_size: int = DEFAULT_MAX_RESULT_SIZE
        self.number_of_rows: int = DEFAULT_NUMBER_OF_ROWS
        self.reversed: bool = False
        self.attributes: list[NameBytesPair] = []
        self.closing: bool = False
        self.allow_partial_results: bool = False
        apply_options(self, *args)

    def __str__(self) -> str:
        filter_text = "<nil>" if self.filter is None else str(self.filter)
        return (
            f"Scan{{Table={_quote(self.table)} StartRow={_quote(self.start_row)} "
            f"StopRow={_quote(self.stop_row)} "
            f"TimeRange=({self.from_timestamp}, {self.to_timestamp}) "
            f"MaxVersions={self.max_versions} NumberOfRows={self.number_of_rows} "
            f"MaxResultSize={self.max_result_size} "
            f"Familes={_format_families(self.families)} Filter={filter_text} "
            f"StoreLimit={self.store_limit} StoreOffset={self.store_offset} "
            f"ScannerID={self.scanner_id} Close={str(self.closing).lower()}}}"
        )

    def name(self) -> str:
        return "Scan"

    def to_proto(self) -> ScanRequest:
        request = ScanRequest(
            region=self.region_specifier(),
            close_scanner=self.closing,
            number_of_rows=self.number_of_rows,
            client_handles_partials=True,
            client_handles_heartbeats=True,
        )
        if self.scanner_id != _NO_SCANNER:
            request.scanner_id = self.scanner_id
            return request

        message = ScanMessage(
            column=families_to_column(self.families),
            start_row=self.start_row,
            stop_row=self.stop_row,
            time_range=TimeRange(),
            max_result_size=self.max_result_size,
        )
        if self.max_versions != DEFAULT_MAX_VERSIONS:
            message.max_versions = self.max_versions
        if self.store_limit != DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY:
            message.store_limit = self.store_limit
        if self.store_offset != 0:
            message.store_offset = self.store_offset
        if self.from_timestamp != MIN_TIMESTAMP:
            message.time_range.from_ = self.from_timestamp
        if self.to_timestamp != MAX_TIMESTAMP:
            message.time_range.to = self.to_timestamp
        if self.reversed:
            message.reversed = True
        if self.cache_blocks != DEFAULT_CACHE_BLOCKS:
            message.cache_blocks = self.cache_blocks
        if self.consistency != ConsistencyType.DEFAULT:
            message.consistency = self.consistency.to_proto()
        message.attribute = list(self.attributes)
        message.filter = self.filter
        request.scan = message
        return request

    def new_response(self) -> ScanResponse:
        return ScanResponse()

    def deserialize_cell_blocks(self, message: ScanResponse, data: bytes) -> int:
        """Fill the reply's results from `data`; return the bytes read."""
        partials = message.partial_flag_per_result
        data = bytes(data)
        results: list[Result] = []
        read = 0
        for index, count in enumerate(message.cells_per_result):
            cells, used = _decode_cells(data[read:], count)
            results.append(Result(cells=cells, partial=partials[index]))
            read += used
        message.results = results
        return read


def scan_range(
    table: Union[str, bytes, None],
    start_row: Union[str, bytes, None],
    stop_row: Union[str, bytes, None],
    *args: Option,
) -> Scan:
    """Create a scanner over the half-open key range [start_row, stop_row)."""
    scan = Scan(table, *args)
    scan.start_row = _as_bytes(start_row)
    scan.stop_row = _as_bytes(stop_row)
    scan.key = scan.start_row
    return scan


def _scan(call: Call, message: str) -> Scan:
    if not isinstance(call, Scan):
        raise ValueError(message)
    return call


def scanner_id(scanner: int) -> Option:
    """Continue an ongoing scan with the given scanner id."""

    def apply(call: Call) -> None:
        _scan(call, "'ScannerID' option can only be used with Scan queries").scanner_id = scanner

    return apply


def close_scanner() -> Option:
    """Close the scanner after the first response."""

    def apply(call: Call) -> None:
        _scan(call, "'Close' option can only be used with Scan queries").closing = True

    return apply


def max_result_size(size: int) -> Option:
    """Set the maximum number of bytes fetched per scanner round trip."""

    def apply(call: Call) -> None:
        scan = _scan(call, "'MaxResultSize' option can only be used with Scan queries")
        if size == 0:
            raise ValueError("'MaxResultSize' option must be greater than 0")
        scan.max_result_size = size

    return apply


def number_of_rows(rows: int) -> Option:
    """Set how many rows are fetched per request to the region server."""

    def apply(call: Call) -> None:
        _scan(call, "'NumberOfRows' option can only be used with Scan queries").number_of_rows = (
            rows
        )

    return apply


def allow_partial_results() -> Option:
    """Let the scanner return partial rows."""

    def apply(call: Call) -> None:
        scan = _scan(call, "'AllowPartialResults' option can only be used with Scan queries")
        scan.allow_partial_results = True

    return apply


def reversed_scan() -> Option:
    """Scan in reverse key order."""

    def apply(call: Call) -> None:
        _scan(call, "'Reversed' option can only be used with Scan queries").reversed = True

    return apply


def attribute(key: str, value: bytes) -> Option:
    """Attach a named attribute to the scan; may be given several times."""

    def apply(call: Call) -> None:
        scan = _scan(call, "'Attributes' option can only be used with Scan queries")
        scan.attributes.append(NameBytesPair(name=key, value=value))

    return apply