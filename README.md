# hrpc

This package builds request objects for HBase region servers and the HBase
master. It covers gets, scans, mutations (put, delete, append and increment)
and admin calls. The admin calls create, delete, enable and disable tables,
take, check, restore, list and delete snapshots, list table names, move
regions, switch the balancer and ask for the cluster status.

Every request is a subclass of `hrpc.call.Call`. Each has `name()`,
`description()`, `to_proto()` and `new_response()`. `to_proto()` returns the
request as a plain dataclass from `hrpc.messages`. `new_response()` returns an
empty reply: `GetResponse`, `ScanResponse` or `MutateResponse` for data calls,
and a generic `Response` for the admin calls.

The package also decodes and encodes HBase cell blocks.

## Installing

```
pip install .
```

To run the tests, install the `test` extra and run pytest:

```
pip install ".[test]"
pytest
```

## Options

Options are callables. You pass them positionally after the required
arguments, and they are applied in order. An option that does not fit the
request raises `ValueError`, and so does an option given an invalid value.
For example, `time_range_uint64(5, 5)` and `max_versions(2**31)` both raise.

## Gets and scans

Get, Scan and Mutate address a region. Before calling `to_proto()`, assign
`call.region`. Any object with a `name` attribute (the region name as bytes)
will do. An object may instead provide a `region_specifier()` method that
returns a `RegionSpecifier`. If no region is set, `to_proto()` raises
`ValueError`.

```python
from types import SimpleNamespace

from hrpc.get import Get
from hrpc.query import families, max_versions, time_range_uint64

get = Get(b"table", b"row", families({"cf": ["a", "b"]}), max_versions(3),
          time_range_uint64(1000, 2000))
get.exists_only()
get.region = SimpleNamespace(name=b"region-name")
request = get.to_proto()          # hrpc.messages.GetRequest
```

Options shared by gets and scans live in `hrpc.query`:

* `families`
* `filters`
* `time_range` (takes datetimes) and `time_range_uint64` (takes milliseconds)
* `max_versions`
* `max_results_per_column_family`
* `result_offset`
* `cache_blocks`
* `consistency`, which takes a `ConsistencyType`

`filters` stores the result of the object's `construct_pb_filter()` if it has
that method. Otherwise it stores the object itself.

Scans are built with `Scan` or `scan_range`:

```python
from hrpc.scan import Scan, scan_range, number_of_rows, reversed_scan

scan = scan_range(b"table", b"start", b"stop", number_of_rows(100))
backwards = Scan(b"table", reversed_scan())
```

Options that apply only to scans:

* `scanner_id`
* `close_scanner`
* `max_result_size`
* `number_of_rows`
* `allow_partial_results`
* `reversed_scan`
* `attribute`

When a scanner id is set, `to_proto()` sends only that id and does not send
the scan body.

## Mutations

```python
from hrpc.mutate import (DurabilityType, durability, new_del, new_inc_single,
                         new_put, timestamp_uint64)

put = new_put(b"table", b"row", {"cf": {"q": b"value"}},
              durability(DurabilityType.SKIP_WAL), timestamp_uint64(42))
delete_family = new_del(b"table", b"row", {"cf": None})
counter = new_inc_single(b"table", b"row", "cf", "hits", 1)

put.region = SimpleNamespace(name=b"region-name")
message, blocks, size = put.serialize_cell_blocks([])
```

`to_proto()` puts the values into the message itself.
`serialize_cell_blocks(blocks)` sends the values as cell blocks instead. It
returns three things:

* the message, carrying only `associated_cell_count`
* the list of blocks, with this mutation's block appended
* the size of that block

Mutation options:

* `ttl`
* `timestamp` (takes a datetime)
* `timestamp_uint64`
* `durability`
* `delete_one_version`

`new_del` raises `ValueError` when `delete_one_version()` is used to delete a
whole row.

`hrpc.call.skip_batch()` marks a Get or Mutate as one that should not be
batched.

## Admin calls

```python
from hrpc.admin import CreateTable, SetBalancer, split_keys, table_attributes
from hrpc.snapshot import Snapshot, SnapshotDone, snapshot_skip_flush
from hrpc.tables import ListTableNames, MoveRegion, list_regex, with_destination_region_server

create = CreateTable(b"table", {"cf": {"VERSIONS": "5"}}, split_keys([b"m"]))
snap = Snapshot("nightly", "table", snapshot_skip_flush())
done = SnapshotDone("nightly", "table")
tables = ListTableNames(list_regex("user_.*"))
move = MoveRegion(b"encodedname", with_destination_region_server("host,16020,1234"))
balancer = SetBalancer(True)
```

`CreateTable` fills in every attribute that a family leaves out from
`DEFAULT_FAMILY_ATTRIBUTES`. Table names go into the `default` namespace.

The other calls in these modules are:

* `hrpc.admin`: `DeleteTable`, `DisableTable`, `EnableTable`,
  `GetProcedureState` and `ClusterStatus`
* `hrpc.snapshot`: `DeleteSnapshot`, `RestoreSnapshot`,
  `RestoreSnapshotDone` and `ListSnapshots`, with the options
  `snapshot_version` and `snapshot_owner`
* `hrpc.tables`: the options `list_namespace` and `list_sys_tables`

## Cell blocks and results

```python
from hrpc.call import CellBlockError, deserialize_cell_blocks, to_local_result

cells, consumed = deserialize_cell_blocks(data, 2)
```

`cell_from_cell_block` decodes a single cell. It returns the cell and the
number of bytes it used.

`Get`, `Scan` and `Mutate` each have a `deserialize_cell_blocks(message,
data)` method. It fills their reply message with the cells decoded from
`data`.

`CellBlockError` (a `ValueError`) is raised when a buffer is too short or
its lengths disagree.

`to_local_result` turns a `Result` into a `LocalResult` with:

* `cells`
* `stale`
* `partial`
* `exists`

## Trace headers

`hrpc.observability.RequestTracePropagator` wraps a `RequestHeader`. Its
`get`, `set` and `keys` methods read and write trace headers in the header's
trace info.

## What this package does not do

It builds requests and decodes cell blocks, and nothing else:

* It opens no connections and sends nothing.
* It does not look up regions.
* It does not iterate scanners.
* It does not encode messages to the protobuf wire format.
* It includes no filter types.

Replies to admin calls are opaque `Response` objects, which the package does
not interpret.