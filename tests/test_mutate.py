from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from hrpc.call import CellBlockError, skip_batch
from hrpc.get import Get
from hrpc.messages import (
    Cell,
    CellType,
    ColumnValue,
    DeleteType,
    Durability,
    MutateRequest,
    MutateResponse,
    MutationProto,
    MutationType,
    NameBytesPair,
    QualifierValue,
    RegionSpecifier,
    RegionSpecifierType,
    Result,
)
from hrpc.mutate import (
    DurabilityType,
    Mutate,
    delete_one_version,
    durability,
    new_app,
    new_del,
    new_inc,
    new_inc_single,
    new_put,
    timestamp,
    timestamp_uint64,
    ttl,
)

RS = RegionSpecifier(type=RegionSpecifierType.REGION_NAME, value=b"region")
LATEST = b"\x7f\xff\xff\xff\xff\xff\xff\xff"
TS42 = b"\x00\x00\x00\x00\x00\x00\x00*"
TTL_VALUE = b"\x00\x00\x00\x00\x00\x00\x03\xe8"


def _proto(mtype, columns=None, ts=None, dur=Durability.USE_DEFAULT, attrs=None, count=None):
    return MutateRequest(
        region=RS,
        mutation=MutationProto(
            row=b"key",
            mutate_type=mtype,
            durability=dur,
            timestamp=ts,
            column_value=columns or [],
            attribute=attrs or [],
            associated_cell_count=count,
        ),
    )


def _qv(qualifier, value=None, ts=None, dt=None):
    return QualifierValue(qualifier=qualifier, value=value, timestamp=ts, delete_type=dt)


CASES = [
    (
        lambda t, k: new_put(t, k, None),
        _proto(MutationType.PUT),
        _proto(MutationType.PUT, count=0),
        [],
        0,
    ),
    (
        lambda t, k: new_put(t, k, None, durability(DurabilityType.SKIP_WAL)),
        _proto(MutationType.PUT, dur=Durability.SKIP_WAL),
        _proto(MutationType.PUT, dur=Durability.SKIP_WAL, count=0),
        [],
        0,
    ),
    (
        lambda t, k: new_put(t, k, None, ttl(timedelta(seconds=1))),
        _proto(MutationType.PUT, attrs=[NameBytesPair(name="_ttl", value=TTL_VALUE)]),
        _proto(MutationType.PUT, attrs=[NameBytesPair(name="_ttl", value=TTL_VALUE)], count=0),
        [],
        0,
    ),
    (
        lambda t, k: new_put(t, k, {"cf": {"q": b"value"}}),
        _proto(MutationType.PUT, [ColumnValue(b"cf", [_qv(b"q", b"value")])]),
        _proto(MutationType.PUT, count=1),
        [
            b"\x00\x00\x00\x1f\x00\x00\x00\x12\x00\x00\x00\x05\x00\x03key\x02cfq"
            + LATEST + b"\x04value"
        ],
        35,
    ),
    (
        lambda t, k: new_put(
            t, k, {"cf1": {"q1": b"value", "q2": b"value"}, "cf2": {"q1": b"value"}}
        ),
        _proto(
            MutationType.PUT,
            [
                ColumnValue(b"cf1", [_qv(b"q1", b"value"), _qv(b"q2", b"value")]),
                ColumnValue(b"cf2", [_qv(b"q1", b"value")]),
            ],
        ),
        _proto(MutationType.PUT, count=3),
        [
            b"\x00\x00\x00!\x00\x00\x00\x14\x00\x00\x00\x05\x00\x03key\x03cf1q1"
            + LATEST + b"\x04value",
            b"\x00\x00\x00!\x00\x00\x00\x14\x00\x00\x00\x05\x00\x03key\x03cf1q2"
            + LATEST + b"\x04value",
            b"\x00\x00\x00!\x00\x00\x00\x14\x00\x00\x00\x05\x00\x03key\x03cf2q1"
            + LATEST + b"\x04value",
        ],
        111,
    ),
    (
        lambda t, k: new_put(
            t,
            k,
            {"cf": {"q": b"value"}},
            timestamp(datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(milliseconds=42)),
        ),
        _proto(MutationType.PUT, [ColumnValue(b"cf", [_qv(b"q", b"value", 42)])], ts=42),
        _proto(MutationType.PUT, ts=42, count=1),
        [b"\x00\x00\x00\x1f\x00\x00\x00\x12\x00\x00\x00\x05\x00\x03key\x02cfq" + TS42
         + b"\x04value"],
        35,
    ),
    (
        lambda t, k: new_put(t, k, {"cf": {"q": b"value"}}, timestamp_uint64(42)),
        _proto(MutationType.PUT, [ColumnValue(b"cf", [_qv(b"q", b"value", 42)])], ts=42),
        _proto(MutationType.PUT, ts=42, count=1),
        [b"\x00\x00\x00\x1f\x00\x00\x00\x12\x00\x00\x00\x05\x00\x03key\x02cfq" + TS42
         + b"\x04value"],
        35,
    ),
    (
        lambda t, k: new_del(t, k, None),
        _proto(MutationType.DELETE),
        _proto(MutationType.DELETE, count=0),
        [],
        0,
    ),
    (
        lambda t, k: new_del(t, k, {"cf": {"q": b"value"}}, timestamp_uint64(42)),
        _proto(
            MutationType.DELETE,
            [ColumnValue(b"cf", [_qv(b"q", b"value", 42, DeleteType.DELETE_MULTIPLE_VERSIONS)])],
            ts=42,
        ),
        _proto(MutationType.DELETE, ts=42, count=1),
        [b"\x00\x00\x00\x1f\x00\x00\x00\x12\x00\x00\x00\x05\x00\x03key\x02cfq" + TS42
         + b"\x0cvalue"],
        35,
    ),
    (
        lambda t, k: new_app(t, k, None),
        _proto(MutationType.APPEND),
        _proto(MutationType.APPEND, count=0),
        [],
        0,
    ),
    (
        lambda t, k: new_inc(t, k, None),
        _proto(MutationType.INCREMENT),
        _proto(MutationType.INCREMENT, count=0),
        [],
        0,
    ),
    (
        lambda t, k: new_inc_single(t, k, "cf", "q", 1),
        _proto(
            MutationType.INCREMENT,
            [ColumnValue(b"cf", [_qv(b"q", b"\x00\x00\x00\x00\x00\x00\x00\x01")])],
        ),
        _proto(MutationType.INCREMENT, count=1),
        [b"\x00\x00\x00\"\x00\x00\x00\x12\x00\x00\x00\x08\x00\x03key\x02cfq" + LATEST
         + b"\x04\x00\x00\x00\x00\x00\x00\x00\x01"],
        38,
    ),
    (
        lambda t, k: new_del(t, k, {"cf": None}),
        _proto(
            MutationType.DELETE,
            [ColumnValue(b"cf", [_qv(b"", dt=DeleteType.DELETE_FAMILY)])],
        ),
        _proto(MutationType.DELETE, count=1),
        [b"\x00\x00\x00\x19\x00\x00\x00\x11\x00\x00\x00\x00\x00\x03key\x02cf" + LATEST
         + b"\x0e"],
        29,
    ),
    (
        lambda t, k: new_del(t, k, {"cf": None}, timestamp_uint64(42)),
        _proto(
            MutationType.DELETE,
            [ColumnValue(b"cf", [_qv(b"", ts=42, dt=DeleteType.DELETE_FAMILY)])],
            ts=42,
        ),
        _proto(MutationType.DELETE, ts=42, count=1),
        [b"\x00\x00\x00\x19\x00\x00\x00\x11\x00\x00\x00\x00\x00\x03key\x02cf" + TS42
         + b"\x0e"],
        29,
    ),
    (
        lambda t, k: new_del(t, k, {"cf": None}, timestamp_uint64(42), delete_one_version()),
        _proto(
            MutationType.DELETE,
            [ColumnValue(b"cf", [_qv(b"", ts=42, dt=DeleteType.DELETE_FAMILY_VERSION)])],
            ts=42,
        ),
        _proto(MutationType.DELETE, ts=42, count=1),
        [b"\x00\x00\x00\x19\x00\x00\x00\x11\x00\x00\x00\x00\x00\x03key\x02cf" + TS42
         + b"\n"],
        29,
    ),
    (
        lambda t, k: new_del(
            t, k, {"cf": {"a": None}}, timestamp_uint64(42), delete_one_version()
        ),
        _proto(
            MutationType.DELETE,
            [ColumnValue(b"cf", [_qv(b"a", ts=42, dt=DeleteType.DELETE_ONE_VERSION)])],
            ts=42,
        ),
        _proto(MutationType.DELETE, ts=42, count=1),
        [b"\x00\x00\x00\x1a\x00\x00\x00\x12\x00\x00\x00\x00\x00\x03key\x02cfa" + TS42
         + b"\x08"],
        30,
    ),
]


@pytest.mark.parametrize("use_str", [False, True])
@pytest.mark.parametrize("case", CASES)
def test_mutate(case, use_str):
    factory, out, cb_proto, blocks, blocks_len = case
    table, key = ("table", "key") if use_str else (b"table", b"key")
    m = factory(table, key)
    assert m.name() == "Mutate"
    assert m.new_response() == MutateResponse()
    m.region = SimpleNamespace(name=b"region")

    assert m.to_proto() == out

    proto, out_blocks, size = m.serialize_cell_blocks(None)
    assert proto == cb_proto
    assert size == blocks_len
    assert sum(len(b) for b in out_blocks) == size
    if blocks:
        assert len(out_blocks) == 1
        for block in blocks:
            assert block in out_blocks[0]
    else:
        assert out_blocks == []


@pytest.mark.parametrize("use_str", [False, True])
def test_invalid_durability(use_str):
    table, key = ("table", "key") if use_str else (b"table", b"key")
    with pytest.raises(ValueError, match="invalid durability value"):
        new_put(table, key, None, durability(42))


@pytest.mark.parametrize("use_str", [False, True])
def test_delete_one_version_whole_row(use_str):
    table, key = ("table", "key") if use_str else (b"table", b"key")
    with pytest.raises(
        ValueError,
        match="'DeleteOneVersion' option cannot be specified for delete entire row request",
    ):
        new_del(table, key, None, delete_one_version())


def test_description_names_mutation_type():
    assert new_put(b"t", b"k", None).description() == "PUT"
    assert new_del(b"t", b"k", None).description() == "DELETE"
    assert new_app(b"t", b"k", None).description() == "APPEND"
    assert new_inc(b"t", b"k", None).description() == "INCREMENT"


def test_cell_blocks_enabled_and_skip_batch():
    m = new_put(b"t", b"k", None, skip_batch())
    assert m.cell_blocks_enabled() is True
    assert m.skip_batch is True
    assert new_put(b"t", b"k", None).skip_batch is False


def test_ttl_seconds_number():
    m = new_put(b"t", b"k", None, ttl(1))
    assert m.ttl == TTL_VALUE


def test_serialize_appends_to_existing_blocks():
    m = new_put(b"table", b"key", {"cf": {"q": b"value"}})
    m.region = SimpleNamespace(name=b"region")
    _, out_blocks, size = m.serialize_cell_blocks([b"prior"])
    assert out_blocks[0] == b"prior"
    assert len(out_blocks) == 2
    assert size == 35


@pytest.mark.parametrize(
    "option, message",
    [
        (ttl(1), "'TTL' option can only be used with mutation queries"),
        (timestamp_uint64(1), "'TimestampUint64' option can only be used with mutation queries"),
        (
            timestamp(datetime(2020, 1, 1, tzinfo=timezone.utc)),
            "'Timestamp' option can only be used with mutation queries",
        ),
        (durability(DurabilityType.SYNC_WAL), "'Durability' option can only be used"),
        (delete_one_version(), "'DeleteOneVersion' option can only be used"),
    ],
)
def test_mutation_options_reject_get(option, message):
    with pytest.raises(ValueError, match=message):
        Get(b"t", b"k", option)


EXPECTED_CELLS = [
    Cell(
        row=b"row7",
        family=b"cf",
        qualifier=b"b",
        timestamp=1494873081120,
        value=b"Hello my name is Dog.",
    ),
    Cell(
        row=b"row7",
        family=b"cf",
        qualifier=b"a",
        timestamp=1494873081120,
        value=b"Hello my name is Dog.",
        cell_type=CellType.PUT,
    ),
]
CELLBLOCK = bytes(
    [0, 0, 0, 48, 0, 0, 0, 19, 0, 0, 0, 21, 0, 4, 114, 111, 119, 55, 2, 99,
     102, 97, 0, 0, 1, 92, 13, 97, 5, 32, 4, 72, 101, 108, 108, 111, 32, 109, 121, 32, 110,
     97, 109, 101, 32, 105, 115, 32, 68, 111, 103, 46]
)


def test_deserialize_cell_blocks():
    response = MutateResponse(result=Result(cells=[EXPECTED_CELLS[0]], associated_cell_count=1))
    read = Mutate().deserialize_cell_blocks(response, CELLBLOCK)
    assert response.result.cells == EXPECTED_CELLS
    assert read == len(CELLBLOCK)


def test_deserialize_cell_blocks_error():
    response = MutateResponse(result=Result(cells=[EXPECTED_CELLS[0]], associated_cell_count=1))
    with pytest.raises(CellBlockError):
        Mutate().deserialize_cell_blocks(response, CELLBLOCK[:10])


def test_deserialize_without_result_reads_nothing():
    assert Mutate().deserialize_cell_blocks(MutateResponse(), CELLBLOCK) == 0