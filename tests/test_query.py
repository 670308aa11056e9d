from datetime import datetime, timedelta, timezone

import pytest

from hrpc.call import Call, apply_options
from hrpc.get import Get
from hrpc.messages import Consistency
from hrpc.query import (
    DEFAULT_CACHE_BLOCKS,
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    ConsistencyType,
    cache_blocks,
    consistency,
    families,
    filters,
    max_results_per_column_family,
    max_versions,
    result_offset,
    time_range,
    time_range_uint64,
)


class _PlainCall(Call):
    def name(self):
        return "Plain"

    def to_proto(self):
        return None

    def new_response(self):
        return None


class _FakeFilter:
    def __init__(self, built):
        self.built = built

    def construct_pb_filter(self):
        return self.built


class _BrokenFilter:
    def construct_pb_filter(self):
        raise ValueError("bad filter")


def _not_query_error(option):
    with pytest.raises(ValueError) as excinfo:
        apply_options(_PlainCall(), option)
    return str(excinfo.value)


def test_families_option():
    f = {"yolo": ["swag", "meow"]}
    g = Get(None, None, families(f))
    assert g.families == f
    assert _not_query_error(families(f)) == (
        "'Families' option can only be used with Get or Scan request"
    )


def test_filters_option():
    g = Get(None, None, filters(_FakeFilter({"kind": "column_count", "limit": 1})))
    assert g.filter == {"kind": "column_count", "limit": 1}
    assert _not_query_error(filters(_FakeFilter("x"))) == (
        "'Filters' option can only be used with Get or Scan request"
    )


def test_filters_option_propagates_build_error():
    with pytest.raises(ValueError, match="bad filter"):
        Get(b"t", b"k", filters(_BrokenFilter()))


def test_time_range_option_sets_millis():
    start = datetime(2020, 1, 1, tzinfo=timezone.utc)
    g = Get(None, None, time_range(start, start + timedelta(minutes=1)))
    assert g.from_timestamp == 1577836800000
    assert g.to_timestamp == 1577836860000


@pytest.mark.parametrize("offset", [timedelta(minutes=-1), timedelta(0)])
def test_time_range_option_rejects_bad_range(offset):
    start = datetime(2020, 1, 1, tzinfo=timezone.utc)
    with pytest.raises(ValueError) as excinfo:
        Get(None, None, time_range(start, start + offset))
    assert str(excinfo.value) == "'from' timestamp is greater or equal to 'to' timestamp"


def test_time_range_option_on_non_query():
    start = datetime(2020, 1, 1, tzinfo=timezone.utc)
    msg = _not_query_error(time_range(start + timedelta(minutes=1), start))
    assert msg == "'TimeRange' option can only be used with Get or Scan request"


def test_time_range_uint64_defaults_accepted():
    g = Get(b"t", b"k", time_range_uint64(MIN_TIMESTAMP, MAX_TIMESTAMP))
    assert (g.from_timestamp, g.to_timestamp) == (0, 2**64 - 1)


def test_max_versions():
    g = Get(None, None, max_versions(123456))
    assert g.max_versions == 123456
    with pytest.raises(ValueError) as excinfo:
        Get(None, None, max_versions(0xFFFFFFFF))
    assert str(excinfo.value) == "'MaxVersions' exceeds supported number of versions"
    assert _not_query_error(max_versions(123456)) == (
        "'MaxVersions' option can only be used with Get or Scan request"
    )


def test_max_results_per_column_family():
    g = Get(None, None, max_results_per_column_family(123456))
    assert g.store_limit == 123456
    with pytest.raises(ValueError) as excinfo:
        Get(None, None, max_results_per_column_family(0xFFFFFFFF))
    assert str(excinfo.value) == (
        "'MaxResultsPerColumnFamily' exceeds supported number of value results"
    )
    assert _not_query_error(max_results_per_column_family(123456)) == (
        "'MaxResultsPerColumnFamily' option can only be used with Get or Scan request"
    )


def test_result_offset():
    g = Get(None, None, result_offset(123456))
    assert g.store_offset == 123456
    with pytest.raises(ValueError) as excinfo:
        Get(None, None, result_offset(0xFFFFFFFF))
    assert str(excinfo.value) == "'ResultOffset' exceeds supported offset value"
    assert _not_query_error(result_offset(123456)) == (
        "'ResultOffset' option can only be used with Get or Scan request"
    )


def test_cache_blocks():
    assert Get(None, None, cache_blocks(False)).cache_blocks is False
    assert Get(None, None).cache_blocks is True
    assert Get(None, None, cache_blocks(True)).cache_blocks is True
    assert DEFAULT_CACHE_BLOCKS is True
    assert _not_query_error(cache_blocks(True)) == (
        "'CacheBlocks' option can only be used with Get or Scan request"
    )


def test_consistency_option():
    g = Get(None, None, consistency(ConsistencyType.TIMELINE))
    assert g.consistency is ConsistencyType.TIMELINE
    assert Get(None, None).consistency is ConsistencyType.DEFAULT
    assert _not_query_error(consistency(ConsistencyType.STRONG)) == (
        "'Consistency' option can only be used with Get or Scan requests"
    )


def test_consistency_to_proto():
    assert ConsistencyType.TIMELINE.to_proto() is Consistency.TIMELINE
    assert ConsistencyType.STRONG.to_proto() is Consistency.STRONG
    with pytest.raises(ValueError, match="default consistency depends on context"):
        ConsistencyType.DEFAULT.to_proto()


def test_options_recorded_in_order():
    first = max_versions(3)
    second = result_offset(2)
    g = Get(b"t", b"k", first, second)
    assert g.options == [first, second]