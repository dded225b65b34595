import pytest

from cache_store import (
    FEATURED_CONTENT_DOC_ID,
    STATE_EMPTY,
    STATE_STALE,
    STATE_VALID,
    FeaturedCacheStore,
)
from content_store import CURATED_LISTS_COLLECTION, ContentStore, ContentStoreError
from telemetry import Metrics


class _Clock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


class _Telemetry:
    def __init__(self):
        self.metrics = Metrics()


class _BrokenStore:
    def collection(self, name):
        raise ContentStoreError("store down")


@pytest.fixture
def store(tmp_path):
    s = ContentStore(str(tmp_path / "cache.db"))
    yield s
    s.close()


def _content(title="A"):
    return {"featured_item": None, "categories": [{"id": "c", "title": title, "items": []}]}


def test_empty_cache(store):
    cache = FeaturedCacheStore(store, 3600, clock=_Clock())
    assert cache.read() is None
    assert cache.is_valid() is False
    assert cache.time_remaining() == 0
    assert cache.state() == STATE_EMPTY


def test_ttl_validity_and_time_remaining_are_monotonic(store):
    clock = _Clock()
    cache = FeaturedCacheStore(store, 3600, clock=clock)
    cache.write(_content())
    assert cache.is_valid() is True
    assert cache.time_remaining() == 3600

    previous = cache.time_remaining()
    for step in (0.5, 1, 100, 1800, 1698.5):
        clock.now += step
        remaining = cache.time_remaining()
        assert remaining <= previous
        previous = remaining
    assert cache.time_remaining() == 0
    assert cache.is_valid() is False
    assert cache.state() == STATE_STALE
    # a stale snapshot stays readable until replaced
    assert cache.read() == _content()


def test_fractional_time_remaining_is_floored(store):
    clock = _Clock()
    cache = FeaturedCacheStore(store, 60, clock=clock)
    cache.write(_content())
    clock.now += 0.25
    assert cache.time_remaining() == 59
    assert cache.state() == STATE_VALID


def test_repeated_writes_keep_a_single_record(store):
    clock = _Clock()
    cache = FeaturedCacheStore(store, 3600, clock=clock)
    cache.write(_content("first"))
    clock.now += 10
    cache.write(_content("second"))
    collection = store.collection(CURATED_LISTS_COLLECTION)
    assert collection.count_documents() == 1
    record = collection.find_one(FEATURED_CONTENT_DOC_ID)
    assert record["content_blob"] == _content("second")
    assert record["last_refreshed_at"] == clock.now
    assert record["ttl_seconds"] == 3600
    assert record["type"] == "featured_section"


def test_missing_ttl_fields_mean_invalid(store):
    store.collection(CURATED_LISTS_COLLECTION).replace_one(FEATURED_CONTENT_DOC_ID, {"content_blob": _content()})
    cache = FeaturedCacheStore(store, 3600, clock=_Clock())
    assert cache.is_valid() is False
    assert cache.time_remaining() == 0
    assert cache.state() == STATE_STALE


def test_clear_is_idempotent(store):
    cache = FeaturedCacheStore(store, 3600, clock=_Clock())
    cache.write(_content())
    assert cache.clear() == 1
    assert cache.clear() == 0
    assert cache.read() is None


def test_store_errors_on_reads_become_misses():
    telemetry = _Telemetry()
    cache = FeaturedCacheStore(_BrokenStore(), 3600, clock=_Clock(), telemetry=telemetry)
    assert cache.read() is None
    assert cache.is_valid() is False
    assert cache.time_remaining() == 0
    assert cache.state() == STATE_EMPTY
    assert telemetry.metrics.value("videoclub_cache_reads_total", result="error") == 1


def test_store_errors_on_write_and_clear_propagate():
    cache = FeaturedCacheStore(_BrokenStore(), 3600, clock=_Clock())
    with pytest.raises(ContentStoreError):
        cache.write(_content())
    with pytest.raises(ContentStoreError):
        cache.clear()


def test_read_counts_hits_and_misses(store):
    telemetry = _Telemetry()
    cache = FeaturedCacheStore(store, 3600, clock=_Clock(), telemetry=telemetry)
    cache.read()
    cache.write(_content())
    cache.read()
    assert telemetry.metrics.value("videoclub_cache_reads_total", result="miss") == 1
    assert telemetry.metrics.value("videoclub_cache_reads_total", result="hit") == 1
