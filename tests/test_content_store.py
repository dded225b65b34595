import pytest

from content_store import ContentStore, ContentStoreError


@pytest.fixture
def store(tmp_path):
    s = ContentStore(str(tmp_path / "nested" / "store.db"))
    yield s
    s.close()


def test_connect_is_memoized_and_creates_parent_dir(store, tmp_path):
    first = store.connect()
    assert store.connect() is first
    assert (tmp_path / "nested").is_dir()
    assert store.ping() is True


def test_connection_failure_surfaces_on_first_use(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    s = ContentStore(str(blocker / "store.db"))
    with pytest.raises(ContentStoreError):
        s.ping()


def test_replace_find_and_delete(store):
    lists = store.collection("curated_lists")
    assert lists.find_one("a") is None
    assert lists.replace_one("a", {"n": 1}) is True
    assert lists.replace_one("a", {"m": 2}) is True
    assert lists.find_one("a") == {"m": 2}
    assert lists.count_documents() == 1
    assert lists.delete_one("a") == 1
    assert lists.delete_one("a") == 0
    assert lists.find_one("a") is None


def test_replace_without_upsert_skips_missing(store):
    lists = store.collection("curated_lists")
    assert lists.replace_one("missing", {"n": 1}, upsert=False) is False
    assert lists.count_documents() == 0


def test_update_one_merges_fields(store):
    cats = store.collection("featured_categories")
    assert cats.update_one("x", {"title": "X"}) is False
    cats.replace_one("x", {"id": "x", "title": "X", "order": 1})
    cats.update_one("x", {"order": 5})
    assert cats.find_one("x") == {"id": "x", "title": "X", "order": 5}


def test_collections_are_isolated_and_sortable(store):
    cats = store.collection("featured_categories")
    cats.insert_many([{"id": "b", "order": 2}, {"id": "a", "order": 1}, {"id": "c", "order": 3}])
    store.collection("curated_lists").replace_one("b", {"other": True})
    assert [d["id"] for d in cats.find(sort_key="order")] == ["a", "b", "c"]
    assert cats.count_documents() == 3
