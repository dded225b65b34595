import pytest

from category_config import DEFAULT_CATEGORIES, CategoryConfigError, CategoryConfigService, normalize_category
from content_store import FEATURED_CATEGORIES_COLLECTION, ContentStore


@pytest.fixture
def store(tmp_path):
    s = ContentStore(str(tmp_path / "categories.db"))
    yield s
    s.close()


def _category(cid, order, enabled=True, source="trendingMovies"):
    return {
        "id": cid,
        "title": cid.title(),
        "type": "movie",
        "source_params": {"source": source},
        "order": order,
        "enabled": enabled,
    }


def test_enabled_categories_filtered_and_sorted(store):
    service = CategoryConfigService(store, defaults=[
        _category("c3", 3),
        _category("c1", 1),
        _category("c2", 2, enabled=False),
    ])
    assert [c["id"] for c in service.get_enabled_categories()] == ["c1", "c3"]
    assert [c["id"] for c in service.get_all_categories()] == ["c1", "c2", "c3"]


def test_defaults_seeded_once(store):
    service = CategoryConfigService(store)
    service.initialize()
    service.delete_category("documentaries")
    CategoryConfigService(store).initialize()
    collection = store.collection(FEATURED_CATEGORIES_COLLECTION)
    assert collection.count_documents() == len(DEFAULT_CATEGORIES) - 1


def test_upsert_and_delete(store):
    service = CategoryConfigService(store, defaults=[])
    saved = service.upsert_category({
        "id": "anime",
        "title": "Anime",
        "type": "tv",
        "source_params": {"source": "popularTV", "min_seeders": 10},
        "order": "7",
        "limit": 5,
    })
    assert saved["order"] == 7
    assert saved["limit"] == 5
    assert saved["enabled"] is True
    assert service.get_enabled_categories() == [saved]
    assert service.delete_category("anime") is True
    assert service.delete_category("anime") is False


@pytest.mark.parametrize("data", [
    {"title": "No id", "source_params": {"source": "trendingMovies"}},
    {"id": "x", "source_params": {"source": "trendingMovies"}},
    {"id": "x", "title": "X", "type": "music", "source_params": {"source": "trendingMovies"}},
    {"id": "x", "title": "X", "source_params": {"source": "unknown"}},
    {"id": "x", "title": "X", "source_params": {"source": "trendingMovies"}, "order": "first"},
])
def test_normalize_rejects_invalid_definitions(data):
    with pytest.raises(CategoryConfigError):
        normalize_category(data)
