"""
Tests for the Videoclub Flask application.
Runs without any external services (Prowlarr, TMDb).
"""
import pytest

import config
from app_factory import build_services, create_app
from mock_content import get_mock_featured_content
from scheduler import ManualTrigger


class _FakeProwlarr:
    def search(self, query="*", **kwargs):
        return [
            {"guid": f"{query}-{i}", "title": f"Release {i} 2024 1080p", "seeders": 50, "size": 1000}
            for i in range(3)
        ]


@pytest.fixture
def services(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DB_PATH", str(tmp_path / "app.db"))
    monkeypatch.setattr(config, "SETTINGS_FILE", str(tmp_path / "settings.json"))
    monkeypatch.setattr(config, "PROWLARR_URL", "")
    monkeypatch.setattr(config, "PROWLARR_API_KEY", "")
    monkeypatch.setattr(config, "TMDB_API_KEY", "")
    monkeypatch.setattr(config, "DRY_RUN", False)
    monkeypatch.setattr(config, "CATEGORY_ITEM_LIMIT", 15)
    monkeypatch.setattr(config, "_file_settings", {})
    deps = build_services(config, trigger=ManualTrigger())
    deps["curator"].provider = _FakeProwlarr()
    yield deps
    deps["store"].close()


@pytest.fixture
def client(services):
    app = create_app(services)
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.get_json()["status"] == "ok"


def test_readyz(client):
    r = client.get("/readyz")
    assert r.status_code == 200
    data = r.get_json()
    assert data["status"] == "ready"
    assert data["checks"]["database"]["ok"] is True


def test_featured_fetches_then_serves_from_cache(client):
    r = client.get("/api/featured")
    assert r.status_code == 200
    data = r.get_json()
    assert [c["id"] for c in data["categories"]] == [
        "trending-now", "popular-tv", "new-releases", "top-4k", "documentaries",
    ]
    assert data["featured_item"]["display_overview"] == "No overview available."

    status = client.get("/api/cache").get_json()
    assert status["valid"] is True
    assert status["state"] == "VALID"
    assert status["ttl_seconds_remaining"] > 0
    assert client.get("/api/featured").get_json() == data


def test_featured_category(client):
    r = client.get("/api/featured/category/popular-tv")
    assert r.status_code == 200
    assert r.get_json()["title"] == "Popular TV Shows"
    assert client.get("/api/featured/category/nope").status_code == 404


def test_featured_item_requires_tmdb(client):
    assert client.get("/api/featured/item/movie/603").status_code == 503
    assert client.get("/api/featured/item/music/603").status_code == 400


def test_refresh_and_clear(client):
    r = client.post("/api/cache/refresh")
    assert r.status_code == 200
    summary = r.get_json()
    assert summary["success"] is True
    assert len(summary["refreshed_categories"]) == 5

    sched = client.get("/api/scheduler").get_json()
    assert sched["mode"] == "manual"
    assert sched["last_summary"]["success"] is True

    r = client.post("/api/cache/clear")
    assert r.get_json() == {"success": True, "deleted": 1}
    assert client.get("/api/cache").get_json()["state"] == "EMPTY"
    assert client.post("/api/cache/clear").get_json()["deleted"] == 0


def test_missing_provider_serves_placeholder(client, services):
    services["curator"].provider = None
    assert client.get("/api/featured").get_json() == get_mock_featured_content()


def test_admin_categories(client):
    r = client.get("/api/admin/categories")
    assert len(r.get_json()["categories"]) == 5

    r = client.post("/api/admin/categories", json={
        "id": "anime", "title": "Anime", "type": "tv",
        "source_params": {"source": "popularTV"}, "order": 0,
    })
    assert r.status_code == 200
    assert r.get_json()["category"]["id"] == "anime"

    r = client.post("/api/admin/categories", json={"id": "bad", "title": "Bad", "source_params": {"source": "?"}})
    assert r.status_code == 400

    assert client.delete("/api/admin/categories/anime").status_code == 200
    assert client.delete("/api/admin/categories/anime").status_code == 404


def test_metrics_endpoint(client):
    client.get("/api/featured")
    client.get("/api/featured")
    r = client.get("/metrics")
    assert r.status_code == 200
    body = r.data.decode()
    assert "videoclub_cache_valid 1" in body
    assert "videoclub_cache_reads_total" in body


def test_config_and_settings(client):
    data = client.get("/api/config").get_json()
    assert data["prowlarr"] is False
    assert data["tmdb"] is False
    assert data["scheduler_mode"] == "manual"

    r = client.post("/api/settings", json={"tmdb_api_key": config.MASKED_SECRET, "category_item_limit": 20})
    assert r.get_json() == {"success": True}
    assert client.post("/api/settings", json={}).status_code == 400


def test_test_endpoints_report_missing_config(client):
    assert client.post("/api/test/prowlarr", json={}).get_json()["error_class"] == "missing_config"
    assert client.post("/api/test/tmdb", json={}).get_json()["error_class"] == "missing_config"
