import pytest
import requests

from prowlarr_client import ProwlarrClient, ProwlarrError, convert_to_featured_item, is_tv_result


class _Resp:
    def __init__(self, status_code=200, payload=None, bad_json=False):
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


class _FakeRequests:
    RequestException = requests.RequestException
    Timeout = requests.Timeout
    ConnectionError = requests.ConnectionError

    def __init__(self, resp=None, exc=None):
        self.resp = resp
        self.exc = exc
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc:
            raise self.exc
        return self.resp


def _result(title, seeders=10, **extra):
    return {"guid": title, "title": title, "seeders": seeders, "size": 1024, "indexerId": 3, **extra}


def test_search_sends_key_and_movie_categories():
    fake = _FakeRequests(_Resp(payload=[_result("A 2020 1080p")]))
    client = ProwlarrClient("http://prowlarr:9696/", "key", requests_module=fake, timeout=7)
    results = client.search("*", media_type="movie", limit=15)
    assert len(results) == 1
    url, kwargs = fake.calls[0]
    assert url == "http://prowlarr:9696/api/v1/search"
    assert kwargs["headers"] == {"X-Api-Key": "key"}
    assert kwargs["params"]["type"] == "movie"
    assert kwargs["params"]["categories"] == [2000]
    assert kwargs["params"]["limit"] == 15
    assert kwargs["timeout"] == 7


def test_search_filters_by_min_seeders():
    fake = _FakeRequests(_Resp(payload=[_result("low", seeders=1), _result("high", seeders=9)]))
    client = ProwlarrClient("http://p", "k", requests_module=fake)
    assert [r["title"] for r in client.search("*", media_type="tv", min_seeders=5)] == ["high"]
    assert fake.calls[0][1]["params"]["type"] == "tvsearch"


@pytest.mark.parametrize("fake", [
    _FakeRequests(exc=requests.ConnectionError("down")),
    _FakeRequests(_Resp(status_code=500)),
    _FakeRequests(_Resp(bad_json=True)),
])
def test_search_errors_raise_prowlarr_error(fake):
    client = ProwlarrClient("http://p", "k", requests_module=fake)
    with pytest.raises(ProwlarrError):
        client.search("*")


def test_from_config_requires_credentials(monkeypatch):
    import config

    monkeypatch.setattr(config, "PROWLARR_URL", "")
    monkeypatch.setattr(config, "PROWLARR_API_KEY", "")
    assert ProwlarrClient.from_config(config) is None

    monkeypatch.setattr(config, "PROWLARR_URL", "http://p")
    monkeypatch.setattr(config, "PROWLARR_API_KEY", "k")
    assert isinstance(ProwlarrClient.from_config(config), ProwlarrClient)


def test_convert_to_featured_item():
    item = convert_to_featured_item(_result(
        "The.Matrix.1999.1080p.BluRay",
        tmdbId=603,
        categories=[{"id": 2040, "name": "Movies/HD"}],
        publishDate="2024-01-01T00:00:00Z",
    ))
    assert item["guid"] == "The.Matrix.1999.1080p.BluRay"
    assert item["clean_title"] == "The Matrix"
    assert item["year"] == 1999
    assert item["quality"] == "1080p"
    assert item["media_type"] == "movie"
    assert item["tmdb_id"] == 603
    assert item["indexer_id"] == "3"
    assert item["size_human"] == "1.0 KB"


def test_is_tv_result():
    assert is_tv_result({"categories": [{"name": "TV/HD"}]})
    assert not is_tv_result({"categories": [{"name": "Movies/UHD"}]})
    assert not is_tv_result({})
