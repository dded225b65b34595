import pytest
import requests

from tmdb_client import TmdbClient, TmdbError


class _Resp:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


class _FakeRequests:
    RequestException = requests.RequestException

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        return self.responses[url.rsplit("/3", 1)[-1]]


def test_search_uses_media_specific_endpoint():
    fake = _FakeRequests({"/search/tv": _Resp(payload={"results": [{"id": 1399}]})})
    client = TmdbClient("key", requests_module=fake)
    assert client.search("Game of Thrones", "tv") == [{"id": 1399}]
    url, params = fake.calls[0]
    assert url.endswith("/search/tv")
    assert params["api_key"] == "key"
    assert params["query"] == "Game of Thrones"


def test_details_not_found_returns_none():
    fake = _FakeRequests({"/movie/1": _Resp(status_code=404)})
    assert TmdbClient("key", requests_module=fake).get_details(1, "movie") is None


def test_tv_details_append_external_ids():
    fake = _FakeRequests({"/tv/5": _Resp(payload={"id": 5})})
    assert TmdbClient("key", requests_module=fake).get_tv_details(5) == {"id": 5}
    assert fake.calls[0][1]["append_to_response"] == "external_ids"


def test_server_error_raises():
    fake = _FakeRequests({"/movie/2": _Resp(status_code=503)})
    with pytest.raises(TmdbError):
        TmdbClient("key", requests_module=fake).get_movie_details(2)


def test_from_config_without_key_returns_none(monkeypatch):
    import config

    monkeypatch.setattr(config, "TMDB_API_KEY", "")
    assert TmdbClient.from_config(config) is None
