import pytest

import upstream
from config import Settings
from conftest import CONVERTER_URL, DummyResp

wsgi = __import__("main")

VIDEO = "https://v.example.com/sd.mp4"


@pytest.fixture
def lookup(monkeypatch):
    """Install a canned lookup response; returns a setter."""
    def install(resp):
        monkeypatch.setattr(upstream.requests, "get", lambda *a, **k: resp)
    return install


def _client(settings=None):
    return wsgi.create_app(settings or Settings()).test_client()


def test_health():
    resp = _client().get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True}


def test_missing_url():
    resp = _client().get("/api/download")
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_lookup_error(lookup):
    lookup(DummyResp(status_code=404))
    resp = _client().get("/api/download?url=https://t/1")
    assert resp.status_code == 502
    assert "404" in resp.get_json()["error"]


def test_extraction_failure(lookup):
    lookup(DummyResp(body={"msg": "nothing here"}))
    resp = _client().get("/api/download?url=https://t/1")
    assert resp.status_code == 500
    assert resp.get_json()["lookup"] == {"msg": "nothing here"}


def test_mp4(lookup):
    lookup(DummyResp(body={"title": "Dance", "video_url": VIDEO}))
    resp = _client().get("/api/download?url=https://t/1")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["downloadUrl"] == VIDEO
    assert body["size"] == "auto"
    assert body["title"] == "Dance"
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


def test_mp3_with_converter(lookup, monkeypatch):
    lookup(DummyResp(body={"video_url": VIDEO}))
    monkeypatch.setattr(upstream.requests, "post", lambda *a, **k: DummyResp(body={"downloadUrl": "x"}))
    resp = _client(Settings(converter_api=CONVERTER_URL)).get("/api/download?url=https://t/1&format=mp3")
    assert resp.status_code == 200
    assert resp.get_json()["downloadUrl"] == "x"


def test_cors_restricted_origin(lookup):
    lookup(DummyResp(body={"video_url": VIDEO}))
    client = _client(Settings(allow_origins=["https://app.example.com"]))
    allowed = client.get("/api/download?url=https://t/1", headers={"Origin": "https://app.example.com"})
    denied = client.get("/api/download?url=https://t/1", headers={"Origin": "https://evil.example.com"})
    assert allowed.headers["Access-Control-Allow-Origin"] == "https://app.example.com"
    assert "Access-Control-Allow-Origin" not in denied.headers


def test_cors_preflight():
    resp = _client().options(
        "/api/download",
        headers={
            "Origin": "https://app.example.com",
            "Access-Control-Request-Method": "GET",
            "Access-Control-Request-Headers": "x-requested-with",
        },
    )
    assert resp.status_code == 200
    assert resp.headers.get("Access-Control-Allow-Origin") in ("*", "https://app.example.com")
    assert "GET" in resp.headers["Access-Control-Allow-Methods"]
    assert "x-requested-with" in resp.headers["Access-Control-Allow-Headers"].lower()


def test_cors_preflight_restricted_origin():
    client = _client(Settings(allow_origins=["https://app.example.com"]))
    resp = client.options(
        "/api/download",
        headers={
            "Origin": "https://app.example.com",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert resp.headers["Access-Control-Allow-Origin"] == "https://app.example.com"
