from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import Settings  # noqa: E402

CONVERTER_URL = "http://converter.local/convert"


class DummyResp:
    def __init__(self, status_code=200, body=None, json_error=None):
        self.status_code = status_code
        self._body = body
        self._json_error = json_error

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json_error is not None:
            raise self._json_error
        return self._body


class FakeSession:
    """Records outbound calls and replays canned responses."""

    def __init__(self, get_resp=None, post_resp=None, post_error=None):
        self.get_resp = get_resp
        self.post_resp = post_resp
        self.post_error = post_error
        self.gets = []
        self.posts = []

    def get(self, url, **kwargs):
        self.gets.append((url, kwargs))
        return self.get_resp

    def post(self, url, **kwargs):
        self.posts.append((url, kwargs))
        if self.post_error is not None:
            raise self.post_error
        return self.post_resp


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def converter_settings():
    return Settings(converter_api=CONVERTER_URL)
