import io
import json
import urllib.error
import urllib.request

import pytest

from perplexica.config import Configuration


@pytest.fixture
def config():
    """Configuration with every default filled in."""
    return Configuration(
        base_url="http://perplexica.test",
        default_provider_id="default-provider",
        default_chat_model_key="default-chat",
        default_embedding_model_key="default-embedding",
    )


@pytest.fixture
def bare_config():
    """Configuration with only the base URL."""
    return Configuration(base_url="http://perplexica.test")


class FakeResponse:
    def __init__(self, body: bytes, status: int = 200):
        self._body = body
        self.status = status

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeBackend:
    """Stands in for urllib.request.urlopen and records every request."""

    def __init__(self):
        self.requests = []
        self.replies = []

    def reply_json(self, data, status=200):
        self.replies.append(FakeResponse(json.dumps(data).encode("utf-8"), status))

    def reply_raw(self, body: bytes, status=200):
        self.replies.append(FakeResponse(body, status))

    def reply_http_error(self, code: int, body: bytes = b""):
        self.replies.append(
            urllib.error.HTTPError("http://perplexica.test", code, "error", {}, io.BytesIO(body))
        )

    def reply_exception(self, exc: Exception):
        self.replies.append(exc)

    def __call__(self, req, timeout=None):
        self.requests.append((req, timeout))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def sent_json(self, index=-1):
        req, _ = self.requests[index]
        return json.loads(req.data.decode("utf-8"))


@pytest.fixture
def backend(monkeypatch):
    fake = FakeBackend()
    monkeypatch.setattr(urllib.request, "urlopen", fake)
    return fake
