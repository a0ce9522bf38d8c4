import socket
import urllib.error

import pytest

from perplexica.client import PerplexicaClient, to_payload
from perplexica.errors import DecodeError, TransportError
from perplexica.models import ModelRef, SearchRequest


def _request(**overrides):
    fields = dict(
        query="What is AI?",
        optimization_mode="speed",
        chat_model=ModelRef("openai", "gpt-4"),
        embedding_model=ModelRef("openai", "text-embedding-3-large"),
    )
    fields.update(overrides)
    return SearchRequest(**fields)


def test_payload_wire_shape():
    payload = to_payload(
        _request(history=[("human", "Hi")], system_instructions="Be brief", stream=True)
    )

    assert payload == {
        "chatModel": {"providerId": "openai", "key": "gpt-4"},
        "embeddingModel": {"providerId": "openai", "key": "text-embedding-3-large"},
        "optimizationMode": "speed",
        "focusMode": "webSearch",
        "query": "What is AI?",
        "history": [["human", "Hi"]],
        "systemInstructions": "Be brief",
        "stream": False,
    }


def test_payload_omits_absent_fields():
    payload = to_payload(_request(chat_model=None, embedding_model=None))

    assert "chatModel" not in payload
    assert "embeddingModel" not in payload
    assert "systemInstructions" not in payload
    assert payload["history"] == []
    assert payload["stream"] is False


def test_search_posts_json(config, backend):
    backend.reply_json({"message": "ok", "sources": []})

    data = PerplexicaClient(config).search(_request())

    assert data == {"message": "ok", "sources": []}
    assert len(backend.requests) == 1
    req, timeout = backend.requests[0]
    assert req.get_method() == "POST"
    assert req.full_url == "http://perplexica.test/api/search"
    assert req.get_header("Content-type") == "application/json"
    assert timeout == config.timeout
    assert backend.sent_json()["query"] == "What is AI?"


def test_list_providers_gets(config, backend):
    backend.reply_json({"providers": []})

    assert PerplexicaClient(config).list_providers() == {"providers": []}
    req, _ = backend.requests[0]
    assert req.get_method() == "GET"
    assert req.full_url == "http://perplexica.test/api/providers"
    assert req.data is None


def test_http_error_carries_status_and_body(config, backend):
    backend.reply_http_error(500, b"Invalid chat model")

    with pytest.raises(TransportError) as excinfo:
        PerplexicaClient(config).search(_request())

    assert excinfo.value.status == 500
    assert "status 500" in str(excinfo.value)
    assert "Invalid chat model" in str(excinfo.value)


def test_connection_refused(config, backend):
    backend.reply_exception(urllib.error.URLError(ConnectionRefusedError(111, "Connection refused")))

    with pytest.raises(TransportError) as excinfo:
        PerplexicaClient(config).list_providers()

    assert excinfo.value.status is None
    assert "Connection refused" in str(excinfo.value)


def test_timeout(config, backend):
    backend.reply_exception(socket.timeout("timed out"))

    with pytest.raises(TransportError, match="timed out"):
        PerplexicaClient(config).search(_request())


def test_invalid_json_body(config, backend):
    backend.reply_raw(b"<html>not json</html>")

    with pytest.raises(DecodeError, match="search"):
        PerplexicaClient(config).search(_request())


def test_no_retry_on_failure(config, backend):
    backend.reply_http_error(503)

    with pytest.raises(TransportError):
        PerplexicaClient(config).search(_request())
    assert len(backend.requests) == 1
