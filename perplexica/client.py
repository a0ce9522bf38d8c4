# =============================================================================
# perplexica/client.py  -  HTTP Client for the Perplexica API
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Performs the two HTTP calls this server needs:
#
#     GET  {base_url}/api/providers   -> list of providers and their models
#     POST {base_url}/api/search      -> answer message + cited sources
#
#   and hands back the parsed JSON body.  Turning that JSON into dataclasses
#   is decoder.py's job, not this module's.
#
# ONE CALL, NO RETRIES:
#   Each method makes exactly one request.  If it fails, the failure goes
#   straight back to the caller as a TransportError with the HTTP status
#   (when there is one) and the response body or the underlying cause.
#   We never return "empty" data on failure, and we never cache.
#
# STREAMING:
#   Never.  The request body always says "stream": false, whatever the
#   caller passed, and the whole response body is read in one go.
# =============================================================================

import json
import logging
import urllib.error
import urllib.request
from typing import Any, Optional

from perplexica.config import Configuration
from perplexica.errors import DecodeError, TransportError
from perplexica.models import ModelRef, SearchRequest

logger = logging.getLogger(__name__)

_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "User-Agent": "perplexica-mcp/0.1",
}


def _model_payload(model: ModelRef) -> dict:
    return {"providerId": model.provider_id, "key": model.key}


def to_payload(request: SearchRequest) -> dict:
    """Serialize a SearchRequest into the JSON body POST /api/search expects."""
    payload: dict[str, Any] = {}
    if request.chat_model is not None:
        payload["chatModel"] = _model_payload(request.chat_model)
    if request.embedding_model is not None:
        payload["embeddingModel"] = _model_payload(request.embedding_model)
    payload["optimizationMode"] = request.optimization_mode
    payload["focusMode"] = request.focus_mode
    payload["query"] = request.query
    payload["history"] = [[role, message] for role, message in request.history]
    if request.system_instructions is not None:
        payload["systemInstructions"] = request.system_instructions
    # Always ask for one complete JSON body; the caller's stream flag is
    # accepted but never forwarded.
    payload["stream"] = False
    return payload


class PerplexicaClient:
    """Thin synchronous client over urllib.

    Holds nothing but the Configuration, so one instance can serve
    concurrent tool calls.
    """

    def __init__(self, config: Configuration):
        self.config = config

    def list_providers(self) -> Any:
        """GET /api/providers and return the parsed JSON body."""
        return self._request("GET", self.config.providers_url, what="providers")

    def search(self, request: SearchRequest) -> Any:
        """POST /api/search and return the parsed JSON body."""
        return self._request("POST", self.config.search_url, body=to_payload(request), what="search")

    def _request(self, method: str, url: str, what: str, body: Optional[dict] = None) -> Any:
        data = json.dumps(body).encode("utf-8") if body is not None else None
        req = urllib.request.Request(url, data=data, headers=_HEADERS, method=method)
        logger.debug("%s %s", method, url)

        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout) as response:
                status = response.status
                raw = response.read()
        except urllib.error.HTTPError as e:
            # urlopen raises for every non-2xx status.  Keep the body: it is
            # usually the backend's explanation of what was wrong.
            error_text = _read_error_body(e)
            logger.warning("%s %s -> %s", method, url, e.code)
            raise TransportError(
                f"Perplexica {what} API error (status {e.code}): {error_text}",
                status=e.code,
            ) from e
        except (urllib.error.URLError, OSError) as e:
            reason = getattr(e, "reason", e)
            logger.warning("%s %s failed: %s", method, url, reason)
            raise TransportError(f"{what.capitalize()} request failed: {reason}") from e

        logger.debug("%s %s -> %s (%d bytes)", method, url, status, len(raw))
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(f"Failed to parse {what} response as JSON: {e}") from e


def _read_error_body(error: urllib.error.HTTPError) -> str:
    try:
        text = error.read().decode("utf-8", errors="replace").strip()
    except OSError:
        return "Failed to read error response"
    return text or error.reason or "no response body"
