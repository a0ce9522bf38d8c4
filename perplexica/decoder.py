# =============================================================================
# perplexica/decoder.py  -  Backend JSON -> Dataclasses
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Converts the parsed JSON of /api/providers and /api/search into the
#   dataclasses in models.py.
#
# DEFENSIVE DECODING:
#   Perplexica is a third-party project whose API changes between releases.
#   Fields come and go; some are present only for some providers.  So we
#   split every field into one of two buckets:
#
#   STRICT (wrong shape -> DecodeError)
#     providers: top level is a list, or {"providers": [...]}
#                each provider entry is an object
#     search:    top level is an object
#                "message" is a string when present and not null
#                "sources" is a list of objects when present and not null
#
#   LENIENT (missing -> zero value)
#     provider id / name                          -> ""
#     chatModels / embeddingModels                -> {}
#     search message                              -> ""
#     search sources                              -> []
#     source title / url / pageContent            -> ""
#
#   Unknown fields are ignored everywhere.
#
# MODEL LISTS, TWO SHAPES:
#   Recent backends send  "chatModels": [{"name": ..., "key": ...}, ...]
#   Older ones sent       "chatModels": {"gpt-4": {"displayName": ...}, ...}
#   Both decode to the same dict[key, Model].  A key listed twice is one
#   model: the later entry wins, and the "Chat Models: N" summary counts
#   distinct keys.
# =============================================================================

from typing import Any

from perplexica.errors import DecodeError
from perplexica.models import Model, Provider, ProvidersResponse, SearchResponse, Source


def _text(obj: dict, name: str) -> str:
    """Lenient string field: missing, null or non-string becomes ""."""
    value = obj.get(name)
    return value if isinstance(value, str) else ""


def _decode_models(raw: Any) -> dict[str, Model]:
    models: dict[str, Model] = {}
    if isinstance(raw, list):
        for item in raw:
            if not isinstance(item, dict):
                continue
            key = _text(item, "key")
            if key:
                models[key] = Model(key=key, name=_text(item, "name"))
    elif isinstance(raw, dict):
        for key, meta in raw.items():
            if not key:
                continue
            name = ""
            if isinstance(meta, dict):
                name = _text(meta, "name") or _text(meta, "displayName")
            models[key] = Model(key=key, name=name)
    return models


def _decode_provider(index: int, raw: Any) -> Provider:
    if not isinstance(raw, dict):
        raise DecodeError(f"providers[{index}] must be an object, got {type(raw).__name__}")
    return Provider(
        id=_text(raw, "id"),
        name=_text(raw, "name"),
        chat_models=_decode_models(raw.get("chatModels")),
        embedding_models=_decode_models(raw.get("embeddingModels")),
    )


def decode_providers(data: Any) -> ProvidersResponse:
    """Decode the body of GET /api/providers.

    Raises:
        DecodeError: the body is neither a list of provider objects nor an
            object with a "providers" list.
    """
    if isinstance(data, dict):
        items = data.get("providers")
        if not isinstance(items, list):
            raise DecodeError('providers response object has no "providers" list')
    elif isinstance(data, list):
        items = data
    else:
        raise DecodeError(f"providers response must be a list or object, got {type(data).__name__}")

    return ProvidersResponse(providers=[_decode_provider(i, item) for i, item in enumerate(items)])


def _decode_source(index: int, raw: Any) -> Source:
    if not isinstance(raw, dict):
        raise DecodeError(f"sources[{index}] must be an object, got {type(raw).__name__}")

    # The documented shape nests title/url under "metadata"; some builds
    # flatten them onto the source itself.
    metadata = raw.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    return Source(
        title=_text(metadata, "title") or _text(raw, "title"),
        url=_text(metadata, "url") or _text(raw, "url"),
        page_content=_text(raw, "pageContent"),
    )


def decode_search(data: Any) -> SearchResponse:
    """Decode the body of POST /api/search.

    Raises:
        DecodeError: the body is not an object, "message" is not a string,
            or "sources" is not a list of objects.
    """
    if not isinstance(data, dict):
        raise DecodeError(f"search response must be an object, got {type(data).__name__}")

    message = data.get("message")
    if message is None:
        message = ""
    elif not isinstance(message, str):
        raise DecodeError(f'search response "message" must be a string, got {type(message).__name__}')

    sources = data.get("sources")
    if sources is None:
        sources = []
    elif not isinstance(sources, list):
        raise DecodeError(f'search response "sources" must be a list, got {type(sources).__name__}')

    return SearchResponse(
        message=message,
        sources=[_decode_source(i, item) for i, item in enumerate(sources)],
    )
