# =============================================================================
# perplexica/resolver.py  -  Tool Arguments -> SearchRequest
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns the raw arguments of a perplexica_search tool call into a complete
#   SearchRequest, filling gaps from the Configuration.  If that is not
#   possible, it raises a ResolutionError that names the missing field.
#
# PRECEDENCE RULES FOR MODELS:
#   The caller passes at most three model-related values:
#       provider_id, chat_model_key, embedding_model_key
#
#   Chat model = (provider_id, chat_model_key)
#     both given      -> used verbatim; configuration is ignored
#     one given       -> error, we do not guess the other half
#     neither given   -> (PERPLEXICA_PROVIDER_ID, PERPLEXICA_CHAT_MODEL_KEY)
#
#   Embedding model = (provider_id, embedding_model_key)
#     both given           -> used verbatim
#     key without provider -> error, we do not guess the provider
#     key not given        -> (PERPLEXICA_PROVIDER_ID,
#                              PERPLEXICA_EMBEDDING_MODEL_KEY), both from
#                              configuration.  A configured key is never
#                              sent to a provider the caller picked.
#
#   An explicitly passed value is never replaced by a configured one.
#
# Blank strings count as "not given".  Agents frequently send "" for
# parameters they meant to leave out.  Non-blank values are passed on
# exactly as the caller wrote them.
# =============================================================================

from typing import Any, Mapping, Optional

from perplexica.config import (
    CHAT_MODEL_KEY_ENV,
    EMBEDDING_MODEL_KEY_ENV,
    PROVIDER_ID_ENV,
    Configuration,
)
from perplexica.errors import MissingModelKey, MissingProvider, ResolutionError
from perplexica.models import DEFAULT_FOCUS_MODE, ModelRef, SearchRequest


def _given(args: Mapping[str, Any], name: str) -> Optional[str]:
    """Return the caller's value for `name`, or None if absent or blank."""
    value = args.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ResolutionError(f"{name} must be a string", field=name)
    return value if value.strip() else None


def _missing(error_cls: type, name: str, env_var: str) -> ResolutionError:
    return error_cls(
        f"Missing {name}. Set either the {name} parameter or {env_var} environment variable",
        field=name,
    )


def _partial(given: str, missing: str) -> ResolutionError:
    return ResolutionError(
        f"{given} was given without {missing}. "
        f"Pass both {given} and {missing}, or neither to use the configured defaults",
        field=missing,
    )


def _resolve_chat_model(
    provider_id: Optional[str], key: Optional[str], config: Configuration
) -> ModelRef:
    if provider_id and key:
        return ModelRef(provider_id=provider_id, key=key)
    if provider_id:
        raise _partial("provider_id", "chat_model_key")
    if key:
        raise _partial("chat_model_key", "provider_id")

    if config.default_provider_id is None:
        raise _missing(MissingProvider, "provider_id", PROVIDER_ID_ENV)
    if config.default_chat_model_key is None:
        raise _missing(MissingModelKey, "chat_model_key", CHAT_MODEL_KEY_ENV)
    return ModelRef(provider_id=config.default_provider_id, key=config.default_chat_model_key)


def _resolve_embedding_model(
    provider_id: Optional[str], key: Optional[str], config: Configuration
) -> ModelRef:
    if key and provider_id:
        return ModelRef(provider_id=provider_id, key=key)
    if key:
        raise _partial("embedding_model_key", "provider_id")

    # provider_id alone belongs to the chat pair; the embedding pair is
    # taken from configuration as a whole.
    if config.default_provider_id is None:
        raise _missing(MissingProvider, "provider_id", PROVIDER_ID_ENV)
    if config.default_embedding_model_key is None:
        raise _missing(MissingModelKey, "embedding_model_key", EMBEDDING_MODEL_KEY_ENV)
    return ModelRef(provider_id=config.default_provider_id, key=config.default_embedding_model_key)


def _resolve_history(raw: Any) -> list[tuple[str, str]]:
    """Validate chat history; every entry must be a [role, message] pair."""
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        raise ResolutionError("history must be a list of [role, message] pairs", field="history")

    history = []
    for index, entry in enumerate(raw):
        if (
            not isinstance(entry, (list, tuple))
            or len(entry) != 2
            or not all(isinstance(part, str) for part in entry)
        ):
            raise ResolutionError(
                f"history[{index}] must be a [role, message] pair of strings, got {entry!r}",
                field="history",
            )
        history.append((entry[0], entry[1]))
    return history


def resolve(call_args: Mapping[str, Any], config: Configuration) -> SearchRequest:
    """Build a SearchRequest from tool-call arguments and configured defaults.

    Args:
        call_args: The perplexica_search arguments, keyed by parameter name.
        config: The process Configuration.

    Returns:
        A SearchRequest whose models are fully resolved.

    Raises:
        ResolutionError: query is missing, history is malformed, or a model
            is only partially specified.
        MissingProvider / MissingModelKey: neither the caller nor the
            configuration supplies a needed model field.
    """
    query = call_args.get("query")
    if not isinstance(query, str) or not query.strip():
        raise ResolutionError("query is required and must be a non-empty string", field="query")

    focus_mode = _given(call_args, "focus_mode") or DEFAULT_FOCUS_MODE
    stream = call_args.get("stream")
    if stream is None:
        stream = False
    elif not isinstance(stream, bool):
        raise ResolutionError("stream must be a boolean", field="stream")

    provider_id = _given(call_args, "provider_id")
    chat_model_key = _given(call_args, "chat_model_key")
    embedding_model_key = _given(call_args, "embedding_model_key")

    return SearchRequest(
        query=query,
        optimization_mode=config.optimization_mode,
        focus_mode=focus_mode,
        stream=stream,
        history=_resolve_history(call_args.get("history")),
        system_instructions=_given(call_args, "system_instructions"),
        chat_model=_resolve_chat_model(provider_id, chat_model_key, config),
        embedding_model=_resolve_embedding_model(provider_id, embedding_model_key, config),
    )
