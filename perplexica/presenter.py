# =============================================================================
# perplexica/presenter.py  -  Dataclasses -> Tool Output Text
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Renders decoded responses into the exact text the MCP tools return.
#   Output is deterministic: same input, byte-for-byte same text, in the
#   order the backend sent things.  Nothing is re-sorted.
#
# TWO FORMATS:
#   render_providers  - one summary block per provider, then the full
#                       catalogue as pretty JSON so the calling agent can
#                       pick exact provider ids and model keys from it.
#   render_search     - markdown:
#
#                           ## Summary
#
#                           <message>
#
#                           ## Sources
#
#                           - <title>
#                             - <url>
# =============================================================================

import json

from perplexica.models import Model, Provider, ProvidersResponse, SearchResponse

NO_SOURCES_LINE = "No sources found."


def _models_json(models: dict[str, Model]) -> list[dict]:
    return [{"name": model.name, "key": model.key} for model in models.values()]


def _provider_json(provider: Provider) -> dict:
    return {
        "id": provider.id,
        "name": provider.name,
        "chatModels": _models_json(provider.chat_models),
        "embeddingModels": _models_json(provider.embedding_models),
    }


def providers_to_json(response: ProvidersResponse) -> dict:
    """Structured form of the providers response, in backend order."""
    return {"providers": [_provider_json(p) for p in response.providers]}


def render_providers(response: ProvidersResponse) -> str:
    """Summarize each provider, then append the complete response as JSON."""
    parts = [f"Found {len(response.providers)} providers available:"]

    for provider in response.providers:
        parts.append(
            f"\n## {provider.name}\n"
            f"ID: {provider.id}\n"
            f"Chat Models: {len(provider.chat_models)}\n"
            f"Embedding Models: {len(provider.embedding_models)}"
        )

    complete = json.dumps(providers_to_json(response), indent=2, ensure_ascii=False)
    parts.append(f"\n## Complete Response (JSON)\n\n```json\n{complete}\n```")
    return "\n".join(parts)


def render_search(response: SearchResponse) -> str:
    """Render a search answer and its sources as markdown.

    A source missing its title (or url) keeps its bullet with empty text.
    A source missing both is skipped: there is nothing to show for it.
    """
    lines = ["## Summary", "", response.message, "", "## Sources", ""]

    sources = [s for s in response.sources if not s.is_blank]
    if not sources:
        lines.append(NO_SOURCES_LINE)
    for source in sources:
        lines.append(f"- {source.title}")
        lines.append(f"  - {source.url}")

    return "\n".join(lines) + "\n"
