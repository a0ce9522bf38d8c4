import json

from perplexica.models import Model, Provider, ProvidersResponse, SearchResponse, Source
from perplexica.presenter import render_providers, render_search


def test_render_search_exact():
    response = SearchResponse(message="AI is...", sources=[Source(title="Wiki", url="http://wiki.example")])

    assert render_search(response) == (
        "## Summary\n"
        "\n"
        "AI is...\n"
        "\n"
        "## Sources\n"
        "\n"
        "- Wiki\n"
        "  - http://wiki.example\n"
    )


def test_render_search_keeps_order():
    response = SearchResponse(
        message="This is a test search response with citations [1][2].",
        sources=[
            Source("Test Title 1", "https://example.com/1"),
            Source("Test Title 2", "https://example.com/2"),
        ],
    )

    expected = """## Summary

This is a test search response with citations [1][2].

## Sources

- Test Title 1
  - https://example.com/1
- Test Title 2
  - https://example.com/2
"""
    assert render_search(response) == expected


def test_render_search_no_sources():
    response = SearchResponse(message="No sources found for this query.")

    expected = """## Summary

No sources found for this query.

## Sources

No sources found.
"""
    assert render_search(response) == expected


def test_missing_url_keeps_bullet():
    text = render_search(SearchResponse(message="m", sources=[Source(title="Wiki")]))
    assert text.endswith("- Wiki\n  - \n")


def test_missing_title_keeps_bullet():
    text = render_search(SearchResponse(message="m", sources=[Source(url="http://a")]))
    assert text.endswith("## Sources\n\n- \n  - http://a\n")


def test_blank_source_is_skipped():
    response = SearchResponse(
        message="m",
        sources=[Source(), Source("Kept", "http://kept")],
    )
    assert render_search(response).endswith("## Sources\n\n- Kept\n  - http://kept\n")


def test_only_blank_sources():
    response = SearchResponse(message="m", sources=[Source(page_content="snippet only")])
    assert render_search(response).endswith("## Sources\n\nNo sources found.\n")


def test_empty_message_still_has_summary_section():
    assert render_search(SearchResponse()).startswith("## Summary\n\n\n\n## Sources\n\n")


def _providers():
    return ProvidersResponse(
        providers=[
            Provider(
                id="zeta",
                name="Zeta",
                chat_models={"z1": Model("z1", "Z One"), "z2": Model("z2", "Z Two")},
            ),
            Provider(
                id="alpha",
                name="Alpha",
                embedding_models={"a-emb": Model("a-emb", "Alpha Embed")},
            ),
            Provider(id="mid", name="Mid"),
        ]
    )


def test_render_providers_summary():
    text = render_providers(_providers())

    assert text.startswith("Found 3 providers available:\n\n## Zeta\nID: zeta\nChat Models: 2\nEmbedding Models: 0\n")
    assert "## Alpha\nID: alpha\nChat Models: 0\nEmbedding Models: 1" in text


def test_render_providers_preserves_order():
    text = render_providers(_providers())

    positions = [text.index(f"## {name}\n") for name in ("Zeta", "Alpha", "Mid")]
    assert positions == sorted(positions)


def test_render_providers_complete_json():
    text = render_providers(_providers())

    head, _, block = text.partition("\n\n## Complete Response (JSON)\n\n```json\n")
    assert block.endswith("\n```")
    data = json.loads(block[: -len("\n```")])
    assert [p["id"] for p in data["providers"]] == ["zeta", "alpha", "mid"]
    assert data["providers"][0]["chatModels"] == [
        {"name": "Z One", "key": "z1"},
        {"name": "Z Two", "key": "z2"},
    ]
    assert data["providers"][1]["embeddingModels"] == [{"name": "Alpha Embed", "key": "a-emb"}]


def test_render_no_providers():
    text = render_providers(ProvidersResponse())
    assert text.startswith("Found 0 providers available:\n")
    assert '"providers": []' in text
