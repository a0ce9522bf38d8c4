# =============================================================================
# perplexica/models.py  -  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shape of every piece of information that
# flows through one tool call:
#
#   outbound:  SearchRequest (+ ModelRef)      built by resolver.py
#   inbound:   ProvidersResponse, SearchResponse  built by decoder.py
#
# None of them outlive a single tool call.  They carry no behavior beyond
# small read-only conveniences.
#
# DESIGN PRINCIPLE - "Zero values, not None":
#   Inbound fields the backend sometimes leaves out (a source's url, a
#   provider's name) default to "" or an empty collection.  The presenter
#   never has to ask "is this None?".
# =============================================================================

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_FOCUS_MODE = "webSearch"


# -----------------------------------------------------------------------------
# ModelRef - a fully resolved (provider, model key) pair
# -----------------------------------------------------------------------------
# A ModelRef only exists once BOTH halves are known.  A half-filled model
# is represented by not having a ModelRef at all, never by an empty string.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ModelRef:
    """A chat or embedding model selection sent to the backend."""

    provider_id: str                   # e.g. "openai" or a provider UUID
    key: str                           # e.g. "gpt-4o-mini"


# -----------------------------------------------------------------------------
# SearchRequest - everything the backend needs for one search
# -----------------------------------------------------------------------------
@dataclass
class SearchRequest:
    """A complete, backend-ready search request."""

    query: str
    optimization_mode: str
    focus_mode: str = DEFAULT_FOCUS_MODE
    stream: bool = False
    history: list[tuple[str, str]] = field(default_factory=list)
    system_instructions: Optional[str] = None
    chat_model: Optional[ModelRef] = None
    embedding_model: Optional[ModelRef] = None


# -----------------------------------------------------------------------------
# Provider catalogue (GET /api/providers)
# -----------------------------------------------------------------------------
@dataclass
class Model:
    """One model offered by a provider."""

    key: str                           # What the backend expects in "key"
    name: str = ""                     # Display name, may be missing


@dataclass
class Provider:
    """A backend-registered source of chat and embedding models."""

    id: str
    name: str
    # Keyed by model key, in the order the backend listed them.
    chat_models: dict[str, Model] = field(default_factory=dict)
    embedding_models: dict[str, Model] = field(default_factory=dict)


@dataclass
class ProvidersResponse:
    """All providers, in backend order."""

    providers: list[Provider] = field(default_factory=list)


# -----------------------------------------------------------------------------
# Search results (POST /api/search)
# -----------------------------------------------------------------------------
@dataclass
class Source:
    """One cited source of a search answer."""

    title: str = ""
    url: str = ""
    page_content: str = ""             # Snippet the answer was built from

    @property
    def is_blank(self) -> bool:
        """True when the source carries neither a title nor a url."""
        return not self.title and not self.url


@dataclass
class SearchResponse:
    """The backend's answer: a markdown message plus its sources."""

    message: str = ""
    sources: list[Source] = field(default_factory=list)
