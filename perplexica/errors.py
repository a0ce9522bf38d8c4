# =============================================================================
# perplexica/errors.py  -  Error Taxonomy
# =============================================================================
#
# Every failure this server can produce belongs to exactly one of four
# families:
#
#   ConfigError      - startup problem (e.g. PERPLEXICA_API_URL not set).
#                      Fatal: the server refuses to start.
#   ResolutionError  - the caller's tool arguments are incomplete or
#                      malformed.  Raised BEFORE any HTTP call is made.
#   TransportError   - the HTTP call failed (connection refused, timeout,
#                      non-2xx status).
#   DecodeError      - the backend answered, but not with the JSON shape
#                      we can work with.
#
# The tools/ layer catches everything except ConfigError and turns it into
# an MCP error result, so the message text here is what the calling agent
# reads.  Messages always name the field or the cause.
# =============================================================================

from typing import Optional


class PerplexicaError(Exception):
    """Base class for every error raised by the perplexica package."""


class ConfigError(PerplexicaError):
    """Process configuration is missing or invalid."""


class ResolutionError(PerplexicaError):
    """Tool-call arguments cannot be turned into a complete search request."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class MissingProvider(ResolutionError):
    """No provider id from the caller and no configured default."""


class MissingModelKey(ResolutionError):
    """No model key from the caller and no configured default."""


class TransportError(PerplexicaError):
    """The HTTP request to the backend failed."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class DecodeError(PerplexicaError):
    """The backend response does not have the expected structure."""
