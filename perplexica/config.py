# =============================================================================
# perplexica/config.py  -  Process-wide Configuration
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads the server's settings from environment variables ONCE, at startup,
#   and freezes them into a Configuration value.
#
# ENVIRONMENT VARIABLES:
#   PERPLEXICA_API_URL              (required)  e.g. http://localhost:3000
#   PERPLEXICA_PROVIDER_ID          (optional)  default provider for models
#   PERPLEXICA_CHAT_MODEL_KEY       (optional)  default chat model key
#   PERPLEXICA_EMBEDDING_MODEL_KEY  (optional)  default embedding model key
#   PERPLEXICA_OPTIMIZATION_MODE    (optional)  "speed" unless set
#   PERPLEXICA_TIMEOUT              (optional)  HTTP timeout in seconds (30)
#
# WHY A FROZEN VALUE INSTEAD OF os.environ LOOKUPS EVERYWHERE?
#   The resolver, the client and the tool layer all receive the same
#   Configuration object as an argument.  Tests build one by hand with
#   whatever defaults they need; nothing reads the environment behind
#   their back.
#
# .env FILES:
#   main.py calls load_dotenv() before load_config(), so values from a .env
#   file in the working directory land in os.environ first.
# =============================================================================

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from perplexica.errors import ConfigError

API_URL_ENV = "PERPLEXICA_API_URL"
PROVIDER_ID_ENV = "PERPLEXICA_PROVIDER_ID"
CHAT_MODEL_KEY_ENV = "PERPLEXICA_CHAT_MODEL_KEY"
EMBEDDING_MODEL_KEY_ENV = "PERPLEXICA_EMBEDDING_MODEL_KEY"
OPTIMIZATION_MODE_ENV = "PERPLEXICA_OPTIMIZATION_MODE"
TIMEOUT_ENV = "PERPLEXICA_TIMEOUT"

DEFAULT_OPTIMIZATION_MODE = "speed"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class Configuration:
    """Immutable snapshot of the server settings."""

    base_url: str                                  # No trailing slash
    default_provider_id: Optional[str] = None
    default_chat_model_key: Optional[str] = None
    default_embedding_model_key: Optional[str] = None
    optimization_mode: str = DEFAULT_OPTIMIZATION_MODE
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def search_url(self) -> str:
        return f"{self.base_url}/api/search"

    @property
    def providers_url(self) -> str:
        return f"{self.base_url}/api/providers"


def _optional(environ: Mapping[str, str], name: str) -> Optional[str]:
    """Return a stripped env value, treating blank as unset."""
    value = environ.get(name, "").strip()
    return value or None


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError(f"{TIMEOUT_ENV} must be a number of seconds, got {raw!r}") from None
    if timeout <= 0:
        raise ConfigError(f"{TIMEOUT_ENV} must be positive, got {raw!r}")
    return timeout


def load_config(environ: Optional[Mapping[str, str]] = None) -> Configuration:
    """Build the Configuration from environment variables.

    Args:
        environ: Mapping to read from.  Defaults to os.environ; tests pass
                 a plain dict.

    Returns:
        A frozen Configuration.

    Raises:
        ConfigError: PERPLEXICA_API_URL is missing, or PERPLEXICA_TIMEOUT is
                     not a positive number.
    """
    if environ is None:
        environ = os.environ

    api_url = _optional(environ, API_URL_ENV)
    if api_url is None:
        raise ConfigError(f"{API_URL_ENV} environment variable must be set")

    return Configuration(
        base_url=api_url.rstrip("/"),
        default_provider_id=_optional(environ, PROVIDER_ID_ENV),
        default_chat_model_key=_optional(environ, CHAT_MODEL_KEY_ENV),
        default_embedding_model_key=_optional(environ, EMBEDDING_MODEL_KEY_ENV),
        optimization_mode=_optional(environ, OPTIMIZATION_MODE_ENV) or DEFAULT_OPTIMIZATION_MODE,
        timeout=_parse_timeout(_optional(environ, TIMEOUT_ENV)),
    )
