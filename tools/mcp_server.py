# =============================================================================
# tools/mcp_server.py  -  FastMCP Tool Server (both tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines the two MCP tools a client (editor, agent runtime) can call.
#   Each tool is a thin wrapper around perplexica/ functions: it wires the
#   pipeline together, logs what happens, and converts failures into MCP
#   error results.
#
# HOW IT WORKS (the flow):
#   perplexica_providers
#     client.list_providers -> decode_providers -> render_providers
#
#   perplexica_search
#     resolve -> client.search -> decode_search -> render_search
#
#   The set of tools is closed: exactly these two are registered in
#   create_server().  FastMCP itself answers calls to any other name with a
#   protocol error.
#
# ERRORS:
#   ResolutionError / TransportError / DecodeError are caught here and
#   re-raised as ToolError.  FastMCP turns a ToolError into a tool result
#   with isError=true and our message as its text, so the agent sees e.g.
#   "Missing chat_model_key. Set either ..." instead of a crashed server.
#
# RUNNING THIS SERVER:
#   python main.py            (stdio transport, what MCP clients launch)
# =============================================================================

import logging
import os
import sys
from typing import Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from perplexica.client import PerplexicaClient
from perplexica.config import Configuration
from perplexica.decoder import decode_providers, decode_search
from perplexica.errors import PerplexicaError
from perplexica.presenter import render_providers, render_search
from perplexica.resolver import resolve

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the MCP server talks to its client over STDOUT.
# A log line on stdout would corrupt the JSON-RPC stream.
#
# ANSI COLOR CODES:
#   CYAN for incoming requests, YELLOW for progress, GREEN for responses.
# =============================================================================

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses
_YELLOW = "\033[33m"   # Status/progress messages
_RED = "\033[31m"      # Errors
_RESET = "\033[0m"

logger = logging.getLogger("perplexica.mcp")

SERVER_INSTRUCTIONS = (
    "A Perplexica API service that performs intelligent searches. "
    "Use perplexica_providers to discover available providers and models, "
    "and perplexica_search to query the Perplexica instance. "
    "Required environment variables: PERPLEXICA_API_URL. "
    "Optional environment variables for defaults: PERPLEXICA_PROVIDER_ID, "
    "PERPLEXICA_CHAT_MODEL_KEY, PERPLEXICA_EMBEDDING_MODEL_KEY."
)


def configure_logging() -> None:
    """Send log records to stderr, level taken from LOG_LEVEL."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items() if v is not None)
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    """Log the size of the rendered response in GREEN, then return it."""
    logger.info(f"{_GREEN}  ← {tool_name} response: {len(text)} chars{_RESET}")
    return text


def _fail(tool_name: str, error: PerplexicaError) -> ToolError:
    logger.warning(f"{_RED}  ✗ {tool_name} failed: {error}{_RESET}")
    return ToolError(str(error))


# =============================================================================
# Server factory
# =============================================================================
# The Configuration is passed in rather than read here, so tests can build a
# server against any configuration and a fake HTTP layer.
# =============================================================================
def create_server(config: Configuration, client: Optional[PerplexicaClient] = None) -> FastMCP:
    """Create the FastMCP server with the two Perplexica tools registered."""
    if client is None:
        client = PerplexicaClient(config)

    mcp = FastMCP("perplexica", instructions=SERVER_INSTRUCTIONS)

    # =========================================================================
    # TOOL 1: perplexica_providers
    # =========================================================================
    # Agents call this when the user names a provider or model, to find the
    # exact provider id and model key to pass to perplexica_search.
    # =========================================================================
    @mcp.tool()
    def perplexica_providers() -> str:
        """Retrieve available providers and their models from Perplexica API.

        Returns a summary of each provider (name, id, number of chat and
        embedding models) followed by the complete provider list as JSON,
        including every model key.
        """
        _log_request("perplexica_providers")
        try:
            response = decode_providers(client.list_providers())
        except PerplexicaError as e:
            raise _fail("perplexica_providers", e) from e

        _log_status(f"Got {len(response.providers)} providers")
        return _log_response("perplexica_providers", render_providers(response))

    # =========================================================================
    # TOOL 2: perplexica_search
    # =========================================================================
    # The docstring matters: the LLM reads it to decide what to pass.  The
    # "DO NOT SET" notes keep agents from inventing provider/model values
    # that would override the configured defaults.
    # =========================================================================
    @mcp.tool()
    def perplexica_search(
        query: str,
        focus_mode: str = "webSearch",
        stream: bool = False,
        history: Optional[list[list[str]]] = None,
        system_instructions: Optional[str] = None,
        provider_id: Optional[str] = None,
        chat_model_key: Optional[str] = None,
        embedding_model_key: Optional[str] = None,
    ) -> str:
        """Search using Perplexica API. Provider and model parameters are optional - the server will use configured defaults unless the user explicitly specifies otherwise.

        Args:
            query: The search query to send to Perplexica.
            focus_mode: The focus mode for search (e.g., 'webSearch', 'academicSearch').
            stream: Whether to stream response.
            history: Chat history as array of [role, message] pairs.
            system_instructions: System instructions for search.
            provider_id: Provider ID to use. DO NOT SET unless user explicitly
                specifies a provider. Will use default from environment
                variables if omitted.
            chat_model_key: Chat model key to use. DO NOT SET unless user
                explicitly specifies a model. Will use default from
                environment variables if omitted.
            embedding_model_key: Embedding model key to use. DO NOT SET unless
                user explicitly specifies an embedding model. Will use default
                from environment variables if omitted.

        Returns:
            Markdown with a "## Summary" section (the answer) and a
            "## Sources" section listing each source's title and url.
        """
        call_args = {
            "query": query,
            "focus_mode": focus_mode,
            "stream": stream,
            "history": history,
            "system_instructions": system_instructions,
            "provider_id": provider_id,
            "chat_model_key": chat_model_key,
            "embedding_model_key": embedding_model_key,
        }
        _log_request("perplexica_search", **call_args)

        try:
            request = resolve(call_args, config)
            _log_status(
                f"chat={request.chat_model.provider_id}/{request.chat_model.key}, "
                f"embedding={request.embedding_model.provider_id}/{request.embedding_model.key}"
            )
            response = decode_search(client.search(request))
        except PerplexicaError as e:
            raise _fail("perplexica_search", e) from e

        _log_status(f"Answer of {len(response.message)} chars with {len(response.sources)} sources")
        return _log_response("perplexica_search", render_search(response))

    return mcp
