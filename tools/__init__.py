# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool server.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between the MCP protocol and the
#   perplexica/ package.  mcp_server.py:
#     1. Registers perplexica_providers and perplexica_search on a FastMCP app
#     2. Chains resolver -> client -> decoder -> presenter for each call
#     3. Turns perplexica errors into MCP error results
#     4. Logs every call to stderr
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT parse JSON or build HTTP payloads (perplexica/ does)
#   - They do NOT read environment variables (main.py loads config once)
# =============================================================================
