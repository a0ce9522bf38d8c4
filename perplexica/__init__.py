# =============================================================================
# perplexica/__init__.py
# =============================================================================
# This package contains ALL the logic for talking to a Perplexica instance:
# configuration, parameter resolution, the HTTP client, response decoding,
# and text rendering.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP.  The MCP layer lives in tools/
#   and only calls into the functions defined here.  Every module in this
#   package can be exercised from a plain Python REPL (or a unit test) by
#   handing it a Configuration value.
# =============================================================================
