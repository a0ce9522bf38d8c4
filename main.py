# =============================================================================
# main.py  -  Entry Point for the Perplexica MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#   (or, once installed: perplexica-mcp)
#
# An MCP client normally launches this as a subprocess, e.g.:
#
#   {
#     "mcpServers": {
#       "perplexica": {
#         "command": "uv",
#         "args": ["run", "python", "main.py"],
#         "env": { "PERPLEXICA_API_URL": "http://localhost:3000" }
#       }
#     }
#   }
#
# WHAT HAPPENS:
#   1. Loads a .env file (if present) into the environment
#   2. Configures logging to stderr
#   3. Reads the configuration ONCE; a missing PERPLEXICA_API_URL stops
#      the process here, before any tool can be called
#   4. Serves the two tools over stdio until the client disconnects
# =============================================================================

import logging
import sys

from dotenv import load_dotenv

from perplexica.config import load_config
from perplexica.errors import ConfigError
from tools.mcp_server import configure_logging, create_server


def main() -> None:
    load_dotenv()
    configure_logging()

    try:
        config = load_config()
    except ConfigError as e:
        logging.error(f"Cannot start Perplexica MCP server: {e}")
        sys.exit(1)

    logging.info(f"Perplexica MCP server using {config.base_url}")
    create_server(config).run()


if __name__ == "__main__":
    main()
