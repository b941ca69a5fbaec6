#!/usr/bin/env python3
"""
Entry point for the CHUK Tuning MCP Server.

This module provides the main entry point for the MCP server over the
stdio transport.
"""

import argparse
import asyncio
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="CHUK Tuning MCP Server")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    # Import after argument parsing so --debug covers server setup
    from chuk_mcp_tuning.async_server import mcp

    logger.info("Starting CHUK Tuning MCP Server (stdio)")
    asyncio.run(mcp.run_stdio())


if __name__ == "__main__":
    main()
