"""
CLI entry point for the portfolio tracker MCP server.

The data file comes from ``--data-path``, then the ``PORTFOLIO_TRACKER_DATA``
environment variable, then ``~/.portfolio-tracker/portfolios.json``.
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from portfolio_tracker import __version__
from portfolio_tracker.server import DEFAULT_DATA_PATH, run_server

DATA_PATH_ENV = "PORTFOLIO_TRACKER_DATA"

logger = logging.getLogger("portfolio_tracker")


def build_parser() -> argparse.ArgumentParser:
    """Command-line options of the server."""
    parser = argparse.ArgumentParser(
        prog="portfolio-tracker-mcp",
        description="Portfolio Tracker MCP Server - record portfolio transactions and ROI over MCP",
    )
    parser.add_argument(
        "--data-path",
        type=Path,
        default=os.environ.get(DATA_PATH_ENV) or DEFAULT_DATA_PATH,
        help=f"JSON data file (env: {DATA_PATH_ENV}, default: {DEFAULT_DATA_PATH})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Parse options, set up stderr logging and serve until interrupted."""
    args = build_parser().parse_args(argv)
    data_path = Path(args.data_path).expanduser()

    # stdout carries the MCP protocol
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    logger.info("Serving portfolios from %s", data_path)

    try:
        asyncio.run(run_server(data_path=data_path))
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception:
        logger.exception("Server terminated with an error")
        sys.exit(1)


if __name__ == "__main__":
    main()
