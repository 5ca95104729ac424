"""
MCP server for the portfolio tracker.

Exposes portfolio management through the Model Context Protocol.
"""

import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from portfolio_tracker.core.exceptions import PortfolioTrackerError
from portfolio_tracker.core.store import PortfolioStore
from portfolio_tracker.tools.tools import PortfolioTools, create_tool_schemas

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path.home() / ".portfolio-tracker" / "portfolios.json"


class PortfolioTrackerServer:
    """MCP server for portfolio tracking."""

    def __init__(self, data_path: Optional[Path] = None):
        """
        Initialize the MCP server.

        Args:
            data_path: Optional path to the JSON data file.
                      If None, uses ~/.portfolio-tracker/portfolios.json.
        """
        self.store = PortfolioStore(data_path or DEFAULT_DATA_PATH)
        self.tools = PortfolioTools(self.store)
        self.server = Server("portfolio-tracker")

        # Register handlers
        self._register_handlers()

    def _handlers(self) -> Dict[str, Callable[..., Awaitable[Dict[str, Any]]]]:
        return {
            "list_portfolios": self.tools.list_portfolios,
            "create_portfolio": self.tools.create_portfolio,
            "delete_portfolio": self.tools.delete_portfolio,
            "get_portfolio": self.tools.get_portfolio,
            "add_transaction": self.tools.add_transaction,
            "edit_transaction": self.tools.edit_transaction,
            "copy_transaction": self.tools.copy_transaction,
            "delete_transactions": self.tools.delete_transactions,
            "save_portfolio": self.tools.save_portfolio,
            "discard_changes": self.tools.discard_changes,
            "list_currencies": self.tools.list_currencies,
            "set_currency": self.tools.set_currency,
        }

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> list[TextContent]:
        """Route a tool call and format its result as text content."""
        handler = self._handlers().get(name)
        if handler is None:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]

        try:
            result = await handler(**arguments)
        except (PortfolioTrackerError, ValueError) as e:
            # Validation and lookup errors are reported back to the caller
            return [TextContent(type="text", text=f"Error: {str(e)}")]
        except Exception as e:
            logger.exception(f"Error executing tool {name}")
            return [
                TextContent(
                    type="text",
                    text=f"Error executing tool: {str(e)}",
                )
            ]

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """List available tools."""
            schemas = create_tool_schemas()
            return [
                Tool(
                    name=schema["name"],
                    description=schema["description"],
                    inputSchema=schema["inputSchema"],
                )
                for schema in schemas
            ]

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool calls."""
            return await self.call_tool(name, arguments or {})

    async def run(self) -> None:  # pragma: no cover
        """Run the MCP server using stdio transport."""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


async def run_server(data_path: Optional[Path] = None) -> None:  # pragma: no cover
    """
    Run the portfolio tracker MCP server.

    Args:
        data_path: Optional path to the JSON data file.
                  If None, uses ~/.portfolio-tracker/portfolios.json.
    """
    server = PortfolioTrackerServer(data_path)
    await server.run()
