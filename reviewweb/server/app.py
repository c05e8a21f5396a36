"""
MCP server front end.

Registers one tool per ReviewWeb operation on a FastMCP server. Tool input
schemas come straight from the argument models, and every call goes through
the shared controller. Failures come back as text content, never as
protocol-level errors.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastmcp import FastMCP
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import PrivateAttr

from reviewweb import __version__
from reviewweb.core.controller import ReviewWebController
from reviewweb.core.errors import ReviewWebError, ensure_error, format_error_for_tool
from reviewweb.core.logging import redact
from reviewweb.tools.registry import Operation
from reviewweb.validation.config import Config

logger = logging.getLogger(__name__)


class OperationTool(Tool):
    """A FastMCP tool backed by one row of the operation table."""

    _operation: Operation = PrivateAttr()
    _controller: ReviewWebController = PrivateAttr()

    @classmethod
    def for_operation(cls, operation: Operation, controller: ReviewWebController) -> "OperationTool":
        tool = cls(
            name=operation.name,
            description=operation.description,
            parameters=operation.input_schema(),
        )
        tool._operation = operation
        tool._controller = controller
        return tool

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        return ToolResult(content=[TextContent(type="text", text=await self.call_text(arguments))])

    async def call_text(self, arguments: Dict[str, Any]) -> str:
        """Run the operation; the JSON result or a formatted error, as text."""
        logger.debug("Tool %s called with %s", self.name, redact(arguments or {}))
        try:
            response = await self._controller.execute(self._operation.name, arguments)
        except ReviewWebError as error:
            logger.error("Tool %s failed: %s", self.name, error.message)
            return format_error_for_tool(error)
        except Exception as exc:
            logger.exception("Tool %s failed unexpectedly", self.name)
            return format_error_for_tool(ensure_error(exc, operation=self._operation.name))
        return response.content


def create_server(controller: ReviewWebController, name: Optional[str] = None) -> FastMCP:
    """
    Build a FastMCP server exposing every operation in the controller's table.

    The controller's own HTTP client is closed when the server shuts down.
    """

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[Dict[str, Any]]:
        try:
            yield {}
        finally:
            await controller.aclose()

    server = FastMCP(
        name=name or controller.config.merged.server.name,
        instructions=controller.operations.build_prompt_fragment(),
        version=__version__,
        lifespan=lifespan,
    )

    for operation in controller.operations:
        server.add_tool(OperationTool.for_operation(operation, controller))

    logger.debug("Registered %d ReviewWeb.site tools", len(controller.operations))
    return server


def run_server(
    config: Config,
    transport: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
) -> None:
    """Run the MCP server until the transport closes (stdio) or the process stops (http/sse)."""
    settings = config.merged.server
    transport = transport or settings.transport

    server = create_server(ReviewWebController(config))
    logger.info("Starting ReviewWeb MCP server over %s", transport)

    if transport == "stdio":
        server.run(transport="stdio")
    else:
        server.run(transport=transport, host=host or settings.host, port=port or settings.port)
