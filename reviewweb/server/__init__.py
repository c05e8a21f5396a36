"""
ReviewWeb server module.

This module provides the MCP server front end.
"""

from reviewweb.server.app import create_server, run_server

__all__ = ["create_server", "run_server"]
