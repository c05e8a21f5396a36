"""
ReviewWeb - MCP adapter for the ReviewWeb.site API.

Exposes ReviewWeb.site website reviews, Markdown conversion, AI data
extraction, scraping, summaries, URL utilities and SEO insights as:
- MCP tools (stdio or HTTP), via ``reviewweb serve``
- CLI subcommands, via ``reviewweb <operation>``
- Programmatic calls, via ``ReviewWebController``

Architecture:
- One operation table drives validation, HTTP mapping and both front ends
- Every call is validated, authenticated and sent as exactly one request
- Failures surface as ``ReviewWebError``, never as raw exceptions
"""

__version__ = "1.0.0"

from reviewweb.core.controller import ControllerResponse, ReviewWebController, run_operation
from reviewweb.core.errors import ErrorType, ReviewWebError
from reviewweb.validation.config import Config

__all__ = [
    "Config",
    "ControllerResponse",
    "ErrorType",
    "ReviewWebController",
    "ReviewWebError",
    "run_operation",
    "__version__",
]
