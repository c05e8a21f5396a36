"""Controller - runs ReviewWeb operations and wraps results in a uniform envelope."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from reviewweb.core.errors import ReviewWebError, config_error, ensure_error, validation_error
from reviewweb.core.logging import redact
from reviewweb.service.client import ReviewWebClient
from reviewweb.tools.registry import Operation, OperationRegistry, registry
from reviewweb.tools.schema import validate_arguments
from reviewweb.validation.config import API_KEY_ENV_VARS, Config, ConfigError

logger = logging.getLogger(__name__)


@dataclass
class ControllerResponse:
    """Uniform success envelope: the remote response as pretty-printed JSON."""

    content: str


class ReviewWebController:
    """
    Executes operations for every front end.

    The controller owns credential resolution and error normalization. It
    never lets a raw exception escape: callers receive either a
    ``ControllerResponse`` or a ``ReviewWebError``.

    Example:
        >>> controller = ReviewWebController(Config.load())
        >>> response = await controller.execute("get_review", {"review_id": "abc"})
        >>> print(response.content)
    """

    def __init__(
        self,
        config: Config,
        client: Optional[ReviewWebClient] = None,
        operations: OperationRegistry = registry,
    ):
        self.config = config
        self.operations = operations
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> ReviewWebClient:
        """The HTTP client, created from config on first use."""
        if self._client is None:
            self._client = ReviewWebClient(base_url=self.config.base_url, timeout=self.config.timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the client this controller created. Injected clients belong to the caller."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # ── Execution ─────────────────────────────────────────────────────────

    async def execute(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None,
        api_key: Optional[str] = None,
    ) -> ControllerResponse:
        """
        Validate, authenticate and perform one operation.

        Parameters
        ----------
        name : operation name like ``convert_to_markdown`` (or ``convert-to-markdown``)
        arguments : raw arguments keyed by wire name; may carry ``api_key``
        api_key : per-call credential, wins over ``arguments["api_key"]``

        Raises
        ------
        ReviewWebError
            CONFIG_ERROR, VALIDATION_ERROR, API_ERROR or UNEXPECTED_ERROR, with
            the operation name, its primary argument and a source tag attached.
        """
        operation = self.operations.get(name)
        if operation is None:
            raise validation_error(
                f"Unknown operation: {name}",
                [{"field": "(operation)", "message": f"no operation named {name!r}"}],
            )

        source = f"reviewweb.core.controller@{operation.name}"
        logger.debug("Executing %s with %s", operation.name, redact(dict(arguments or {})))

        try:
            args = validate_arguments(operation.args_model, arguments, operation=operation.name)
            key = self.resolve_api_key(api_key or args.api_key)
            result = await self.client.request(operation, args, key)
        except ReviewWebError as error:
            self._annotate(error, operation, source, arguments)
            raise
        except ConfigError as exc:
            error = config_error(str(exc))
            self._annotate(error, operation, source, arguments)
            raise error from exc
        except Exception as exc:
            error = ensure_error(exc)
            self._annotate(error, operation, source, arguments)
            raise error from exc

        return ControllerResponse(content=json.dumps(result, indent=2, ensure_ascii=False))

    def resolve_api_key(self, override: Optional[str] = None) -> str:
        """Per-call key if non-empty, else the configured key; having neither is a CONFIG_ERROR."""
        api_key = override or self.config.api_key
        if not api_key:
            raise config_error(
                "API key is required for ReviewWebsite API. "
                f"Pass api_key or set {API_KEY_ENV_VARS[0]}."
            )
        return api_key

    def _annotate(
        self,
        error: ReviewWebError,
        operation: Operation,
        source: str,
        arguments: Optional[Mapping[str, Any]],
    ) -> None:
        error.with_context(operation=operation.name, entityType=operation.entity, source=source)
        error.with_context(**self._primary_context(operation, arguments))
        logger.debug("%s failed: %r", operation.name, error)

    @staticmethod
    def _primary_context(operation: Operation, arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Diagnostic copy of the primary argument; lists are reduced to a count."""
        if not operation.primary or not isinstance(arguments, Mapping):
            return {}
        value = arguments.get(operation.primary)
        if value is None:
            return {}
        if isinstance(value, (list, tuple)):
            return {"urlCount": len(value)}
        return {operation.primary: value}


async def run_operation(
    config: Config,
    name: str,
    arguments: Optional[Mapping[str, Any]] = None,
    api_key: Optional[str] = None,
    client: Optional[ReviewWebClient] = None,
) -> ControllerResponse:
    """One-shot helper: build a controller, run ``name``, close any client it created."""
    controller = ReviewWebController(config, client=client)
    try:
        return await controller.execute(name, arguments, api_key=api_key)
    finally:
        await controller.aclose()


__all__ = ["ControllerResponse", "ReviewWebController", "run_operation"]
