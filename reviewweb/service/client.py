"""
ReviewWeb Client - HTTP access to the ReviewWeb.site REST API.

Every operation is exactly one request: no retries, no caching. Requests are
built from the operation table, so the client knows nothing about individual
endpoints beyond the per-operation helpers at the bottom of the class.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from reviewweb.core.errors import ErrorType, ReviewWebError
from reviewweb.tools.registry import Operation, registry
from reviewweb.tools.schema import ToolArgs, validate_arguments
from reviewweb.validation.config import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)

UNKNOWN_API_ERROR = "Unknown error from ReviewWebsite API"
UNKNOWN_API_ERROR_CODE = "reviewwebsite_api_error"
SERVICE_ERROR = "Failed to communicate with ReviewWebsite API"
SERVICE_ERROR_CODE = "reviewwebsite_service_error"


def build_headers(api_key: Optional[str]) -> Dict[str, str]:
    """JSON content type, plus ``X-API-Key`` when a key is present."""
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["X-API-Key"] = api_key
    return headers


def build_request_parts(
    operation: Operation, args: ToolArgs
) -> Tuple[str, Dict[str, str], Optional[Dict[str, Any]]]:
    """
    Split validated arguments into path, query parameters and JSON body.

    Absent optional fields are left out entirely. An operation with an
    ``options`` group always sends that object, even when it is empty.
    """
    values = args.wire_values()

    path = operation.path.format(
        **{name: quote(str(values[name]), safe="") for name in operation.path_params}
    )

    params = {name: _query_value(values[name]) for name in operation.query if name in values}

    body: Optional[Dict[str, Any]] = None
    if operation.has_body:
        body = {name: values[name] for name in operation.body if name in values}
        if operation.options:
            body["options"] = {name: values[name] for name in operation.options if name in values}

    return path, params, body


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ReviewWebClient:
    """
    Async client for the ReviewWeb.site API.

    Parameters
    ----------
    base_url : API root, e.g. ``https://reviewweb.site/api/v1``
    timeout : seconds before httpx gives up; ``None`` waits indefinitely
    transport : optional httpx transport (tests pass an ``httpx.MockTransport``)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            follow_redirects=False,
        )

    async def __aenter__(self) -> "ReviewWebClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ── Generic request ───────────────────────────────────────────────────

    async def request(self, operation: Operation, args: ToolArgs, api_key: Optional[str] = None) -> Any:
        """
        Perform the single HTTP call for ``operation``.

        Returns:
            The decoded JSON response body, unmodified.

        Raises:
            ReviewWebError: API_ERROR for non-2xx responses, UNEXPECTED_ERROR
                for transport failures.
        """
        path, params, body = build_request_parts(operation, args)
        source = f"reviewweb.service.client@{operation.name}"

        logger.debug("%s %s params=%s body=%s", operation.method, path, params, body)

        try:
            response = await self._http.request(
                operation.method,
                path,
                params=params or None,
                json=body,
                headers=build_headers(api_key),
            )
        except httpx.HTTPError as exc:
            logger.error("Request to %s failed: %s", path, exc)
            raise ReviewWebError(
                SERVICE_ERROR,
                ErrorType.UNEXPECTED_ERROR,
                500,
                {"errorCode": SERVICE_ERROR_CODE, "source": source},
                cause=exc,
            ) from exc

        if response.is_error:
            raise self._api_error(response, source)

        logger.debug("%s %s -> %s", operation.method, path, response.status_code)
        return self._decode(response)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _api_error(response: httpx.Response, source: str) -> ReviewWebError:
        """Translate a non-2xx response, preferring the API's own message and code."""
        message = UNKNOWN_API_ERROR
        error_code = UNKNOWN_API_ERROR_CODE

        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict):
            detail = data.get("message")
            if isinstance(detail, list):
                detail = ", ".join(str(item) for item in detail)
            if detail:
                message = str(detail)
            if data.get("error"):
                error_code = str(data["error"])

        logger.error(
            "ReviewWebsite API error response: status=%s url=%s",
            response.status_code,
            response.request.url.path,
        )
        return ReviewWebError(
            message,
            ErrorType.API_ERROR,
            response.status_code,
            {"errorCode": error_code, "source": source},
        )

    async def call(self, name: str, api_key: Optional[str] = None, **arguments: Any) -> Any:
        """Validate keyword arguments for ``name`` and perform the request."""
        operation = registry.get(name)
        if operation is None:
            raise ReviewWebError(f"Unknown operation: {name}", ErrorType.VALIDATION_ERROR, 400)
        args = validate_arguments(operation.args_model, arguments, operation=name)
        return await self.request(operation, args, api_key)

    # ── Per-operation helpers ─────────────────────────────────────────────

    async def get_ai_models(self, api_key: Optional[str] = None) -> Any:
        return await self.call("get_ai_models", api_key)

    async def create_review(
        self, url: str, instructions: Optional[str] = None, options: Optional[Dict[str, Any]] = None,
        api_key: Optional[str] = None,
    ) -> Any:
        return await self.call("create_review", api_key, url=url, instructions=instructions, **(options or {}))

    async def get_review(self, review_id: str, api_key: Optional[str] = None) -> Any:
        return await self.call("get_review", api_key, review_id=review_id)

    async def list_reviews(
        self, page: Optional[int] = None, limit: Optional[int] = None, api_key: Optional[str] = None
    ) -> Any:
        return await self.call("list_reviews", api_key, page=page, limit=limit)

    async def update_review(
        self, review_id: str, url: Optional[str] = None, instructions: Optional[str] = None,
        api_key: Optional[str] = None,
    ) -> Any:
        return await self.call("update_review", api_key, review_id=review_id, url=url, instructions=instructions)

    async def delete_review(self, review_id: str, api_key: Optional[str] = None) -> Any:
        return await self.call("delete_review", api_key, review_id=review_id)

    async def convert_to_markdown(
        self, url: str, options: Optional[Dict[str, Any]] = None, api_key: Optional[str] = None
    ) -> Any:
        return await self.call("convert_to_markdown", api_key, url=url, **(options or {}))

    async def convert_multiple_to_markdown(
        self, urls: List[str], options: Optional[Dict[str, Any]] = None, api_key: Optional[str] = None
    ) -> Any:
        return await self.call("convert_multiple_to_markdown", api_key, urls=urls, **(options or {}))

    async def extract_data(self, url: str, options: Dict[str, Any], api_key: Optional[str] = None) -> Any:
        return await self.call("extract_data", api_key, url=url, **options)

    async def extract_data_multiple(
        self, urls: List[str], options: Dict[str, Any], api_key: Optional[str] = None
    ) -> Any:
        return await self.call("extract_data_multiple", api_key, urls=urls, **options)

    async def scrape_url(self, url: str, delay_after_load: Optional[int] = None, api_key: Optional[str] = None) -> Any:
        return await self.call("scrape_url", api_key, url=url, delayAfterLoad=delay_after_load)

    async def extract_links(
        self, url: str, options: Optional[Dict[str, Any]] = None, api_key: Optional[str] = None
    ) -> Any:
        return await self.call("extract_links", api_key, url=url, **(options or {}))

    async def summarize_url(
        self, url: str, options: Optional[Dict[str, Any]] = None, api_key: Optional[str] = None
    ) -> Any:
        return await self.call("summarize_url", api_key, url=url, **(options or {}))

    async def summarize_website(
        self, url: str, options: Optional[Dict[str, Any]] = None, api_key: Optional[str] = None
    ) -> Any:
        return await self.call("summarize_website", api_key, url=url, **(options or {}))

    async def summarize_multiple_urls(
        self, urls: List[str], options: Optional[Dict[str, Any]] = None, api_key: Optional[str] = None
    ) -> Any:
        return await self.call("summarize_multiple_urls", api_key, urls=urls, **(options or {}))

    async def is_url_alive(
        self, url: str, timeout: Optional[int] = None, proxy_url: Optional[str] = None,
        api_key: Optional[str] = None,
    ) -> Any:
        return await self.call("url_is_alive", api_key, url=url, timeout=timeout, proxyUrl=proxy_url)

    async def get_url_after_redirects(self, url: str, api_key: Optional[str] = None) -> Any:
        return await self.call("url_get_after_redirects", api_key, url=url)

    async def get_keyword_ideas(
        self, keyword: str, options: Optional[Dict[str, Any]] = None, api_key: Optional[str] = None
    ) -> Any:
        return await self.call("seo_keyword_ideas", api_key, keyword=keyword, **(options or {}))

    async def get_keyword_difficulty(
        self, keyword: str, options: Optional[Dict[str, Any]] = None, api_key: Optional[str] = None
    ) -> Any:
        return await self.call("seo_keyword_difficulty", api_key, keyword=keyword, **(options or {}))

    async def get_traffic(
        self, domain_or_url: str, options: Optional[Dict[str, Any]] = None, api_key: Optional[str] = None
    ) -> Any:
        return await self.call("seo_traffic", api_key, domainOrUrl=domain_or_url, **(options or {}))

    async def get_backlinks(self, domain: str, api_key: Optional[str] = None) -> Any:
        return await self.call("seo_backlinks", api_key, domain=domain)
