"""Tests for the ReviewWeb.site HTTP client."""

import httpx
import pytest

from reviewweb.core.errors import ErrorType, ReviewWebError
from reviewweb.service.client import (
    SERVICE_ERROR,
    SERVICE_ERROR_CODE,
    UNKNOWN_API_ERROR,
    UNKNOWN_API_ERROR_CODE,
    build_headers,
    build_request_parts,
)
from reviewweb.tools.registry import registry
from reviewweb.tools.schema import validate_arguments


def parts(name, arguments):
    operation = registry.get(name)
    return build_request_parts(operation, validate_arguments(operation.args_model, arguments))


class TestBuildRequestParts:
    """Tests for splitting arguments into path, query and body."""

    def test_path_parameter(self):
        """Test path parameters are substituted and escaped."""
        path, params, body = parts("get_review", {"review_id": "a b"})

        assert path == "/review/a%20b"
        assert params == {}
        assert body is None

    def test_options_group(self):
        """Test option fields are nested under options."""
        path, params, body = parts(
            "create_review",
            {"url": "https://example.com", "instructions": "be brief", "maxExtractedImages": 3},
        )

        assert path == "/review"
        assert body == {
            "url": "https://example.com",
            "instructions": "be brief",
            "options": {"maxExtractedImages": 3},
        }

    def test_empty_options_still_sent(self):
        """Test an options object is sent even when no option is given."""
        _, _, body = parts("convert_to_markdown", {"url": "https://example.com"})

        assert body == {"url": "https://example.com", "options": {}}

    def test_query_values(self):
        """Test query values are stringified and absent ones left out."""
        _, params, body = parts("url_is_alive", {"url": "https://example.com", "timeout": 5000})

        assert params == {"url": "https://example.com", "timeout": "5000"}
        assert body is None

    def test_query_and_flat_body(self):
        """Test link extraction puts the URL in the query and options at the top level."""
        path, params, body = parts(
            "extract_links",
            {"url": "https://example.com", "type": "image", "getStatusCode": False},
        )

        assert path == "/scrape/links-map"
        assert params == {"url": "https://example.com"}
        assert body == {"type": "image", "getStatusCode": False}

    def test_scrape_url(self):
        """Test scraping sends the URL as a query parameter and the delay as an option."""
        _, params, body = parts("scrape_url", {"url": "https://example.com", "delayAfterLoad": 250})

        assert params == {"url": "https://example.com"}
        assert body == {"options": {"delayAfterLoad": 250}}


class TestBuildHeaders:
    """Tests for request headers."""

    def test_with_key(self):
        assert build_headers("k") == {"Content-Type": "application/json", "X-API-Key": "k"}

    def test_without_key(self):
        assert build_headers(None) == {"Content-Type": "application/json"}


class TestReviewWebClient:
    """Tests for ReviewWebClient requests against a mock API."""

    @pytest.mark.asyncio
    async def test_get_request(self, api):
        """Test a GET carries the key header and no body."""
        api.reply(200, {"data": [{"id": "m1"}]})

        async with api.client() as client:
            result = await client.get_ai_models(api_key="secret")

        assert result == {"data": [{"id": "m1"}]}
        assert len(api.requests) == 1
        request = api.last
        assert request.method == "GET"
        assert request.url.path == "/v1/ai/models"
        assert request.headers["X-API-Key"] == "secret"
        assert request.content == b""

    @pytest.mark.asyncio
    async def test_list_reviews_query(self, api):
        """Test pagination goes in the query string."""
        async with api.client() as client:
            await client.list_reviews(page=2, limit=10, api_key="k")

        assert api.last.url.path == "/v1/review"
        assert dict(api.last.url.params) == {"page": "2", "limit": "10"}

    @pytest.mark.asyncio
    async def test_extract_data_multiple_body(self, api):
        """Test URL order is preserved and options are nested."""
        urls = ["https://a.example", "https://b.example", "https://c.example"]

        async with api.client() as client:
            await client.extract_data_multiple(
                urls,
                {"instructions": "get title", "jsonTemplate": '{"title": "string"}'},
                api_key="k",
            )

        assert api.last.method == "POST"
        assert api.last.url.path == "/v1/extract/urls"
        assert api.last.headers["Content-Type"] == "application/json"
        assert api.last_json == {
            "urls": urls,
            "options": {"instructions": "get title", "jsonTemplate": '{"title": "string"}'},
        }

    @pytest.mark.asyncio
    async def test_update_review_patch(self, api):
        """Test updates use PATCH with only the given fields."""
        async with api.client() as client:
            await client.update_review("abc", instructions="shorter", api_key="k")

        assert api.last.method == "PATCH"
        assert api.last.url.path == "/v1/review/abc"
        assert api.last_json == {"instructions": "shorter"}

    @pytest.mark.asyncio
    async def test_empty_response(self, api):
        """Test an empty 2xx body decodes to None."""
        api.reply(204)

        async with api.client() as client:
            result = await client.delete_review("abc", api_key="k")

        assert result is None
        assert api.last.method == "DELETE"

    @pytest.mark.asyncio
    async def test_api_error(self, api):
        """Test non-2xx responses become API errors with the remote message."""
        api.reply(404, {"message": "not found", "error": "not_found"})

        async with api.client() as client:
            with pytest.raises(ReviewWebError) as exc_info:
                await client.get_review("missing", api_key="k")

        error = exc_info.value
        assert error.error_type is ErrorType.API_ERROR
        assert error.status_code == 404
        assert error.message == "not found"
        assert error.metadata["errorCode"] == "not_found"
        assert error.metadata["source"] == "reviewweb.service.client@get_review"

    @pytest.mark.asyncio
    async def test_api_error_message_list(self, api):
        """Test a list of validation messages is joined into one message."""
        api.reply(400, {"message": ["url must be a URL address", "url should not be empty"], "error": "Bad Request"})

        async with api.client() as client:
            with pytest.raises(ReviewWebError) as exc_info:
                await client.scrape_url("not-a-url", api_key="k")

        error = exc_info.value
        assert error.status_code == 400
        assert error.message == "url must be a URL address, url should not be empty"
        assert error.metadata["errorCode"] == "Bad Request"

    @pytest.mark.asyncio
    async def test_api_error_without_json(self, api):
        """Test unparseable error bodies fall back to a generic message."""
        api.reply(502, text="<html>Bad Gateway</html>")

        async with api.client() as client:
            with pytest.raises(ReviewWebError) as exc_info:
                await client.get_ai_models(api_key="k")

        error = exc_info.value
        assert error.error_type is ErrorType.API_ERROR
        assert error.status_code == 502
        assert error.message == UNKNOWN_API_ERROR
        assert error.metadata["errorCode"] == UNKNOWN_API_ERROR_CODE

    @pytest.mark.asyncio
    async def test_transport_error(self, api):
        """Test transport failures become unexpected errors."""
        api.fail(httpx.ConnectError)

        async with api.client() as client:
            with pytest.raises(ReviewWebError) as exc_info:
                await client.is_url_alive("https://example.com", api_key="k")

        error = exc_info.value
        assert error.error_type is ErrorType.UNEXPECTED_ERROR
        assert error.status_code == 500
        assert error.message == SERVICE_ERROR
        assert error.metadata["errorCode"] == SERVICE_ERROR_CODE
        assert isinstance(error.cause, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_seo_traffic_query(self, api):
        """Test SEO lookups send their arguments as query parameters."""
        async with api.client() as client:
            await client.get_traffic("example.com", {"mode": "subdomains"}, api_key="k")

        assert api.last.url.path == "/v1/seo-insights/traffic"
        assert dict(api.last.url.params) == {"domainOrUrl": "example.com", "mode": "subdomains"}

    @pytest.mark.asyncio
    async def test_call_validates(self, api):
        """Test invalid keyword arguments never reach the network."""
        async with api.client() as client:
            with pytest.raises(ReviewWebError) as exc_info:
                await client.call("list_reviews", api_key="k", page="one")

        assert exc_info.value.error_type is ErrorType.VALIDATION_ERROR
        assert api.requests == []
