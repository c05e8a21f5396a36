"""Argument models for every ReviewWeb operation, plus validation helpers."""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Type, TypeVar

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from reviewweb.core.errors import validation_error

NonEmptyStr = Annotated[str, Field(min_length=1)]


def _not_dot_segment(value: str) -> str:
    # "." and ".." would be collapsed out of the request path
    if not value.strip("."):
        raise ValueError("must not consist only of dots")
    return value


def _whole_number(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


PathId = Annotated[str, Field(min_length=1), AfterValidator(_not_dot_segment)]
WholeNumber = Annotated[int, BeforeValidator(_whole_number)]  # accepts 5000.0, rejects 5000.5 and "5000"

LinkType = Literal["web", "image", "file", "all"]
SummaryFormat = Literal["bullet", "paragraph"]
TrafficMode = Literal["subdomains", "exact"]


class ToolArgs(BaseModel):
    """
    Base for operation arguments.

    Attributes are snake_case; the wire and MCP names are their camelCase
    aliases (``delay_after_load`` <-> ``delayAfterLoad``). Unknown names and
    mis-typed values are rejected rather than coerced.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        strict=True,
    )

    api_key: Optional[str] = Field(
        default=None, alias="api_key", description="Your ReviewWebsite API key"
    )

    def wire_values(self) -> Dict[str, Any]:
        """Present fields keyed by wire name, without the credential."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"api_key"})


# ── Reviews & models ─────────────────────────────────────────────────────


class GetAIModelsArgs(ToolArgs):
    pass


class CreateReviewArgs(ToolArgs):
    url: NonEmptyStr = Field(description="Website URL to be reviewed")
    instructions: Optional[str] = Field(default=None, description="Optional custom review instructions")
    skip_image_extraction: Optional[bool] = Field(default=None, description="Skip extracting images from the website")
    skip_link_extraction: Optional[bool] = Field(default=None, description="Skip extracting links from the website")
    max_extracted_images: Optional[WholeNumber] = Field(default=None, description="Maximum number of images to extract")
    max_extracted_links: Optional[WholeNumber] = Field(default=None, description="Maximum number of links to extract")
    text_model: Optional[str] = Field(default=None, description="Text model to use for AI analysis")
    vision_model: Optional[str] = Field(default=None, description="Vision model to use for AI analysis")


class GetReviewArgs(ToolArgs):
    review_id: PathId = Field(alias="review_id", description="ID of the review to retrieve")


class ListReviewsArgs(ToolArgs):
    page: Optional[WholeNumber] = Field(default=None, description="Page number for pagination")
    limit: Optional[WholeNumber] = Field(default=None, description="Number of reviews per page")


class UpdateReviewArgs(ToolArgs):
    review_id: PathId = Field(alias="review_id", description="ID of the review to update")
    url: Optional[str] = Field(default=None, description="Updated website URL to be reviewed")
    instructions: Optional[str] = Field(default=None, description="Updated custom review instructions")


class DeleteReviewArgs(ToolArgs):
    review_id: PathId = Field(alias="review_id", description="ID of the review to delete")


# ── Conversion & extraction ──────────────────────────────────────────────


class ConvertToMarkdownArgs(ToolArgs):
    url: NonEmptyStr = Field(description="The URL to convert to Markdown")
    model: Optional[str] = Field(default=None, description="AI model to use for conversion")
    delay_after_load: Optional[WholeNumber] = Field(default=None, description="Optional delay after page load in milliseconds")
    debug: Optional[bool] = Field(default=None, description="Enable debug mode for detailed logging")


class ConvertMultipleToMarkdownArgs(ToolArgs):
    urls: List[NonEmptyStr] = Field(min_length=1, description="List of URLs to convert to Markdown")
    model: Optional[str] = Field(default=None, description="AI model to use for conversion")
    delay_after_load: Optional[WholeNumber] = Field(default=None, description="Optional delay after page load in milliseconds")
    max_links: Optional[WholeNumber] = Field(default=None, description="Maximum number of URLs to process")
    debug: Optional[bool] = Field(default=None, description="Whether to enable debug mode")


class ExtractDataArgs(ToolArgs):
    url: NonEmptyStr = Field(description="The URL to extract data from")
    instructions: NonEmptyStr = Field(description="Instructions for the AI on what data to extract")
    json_template: NonEmptyStr = Field(description="JSON template for structuring the extracted data")
    system_prompt: Optional[str] = Field(default=None, description="Optional system prompt to guide the AI")
    model: Optional[str] = Field(default=None, description="AI model to use for extraction")
    delay_after_load: Optional[WholeNumber] = Field(default=None, description="Optional delay after page load in milliseconds")
    recursive: Optional[bool] = Field(
        default=None,
        description="If true, recursively scrape all internal URLs and extract data from each",
    )
    debug: Optional[bool] = Field(default=None, description="Enable debug mode for detailed logging")


class ExtractDataMultipleArgs(ToolArgs):
    urls: List[NonEmptyStr] = Field(min_length=1, description="List of URLs to extract data from")
    instructions: NonEmptyStr = Field(description="Instructions for the AI to extract data from the websites")
    json_template: NonEmptyStr = Field(description="JSON schema template for the extracted data output")
    system_prompt: Optional[str] = Field(default=None, description="System prompt for the AI")
    model: Optional[str] = Field(default=None, description="AI model to use for extraction")
    delay_after_load: Optional[WholeNumber] = Field(default=None, description="Optional delay after page load in milliseconds")
    debug: Optional[bool] = Field(default=None, description="Whether to enable debug mode")


# ── Scraping ─────────────────────────────────────────────────────────────


class ScrapeUrlArgs(ToolArgs):
    url: NonEmptyStr = Field(description="The URL to scrape")
    delay_after_load: Optional[WholeNumber] = Field(default=None, description="Optional delay after page load in milliseconds")


class ExtractLinksArgs(ToolArgs):
    url: NonEmptyStr = Field(description="The target URL to extract links from")
    type: Optional[LinkType] = Field(default=None, description="Type of links to extract (web, image, file, all)")
    max_links: Optional[WholeNumber] = Field(default=None, description="Maximum number of links to return")
    delay_after_load: Optional[WholeNumber] = Field(
        default=None, description="Delay in milliseconds after page load before extracting links"
    )
    get_status_code: Optional[bool] = Field(default=None, description="Whether to get HTTP status codes for each link")
    auto_scrape_internal_links: Optional[bool] = Field(
        default=None, description="Whether to automatically scrape internal links"
    )
    debug: Optional[bool] = Field(default=None, description="Whether to enable debug mode")


# ── Summaries ────────────────────────────────────────────────────────────


class _SummaryOptions(ToolArgs):
    instructions: Optional[str] = Field(
        default=None, description="Custom instructions for the AI on how to summarize the content"
    )
    system_prompt: Optional[str] = Field(default=None, description="Custom system prompt to guide the AI")
    model: Optional[str] = Field(default=None, description="AI model to use for summarization")
    delay_after_load: Optional[WholeNumber] = Field(default=None, description="Optional delay after page load in milliseconds")
    max_length: Optional[WholeNumber] = Field(default=None, description="Maximum length of the summary in words")
    format: Optional[SummaryFormat] = Field(
        default=None, description="Format of the summary (bullet points or paragraph)"
    )
    debug: Optional[bool] = Field(default=None, description="Enable debug mode for detailed logging")


class SummarizeUrlArgs(_SummaryOptions):
    url: NonEmptyStr = Field(description="The URL to summarize")


class SummarizeWebsiteArgs(_SummaryOptions):
    url: NonEmptyStr = Field(description="The main URL of the website to summarize")
    max_links: Optional[WholeNumber] = Field(default=None, description="Maximum number of pages to process")


class SummarizeMultipleUrlsArgs(_SummaryOptions):
    urls: List[NonEmptyStr] = Field(min_length=1, description="List of URLs to summarize")
    max_links: Optional[WholeNumber] = Field(default=None, description="Maximum number of URLs to process")


# ── URL utilities ────────────────────────────────────────────────────────


class UrlIsAliveArgs(ToolArgs):
    url: NonEmptyStr = Field(description="URL to check if it's alive")
    timeout: Optional[WholeNumber] = Field(default=None, description="Request timeout in milliseconds (default: 10000)")
    proxy_url: Optional[str] = Field(default=None, description="Proxy URL to use for the request")


class UrlGetAfterRedirectsArgs(ToolArgs):
    url: NonEmptyStr = Field(description="URL to get after redirects")


# ── SEO insights ─────────────────────────────────────────────────────────


class SeoKeywordIdeasArgs(ToolArgs):
    keyword: NonEmptyStr = Field(description="Keyword to get ideas for")
    country: Optional[str] = Field(default=None, description="Country code (e.g. us, uk)")
    search_engine: Optional[str] = Field(default=None, description="Search engine (e.g. Google)")


class SeoKeywordDifficultyArgs(ToolArgs):
    keyword: NonEmptyStr = Field(description="Keyword to check difficulty for")
    country: Optional[str] = Field(default=None, description="Country code (e.g. us, uk)")


class SeoTrafficArgs(ToolArgs):
    domain_or_url: NonEmptyStr = Field(description="Domain or URL to check traffic for")
    mode: Optional[TrafficMode] = Field(default=None, description="Include subdomains or match the exact URL")
    country: Optional[str] = Field(default=None, description="Country code (e.g. us, uk)")


class SeoBacklinksArgs(ToolArgs):
    domain: NonEmptyStr = Field(description="Domain to get backlinks for")


# ── Validation ───────────────────────────────────────────────────────────

ArgsT = TypeVar("ArgsT", bound=ToolArgs)


def validate_arguments(model: Type[ArgsT], raw: Optional[Mapping[str, Any]], operation: str = "") -> ArgsT:
    """
    Validate ``raw`` against ``model``.

    Raises:
        ReviewWebError: VALIDATION_ERROR listing every missing or mis-typed
            field at once, in ``metadata["violations"]``.
    """
    if raw is not None and not isinstance(raw, Mapping):
        raise validation_error(
            "Invalid arguments: expected an object",
            [{"field": "(root)", "message": f"expected an object, got {type(raw).__name__}"}],
            operation=operation,
        )

    try:
        return model.model_validate(dict(raw or {}))
    except ValidationError as exc:
        violations = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or "(root)",
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        fields = ", ".join(v["field"] for v in violations)
        raise validation_error(f"Invalid arguments: {fields}", violations, operation=operation) from None


def field_names(model: Type[ToolArgs]) -> List[str]:
    """Wire names of a model's fields, in declaration order."""
    return [info.alias or name for name, info in model.model_fields.items()]

