"""
Operation registry: one table row per remote operation.

Each ``Operation`` says which argument model validates it, which HTTP method
and path template it maps to, and where each wire field goes: the path, the
query string, the top level of the JSON body, or the body's ``options``
object. The client, controller and both front ends are driven by this table.
"""

from __future__ import annotations

from dataclasses import dataclass
from string import Formatter
from typing import Any, Dict, List, Optional, Tuple, Type

from reviewweb.tools import schema
from reviewweb.tools.schema import ToolArgs


@dataclass(frozen=True)
class Operation:
    """Lean definition of a single ReviewWeb.site operation."""

    name: str  # e.g. "convert_to_markdown"
    method: str  # e.g. "POST"
    path: str  # e.g. "/review/{review_id}"
    args_model: Type[ToolArgs]
    summary: str  # one-liner for listings
    description: str  # multi-line, for the calling model
    entity: str = "Resource"  # e.g. "Markdown", recorded in error context
    query: Tuple[str, ...] = ()
    body: Tuple[str, ...] = ()
    options: Tuple[str, ...] = ()
    primary: Optional[str] = None  # argument recorded in error context

    @property
    def command_name(self) -> str:
        """CLI subcommand name (``convert-to-markdown``)."""
        return self.name.replace("_", "-")

    @property
    def path_params(self) -> List[str]:
        return [field for _, field, _, _ in Formatter().parse(self.path) if field]

    @property
    def has_body(self) -> bool:
        return bool(self.body or self.options)

    def input_schema(self) -> Dict[str, Any]:
        """JSON schema of the arguments, keyed by wire name."""
        return self.args_model.model_json_schema(by_alias=True)

    def prompt_line(self) -> str:
        return f"- {self.name}: {self.summary}"


_REVIEWWEB = "via ReviewWeb.site API"

OPERATIONS: Tuple[Operation, ...] = (
    # ── Reviews & models ──────────────────────────────────────────────────
    Operation(
        name="get_ai_models",
        method="GET",
        path="/ai/models",
        args_model=schema.GetAIModelsArgs,
        summary="List the AI models available to ReviewWeb.site",
        description=(
            f"Get the list of AI models available {_REVIEWWEB}.\n"
            "Use the returned model ids for the model, textModel and visionModel arguments of other tools."
        ),
        entity="AI Models",
    ),
    Operation(
        name="create_review",
        method="POST",
        path="/review",
        args_model=schema.CreateReviewArgs,
        summary="Create a new website review",
        description=(
            f"Create a new AI-generated review of a website {_REVIEWWEB}.\n"
            "The review analyses content, images and links of the page."
        ),
        entity="Review",
        body=("url", "instructions"),
        options=(
            "skipImageExtraction",
            "skipLinkExtraction",
            "maxExtractedImages",
            "maxExtractedLinks",
            "textModel",
            "visionModel",
        ),
        primary="url",
    ),
    Operation(
        name="get_review",
        method="GET",
        path="/review/{review_id}",
        args_model=schema.GetReviewArgs,
        summary="Get a specific review by ID",
        description=f"Get a specific website review by its ID {_REVIEWWEB}.",
        entity="Review",
        primary="review_id",
    ),
    Operation(
        name="list_reviews",
        method="GET",
        path="/review",
        args_model=schema.ListReviewsArgs,
        summary="List reviews with pagination",
        description=f"List your website reviews, page by page, {_REVIEWWEB}.",
        entity="Reviews",
        query=("page", "limit"),
    ),
    Operation(
        name="update_review",
        method="PATCH",
        path="/review/{review_id}",
        args_model=schema.UpdateReviewArgs,
        summary="Update an existing review",
        description=f"Update the URL or instructions of an existing website review {_REVIEWWEB}.",
        entity="Review",
        body=("url", "instructions"),
        primary="review_id",
    ),
    Operation(
        name="delete_review",
        method="DELETE",
        path="/review/{review_id}",
        args_model=schema.DeleteReviewArgs,
        summary="Delete a review",
        description=f"Delete a website review by its ID {_REVIEWWEB}.",
        entity="Review",
        primary="review_id",
    ),
    # ── Conversion & extraction ───────────────────────────────────────────
    Operation(
        name="convert_to_markdown",
        method="POST",
        path="/convert/markdown",
        args_model=schema.ConvertToMarkdownArgs,
        summary="Convert a URL to Markdown",
        description=(
            f"Convert a URL to Markdown using AI {_REVIEWWEB}.\n"
            "Turn a web page into LLM-friendly content."
        ),
        entity="Markdown",
        body=("url",),
        options=("model", "delayAfterLoad", "debug"),
        primary="url",
    ),
    Operation(
        name="convert_multiple_to_markdown",
        method="POST",
        path="/convert/markdown/urls",
        args_model=schema.ConvertMultipleToMarkdownArgs,
        summary="Convert multiple URLs to Markdown",
        description=(
            f"Convert multiple URLs to Markdown using AI {_REVIEWWEB}.\n"
            "Turn multiple web pages into LLM-friendly content."
        ),
        entity="Markdown",
        body=("urls",),
        options=("model", "delayAfterLoad", "maxLinks", "debug"),
        primary="urls",
    ),
    Operation(
        name="extract_data",
        method="POST",
        path="/extract",
        args_model=schema.ExtractDataArgs,
        summary="Extract structured JSON from a URL",
        description=(
            f"Extract structured data (JSON) from a web page URL using AI {_REVIEWWEB}.\n"
            "Describe what to extract in instructions and the output shape in jsonTemplate."
        ),
        entity="Data",
        body=("url",),
        options=(
            "instructions",
            "jsonTemplate",
            "systemPrompt",
            "model",
            "delayAfterLoad",
            "recursive",
            "debug",
        ),
        primary="url",
    ),
    Operation(
        name="extract_data_multiple",
        method="POST",
        path="/extract/urls",
        args_model=schema.ExtractDataMultipleArgs,
        summary="Extract structured JSON from multiple URLs",
        description=f"Extract structured data (JSON) from multiple web page URLs using AI {_REVIEWWEB}.",
        entity="Data",
        body=("urls",),
        options=("instructions", "jsonTemplate", "systemPrompt", "model", "delayAfterLoad", "debug"),
        primary="urls",
    ),
    # ── Scraping ──────────────────────────────────────────────────────────
    Operation(
        name="scrape_url",
        method="POST",
        path="/scrape",
        args_model=schema.ScrapeUrlArgs,
        summary="Scrape a URL and return its HTML",
        description="Scrape a URL and return HTML content using ReviewWeb.site API.",
        entity="HTML",
        query=("url",),
        options=("delayAfterLoad",),
        primary="url",
    ),
    Operation(
        name="extract_links",
        method="POST",
        path="/scrape/links-map",
        args_model=schema.ExtractLinksArgs,
        summary="Extract links from a web page",
        description=(
            "Extract all links from the HTML content of a web page URL using ReviewWeb.site API.\n"
            "Filter by link type and optionally check each link's HTTP status code."
        ),
        entity="Links",
        query=("url",),
        body=("type", "maxLinks", "delayAfterLoad", "getStatusCode", "autoScrapeInternalLinks", "debug"),
        primary="url",
    ),
    # ── Summaries ─────────────────────────────────────────────────────────
    Operation(
        name="summarize_url",
        method="POST",
        path="/summarize/url",
        args_model=schema.SummarizeUrlArgs,
        summary="Summarize a web page",
        description=f"Summarize a web page URL using AI {_REVIEWWEB}.",
        entity="Summary",
        body=("url",),
        options=("instructions", "systemPrompt", "model", "delayAfterLoad", "maxLength", "format", "debug"),
        primary="url",
    ),
    Operation(
        name="summarize_website",
        method="POST",
        path="/summarize/website",
        args_model=schema.SummarizeWebsiteArgs,
        summary="Summarize a website and its internal links",
        description=f"Summarize a website (and its internal links) using AI {_REVIEWWEB}.",
        entity="Summary",
        body=("url",),
        options=(
            "instructions",
            "systemPrompt",
            "model",
            "delayAfterLoad",
            "maxLinks",
            "maxLength",
            "format",
            "debug",
        ),
        primary="url",
    ),
    Operation(
        name="summarize_multiple_urls",
        method="POST",
        path="/summarize/urls",
        args_model=schema.SummarizeMultipleUrlsArgs,
        summary="Summarize multiple web pages",
        description=f"Summarize multiple web page URLs using AI {_REVIEWWEB}.",
        entity="Summary",
        body=("urls",),
        options=(
            "instructions",
            "systemPrompt",
            "model",
            "delayAfterLoad",
            "maxLinks",
            "maxLength",
            "format",
            "debug",
        ),
        primary="urls",
    ),
    # ── URL utilities ─────────────────────────────────────────────────────
    Operation(
        name="url_is_alive",
        method="GET",
        path="/url/is-alive",
        args_model=schema.UrlIsAliveArgs,
        summary="Check whether a URL is alive",
        description=(
            "Check if a URL is alive using ReviewWeb.site API.\n"
            "Optionally route the check through a proxy."
        ),
        entity="URL Status",
        query=("url", "timeout", "proxyUrl"),
        primary="url",
    ),
    Operation(
        name="url_get_after_redirects",
        method="GET",
        path="/url/get-url-after-redirects",
        args_model=schema.UrlGetAfterRedirectsArgs,
        summary="Resolve the final URL after redirects",
        description="Get URL after redirects using ReviewWeb.site API.",
        entity="URL",
        query=("url",),
        primary="url",
    ),
    # ── SEO insights ──────────────────────────────────────────────────────
    Operation(
        name="seo_keyword_ideas",
        method="GET",
        path="/seo-insights/keyword-ideas",
        args_model=schema.SeoKeywordIdeasArgs,
        summary="Get keyword ideas for a keyword",
        description=f"Get keyword ideas (related keywords and search volume) for a keyword {_REVIEWWEB}.",
        entity="Keyword Ideas",
        query=("keyword", "country", "searchEngine"),
        primary="keyword",
    ),
    Operation(
        name="seo_keyword_difficulty",
        method="GET",
        path="/seo-insights/keyword-difficulty",
        args_model=schema.SeoKeywordDifficultyArgs,
        summary="Get the ranking difficulty of a keyword",
        description=f"Get keyword difficulty for a keyword {_REVIEWWEB}.",
        entity="Keyword Difficulty",
        query=("keyword", "country"),
        primary="keyword",
    ),
    Operation(
        name="seo_traffic",
        method="GET",
        path="/seo-insights/traffic",
        args_model=schema.SeoTrafficArgs,
        summary="Check traffic for a domain or URL",
        description=f"Check estimated traffic for a domain or URL {_REVIEWWEB}.",
        entity="Traffic Data",
        query=("domainOrUrl", "mode", "country"),
        primary="domainOrUrl",
    ),
    Operation(
        name="seo_backlinks",
        method="GET",
        path="/seo-insights/backlinks",
        args_model=schema.SeoBacklinksArgs,
        summary="Get backlinks for a domain",
        description=f"Get backlinks pointing to a domain {_REVIEWWEB}.",
        entity="Backlinks Data",
        query=("domain",),
        primary="domain",
    ),
)


class OperationRegistry:
    """Lookup over the operation table."""

    def __init__(self, operations: Tuple[Operation, ...] = OPERATIONS):
        self._operations: Dict[str, Operation] = {op.name: op for op in operations}

    def get(self, name: str) -> Optional[Operation]:
        """Lookup an operation by tool name or CLI command name."""
        return self._operations.get(name.replace("-", "_"))

    def list_operations(self) -> List[Operation]:
        return list(self._operations.values())

    def __iter__(self):
        return iter(self._operations.values())

    def __len__(self) -> int:
        return len(self._operations)

    def build_prompt_fragment(self) -> str:
        """One line per operation, for server instructions."""
        lines = ["Available ReviewWeb.site tools:"]
        lines.extend(op.prompt_line() for op in self)
        return "\n".join(lines)


registry = OperationRegistry()
