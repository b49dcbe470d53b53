"""
Website Resolver
Finds a company's official homepage plus its About and News/Blog pages from a
web search, using an LLM extraction step to pick the right URLs.
"""

import json
import logging

from pydantic import ValidationError

from company_snapshot.errors import ResolutionError
from company_snapshot.models import WebsiteInfo
from company_snapshot.services import ExtractionService, SearchService

logger = logging.getLogger(__name__)

SEARCH_HINT_TERMS = "official website about news blog"
SEARCH_LIMIT = 5

IDENTIFY_PROMPT = """From these search results for "{company_name}", identify the \
official homepage URL, the "About Us" page URL, and the "News" or "Blog" page URL.

Only use URLs that appear in the search results. Leave the About or News URL \
out if no result is clearly that page.

Search results:
{results_json}"""


def build_search_query(company_name: str) -> str:
    return f"{company_name} {SEARCH_HINT_TERMS}"


def resolve_website(
    company_name: str,
    search: SearchService,
    extractor: ExtractionService,
    search_limit: int = SEARCH_LIMIT,
) -> WebsiteInfo:
    """
    Identify the company's homepage, About page and News page.

    Args:
        company_name: Company to look up.
        search: Web search service.
        extractor: Schema-constrained extraction service.
        search_limit: Maximum number of search results to consider.

    Returns:
        WebsiteInfo with a validated absolute homepage URL.

    Raises:
        ResolutionError: If no homepage URL can be identified.
    """
    company_name = (company_name or "").strip()
    if not company_name:
        raise ResolutionError("Company name is empty")

    query = build_search_query(company_name)
    logger.info(f"Searching for website of {company_name}: {query!r}")

    try:
        results = search.search(query, search_limit)
    except Exception as e:
        raise ResolutionError(f"Web search failed for {company_name}: {e}") from e

    if not results:
        raise ResolutionError(f"Web search returned no results for {company_name}")

    results_json = json.dumps([r.model_dump() for r in results], indent=2)
    prompt = IDENTIFY_PROMPT.format(company_name=company_name, results_json=results_json)

    try:
        data = extractor.extract(prompt, WebsiteInfo)
    except Exception as e:
        raise ResolutionError(f"Failed to identify company website URLs: {e}") from e

    try:
        info = WebsiteInfo.model_validate(data)
    except ValidationError as e:
        raise ResolutionError(f"Failed to identify company website URLs: {e}") from e

    logger.info(
        f"Resolved {company_name}: homepage={info.homepage_url} "
        f"about={info.about_page_url or '-'} news={info.news_page_url or '-'}"
    )
    return info
