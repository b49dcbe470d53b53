"""
Web Scraping Module
Fetches the homepage, About and News pages identified for a company and
extracts them into clean text. A page that cannot be fetched is left out of
the result instead of failing the run.
"""

import logging
from typing import Optional

import requests
from bs4 import BeautifulSoup

from company_snapshot.errors import FetchError
from company_snapshot.models import ScrapedContent, WebsiteInfo
from company_snapshot.services import PageFetchService

logger = logging.getLogger(__name__)

# Elements to strip from HTML before text extraction
STRIP_ELEMENTS = [
    "script", "style", "nav", "footer", "header", "noscript",
    "iframe", "svg", "form", "button",
]

# Default headers to mimic a browser
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

REQUEST_TIMEOUT = 15
MAX_CONTENT_LENGTH = 5000  # max chars per page to keep


def _extract_text(html: str) -> str:
    """Clean HTML and extract readable text content."""
    soup = BeautifulSoup(html, "html.parser")

    for tag_name in STRIP_ELEMENTS:
        for tag in soup.find_all(tag_name):
            tag.decompose()

    text = soup.get_text(separator="\n", strip=True)

    lines = [line.strip() for line in text.splitlines()]
    # Very short lines are almost always nav remnants
    cleaned = [line for line in lines if len(line) > 2]

    text = "\n".join(cleaned)

    if len(text) > MAX_CONTENT_LENGTH:
        text = text[:MAX_CONTENT_LENGTH] + "\n... [content truncated]"

    return text


class RequestsPageFetcher:
    """Fetches pages over HTTP and returns their visible text."""

    def __init__(self, timeout: int = REQUEST_TIMEOUT, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session

    def _get(self, session: requests.Session, url: str) -> requests.Response:
        response = session.get(url, headers=DEFAULT_HEADERS, timeout=self.timeout)
        response.raise_for_status()
        return response

    def fetch_page(self, url: str) -> str:
        """
        Fetch a single page and return its cleaned text.

        Raises:
            FetchError: On network errors, non-HTML responses or empty pages.
        """
        try:
            if self.session is not None:
                response = self._get(self.session, url)
            else:
                with requests.Session() as session:
                    response = self._get(session, url)
        except requests.exceptions.Timeout as e:
            raise FetchError(f"Timeout fetching {url}") from e
        except requests.exceptions.HTTPError as e:
            raise FetchError(f"HTTP error fetching {url}: {e}") from e
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Error fetching {url}: {e}") from e

        content_type = response.headers.get("Content-Type", "")
        if "text/html" not in content_type and "application/xhtml" not in content_type:
            raise FetchError(f"Non-HTML content at {url}: {content_type}")

        text = _extract_text(response.text)
        if not text:
            raise FetchError(f"No readable text at {url}")
        return text


def _fetch_optional(fetcher: PageFetchService, url: str, page_type: str) -> Optional[str]:
    """Fetch one page, converting any failure into a missing value."""
    try:
        text = fetcher.fetch_page(url)
    except Exception as e:
        logger.warning(f"Could not fetch {page_type} page {url}: {e}")
        return None

    if not text:
        logger.warning(f"{page_type.capitalize()} page {url} returned no content")
        return None

    logger.info(f"Scraped {page_type}: {len(text)} chars")
    return text


def scrape_website(info: WebsiteInfo, fetcher: PageFetchService) -> ScrapedContent:
    """
    Scrape the homepage and, when known, the About and News pages.

    Args:
        info: URLs identified for the company.
        fetcher: Page fetch service.

    Returns:
        ScrapedContent with a field set for every page that was fetched.
    """
    content = ScrapedContent()

    content.homepage = _fetch_optional(fetcher, info.homepage_url, "homepage")

    if info.about_page_url:
        content.about = _fetch_optional(fetcher, info.about_page_url, "about")

    if info.news_page_url:
        content.news = _fetch_optional(fetcher, info.news_page_url, "news")

    fetched = [name for name, value in content.model_dump().items() if value]
    logger.info(f"Scraping complete: {len(fetched)} page(s) ({', '.join(fetched) or 'none'})")
    return content
