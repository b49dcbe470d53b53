"""Firecrawl web search client."""

import logging
from typing import Optional

import requests

from company_snapshot.errors import SearchError
from company_snapshot.models import SearchResult

logger = logging.getLogger(__name__)

FIRECRAWL_SEARCH_URL = "https://api.firecrawl.dev/v2/search"


class FirecrawlSearch:
    """Runs Google-style web searches through the Firecrawl API."""

    def __init__(self, api_key: str, timeout: int = 60, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session

    def _post(self, session: requests.Session, headers: dict, payload: dict) -> dict:
        response = session.post(
            FIRECRAWL_SEARCH_URL,
            headers=headers,
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def search(self, query: str, limit: int) -> list[SearchResult]:
        """
        Execute a search and return normalised results.

        Raises:
            SearchError: On transport errors or an unsuccessful API response.
        """
        if not self.api_key:
            raise SearchError("FIRECRAWL_API_KEY is not set")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {"query": query, "limit": limit}

        try:
            if self.session is not None:
                data = self._post(self.session, headers, payload)
            else:
                with requests.Session() as session:
                    data = self._post(session, headers, payload)
        except requests.exceptions.Timeout as e:
            logger.warning(f"Firecrawl timeout for query: {query[:80]}")
            raise SearchError("Search timed out") from e
        except requests.exceptions.HTTPError as e:
            logger.warning(f"Firecrawl HTTP error for query '{query[:80]}': {e}")
            raise SearchError(f"Search failed: {e}") from e
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"Firecrawl error for query '{query[:80]}': {e}")
            raise SearchError(f"Search failed: {e}") from e

        if not data.get("success", False):
            warning = data.get("warning") or data.get("error") or "unknown error"
            raise SearchError(f"Search was not successful: {warning}")

        # v2 nests results under "web"; v1 returned a flat list
        raw_data = data.get("data", {})
        raw_results = raw_data if isinstance(raw_data, list) else raw_data.get("web", [])

        results = []
        for item in raw_results[:limit]:
            url = item.get("url", "")
            if not url:
                continue
            results.append(SearchResult(
                url=url,
                title=item.get("title") or "",
                snippet=item.get("description") or "",
            ))

        logger.info(f"Search returned {len(results)} results for: {query[:80]}")
        return results
