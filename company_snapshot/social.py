"""
Social Activity Module
Pulls recent LinkedIn company posts and renders them into a single text digest
for the report prompt. Never raises: a missing handle or a failed fetch yields
a fixed placeholder digest.
"""

import logging
from typing import Any, Optional

from apify_client import ApifyClient

from company_snapshot.errors import PostFetchError
from company_snapshot.models import SocialPost
from company_snapshot.services import PostFetchService

logger = logging.getLogger(__name__)

POST_LIMIT = 10

NO_HANDLE_DIGEST = "No LinkedIn username found for scraping posts."
FETCH_FAILED_DIGEST = "Failed to fetch LinkedIn posts."
UNKNOWN_DATE = "Unknown Date"


def derive_handle(company_name: str) -> str:
    """Guess a LinkedIn company handle: lower-case with all whitespace removed."""
    return "".join(company_name.lower().split())


def _post_date(item: dict[str, Any]) -> Optional[str]:
    """Pull a display date out of the different shapes actors return."""
    for key in ("posted_at", "postedAt"):
        value = item.get(key)
        if isinstance(value, dict):
            value = value.get("date") or value.get("relative")
        if value:
            return str(value)
    date = item.get("date")
    return str(date) if date else None


def _normalize_post(item: dict[str, Any]) -> Optional[SocialPost]:
    text = (item.get("text") or item.get("content") or "").strip()
    if not text:
        return None
    return SocialPost(text=text, posted_at=_post_date(item))


class ApifyPostFetcher:
    """Scrapes LinkedIn company posts through an Apify actor."""

    def __init__(self, api_token: str, actor_id: str, timeout: int = 120):
        self.api_token = api_token
        self.actor_id = actor_id
        self.timeout = timeout

    def fetch_posts(self, handle: str, limit: int) -> list[SocialPost]:
        """
        Run the posts actor for `handle` and return up to `limit` posts,
        newest first as returned by the actor.

        Raises:
            PostFetchError: If the actor run fails or does not finish.
        """
        if not self.api_token:
            raise PostFetchError("APIFY_API_TOKEN is not set")

        client = ApifyClient(self.api_token)
        logger.info(f"Fetching up to {limit} LinkedIn posts for '{handle}'...")
        try:
            run = client.actor(self.actor_id).call(
                run_input={"company_name": handle, "limit": limit},
                timeout_secs=self.timeout,
            )
        except Exception as e:
            raise PostFetchError(f"Apify actor {self.actor_id} failed: {e}") from e

        if not run or run.get("status") not in (None, "SUCCEEDED"):
            status = run.get("status") if run else "no run"
            raise PostFetchError(f"Apify actor {self.actor_id} did not succeed: {status}")

        try:
            items = client.dataset(run["defaultDatasetId"]).list_items(limit=limit).items
        except Exception as e:
            raise PostFetchError(f"Could not read Apify dataset: {e}") from e

        posts = [post for post in (_normalize_post(item) for item in items) if post]
        logger.info(f"Fetched {len(posts)} LinkedIn posts for '{handle}'")
        return posts[:limit]


def render_digest(posts: list[SocialPost]) -> str:
    return "\n\n".join(f"[{post.posted_at or UNKNOWN_DATE}] {post.text}" for post in posts)


def fetch_recent_posts(
    handle: Optional[str],
    fetcher: PostFetchService,
    limit: int = POST_LIMIT,
) -> str:
    """
    Build the social activity digest for a LinkedIn handle.

    Returns:
        Rendered posts in source order, or NO_HANDLE_DIGEST / FETCH_FAILED_DIGEST.
    """
    if not handle or not handle.strip():
        logger.info("No LinkedIn handle available, skipping post fetch")
        return NO_HANDLE_DIGEST

    try:
        posts = fetcher.fetch_posts(handle.strip(), limit)
    except Exception as e:
        logger.warning(f"LinkedIn post fetch failed for '{handle}': {e}")
        return FETCH_FAILED_DIGEST

    if not posts:
        logger.warning(f"No LinkedIn posts returned for '{handle}'")
        return FETCH_FAILED_DIGEST

    return render_digest(posts[:limit])
