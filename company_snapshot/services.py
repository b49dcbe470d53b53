"""
Collaborator Interfaces
One protocol per external role the pipeline depends on. The orchestrator only
ever talks to these; concrete adapters live in search.py, scraper.py,
social.py, llm.py and mailer.py.
"""

from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel

from company_snapshot.models import SearchResult, SocialPost


class SearchService(Protocol):
    def search(self, query: str, limit: int) -> list[SearchResult]: ...


class ExtractionService(Protocol):
    def extract(self, prompt: str, schema: type[BaseModel]) -> dict: ...


class PageFetchService(Protocol):
    def fetch_page(self, url: str) -> str: ...


class PostFetchService(Protocol):
    def fetch_posts(self, handle: str, limit: int) -> list[SocialPost]: ...


class GenerateService(Protocol):
    def generate(self, prompt: str) -> str: ...


class EmailTransport(Protocol):
    def send_email(self, to: list[str], subject: str, body: str) -> None: ...


@dataclass
class Services:
    """The full set of collaborators a pipeline run needs."""
    search: SearchService
    extractor: ExtractionService
    pages: PageFetchService
    posts: PostFetchService
    generator: GenerateService
    mail: EmailTransport
