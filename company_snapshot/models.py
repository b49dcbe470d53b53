"""Pydantic models for structured data throughout the pipeline."""

from urllib.parse import urlparse
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _is_absolute_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class ResearchRequest(BaseModel):
    """Input payload for a single snapshot run."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    company_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("company_name", "companyName"),
    )
    social_handle: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("social_handle", "linkedin_username", "linkedinUsername", "handle"),
    )
    recipient_email: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("recipient_email", "recipientEmail"),
    )


class WebsiteInfo(BaseModel):
    """Homepage / About / News URLs identified for a company."""
    model_config = ConfigDict(populate_by_name=True)

    homepage_url: str = Field(alias="homepageUrl")
    about_page_url: Optional[str] = Field(default=None, alias="aboutPageUrl")
    news_page_url: Optional[str] = Field(default=None, alias="newsPageUrl")

    @field_validator("homepage_url")
    @classmethod
    def _check_homepage(cls, value: str) -> str:
        value = value.strip()
        if not _is_absolute_url(value):
            raise ValueError(f"homepage_url must be an absolute http(s) URL, got {value!r}")
        return value

    @field_validator("about_page_url", "news_page_url")
    @classmethod
    def _normalize_optional(cls, value: Optional[str]) -> Optional[str]:
        # Blank or relative URLs are treated as "not found"
        if value is None:
            return None
        value = value.strip()
        if not value or not _is_absolute_url(value):
            return None
        return value


class ScrapedContent(BaseModel):
    """Page text for each URL that was present and fetched successfully."""
    homepage: Optional[str] = None
    about: Optional[str] = None
    news: Optional[str] = None


class SearchResult(BaseModel):
    """A single web search hit."""
    url: str
    title: str = ""
    snippet: str = ""


class SocialPost(BaseModel):
    """A recent post from the company's LinkedIn page."""
    text: str = ""
    posted_at: Optional[str] = None
