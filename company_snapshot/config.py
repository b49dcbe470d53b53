"""Configuration loaded from environment variables and an optional .env file."""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv


@dataclass
class RequestDefaults:
    """Fallback values for requests that arrive without a company or recipient."""
    company_name: str = "Stripe"
    recipient_email: str = "user@example.com"


@dataclass
class SnapshotConfig:
    """Credentials, models and timeouts for the concrete service adapters."""
    anthropic_api_key: str = ""
    firecrawl_api_key: str = ""
    apify_api_token: str = ""

    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    sender_address: str = ""
    sender_name: str = "Company Snapshot"

    llm_model: str = "claude-sonnet-4-5-20250929"
    linkedin_posts_actor: str = "apimaestro/linkedin-company-posts"

    # Per-call timeouts, in seconds
    search_timeout: int = 60
    scrape_timeout: int = 15
    social_timeout: int = 120
    llm_timeout: int = 120
    smtp_timeout: int = 30

    # Overall run deadline in seconds; None disables it
    run_deadline: Optional[float] = None

    defaults: RequestDefaults = field(default_factory=RequestDefaults)


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


def load_config() -> SnapshotConfig:
    """Load configuration from .env and the process environment.

    Environment variables override .env values. Missing credentials are not
    an error here; the adapter that needs them fails when it is first called.
    """
    load_dotenv()

    smtp_username = os.getenv("SMTP_USERNAME", os.getenv("GMAIL_ADDRESS", ""))

    return SnapshotConfig(
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
        firecrawl_api_key=os.getenv("FIRECRAWL_API_KEY", ""),
        apify_api_token=os.getenv("APIFY_API_TOKEN", ""),
        smtp_host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
        smtp_port=int(os.getenv("SMTP_PORT", "587")),
        smtp_username=smtp_username,
        smtp_password=os.getenv("SMTP_PASSWORD", os.getenv("GMAIL_APP_PASSWORD", "")),
        sender_address=os.getenv("SENDER_ADDRESS", smtp_username),
        sender_name=os.getenv("SENDER_NAME", "Company Snapshot"),
        llm_model=os.getenv("LLM_MODEL", "claude-sonnet-4-5-20250929"),
        linkedin_posts_actor=os.getenv("LINKEDIN_POSTS_ACTOR", "apimaestro/linkedin-company-posts"),
        search_timeout=int(os.getenv("SEARCH_TIMEOUT", "60")),
        scrape_timeout=int(os.getenv("SCRAPE_TIMEOUT", "15")),
        social_timeout=int(os.getenv("SOCIAL_TIMEOUT", "120")),
        llm_timeout=int(os.getenv("LLM_TIMEOUT", "120")),
        smtp_timeout=int(os.getenv("SMTP_TIMEOUT", "30")),
        run_deadline=_optional_float("RUN_DEADLINE"),
        defaults=RequestDefaults(
            company_name=os.getenv("DEFAULT_COMPANY_NAME", "Stripe"),
            recipient_email=os.getenv("DEFAULT_RECIPIENT_EMAIL", "user@example.com"),
        ),
    )
