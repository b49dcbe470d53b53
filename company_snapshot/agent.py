"""
Agent Orchestrator
Runs the full snapshot pipeline for one company:
Website Resolution -> Page Scraping -> LinkedIn Digest -> Report Synthesis -> Email Delivery

Only resolution and delivery failures end a run early; every other stage
degrades to a placeholder and the run continues.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Callable

from company_snapshot.config import RequestDefaults, SnapshotConfig
from company_snapshot.errors import DeadlineExceededError
from company_snapshot.llm import ClaudeClient
from company_snapshot.mailer import SmtpTransport, deliver_report
from company_snapshot.models import ResearchRequest, ScrapedContent, WebsiteInfo
from company_snapshot.report import synthesize_report
from company_snapshot.resolver import resolve_website
from company_snapshot.scraper import RequestsPageFetcher, scrape_website
from company_snapshot.search import FirecrawlSearch
from company_snapshot.services import Services
from company_snapshot.social import ApifyPostFetcher, derive_handle, fetch_recent_posts

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Company Snapshot Report for {company_name} has been sent to {recipient}."


def build_services(config: SnapshotConfig) -> Services:
    """Wire the concrete service adapters from configuration."""
    claude = ClaudeClient(
        api_key=config.anthropic_api_key,
        model=config.llm_model,
        timeout=config.llm_timeout,
    )
    return Services(
        search=FirecrawlSearch(api_key=config.firecrawl_api_key, timeout=config.search_timeout),
        extractor=claude,
        pages=RequestsPageFetcher(timeout=config.scrape_timeout),
        posts=ApifyPostFetcher(
            api_token=config.apify_api_token,
            actor_id=config.linkedin_posts_actor,
            timeout=config.social_timeout,
        ),
        generator=claude,
        mail=SmtpTransport(
            username=config.smtp_username,
            password=config.smtp_password,
            sender_address=config.sender_address,
            sender_name=config.sender_name,
            host=config.smtp_host,
            port=config.smtp_port,
            timeout=config.smtp_timeout,
        ),
    )


@dataclass
class PipelineResult:
    """Intermediate data from a single pipeline run."""
    company_name: str
    recipient_email: str
    social_handle: Optional[str] = None
    website: Optional[WebsiteInfo] = None
    scraped: Optional[ScrapedContent] = None
    digest: Optional[str] = None
    report: Optional[str] = None
    message: Optional[str] = None
    stage: str = "not_started"  # resolving, scraping, social, synthesizing, delivering, complete, failed
    timings: dict[str, float] = field(default_factory=dict)


class SnapshotAgent:
    """
    Company Snapshot agent: researches one company and emails the report.
    """

    def __init__(
        self,
        services: Services,
        defaults: Optional[RequestDefaults] = None,
        run_deadline: Optional[float] = None,
    ):
        self.services = services
        self.defaults = defaults or RequestDefaults()
        self.run_deadline = run_deadline

    @classmethod
    def from_config(cls, config: SnapshotConfig) -> "SnapshotAgent":
        return cls(
            services=build_services(config),
            defaults=config.defaults,
            run_deadline=config.run_deadline,
        )

    def _prepare(self, request: ResearchRequest) -> PipelineResult:
        """Apply request defaults and derive the LinkedIn handle."""
        company_name = (request.company_name or "").strip() or self.defaults.company_name
        recipient = (request.recipient_email or "").strip() or self.defaults.recipient_email
        handle = (request.social_handle or "").strip() or derive_handle(company_name)
        return PipelineResult(
            company_name=company_name,
            recipient_email=recipient,
            social_handle=handle or None,
        )

    def run_pipeline(
        self,
        request: ResearchRequest,
        progress_callback: Optional[Callable] = None,
    ) -> PipelineResult:
        """
        Run the full pipeline end-to-end for a single request.

        Args:
            request: Company to research and where to send the report.
            progress_callback: Optional callable(message: str) for progress updates.

        Returns:
            PipelineResult with all intermediate data.

        Raises:
            ResolutionError: No homepage could be identified; nothing was sent.
            DeliveryError: The report could not be emailed.
            DeadlineExceededError: The run deadline passed before a stage started.
        """
        result = self._prepare(request)
        started = time.monotonic()

        def _log(msg: str):
            logger.info(msg)
            if progress_callback:
                progress_callback(msg)

        def _enter(stage: str):
            elapsed = time.monotonic() - started
            if self.run_deadline is not None and elapsed > self.run_deadline:
                result.stage = "failed"
                raise DeadlineExceededError(
                    f"Run deadline of {self.run_deadline}s exceeded before {stage} "
                    f"({elapsed:.1f}s elapsed)"
                )
            result.stage = stage
            result.timings[stage] = elapsed

        company = result.company_name
        try:
            # Phase 1: Resolve
            _enter("resolving")
            _log(f"Phase 1: Finding the official website for {company}...")
            result.website = resolve_website(company, self.services.search, self.services.extractor)

            # Phase 2: Scrape
            _enter("scraping")
            _log(f"Phase 2: Scraping {result.website.homepage_url}...")
            result.scraped = scrape_website(result.website, self.services.pages)

            # Phase 3: LinkedIn
            _enter("social")
            _log(f"Phase 3: Fetching recent LinkedIn posts for '{result.social_handle}'...")
            result.digest = fetch_recent_posts(result.social_handle, self.services.posts)

            # Phase 4: Report
            _enter("synthesizing")
            _log("Phase 4: Generating the Company Snapshot Report...")
            result.report = synthesize_report(company, result.scraped, result.digest, self.services.generator)

            # Phase 5: Deliver
            _enter("delivering")
            _log(f"Phase 5: Sending report to {result.recipient_email}...")
            deliver_report(result.recipient_email, company, result.report, self.services.mail)

        except Exception as e:
            result.stage = "failed"
            logger.error(f"Pipeline error: {e}")
            _log(f"Error: {e}")
            raise

        result.stage = "complete"
        result.message = SUCCESS_MESSAGE.format(company_name=company, recipient=result.recipient_email)
        _log(result.message)
        return result

    def run(self, request: ResearchRequest) -> dict[str, str]:
        """Run the pipeline and return the caller-facing status message."""
        result = self.run_pipeline(request)
        return {"message": result.message}
