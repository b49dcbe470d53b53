"""
Report Synthesis Module
Turns the scraped website text and LinkedIn digest into a Markdown
"Company Snapshot Report".
"""

import logging

from company_snapshot.models import ScrapedContent
from company_snapshot.services import GenerateService

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
FALLBACK_REPORT = "Failed to generate report content."

REPORT_PROMPT = """Generate a concise "Company Snapshot Report" for {company_name}.

Website Content:
Homepage: {homepage}
About Page: {about}
News Page: {news}

Recent LinkedIn Posts (last 3 weeks):
{posts}

The report should include:
1. Company Mission, Values, and Culture
2. Key points from recent LinkedIn posts
3. Highlights from website news or blogs

Format the output in clean Markdown."""


def build_report_prompt(company_name: str, content: ScrapedContent, digest: str) -> str:
    return REPORT_PROMPT.format(
        company_name=company_name,
        homepage=content.homepage or NOT_AVAILABLE,
        about=content.about or NOT_AVAILABLE,
        news=content.news or NOT_AVAILABLE,
        posts=digest,
    )


def synthesize_report(
    company_name: str,
    content: ScrapedContent,
    digest: str,
    generator: GenerateService,
) -> str:
    """
    Generate the snapshot report.

    Never raises; returns FALLBACK_REPORT if generation fails or comes back empty.
    """
    prompt = build_report_prompt(company_name, content, digest)

    try:
        report = generator.generate(prompt)
    except Exception as e:
        logger.warning(f"Report generation failed for {company_name}: {e}")
        return FALLBACK_REPORT

    if not report or not report.strip():
        logger.warning(f"Report generation returned no content for {company_name}")
        return FALLBACK_REPORT

    logger.info(f"Report generated for {company_name}: {len(report)} chars")
    return report
