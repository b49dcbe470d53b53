"""Tests for the web scraping module."""

import pytest
import requests
from unittest.mock import patch, MagicMock

from company_snapshot.errors import FetchError
from company_snapshot.models import WebsiteInfo
from company_snapshot.scraper import (
    _extract_text,
    RequestsPageFetcher,
    scrape_website,
    MAX_CONTENT_LENGTH,
)


# --- Sample HTML fixtures ---

SAMPLE_HTML = """
<html>
<head><title>Acme Corp - Building the Future</title></head>
<body>
<nav><a href="/">Home</a><a href="/about">About</a></nav>
<main>
<h1>Welcome to Acme Corp</h1>
<p>We build innovative solutions for modern businesses.</p>
<p>Our team of experts delivers world-class engineering.</p>
</main>
<footer>Copyright 2024</footer>
<script>var x = 1;</script>
</body>
</html>
"""


def _make_session(text: str = SAMPLE_HTML, content_type: str = "text/html; charset=utf-8") -> MagicMock:
    session = MagicMock()
    response = MagicMock()
    response.text = text
    response.headers = {"Content-Type": content_type}
    response.raise_for_status = MagicMock()
    session.get.return_value = response
    return session


class FakeFetcher:
    """Page fetcher that serves canned text and records requested URLs."""

    def __init__(self, pages: dict, failures: tuple = ()):
        self.pages = pages
        self.failures = set(failures)
        self.calls = []

    def fetch_page(self, url: str) -> str:
        self.calls.append(url)
        if url in self.failures:
            raise FetchError(f"boom: {url}")
        return self.pages.get(url, "")


class TestExtractText:
    def test_strips_scripts_and_nav(self):
        text = _extract_text(SAMPLE_HTML)
        assert "var x = 1" not in text
        assert "Copyright 2024" not in text  # footer stripped
        assert "Welcome to Acme Corp" in text

    def test_preserves_content(self):
        text = _extract_text(SAMPLE_HTML)
        assert "innovative solutions" in text
        assert "world-class engineering" in text

    def test_strips_short_lines(self):
        html = "<html><body><p>OK</p><p>A</p><p>This is real content here</p></body></html>"
        text = _extract_text(html)
        assert text == "This is real content here"

    def test_truncates_long_content(self):
        long_html = f"<html><body><p>{'x' * (MAX_CONTENT_LENGTH + 1000)}</p></body></html>"
        text = _extract_text(long_html)
        assert len(text) <= MAX_CONTENT_LENGTH + 50  # allow for truncation message
        assert "truncated" in text


class TestRequestsPageFetcher:
    def test_success(self):
        fetcher = RequestsPageFetcher(session=_make_session())
        text = fetcher.fetch_page("https://acme.com")
        assert "Welcome to Acme Corp" in text

    def test_uses_configured_timeout(self):
        session = _make_session()
        RequestsPageFetcher(timeout=7, session=session).fetch_page("https://acme.com")
        assert session.get.call_args.kwargs["timeout"] == 7

    @patch("company_snapshot.scraper.requests.Session")
    def test_owned_session_is_closed(self, mock_session_cls):
        session = _make_session()
        mock_session_cls.return_value.__enter__.return_value = session

        text = RequestsPageFetcher().fetch_page("https://acme.com")

        assert "Welcome to Acme Corp" in text
        mock_session_cls.return_value.__exit__.assert_called_once()

    def test_injected_session_left_open(self):
        session = _make_session()
        RequestsPageFetcher(session=session).fetch_page("https://acme.com")
        session.close.assert_not_called()
        session.__exit__.assert_not_called()

    def test_non_html_raises(self):
        fetcher = RequestsPageFetcher(session=_make_session(content_type="application/pdf"))
        with pytest.raises(FetchError, match="Non-HTML"):
            fetcher.fetch_page("https://acme.com/file.pdf")

    def test_timeout_raises(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.Timeout("timed out")

        with pytest.raises(FetchError, match="Timeout"):
            RequestsPageFetcher(session=session).fetch_page("https://slow.com")

    def test_http_error_raises(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.HTTPError("404")

        with pytest.raises(FetchError):
            RequestsPageFetcher(session=session).fetch_page("https://acme.com/404")

    def test_empty_page_raises(self):
        fetcher = RequestsPageFetcher(session=_make_session(text="<html><body></body></html>"))
        with pytest.raises(FetchError, match="No readable text"):
            fetcher.fetch_page("https://acme.com")


class TestScrapeWebsite:
    def test_homepage_only(self):
        info = WebsiteInfo(homepage_url="https://acme.com")
        fetcher = FakeFetcher({"https://acme.com": "Acme home"})

        content = scrape_website(info, fetcher)

        assert content.homepage == "Acme home"
        assert content.about is None
        assert content.news is None
        assert fetcher.calls == ["https://acme.com"]

    def test_all_pages(self):
        info = WebsiteInfo(
            homepage_url="https://acme.com",
            about_page_url="https://acme.com/about",
            news_page_url="https://acme.com/news",
        )
        fetcher = FakeFetcher({
            "https://acme.com": "Acme home",
            "https://acme.com/about": "About Acme",
            "https://acme.com/news": "Acme news",
        })

        content = scrape_website(info, fetcher)

        assert content.homepage == "Acme home"
        assert content.about == "About Acme"
        assert content.news == "Acme news"

    def test_homepage_failure_does_not_stop_siblings(self):
        info = WebsiteInfo(
            homepage_url="https://acme.com",
            about_page_url="https://acme.com/about",
        )
        fetcher = FakeFetcher({"https://acme.com/about": "About Acme"}, failures=("https://acme.com",))

        content = scrape_website(info, fetcher)

        assert content.homepage is None
        assert content.about == "About Acme"
        assert content.news is None
        assert fetcher.calls == ["https://acme.com", "https://acme.com/about"]

    def test_empty_text_is_absent(self):
        info = WebsiteInfo(homepage_url="https://acme.com", news_page_url="https://acme.com/news")
        fetcher = FakeFetcher({"https://acme.com": "Acme home", "https://acme.com/news": ""})

        content = scrape_website(info, fetcher)
        assert content.news is None

    def test_unexpected_exception_degrades(self):
        info = WebsiteInfo(homepage_url="https://acme.com")
        fetcher = MagicMock()
        fetcher.fetch_page.side_effect = RuntimeError("surprise")

        content = scrape_website(info, fetcher)
        assert content.homepage is None
