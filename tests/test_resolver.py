"""Tests for the website resolver."""

import pytest
from unittest.mock import MagicMock

from company_snapshot.errors import ExtractionError, ResolutionError, SearchError
from company_snapshot.models import SearchResult, WebsiteInfo
from company_snapshot.resolver import resolve_website, build_search_query


def _make_results() -> list[SearchResult]:
    return [
        SearchResult(url="https://acme.com", title="Acme Corp", snippet="Official site"),
        SearchResult(url="https://acme.com/about", title="About Acme", snippet="Our mission"),
    ]


def _make_search(results=None) -> MagicMock:
    search = MagicMock()
    search.search.return_value = _make_results() if results is None else results
    return search


def _make_extractor(data) -> MagicMock:
    extractor = MagicMock()
    extractor.extract.return_value = data
    return extractor


class TestResolveWebsite:
    def test_resolves_all_urls(self):
        extractor = _make_extractor({
            "homepageUrl": "https://acme.com",
            "aboutPageUrl": "https://acme.com/about",
            "newsPageUrl": "https://acme.com/blog",
        })

        info = resolve_website("Acme", _make_search(), extractor)

        assert info.homepage_url == "https://acme.com"
        assert info.about_page_url == "https://acme.com/about"
        assert info.news_page_url == "https://acme.com/blog"

    def test_homepage_only(self):
        info = resolve_website("Acme", _make_search(), _make_extractor({"homepageUrl": "https://acme.com"}))

        assert info.homepage_url
        assert info.about_page_url is None
        assert info.news_page_url is None

    def test_search_query_and_limit(self):
        search = _make_search()

        resolve_website("Acme Corp", search, _make_extractor({"homepageUrl": "https://acme.com"}))

        search.search.assert_called_once_with("Acme Corp official website about news blog", 5)
        assert build_search_query("Acme") == "Acme official website about news blog"

    def test_extraction_prompt_embeds_results(self):
        extractor = _make_extractor({"homepageUrl": "https://acme.com"})

        resolve_website("Acme", _make_search(), extractor)

        prompt, schema = extractor.extract.call_args.args
        assert '"Acme"' in prompt
        assert "https://acme.com/about" in prompt
        assert schema is WebsiteInfo

    def test_blank_company_name(self):
        search = _make_search()
        with pytest.raises(ResolutionError, match="empty"):
            resolve_website("   ", search, _make_extractor({}))
        search.search.assert_not_called()

    def test_search_failure(self):
        search = MagicMock()
        search.search.side_effect = SearchError("timeout")

        with pytest.raises(ResolutionError, match="Web search failed"):
            resolve_website("Acme", search, _make_extractor({}))

    def test_no_results(self):
        extractor = _make_extractor({"homepageUrl": "https://acme.com"})

        with pytest.raises(ResolutionError, match="no results"):
            resolve_website("Acme", _make_search(results=[]), extractor)
        extractor.extract.assert_not_called()

    def test_extraction_failure(self):
        extractor = MagicMock()
        extractor.extract.side_effect = ExtractionError("LLM did not return valid JSON")

        with pytest.raises(ResolutionError, match="Failed to identify"):
            resolve_website("Acme", _make_search(), extractor)

    @pytest.mark.parametrize("data", [
        {},
        None,
        {"homepageUrl": ""},
        {"homepageUrl": "acme"},
        {"aboutPageUrl": "https://acme.com/about"},
    ])
    def test_unparseable_homepage(self, data):
        with pytest.raises(ResolutionError, match="Failed to identify"):
            resolve_website("Acme", _make_search(), _make_extractor(data))
