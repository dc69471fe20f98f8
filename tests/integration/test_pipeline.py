import pytest
from rich.console import Console

from newsel.core.pipeline import PIPELINE_THEME, ScrapePipeline
from newsel.exceptions import BotDetectionError
from newsel.models import FetchResult
from newsel.storage import UsageTracker

LISTING_URL = 'https://www.example.com/politica'
NOTA_1 = 'https://www.example.com/politica/nota-1'
NOTA_2 = 'https://www.example.com/politica/nota-2'


@pytest.fixture
def console():
    return Console(theme=PIPELINE_THEME, quiet=True)


@pytest.fixture
def pages(listing_html, article_html):
    return {LISTING_URL: listing_html, NOTA_1: article_html}


@pytest.fixture
def fetcher(mocker, pages):
    def fetch(url, referer=None, language=None, encoding=None):
        if url in pages:
            return FetchResult(url=url, html=pages[url], status_code=200)
        return FetchResult(url=url, status_code=None, block_reason='connection reset')

    mock = mocker.Mock()
    mock.fetch.side_effect = fetch
    return mock


def test_scrape_listing_end_to_end(store, fetcher, console, tmp_path):
    tracker = UsageTracker(tmp_path / 'usage.json')
    collected = []
    pipeline = ScrapePipeline(
        store,
        fetcher=fetcher,
        tracker=tracker,
        console=console,
        max_fetch_retries=1,
        on_article=collected.append,
    )

    report = pipeline.scrape(LISTING_URL)

    assert report.domain == 'example.com'
    assert report.candidates_found == 2
    assert [a.source_url for a in report.articles] == [NOTA_1]
    assert report.articles[0].title == 'Gobierno anuncia nuevo plan'
    assert report.articles[0].content == 'Primer párrafo.\n\nSegundo párrafo.'
    assert collected == report.articles

    assert len(report.failures) == 1
    assert report.failures[0].url == NOTA_2
    assert report.failures[0].error_type == 'FetchError'
    assert report.success

    stats = tracker.get_stats('example.com')
    assert stats['usage_count'] == 1
    assert stats['success_count'] == 1


def test_article_requests_carry_the_site_hints(store, fetcher, console):
    ScrapePipeline(store, fetcher=fetcher, console=console, max_fetch_retries=1).scrape(LISTING_URL, limit=1)

    article_call = fetcher.fetch.call_args_list[1]
    assert article_call.args == (NOTA_1,)
    assert article_call.kwargs == {'referer': LISTING_URL, 'language': 'es', 'encoding': 'utf-8'}


def test_limit_caps_the_number_of_articles(store, fetcher, console):
    report = ScrapePipeline(store, fetcher=fetcher, console=console, max_fetch_retries=1).scrape(LISTING_URL, limit=1)

    assert report.candidates_found == 2
    assert len(report.articles) == 1
    assert report.failures == []
    assert fetcher.fetch.call_count == 2


@pytest.mark.parametrize('limit', [0, -1])
def test_limit_below_one_is_rejected(store, fetcher, console, limit):
    pipeline = ScrapePipeline(store, fetcher=fetcher, console=console)

    with pytest.raises(ValueError):
        pipeline.scrape(LISTING_URL, limit=limit)
    with pytest.raises(ValueError):
        pipeline.scrape_many([LISTING_URL], limit=limit)

    fetcher.fetch.assert_not_called()


def test_article_without_content_is_reported_not_raised(store, fetcher, pages, console):
    pages[NOTA_2] = '<html><body><p>' + 'sin contenido ' * 20 + '</p></body></html>'

    report = ScrapePipeline(store, fetcher=fetcher, console=console, max_fetch_retries=1).scrape(LISTING_URL)

    assert len(report.articles) == 1
    assert report.failures[0].error_type == 'MissingRequiredFieldError'


def test_unknown_site_is_reported(store, fetcher, console):
    report = ScrapePipeline(store, fetcher=fetcher, console=console).scrape('https://unknown.cl/news')

    assert not report.success
    assert 'No site configuration' in report.error
    fetcher.fetch.assert_not_called()


def test_blocked_listing_is_retried_then_reported(store, mocker, console):
    fetcher = mocker.Mock()
    fetcher.fetch.side_effect = BotDetectionError(LISTING_URL, 429, ['HTTP 429'])
    mocker.patch('tenacity.nap.time.sleep')

    report = ScrapePipeline(store, fetcher=fetcher, console=console, max_fetch_retries=2).scrape(LISTING_URL)

    assert fetcher.fetch.call_count == 2
    assert report.articles == []
    assert '429' in report.error


def test_scrape_many_keeps_input_order(store, fetcher, console):
    pipeline = ScrapePipeline(store, fetcher=fetcher, console=console, max_fetch_retries=1, max_workers=2)

    reports = pipeline.scrape_many(['https://unknown.cl/', LISTING_URL])

    assert [r.listing_url for r in reports] == ['https://unknown.cl/', LISTING_URL]
    assert not reports[0].success
    assert reports[1].success
