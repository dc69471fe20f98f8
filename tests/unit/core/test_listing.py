import pytest

from newsel.core.dom import SoupDocument
from newsel.core.extraction import ListingExtractor
from newsel.models import ListingCandidate


def test_extract_listing(listing_html):
    dom = SoupDocument.parse(listing_html, 'https://www.example.com/politica')

    candidates = ListingExtractor().extract_listing(
        ['.missing-list', 'article.teaser'],
        ['h2 a'],
        ['h2'],
        dom=dom,
        description=['.summary'],
    )

    assert candidates == [
        ListingCandidate(
            url='https://www.example.com/politica/nota-1',
            preview_title='Nota uno',
            description='Resumen uno',
        ),
        ListingCandidate(url='https://www.example.com/politica/nota-2', preview_title='Nota dos'),
    ]


def test_relative_and_absolute_links_are_deduplicated():
    html = """
    <div class="c"><a href="/a">first</a></div>
    <div class="c"><a href="https://x.com/a">second</a></div>
    """
    dom = SoupDocument.parse(html, 'https://x.com/news')

    candidates = ListingExtractor().extract_listing(['.c'], ['a'], dom=dom)

    assert len(candidates) == 1
    assert candidates[0].url == 'https://x.com/a'
    assert candidates[0].preview_title == 'first'


def test_links_resolve_against_base_href():
    html = """
    <html><head><base href="https://cdn.x.com/sub/"></head>
    <body><div class="c"><a href="nota">N</a></div></body></html>
    """
    dom = SoupDocument.parse(html, 'https://x.com/news')

    candidates = ListingExtractor().extract_listing(['.c'], ['a'], dom=dom)

    assert [c.url for c in candidates] == ['https://cdn.x.com/sub/nota']


def test_without_link_selectors_container_href_is_used():
    html = """
    <a class="card" href="/b"><span>Card B</span></a>
    <div class="card"><p>Teaser</p><a href="/c">C</a><a href="/d">D</a></div>
    """
    dom = SoupDocument.parse(html, 'https://x.com/')

    candidates = ListingExtractor().extract_listing(['.card'], [], dom=dom)

    assert [c.url for c in candidates] == ['https://x.com/b', 'https://x.com/c']
    assert [c.preview_title for c in candidates] == ['Card B', 'C']


def test_non_http_links_and_linkless_containers_are_skipped():
    html = """
    <div class="c"><a href="mailto:news@x.com">mail</a></div>
    <div class="c"><a href="javascript:void(0)">js</a></div>
    <div class="c"><span>no link</span></div>
    <div class="c"><a href="/ok">ok</a></div>
    """
    dom = SoupDocument.parse(html, 'https://x.com/')

    candidates = ListingExtractor().extract_listing(['.c'], ['a'], dom=dom)

    assert [c.url for c in candidates] == ['https://x.com/ok']


def test_no_matching_container_returns_empty_list(listing_html):
    dom = SoupDocument.parse(listing_html, 'https://x.com/')
    assert ListingExtractor().extract_listing(['.nothing', 'div['], ['a'], dom=dom) == []


def test_failing_container_does_not_abort_the_listing(mocker, listing_html):
    dom = SoupDocument.parse(listing_html, 'https://x.com/')
    extractor = ListingExtractor()
    mocker.patch.object(
        extractor,
        '_candidate',
        side_effect=[RuntimeError('boom'), ListingCandidate(url='https://x.com/ok'), None, None],
    )

    candidates = extractor.extract_listing(['article.teaser'], ['h2 a'], dom=dom)

    assert [c.url for c in candidates] == ['https://x.com/ok']


def test_document_is_required():
    with pytest.raises(ValueError):
        ListingExtractor().extract_listing(['.c'], ['a'])
