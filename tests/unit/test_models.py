import json

import pytest
from pydantic import ValidationError

from newsel.models import ArticlePreview, CleaningRule, SelectorTestResult, SiteConfig


def test_stored_shape_round_trips(site_config_data):
    data = {**site_config_data, 'domain': 'example.com'}

    config = SiteConfig.from_dict(data)
    dumped = json.loads(json.dumps(config.to_dict()))

    assert dumped['domain'] == 'example.com'
    assert dumped['cleaningRules'] == [{'type': 'strip', 'pattern': 'PUBLICIDAD', 'description': 'Ad marker'}]
    assert dumped['selectors']['article']['title'] == ['.missing', 'h1.headline']
    assert dumped['selectors']['listing']['container'] == ['.missing-list', 'article.teaser']
    assert SiteConfig.from_dict(dumped) == config


def test_every_selector_key_is_always_emitted():
    config = SiteConfig.from_dict({'domain': 'x.com', 'selectors': {'article': {'title': ['h1']}}})
    selectors = config.to_dict()['selectors']

    assert selectors['listing'] == {'container': [], 'title': [], 'link': [], 'description': []}
    assert selectors['article'] == {'title': ['h1'], 'content': [], 'date': [], 'author': [], 'images': []}


def test_single_selector_strings_become_lists():
    config = SiteConfig.from_dict(
        {'domain': 'x.com', 'selectors': {'article': {'title': 'h1', 'content': None}}, 'cleaningRules': None}
    )

    assert config.selectors.article.title == ['h1']
    assert config.selectors.article.content == []
    assert config.cleaning_rules == []


def test_defaults():
    config = SiteConfig(domain='  x.com ')

    assert config.domain == 'x.com'
    assert config.enabled is True
    assert config.priority == 1
    assert config.metadata.encoding == 'utf-8'


def test_usable_needs_a_non_blank_title_or_content_selector():
    assert not SiteConfig.from_dict({'domain': 'x.com'}).is_usable
    assert not SiteConfig.from_dict({'domain': 'x.com', 'selectors': {'article': {'title': ['  ']}}}).is_usable
    assert SiteConfig.from_dict({'domain': 'x.com', 'selectors': {'article': {'content': ['.body']}}}).is_usable


def test_replacement_is_only_serialized_for_replace_rules():
    strip = CleaningRule(type='strip', pattern='x')
    replace = CleaningRule(type='replace', pattern='a+', replacement='b')

    assert strip.model_dump() == {'type': 'strip', 'pattern': 'x', 'description': ''}
    assert replace.model_dump() == {'type': 'replace', 'pattern': 'a+', 'description': '', 'replacement': 'b'}


def test_test_result_response_drops_empty_preview_fields():
    result = SelectorTestResult(success=True, preview=ArticlePreview(title='T', content='C'))

    assert result.to_response() == {'success': True, 'preview': {'title': 'T', 'content': 'C'}}


def test_failed_test_result_response_has_error():
    result = SelectorTestResult(success=False, error='nothing found')

    assert result.to_response() == {'success': False, 'preview': {}, 'error': 'nothing found'}


def test_site_config_is_immutable(site_config):
    with pytest.raises(ValidationError):
        site_config.enabled = False

    assert site_config.model_copy(update={'enabled': False}).enabled is False
    assert site_config.enabled is True
