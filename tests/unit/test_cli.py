import json

import pytest

from newsel.cli import main
from newsel.models import FetchResult


@pytest.fixture
def project(monkeypatch, tmp_path, mocker):
    (tmp_path / 'pyproject.toml').touch()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('NEWSEL_CONFIG_FILE', str(tmp_path / 'sites.json'))
    monkeypatch.setenv('NEWSEL_USAGE_FILE', str(tmp_path / 'usage.json'))
    monkeypatch.setenv('NEWSEL_FETCHER', 'simple')
    mocker.patch('newsel.cli.setup_local_logging')
    mocker.patch('newsel.cli.setup_logfire')
    return tmp_path


@pytest.fixture
def config_path(project, site_config_data):
    path = project / 'example.json'
    path.write_text(json.dumps(site_config_data), encoding='utf-8')
    return path


def stored(project):
    return json.loads((project / 'sites.json').read_text(encoding='utf-8'))['sites']


def test_add_list_and_disable(project, config_path):
    assert main(['add', str(config_path)]) == 0
    assert [site['domain'] for site in stored(project)] == ['example.com']

    assert main(['list']) == 0
    assert main(['disable', 'example.com']) == 0
    assert stored(project)[0]['enabled'] is False


def test_add_duplicate_fails(project, config_path, site_config_data):
    assert main(['add', str(config_path)]) == 0
    config_path.write_text(json.dumps({**site_config_data, 'name': 'Otro'}), encoding='utf-8')

    assert main(['add', str(config_path)]) == 1
    assert main(['add', str(config_path), '--update']) == 0
    assert stored(project)[0]['name'] == 'Otro'


def test_show_unknown_domain_fails(project):
    assert main(['show', 'nowhere.cl']) == 1


def test_test_command_uses_live_page(project, config_path, mocker, article_html):
    fetcher = mocker.Mock()
    fetcher.fetch.return_value = FetchResult(url='https://example.com/a', html=article_html, status_code=200)
    mocker.patch('newsel.services.config_service.create_fetcher', return_value=fetcher)

    assert main(['test', 'https://example.com/a', '--config', str(config_path), '--method', 'article']) == 0
    assert not (project / 'sites.json').exists() or stored(project) == []


def test_import_command(project, site_config_data):
    path = project / 'bulk.json'
    path.write_text(json.dumps({'sites': [site_config_data, {'domain': 'vacio.cl'}]}), encoding='utf-8')

    assert main(['import', str(path)]) == 0
    assert [site['domain'] for site in stored(project)] == ['example.com']


def test_missing_input_file(project):
    assert main(['add', str(project / 'nope.json')]) == 1


def test_test_command_checks_listing_pages(project, config_path, mocker, listing_html):
    fetcher = mocker.Mock()
    fetcher.fetch.return_value = FetchResult(url='https://example.com/politica', html=listing_html, status_code=200)
    mocker.patch('newsel.services.config_service.create_fetcher', return_value=fetcher)

    assert main(['test', 'https://example.com/politica', '--config', str(config_path)]) == 0


def test_test_command_with_malformed_config(project, mocker):
    mocker.patch('newsel.services.config_service.create_fetcher')
    path = project / 'bad.json'
    path.write_text(json.dumps({'selectors': {'article': {'title': ['h1']}}, 'priority': 'high'}), encoding='utf-8')

    assert main(['test', 'https://example.com/a', '--config', str(path)]) == 1


@pytest.mark.parametrize('limit', ['0', '-3'])
def test_scrape_limit_must_be_positive(project, limit):
    with pytest.raises(SystemExit) as exc_info:
        main(['scrape', 'https://example.com/politica', '--limit', limit])

    assert exc_info.value.code == 2
