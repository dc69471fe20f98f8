import json

import pytest

from newsel.exceptions import ConfigLoadError
from newsel.storage import ConfigFile


def test_save_and_load(tmp_path, site_config):
    config_file = ConfigFile(tmp_path / 'nested' / 'sites.json')

    config_file.save([site_config])
    data = json.loads(config_file.path.read_text(encoding='utf-8'))

    assert list(data) == ['sites']
    assert data['sites'][0]['cleaningRules'][0]['pattern'] == 'PUBLICIDAD'
    assert config_file.load() == [site_config]


def test_missing_file_loads_empty(tmp_path):
    assert ConfigFile(tmp_path / 'none.json').load() == []


def test_bare_list_is_accepted(tmp_path):
    path = tmp_path / 'sites.json'
    path.write_text(json.dumps([{'domain': 'x.com', 'selectors': {'article': {'title': 'h1'}}}]))

    configs = ConfigFile(path).load()

    assert configs[0].selectors.article.title == ['h1']


@pytest.mark.parametrize(
    'content',
    ['{not json', '{"sites": {"domain": "x.com"}}', '{"sites": [{"name": "no domain"}]}'],
)
def test_invalid_files_raise(tmp_path, content):
    path = tmp_path / 'sites.json'
    path.write_text(content)

    with pytest.raises(ConfigLoadError):
        ConfigFile(path).load()
