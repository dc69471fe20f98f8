from pathlib import Path

import pytest

from newsel.settings import Settings


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv('NEWSEL_CONFIG_FILE', str(tmp_path / 'sites.json'))
    monkeypatch.setenv('NEWSEL_FETCH_TIMEOUT', '12')
    monkeypatch.setenv('NEWSEL_MAX_WORKERS', '2')
    monkeypatch.setenv('NEWSEL_FETCHER', 'smart')
    monkeypatch.delenv('LOGFIRE_TOKEN', raising=False)

    settings = Settings.from_env(dotenv=False)

    assert settings.config_file == tmp_path / 'sites.json'
    assert settings.fetch_timeout == 12
    assert settings.max_workers == 2
    assert settings.fetcher_type == 'smart'
    assert settings.logfire_token is None


def test_defaults_point_into_newsel_dir(monkeypatch):
    for name in ('NEWSEL_CONFIG_FILE', 'NEWSEL_USAGE_FILE', 'NEWSEL_LOG_LEVEL', 'NEWSEL_FETCHER'):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env(dotenv=False)

    assert settings.config_file.name == 'site-configs.json'
    assert settings.usage_file.name == 'usage.json'
    assert settings.log_level == 'INFO'
    assert settings.fetcher_type == 'simple'


@pytest.mark.parametrize(
    'overrides',
    [{'fetch_timeout': 0}, {'max_workers': -1}, {'fetcher_type': 'curl'}],
)
def test_invalid_settings_raise(overrides):
    with pytest.raises(ValueError):
        Settings(config_file=Path('a.json'), usage_file=Path('b.json'), **overrides)
