import json
from pathlib import Path

import newsel.utils.files
from newsel.utils.files import get_config_path, get_project_root, init_newsel, is_initialized


def test_get_project_root(monkeypatch, tmp_path):
    # Create a dummy project structure
    project_root = tmp_path / 'project'
    project_root.mkdir()
    (project_root / 'pyproject.toml').touch()

    sub_dir = project_root / 'src' / 'deep' / 'dir'
    sub_dir.mkdir(parents=True)

    # Mock Path.cwd() to simulate being in the sub_dir
    monkeypatch.setattr(Path, 'cwd', lambda: sub_dir)

    root = get_project_root()
    assert root == project_root


def test_get_project_root_default(monkeypatch, tmp_path):
    # Fallback to CWD if no markers found
    monkeypatch.setattr(Path, 'cwd', lambda: tmp_path)

    assert get_project_root() == tmp_path


def test_init_newsel(monkeypatch, tmp_path):
    project_root = tmp_path / 'project'
    project_root.mkdir()
    (project_root / 'pyproject.toml').touch()
    monkeypatch.setattr(newsel.utils.files, 'get_project_root', lambda: project_root)

    assert not is_initialized()

    newsel_dir = init_newsel()

    assert is_initialized()
    assert newsel_dir == project_root / '.newsel'
    assert (newsel_dir / 'logs').is_dir()
    assert get_config_path() == newsel_dir / 'site-configs.json'
    assert json.loads(get_config_path().read_text()) == {'sites': []}
    assert 'usage.json' in (newsel_dir / '.gitignore').read_text()


def test_init_newsel_keeps_existing_configs(monkeypatch, tmp_path):
    monkeypatch.setattr(newsel.utils.files, 'get_project_root', lambda: tmp_path)
    config_file = tmp_path / '.newsel' / 'site-configs.json'
    config_file.parent.mkdir()
    config_file.write_text('{"sites": [{"domain": "x.com"}]}')

    init_newsel()

    assert json.loads(config_file.read_text()) == {'sites': [{'domain': 'x.com'}]}
