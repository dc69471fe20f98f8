"""Utility functions for file and directory management in newsel."""

import json
from pathlib import Path

PROJECT_MARKERS = {'.git', 'pyproject.toml', '.newsel', 'requirements.txt'}


def get_project_root() -> Path:
    """Find the project root by searching upwards from the Current Working Directory.

    Stops at the first directory containing a marker file.
    """
    current_path = Path.cwd()

    for parent in [current_path] + list(current_path.parents):
        if any((parent / marker).exists() for marker in PROJECT_MARKERS):
            return parent

    # No markers found (e.g. running in /tmp)
    return current_path


def get_newsel_dir() -> Path:
    """Return the path to the .newsel directory in the project root."""
    return get_project_root() / '.newsel'


def get_config_path() -> Path:
    """Return the default path of the site configuration file."""
    return get_newsel_dir() / 'site-configs.json'


def get_usage_path() -> Path:
    """Return the path to the per-domain usage statistics file."""
    return get_newsel_dir() / 'usage.json'


def get_logs_path() -> Path:
    """Return the path to the logs directory in .newsel."""
    return get_newsel_dir() / 'logs'


def is_initialized() -> bool:
    """Check if the .newsel directory and its config file exist."""
    newsel_dir = get_newsel_dir()
    return newsel_dir.is_dir() and (newsel_dir / 'site-configs.json').exists()


def init_newsel() -> Path:
    """Initialize the .newsel directory and return it.

    Creates the logs directory, an empty site configuration file and a
    .gitignore that keeps generated files out of source control. Existing
    files are left untouched.
    """
    newsel_dir = get_newsel_dir()
    get_logs_path().mkdir(parents=True, exist_ok=True)

    config_file = newsel_dir / 'site-configs.json'
    if not config_file.exists():
        with open(config_file, 'w', encoding='utf-8') as f:
            json.dump({'sites': []}, f, indent=2)

    gitignore = newsel_dir / '.gitignore'
    if not gitignore.exists():
        gitignore.write_text('# Automatically created by newsel\nlogs/\nusage.json\n')

    return newsel_dir


if __name__ == '__main__':
    path = init_newsel()
    print(f'newsel initialized at: {path}')
