"""Reads and writes the site configuration JSON file."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from newsel.exceptions import ConfigLoadError
from newsel.models import SiteConfig


class ConfigFile:
    """JSON file holding ``{"sites": [SiteConfig, ...]}``.

    Attributes:
        path: Location of the file
        logger: Module logger

    """

    def __init__(self, path: str | Path):
        """Initialize the config file wrapper.

        Args:
            path: Location of the JSON file. It does not need to exist yet.

        """
        self.path = Path(path)
        self.logger = logging.getLogger(__name__)

    def exists(self) -> bool:
        """Check if the file exists."""
        return self.path.exists()

    def load(self) -> list[SiteConfig]:
        """Load every stored configuration.

        Returns:
            Configurations in file order; empty if the file does not exist.

        Raises:
            ConfigLoadError: If the file is not valid JSON or a site entry is invalid.

        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, encoding='utf-8') as f:
                data: Any = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigLoadError(f'Could not read {self.path}: {e}') from e

        sites = data.get('sites') if isinstance(data, dict) else data
        if not isinstance(sites, list):
            raise ConfigLoadError(f'{self.path} must contain a "sites" array')

        configs = []
        for position, entry in enumerate(sites):
            try:
                configs.append(SiteConfig.from_dict(entry))
            except ValidationError as e:
                raise ConfigLoadError(f'Invalid site entry #{position + 1} in {self.path}: {e}') from e

        self.logger.debug(f'Loaded {len(configs)} site configs from {self.path}')
        return configs

    def save(self, configs: list[SiteConfig]) -> Path:
        """Write every configuration, replacing the file atomically.

        Args:
            configs: Configurations to store

        Returns:
            Path of the written file.

        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {'sites': [config.to_dict() for config in configs]}

        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix='.site-configs-', suffix='.json')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
                f.write('\n')
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        self.logger.debug(f'Saved {len(configs)} site configs to {self.path}')
        return self.path
