"""Runtime settings for newsel, read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from newsel.utils.files import get_config_path, get_usage_path

FETCHER_TYPES = ('simple', 'playwright', 'smart')


@dataclass
class Settings:
    """Settings shared by the CLI, the services and the scrape pipeline.

    Attributes:
        config_file: JSON file holding the site configurations
        usage_file: JSON file holding per-domain usage statistics
        log_level: Level for the local log file
        fetch_timeout: Seconds before a page fetch gives up
        max_workers: Sites scraped in parallel by scrape_many
        fetcher_type: Default fetcher ('simple', 'playwright' or 'smart')
        logfire_token: Optional logfire write token

    """

    config_file: Path
    usage_file: Path
    log_level: str = 'INFO'
    fetch_timeout: int = 30
    max_workers: int = 4
    fetcher_type: str = 'simple'
    logfire_token: str | None = None

    def __post_init__(self) -> None:
        """Validate settings after initialization.

        Raises:
            ValueError: If a numeric setting is not positive or the fetcher is unknown.

        """
        self.config_file = Path(self.config_file)
        self.usage_file = Path(self.usage_file)
        if self.fetch_timeout <= 0:
            raise ValueError(f'fetch_timeout must be positive, got {self.fetch_timeout}')
        if self.max_workers <= 0:
            raise ValueError(f'max_workers must be positive, got {self.max_workers}')
        if self.fetcher_type not in FETCHER_TYPES:
            raise ValueError(f'Unknown fetcher type: {self.fetcher_type}. Choose from: {list(FETCHER_TYPES)}')

    @classmethod
    def from_env(cls, dotenv: bool = True) -> 'Settings':
        """Build settings from NEWSEL_* environment variables.

        Args:
            dotenv: Load a .env file first. Defaults to True.

        """
        if dotenv:
            load_dotenv()

        return cls(
            config_file=Path(os.getenv('NEWSEL_CONFIG_FILE') or get_config_path()),
            usage_file=Path(os.getenv('NEWSEL_USAGE_FILE') or get_usage_path()),
            log_level=os.getenv('NEWSEL_LOG_LEVEL', 'INFO'),
            fetch_timeout=int(os.getenv('NEWSEL_FETCH_TIMEOUT', '30')),
            max_workers=int(os.getenv('NEWSEL_MAX_WORKERS', '4')),
            fetcher_type=os.getenv('NEWSEL_FETCHER', 'simple'),
            logfire_token=os.getenv('LOGFIRE_TOKEN'),
        )
