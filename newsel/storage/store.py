"""In-memory registry of site configurations."""

import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from newsel.models import SiteConfig
from newsel.utils.domains import match_length, normalize_domain


def _sorted_mapping(configs: Iterable[SiteConfig]) -> Mapping[str, SiteConfig]:
    ordered = sorted(configs, key=lambda config: (config.priority, config.domain))
    return MappingProxyType({config.domain: config for config in ordered})


class SiteConfigStore:
    """Maps normalized domains to site configurations.

    Writers build a new mapping under a lock and swap the reference, so
    readers always see a complete snapshot without locking. Iteration order is
    priority ascending, then domain.
    """

    def __init__(self, configs: Iterable[SiteConfig] = ()):
        """Initialize the store.

        Args:
            configs: Initial configurations. Their domains must already be normalized.

        """
        self._lock = threading.Lock()
        self._configs: Mapping[str, SiteConfig] = _sorted_mapping(configs)

    def __len__(self) -> int:
        """Return the number of stored configurations."""
        return len(self._configs)

    def __contains__(self, domain: object) -> bool:
        """Check if a configuration exists for a domain."""
        return isinstance(domain, str) and normalize_domain(domain) in self._configs

    def get(self, domain: str) -> SiteConfig | None:
        """Return the configuration stored under a domain (normalized first)."""
        return self._configs.get(normalize_domain(domain))

    def all(self, enabled_only: bool = False) -> list[SiteConfig]:
        """Return configurations ordered by priority.

        Args:
            enabled_only: Leave out disabled configurations

        """
        configs = list(self._configs.values())
        if enabled_only:
            configs = [config for config in configs if config.enabled]
        return configs

    def find_for_url(self, url: str, enabled_only: bool = True) -> SiteConfig | None:
        """Find the configuration that applies to a URL.

        The most specific domain key wins ('site.cl/deportes' over 'site.cl').
        Equally specific keys are broken by priority.

        Args:
            url: Listing or article URL
            enabled_only: Ignore disabled configurations. Defaults to True.

        Returns:
            The matching configuration, or None.

        """
        best: SiteConfig | None = None
        best_length = 0
        # snapshot is already in priority order, so the first of equal length wins
        for config in self.all(enabled_only=enabled_only):
            length = match_length(config.domain, url)
            if length is not None and length > best_length:
                best, best_length = config, length
        return best

    def put(self, config: SiteConfig) -> None:
        """Insert or replace a configuration."""
        with self._lock:
            configs = dict(self._configs)
            configs[config.domain] = config
            self._configs = _sorted_mapping(configs.values())

    def replace_all(self, configs: Iterable[SiteConfig]) -> None:
        """Replace every configuration at once."""
        with self._lock:
            self._configs = _sorted_mapping(configs)

    def snapshot(self) -> Mapping[str, SiteConfig]:
        """Return the current read-only mapping."""
        return self._configs
