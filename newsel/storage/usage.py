"""Per-domain usage statistics for site configurations.

Stores everything in a single usage.json file.
"""

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

MAX_ERROR_LENGTH = 1000


def confidence_for(success_count: int, usage_count: int) -> float:
    """Confidence score derived from the success rate, between 0.5 and 1.0."""
    if usage_count <= 0:
        return 0.5
    rate = success_count / usage_count
    return min(0.5 + rate * 0.5, 1.0)


class UsageTracker:
    """Tracks how often each site configuration is used and how often it works.

    Attributes:
        tracking_file: Path to the JSON file storing usage data

    """

    def __init__(self, tracking_file: str | Path):
        """Initialize the tracker.

        Args:
            tracking_file: Path to the JSON file. Created on first write.

        """
        self.tracking_file = Path(tracking_file)
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

    def _load_data(self) -> dict[str, Any]:
        if not self.tracking_file.exists():
            return {}
        try:
            with open(self.tracking_file, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.warning(f'Ignoring unreadable usage file {self.tracking_file}: {e}')
            return {}
        return data if isinstance(data, dict) else {}

    def _save_data(self, data: dict[str, Any]) -> None:
        self.tracking_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.tracking_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def record(self, domain: str, success: bool, error: str | None = None) -> dict[str, Any]:
        """Record one use of a configuration.

        Args:
            domain: Configuration domain
            success: Whether the run produced articles
            error: Error message of a failed run

        Returns:
            Updated statistics for the domain.

        """
        with self._lock:
            data = self._load_data()
            stats = data.setdefault(
                domain,
                {'usage_count': 0, 'success_count': 0, 'failure_count': 0, 'last_error': None},
            )

            now = datetime.now(timezone.utc).isoformat()
            stats['usage_count'] += 1
            if success:
                stats['success_count'] += 1
                stats['last_success'] = now
                stats['last_error'] = None
            else:
                stats['failure_count'] += 1
                stats['last_error'] = (error or 'unknown error')[:MAX_ERROR_LENGTH]

            stats['last_used'] = now
            stats['confidence'] = round(confidence_for(stats['success_count'], stats['usage_count']), 4)

            self._save_data(data)
            return dict(stats)

    def get_stats(self, domain: str) -> dict[str, Any] | None:
        """Get statistics for one domain, or None if it was never used."""
        return self._load_data().get(domain)

    def get_all_stats(self) -> dict[str, dict[str, Any]]:
        """Get statistics for every tracked domain."""
        return self._load_data()

    def reset(self, domain: str | None = None) -> None:
        """Reset statistics for one domain, or for all when domain is None."""
        with self._lock:
            if domain is None:
                self._save_data({})
                return
            data = self._load_data()
            if data.pop(domain, None) is not None:
                self._save_data(data)

    def print_stats(self, console: Console) -> None:
        """Print statistics as a table, most used domains first."""
        data = self._load_data()
        if not data:
            console.print('[warning]No usage data yet.[/warning]')
            return

        table = Table(title='Site usage')
        table.add_column('Domain', style='cyan')
        table.add_column('Runs', justify='right')
        table.add_column('OK', justify='right', style='green')
        table.add_column('Failed', justify='right', style='red')
        table.add_column('Confidence', justify='right')
        table.add_column('Last error', overflow='fold')

        for domain, stats in sorted(data.items(), key=lambda item: item[1].get('usage_count', 0), reverse=True):
            table.add_row(
                domain,
                str(stats.get('usage_count', 0)),
                str(stats.get('success_count', 0)),
                str(stats.get('failure_count', 0)),
                f'{stats.get("confidence", 0.5):.2f}',
                (stats.get('last_error') or '')[:80],
            )

        console.print(table)
