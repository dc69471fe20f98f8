"""
cli.py
======
Command line entry point for managing site configurations and scraping.

Usage:
    newsel list                                  # List stored site configs
    newsel show <domain>                         # Show one config as JSON
    newsel add <config.json> --test-url <url>    # Validate, test and save a config
    newsel import <sites.json>                   # Bulk import configs
    newsel enable|disable <domain>               # Soft toggle a config
    newsel test <url> --config <config.json>     # Dry run selectors against a page
    newsel scrape <listing_url> [...]            # Scrape listing pages
    newsel stats                                 # Show usage statistics
"""

import argparse
import json
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from newsel.core.pipeline import PIPELINE_THEME, ScrapePipeline
from newsel.exceptions import ConfigError, NewselError, SelectorValidationFailedError
from newsel.models import ScrapeReport, SelectorTestResult, SiteConfig
from newsel.services import ConfigPersistenceService
from newsel.services.config_service import TEST_METHODS
from newsel.settings import FETCHER_TYPES, Settings
from newsel.storage import UsageTracker
from newsel.utils.files import init_newsel
from newsel.utils.logging import setup_local_logging, setup_logfire


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per action."""
    parser = argparse.ArgumentParser(prog='newsel', description='Scrape news sites with curated CSS selector chains')
    parser.add_argument('--log-level', help='Log level for the local log file (default: NEWSEL_LOG_LEVEL or INFO)')
    commands = parser.add_subparsers(dest='command', required=True)

    list_cmd = commands.add_parser('list', help='List stored site configs')
    list_cmd.add_argument('--enabled', action='store_true', help='Only show enabled configs')

    show_cmd = commands.add_parser('show', help='Show one site config')
    show_cmd.add_argument('domain')

    add_cmd = commands.add_parser('add', help='Validate and save a site config from a JSON file')
    add_cmd.add_argument('file')
    add_cmd.add_argument('--test-url', help='Article URL to test the selectors against before saving')
    add_cmd.add_argument('--update', action='store_true', help='Replace an existing config for the same domain')

    import_cmd = commands.add_parser('import', help='Import site configs in bulk')
    import_cmd.add_argument('file')
    import_cmd.add_argument('--update', action='store_true', help='Replace existing configs')

    for name in ('enable', 'disable'):
        toggle = commands.add_parser(name, help=f'{name.capitalize()} a site config')
        toggle.add_argument('domain')

    test_cmd = commands.add_parser('test', help='Run selectors against a page without saving')
    test_cmd.add_argument('url')
    test_cmd.add_argument('--config', required=True, help='JSON file with a site config or a selector set')
    test_cmd.add_argument(
        '--method',
        choices=TEST_METHODS,
        default='auto',
        help='Selectors to test (default: listing selectors when configured, else article selectors)',
    )

    scrape_cmd = commands.add_parser('scrape', help='Scrape listing pages of configured sites')
    scrape_cmd.add_argument('urls', nargs='+')
    scrape_cmd.add_argument('--limit', type=positive_int, help='Maximum articles per listing page')
    scrape_cmd.add_argument('--fetcher', choices=FETCHER_TYPES, help='HTML fetcher to use')

    commands.add_parser('stats', help='Show per-site usage statistics')
    return parser


def positive_int(value: str) -> int:
    """Argparse type for counts that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f'must be at least 1, got {number}')
    return number


def _read_json(path: str) -> dict:
    with open(path, encoding='utf-8') as f:
        return json.load(f)


def print_configs(console: Console, configs: list[SiteConfig]) -> None:
    """Print site configs as a table."""
    if not configs:
        console.print('[warning]No site configs stored[/warning]')
        return

    table = Table(title='Site configs')
    table.add_column('Domain', style='cyan')
    table.add_column('Name')
    table.add_column('Priority', justify='right')
    table.add_column('Enabled')
    table.add_column('Title / content selectors', justify='right')

    for config in configs:
        article = config.selectors.article
        table.add_row(
            config.domain,
            config.name,
            str(config.priority),
            '[success]yes[/success]' if config.enabled else '[danger]no[/danger]',
            f'{len(article.title)} / {len(article.content)}',
        )

    console.print(table)
    console.print(f'\n[success]Total: {len(configs)}[/success]')


def print_test_result(console: Console, result: SelectorTestResult) -> None:
    """Print a selector test run with its per-field report."""
    style = 'success' if result.success else 'danger'
    console.print(Panel(json.dumps(result.to_response(), indent=2, ensure_ascii=False), style=style, title='Preview'))

    for name, field in result.fields.items():
        if field.resolved:
            console.print(f'  [success]✓ {name}[/success]: candidate #{(field.index or 0) + 1} ({field.selector})')
        else:
            console.print(f'  [danger]✗ {name}[/danger]: no candidate matched')
        for failure in field.failed_selectors:
            detail = f' ({failure.detail})' if failure.detail else ''
            console.print(f'      → #{failure.index + 1} "{failure.selector}": {failure.reason}{detail}')

    if result.listing:
        console.print(f'\n[info]{len(result.listing)} listing candidates found[/info]')
        for candidate in result.listing[:10]:
            console.print(f'  • {candidate.preview_title or "(no title)"} → {candidate.url}')


def print_report(console: Console, report: ScrapeReport) -> None:
    """Print a scrape report summary."""
    if report.error and not report.articles:
        console.print(f'[danger]✗ {report.listing_url}: {report.error}[/danger]')
        return

    table = Table(title=f'{report.domain}: {len(report.articles)}/{report.candidates_found} articles')
    table.add_column('Title', overflow='fold')
    table.add_column('Date')
    table.add_column('Chars', justify='right')
    for article in report.articles:
        table.add_row(article.title or '(no title)', article.date or '', f'{len(article.content):,}')
    console.print(table)

    for failure in report.failures:
        console.print(f'  [warning]⚠ {failure.url}: {failure.error_type}: {failure.message}[/warning]')


def run(args: argparse.Namespace, settings: Settings, console: Console) -> int:  # noqa: C901
    """Execute a parsed command and return the exit code."""
    if args.command == 'stats':
        UsageTracker(settings.usage_file).print_stats(console)
        return 0

    service = ConfigPersistenceService.from_settings(settings, console=console)

    if args.command == 'list':
        print_configs(console, service.list_configs(enabled_only=args.enabled))

    elif args.command == 'show':
        config = service.get_config(args.domain)
        console.print_json(json.dumps(config.to_dict(), ensure_ascii=False))

    elif args.command == 'add':
        try:
            config = service.save_config(_read_json(args.file), test_url=args.test_url, update=args.update)
        except SelectorValidationFailedError as e:
            console.print(f'[danger]✗ {e}[/danger]')
            if isinstance(e.report, SelectorTestResult):
                print_test_result(console, e.report)
            return 1
        console.print(f'[success]✓ Saved config for {config.domain}[/success]')

    elif args.command == 'import':
        result = service.import_configs(args.file, update=args.update)
        console.print(f'[success]✓ Imported {len(result["imported"])} sites[/success]')
        for key, message in result['failed'].items():
            console.print(f'  [warning]⚠ {key}: {message}[/warning]')
        return 1 if result['failed'] and not result['imported'] else 0

    elif args.command in ('enable', 'disable'):
        config = service.set_enabled(args.domain, args.command == 'enable')
        console.print(f'[success]✓ {config.domain} is now {args.command}d[/success]')

    elif args.command == 'test':
        data = _read_json(args.config)
        if 'selectors' in data:
            config = SiteConfig.from_dict({'domain': data.get('domain') or args.url, **data})
            result = service.test_selectors(args.url, config.selectors, config.cleaning_rules, method=args.method)
        else:
            result = service.test_selectors(args.url, data, method=args.method)
        print_test_result(console, result)
        return 0 if result.success else 1

    elif args.command == 'scrape':
        pipeline = ScrapePipeline(
            service.store,
            fetcher_type=args.fetcher or settings.fetcher_type,
            tracker=UsageTracker(settings.usage_file),
            console=console,
            max_workers=settings.max_workers,
            fetch_timeout=settings.fetch_timeout,
        )
        if len(args.urls) == 1:
            reports = [pipeline.scrape(args.urls[0], limit=args.limit)]
        else:
            reports = pipeline.scrape_many(args.urls, limit=args.limit)
        for report in reports:
            print_report(console, report)
        return 0 if any(report.success for report in reports) else 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    console = Console(theme=PIPELINE_THEME)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        console.print(f'[danger]Invalid settings: {e}[/danger]')
        return 2

    init_newsel()
    setup_local_logging(args.log_level or settings.log_level)
    setup_logfire(settings.logfire_token)

    try:
        return run(args, settings, console)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f'[danger]Could not read input: {e}[/danger]')
        return 1
    except ConfigError as e:
        console.print(f'[danger]✗ {e}[/danger]')
        return 1
    except ValidationError as e:
        console.print(f'[danger]✗ Invalid config: {e}[/danger]')
        return 1
    except NewselError as e:
        console.print(f'[danger]Error: {e}[/danger]')
        return 1


if __name__ == '__main__':
    sys.exit(main())
