"""Main CLI entry point for the Trello to Asana Migration Tool."""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)
from rich.table import Table

from .. import __version__
from ..config.config import Config
from ..migration.engine import MigrationEngine
from ..migration.exceptions import MigrationCancelled
from ..migration.orchestrator import MigrationPlan, MigrationSummary
from ..utils.logging import setup_logging

console = Console()

DEFAULT_CONFIG = 'config.json'


@click.command()
@click.version_option(version=__version__, prog_name='trello-asana-migrate')
@click.argument(
    'files',
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False),
)
@click.option(
    '--config',
    '-c',
    'config_path',
    default=DEFAULT_CONFIG,
    show_default=True,
    type=click.Path(dir_okay=False),
    help='Path to configuration file (JSON or YAML)',
)
@click.option(
    '--only-members',
    '-m',
    is_flag=True,
    help='List Trello and Asana members without migrating anything',
)
@click.option(
    '--append',
    '-a',
    is_flag=True,
    help='Append tasks when a project with the same name exists',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose logging',
)
@click.option(
    '--log-file',
    type=click.Path(dir_okay=False),
    default=None,
    help='Also write logs to this file',
)
def cli(
    files: tuple,
    config_path: str,
    only_members: bool,
    append: bool,
    verbose: bool,
    log_file: Optional[str],
) -> None:
    """Import Asana projects from Trello board JSON exports."""
    # Setup basic logging first (will be enhanced later with config)
    setup_logging('DEBUG' if verbose else 'INFO', log_file=log_file)

    console.print(
        Panel.fit(
            '[bold blue]Trello to Asana Migration Tool[/bold blue]\n'
            f'Importing {len(files)} board export(s)...',
            border_style='blue',
        )
    )

    try:
        config = _load_config(config_path)
        _setup_logging_with_config(config, verbose, log_file)

        plan = MigrationPlan(
            files=list(files), append=append, only_members=only_members
        )
        summary = asyncio.run(_run_migration(config, plan))

    except MigrationCancelled as cancelled:
        _display_listings(cancelled)
        return
    except Exception as e:
        logger.error(f'Migration failed: {e}')
        console.print(f'[red]✗[/red] Migration failed: {escape(str(e))}')
        if verbose:
            console.print_exception()
        sys.exit(1)

    console.print('[green]✓[/green] Migration completed successfully')
    _display_migration_summary(summary)


def _load_config(config_path: str) -> Config:
    """Load configuration from file, or the environment when no default file exists."""
    if Path(config_path).exists():
        return Config.from_file(config_path)

    if config_path != DEFAULT_CONFIG:
        raise FileNotFoundError(f'Configuration file not found: {config_path}')

    try:
        return Config.from_env()
    except Exception:
        raise FileNotFoundError(
            f'No configuration found. Create {DEFAULT_CONFIG}, pass --config, '
            'or set ASANA_PERSONAL_ACCESS_TOKEN, TRELLO_KEY and TRELLO_TOKEN.'
        ) from None


def _setup_logging_with_config(
    config: Config, verbose: bool, log_file: Optional[str]
) -> None:
    """Setup logging with configuration from config file."""
    # The verbose flag and --log-file override the config file
    log_level = 'DEBUG' if verbose else config.logging.level
    setup_logging(
        level=log_level,
        log_file=log_file or config.logging.file,
        log_format=config.logging.format,
    )


async def _run_migration(config: Config, plan: MigrationPlan) -> MigrationSummary:
    """Run the migration with a per-file progress bar."""
    engine = MigrationEngine(config)

    with Progress(
        SpinnerColumn(),
        TextColumn('[progress.description]{task.description}'),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task('[blue]Preparing...', total=len(plan.files))

        def update_progress(current: int, total: int, description: str) -> None:
            progress.update(
                task,
                completed=current,
                total=total,
                description=f'[blue]{description}',
            )

        return await engine.migrate(plan, progress_callback=update_progress)


def _display_listings(cancelled: MigrationCancelled) -> None:
    """Show the choices that stopped the run."""
    console.print(f'[yellow]{escape(str(cancelled))}[/yellow]')

    for listing in cancelled.listings:
        table = Table(title=listing.title)
        for column in listing.columns:
            table.add_column(column, style='cyan' if column in ('id', 'gid') else 'green')
        for row in listing.rows:
            table.add_row(*(escape(cell) for cell in row))
        console.print(table)


def _display_migration_summary(summary: MigrationSummary) -> None:
    """Display migration summary results."""
    table = Table(title='Migration Summary')
    table.add_column('File', style='cyan')
    table.add_column('Project', style='blue')
    table.add_column('Sections', style='green')
    table.add_column('Tags', style='green')
    table.add_column('Tasks', style='green')
    table.add_column('Subtasks', style='green')
    table.add_column('Comments', style='green')
    table.add_column('Attachments', style='yellow')

    for result in summary.results:
        project = result.project_name or '-'
        if result.appended:
            project += ' (appended)'
        table.add_row(
            Path(result.source).name,
            project,
            f'{result.sections_created} new / {result.sections_reused} reused',
            f'{result.tags_created} new / {result.tags_reused} reused',
            f'{result.tasks_created} new / {result.tasks_reused} reused',
            str(result.subtasks_created),
            str(result.comments_created),
            f'{result.attachments_uploaded} ok / {result.attachments_failed} failed',
        )

    console.print(table)

    if summary.completed_at:
        duration = summary.completed_at - summary.started_at
        console.print(f'\n[blue]Migration Duration:[/blue] {duration}')

    warnings = summary.warnings
    if warnings:
        console.print(f'\n[yellow]Warnings ({len(warnings)}):[/yellow]')
        for warning in warnings[:5]:  # Show first 5 warnings
            console.print(f'  • {escape(warning)}')
        if len(warnings) > 5:
            console.print(f'  ... and {len(warnings) - 5} more warnings')


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print('\n[red]Migration interrupted by user[/red]')
        sys.exit(1)


if __name__ == '__main__':
    main()
