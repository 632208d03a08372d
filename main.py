#!/usr/bin/env python3
"""
FeedStore - Feed Item Storage
=============================

Management CLI for the feed item database.

Usage:
    python main.py --help                    # Show all commands
    python main.py check-config              # Validate configuration
    python main.py init-db                   # Initialize database
    python main.py show-items --session s1   # Show the next page for a session
    python main.py stats                     # Show item counts and database size
    python main.py purge --yes               # Delete every item
"""

import sys
import asyncio
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from feedstore.config.settings import get_settings
from feedstore.database.schema import DatabaseSchema
from feedstore.database.models import FeedContentType
from feedstore.storage.feed_store import FeedStore
from feedstore.utils.logging import configure_application_logging, get_logger_for_component
from feedstore.utils.exceptions import FeedStoreError, get_user_friendly_message

console = Console()
logger = get_logger_for_component("cli")


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, debug):
    """FeedStore - feed item storage management."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _setup(ctx):
    """Load settings and configure logging for a command."""
    settings = get_settings()
    configure_application_logging(
        log_level="DEBUG" if ctx.obj.get('debug') else settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
    )
    return settings


@cli.command()
@click.pass_context
def check_config(ctx):
    """Validate configuration and environment variables."""
    console.print("[bold blue]🔧 Checking FeedStore Configuration[/bold blue]")

    try:
        settings = get_settings()

        table = Table(title="Configuration Status")
        table.add_column("Component", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Details")

        checks = [
            ("Database", _check_database_config),
            ("Logging", _check_logging_config),
            ("Queries", _check_query_config),
        ]

        all_passed = True
        for name, check_func in checks:
            status, details = check_func(settings)
            table.add_row(name, "✅ Valid" if status else "❌ Invalid", details)
            if not status:
                all_passed = False

        console.print(table)

        if all_passed:
            console.print("[bold green]✅ All configuration checks passed![/bold green]")
        else:
            console.print("[bold red]❌ Configuration validation failed[/bold red]")
            sys.exit(1)

    except FeedStoreError as e:
        logger.error(f"check-config failed: {e}")
        console.print(f"[bold red]❌ Configuration error: {e}[/bold red]")
        sys.exit(1)


@cli.command()
@click.pass_context
def init_db(ctx):
    """Initialize database with schema."""
    console.print("[bold blue]🗄️ Initializing FeedStore Database[/bold blue]")

    try:
        settings = _setup(ctx)
        schema = DatabaseSchema(settings.database.path)
        schema.create_tables()

        if not schema.verify_schema():
            console.print("[bold red]❌ Database schema verification failed[/bold red]")
            sys.exit(1)

        console.print("[bold green]✅ Database initialized successfully![/bold green]")
        store = FeedStore.from_settings(settings)
        try:
            _print_database_info(settings, store.db.get_database_info())
        finally:
            store.db.close_all_connections()

    except FeedStoreError as e:
        logger.error(f"init-db failed: {e}")
        console.print(f"[bold red]❌ Database initialization error: {get_user_friendly_message(e)}[/bold red]")
        sys.exit(1)


@cli.command()
@click.option('--session', default='cli', help='Session token; items shown in it are skipped')
@click.option('--publisher', default=None, help='Restrict to one publisher id')
@click.option('--limit', type=int, default=None, help='Maximum items (default from settings)')
@click.option('--with-image', is_flag=True, help='Only items that carry an image')
@click.option('--content-type', default=FeedContentType.ANY.value,
              help='Content type filter ("any" for no filter)')
@click.option('--all', 'show_all', is_flag=True, help='Show every row, removed items included')
@click.pass_context
def show_items(ctx, session, publisher, limit, with_image, content_type, show_all):
    """Show a page of feed items."""
    console.print("[bold blue]📰 Feed Items[/bold blue]")

    async def load(store):
        if show_all:
            return await store.fetch_all()
        if publisher:
            return await store.fetch_page_for_publisher(
                session, publisher, limit, with_image, content_type
            )
        return await store.fetch_page(session, limit, with_image, content_type)

    try:
        settings = _setup(ctx)
        store = FeedStore.from_settings(settings)
        try:
            items = asyncio.run(load(store))
        finally:
            store.db.close_all_connections()

        if not items:
            console.print("[yellow]⚠️ No items found[/yellow]")
            return

        items_table = Table(title=f"{len(items)} items")
        items_table.add_column("ID", style="cyan")
        items_table.add_column("State")
        items_table.add_column("Title", style="green")
        items_table.add_column("Publisher", style="yellow")
        items_table.add_column("Type")
        items_table.add_column("Published")

        for item in items:
            state = "🗑️" if item.removed else ("●" if item.unread else "○")
            title = item.title[:47] + "..." if len(item.title) > 50 else item.title
            items_table.add_row(
                str(item.id), state, title, item.publisher_name,
                item.content_type, str(item.publish_time),
            )

        console.print(items_table)

    except FeedStoreError as e:
        logger.error(f"show-items failed: {e}")
        console.print(f"[bold red]❌ Error showing items: {e}[/bold red]")
        sys.exit(1)


@cli.command()
@click.pass_context
def stats(ctx):
    """Show item counts and database size."""
    try:
        settings = _setup(ctx)
        store = FeedStore.from_settings(settings)
        try:
            _print_database_info(settings, store.db.get_database_info())
        finally:
            store.db.close_all_connections()
    except FeedStoreError as e:
        logger.error(f"stats failed: {e}")
        console.print(f"[bold red]❌ Error reading stats: {e}[/bold red]")
        sys.exit(1)


@cli.command()
@click.option('--yes', is_flag=True, help='Confirm deleting every item')
@click.pass_context
def purge(ctx, yes):
    """Delete every item from the database."""
    if not yes and not click.confirm("Delete ALL feed items? This cannot be undone"):
        console.print("[yellow]Purge cancelled[/yellow]")
        return

    try:
        settings = _setup(ctx)
        store = FeedStore.from_settings(settings)
        try:
            deleted = asyncio.run(store.delete_all_records())
        finally:
            store.db.close_all_connections()
        console.print(f"[bold green]✅ Deleted {deleted} items[/bold green]")
    except FeedStoreError as e:
        logger.error(f"purge failed: {e}")
        console.print(f"[bold red]❌ Purge error: {e}[/bold red]")
        sys.exit(1)


def _print_database_info(settings, info) -> None:
    info_table = Table(title="Database Information")
    info_table.add_column("Property", style="cyan")
    info_table.add_column("Value", style="green")

    info_table.add_row("Database Path", settings.database.path)
    info_table.add_row("Size", f"{info['database_size_mb']:.2f} MB")
    info_table.add_row("Items", str(info['item_count']))
    info_table.add_row("Removed Items", str(info['removed_count']))
    info_table.add_row("Connection Pool", f"{info['total_connections']} connections")

    console.print(info_table)


# Helper functions for configuration checks
def _check_database_config(settings) -> tuple[bool, str]:
    """Check database configuration."""
    try:
        db_path = Path(settings.database.path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return True, f"Path: {settings.database.path}, Pool: {settings.database.pool_size}"
    except OSError as e:
        return False, str(e)


def _check_logging_config(settings) -> tuple[bool, str]:
    """Check logging configuration."""
    try:
        if settings.logging.file_path:
            log_path = Path(settings.logging.file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
        return True, f"Level: {settings.logging.level.value}, Console: {settings.logging.console_logging}"
    except OSError as e:
        return False, str(e)


def _check_query_config(settings) -> tuple[bool, str]:
    return True, f"Default page size: {settings.query.default_page_size}"


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 FeedStore interrupted by user[/yellow]")
        sys.exit(130)
