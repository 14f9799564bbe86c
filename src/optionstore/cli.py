"""Command line access to the options table."""

from __future__ import annotations

from typing import Optional

import click

from .config import BaseConfig
from .logging_config import setup_logging
from .migrations import migration_statements
from .option import Option
from .store import OptionStore


def _store(ctx: click.Context) -> OptionStore:
    return OptionStore.from_config(ctx.obj["config"])


def _raw_option(store: OptionStore, key: str) -> Option[Optional[str]]:
    return store.option(key, Optional[str], resolver=Option.get_or_null)


@click.group()
@click.option("--database-url", envvar="OPTIONSTORE_DATABASE_URL", default=None, help="SQLAlchemy URL")
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str]) -> None:
    """Inspect and edit stored options."""

    config = BaseConfig()
    if database_url:
        config.DATABASE_URL = database_url
    setup_logging(config)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the options table."""

    _store(ctx)
    click.echo("Options table ready.")


@cli.command("get")
@click.argument("key")
@click.pass_context
def get_option(ctx: click.Context, key: str) -> None:
    """Print the stored text for KEY."""

    value = _raw_option(_store(ctx), key).value
    if value is None:
        click.echo(f"Option {key} is not set", err=True)
        ctx.exit(1)
    click.echo(value)


@cli.command("set")
@click.argument("key")
@click.argument("value", required=False)
@click.option("--null", "store_null", is_flag=True, default=False, help="Store NULL instead of a value")
@click.pass_context
def set_option(ctx: click.Context, key: str, value: Optional[str], store_null: bool) -> None:
    """Store VALUE as the text of KEY."""

    if store_null == (value is not None):
        raise click.UsageError("Pass either VALUE or --null.")
    _raw_option(_store(ctx), key).set(None if store_null else value)
    click.echo(f"Option {key} updated.")


@cli.command("migrations")
@click.argument("from_version", type=int)
@click.argument("to_version", type=int)
def show_migrations(from_version: int, to_version: int) -> None:
    """Print the schema statements between two versions."""

    try:
        statements = migration_statements(from_version, to_version)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    for statement in statements:
        click.echo(f"{statement};")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":  # pragma: no cover
    main()
