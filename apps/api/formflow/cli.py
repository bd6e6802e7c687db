"""CLI tools for formflow administration."""

import logging

import click

from formflow.core.config import settings
from formflow.db.session import SessionLocal
from formflow.services.retention_service import RetentionPruner


def _progress(message: str) -> None:
    if message.startswith("Failed"):
        click.secho(message, fg="red")
    elif message.startswith("Preparing"):
        click.secho(message, fg="yellow")
    else:
        click.secho(message, fg="green")


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def cli(log_level: str | None):
    """formflow CLI tools."""
    logging.basicConfig(
        level=log_level or settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


@cli.command()
def prune_incomplete():
    """
    Delete stale incomplete submissions, then trim spam.

    Example:
        formflow prune-incomplete
    """
    with SessionLocal() as db:
        deleted = RetentionPruner(db, settings).prune_incomplete(progress=_progress)
    click.echo(f"✓ Pruned {deleted} submissions")


@cli.command()
def prune_retention():
    """
    Delete submissions older than each form's data-retention window.

    Example:
        formflow prune-retention
    """
    with SessionLocal() as db:
        deleted = RetentionPruner(db, settings).prune_by_retention(progress=_progress)
    click.echo(f"✓ Pruned {deleted} submissions")


@cli.command()
def run_worker():
    """Run the background job worker until interrupted."""
    from formflow.worker import main as worker_main

    worker_main()


if __name__ == "__main__":
    cli()
