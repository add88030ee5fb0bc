"""
Command-line interface for lila-docker

lila-docker {start|stop|restart|down|build|format|gitpod-welcome}
"""

import logging
import sys
from typing import Callable, TypeVar

import click
from pydantic import ValidationError

from .config import LilaDockerConfig, load_config
from .logging_config import setup_logging
from .models import CommandError, LilaDockerError, StartOutcome
from .orchestrator import EnvironmentOrchestrator

logger = logging.getLogger(__name__)

T = TypeVar("T")

GITPOD_BANNER = """\
\033[1;33m
################################################################
#                                                              #
#   Welcome to lila-docker on Gitpod                           #
#                                                              #
#   Start the services with:                                   #
#                                                              #
#       ./lila-docker start                                    #
#                                                              #
#   then open the "Ports" tab and visit port 8080.             #
#                                                              #
################################################################
\033[0m"""


def _exit_with_usage(ctx: click.Context, error: click.UsageError) -> None:
    click.echo(f"Error: {error.format_message()}\n", err=True)
    click.echo(ctx.get_help())
    ctx.exit(1)


class LilaDockerGroup(click.Group):
    """Command group that answers every usage error with help and exit code 1."""

    def parse_args(self, ctx: click.Context, args):
        if not args:
            click.echo(ctx.get_help())
            ctx.exit(1)
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            _exit_with_usage(ctx, e)

    def resolve_command(self, ctx: click.Context, args):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            _exit_with_usage(ctx, e)

    def invoke(self, ctx: click.Context):
        # bad subcommand arguments surface here, from the subcommand's make_context
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            _exit_with_usage(e.ctx or ctx, e)


@click.group(
    cls=LilaDockerGroup,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """
    lila-docker: run a local lichess development environment

    Clones lila, lila-ws and friends into repos/, then builds and runs them
    with Docker Compose.
    """
    try:
        config = load_config()
    except ValidationError as e:
        click.echo(f"❌ Invalid configuration: {e}", err=True)
        sys.exit(1)

    setup_logging(
        log_dir=config.log_dir,
        verbose=config.verbose,
        log_level=config.log_level,
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def _orchestrator(ctx: click.Context) -> EnvironmentOrchestrator:
    config: LilaDockerConfig = ctx.obj["config"]
    return EnvironmentOrchestrator(config)


def _run(action: str, operation: Callable[[], T]) -> T:
    """Run an orchestrator operation, exiting with the failing tool's status."""
    try:
        return operation()
    except CommandError as e:
        logger.debug(f"{action} aborted", exc_info=True)
        click.echo(f"❌ {action} failed: {e}", err=True)
        sys.exit(e.returncode)
    except LilaDockerError as e:
        click.echo(f"❌ {action} failed: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def start(ctx: click.Context) -> None:
    """Start the services, running first-time setup if there are none."""
    outcome = _run("Start", _orchestrator(ctx).start)
    _report_start(outcome)


@cli.command()
@click.pass_context
def stop(ctx: click.Context) -> None:
    """Stop the services without removing any data."""
    _run("Stop", _orchestrator(ctx).stop)
    click.echo("🛑 Services stopped")


@cli.command()
@click.pass_context
def restart(ctx: click.Context) -> None:
    """Stop and then start the services."""
    outcome = _run("Restart", _orchestrator(ctx).restart)
    _report_start(outcome)


@cli.command()
@click.pass_context
def down(ctx: click.Context) -> None:
    """Remove the services and their volumes (deletes the database)."""
    _run("Down", _orchestrator(ctx).down)
    click.echo("🧹 Services and volumes removed")


@cli.command()
@click.pass_context
def build(ctx: click.Context) -> None:
    """Pull and rebuild the images of every profile."""
    _run("Build", _orchestrator(ctx).build)
    click.echo("🎉 All images built successfully!")


@cli.command("format")
@click.pass_context
def format_code(ctx: click.Context) -> None:
    """Run the code formatters on the cloned repositories."""
    results = _run("Format", _orchestrator(ctx).format)
    for result in results:
        if result.ran:
            click.echo(f"✅ {result.target} formatted")
        else:
            click.echo(f"⏭️  {result.target} skipped ({result.message})")


@cli.command("gitpod-welcome")
def gitpod_welcome() -> None:
    """Print the Gitpod welcome message."""
    click.echo(GITPOD_BANNER)


def _report_start(outcome: StartOutcome) -> None:
    if outcome is StartOutcome.SETUP:
        click.echo("🎉 lila-docker is set up, visit http://localhost:8080")
    elif outcome is StartOutcome.RESUMED:
        click.echo("✅ Stopped services resumed")
    else:
        click.echo("There are no stopped services to resume")


def main() -> None:
    cli(prog_name="lila-docker")


if __name__ == "__main__":
    main()
