"""Command line entry point for Appcast Notifier.

Wires settings, the feed client and the update checker together and
exposes them as the `appcast-notifier` command.
"""

import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

import click

from appcast_notifier import __version__
from appcast_notifier.config.paths import get_log_file_path
from appcast_notifier.config.settings import SettingsManager, SettingsStore
from appcast_notifier.updater.checker import (
    CheckOutcome,
    OutcomeKind,
    UpdateChecker,
    is_check_due,
    next_check_time,
)
from appcast_notifier.updater.feed_client import FeedClient
from appcast_notifier.updater.notifications import LoggingNotifier
from appcast_notifier.updater.version import compare_versions
from appcast_notifier.utils.logging import get_logger, setup_logging
from appcast_notifier.utils.threading import CheckWorker
from appcast_notifier.utils.validators import (
    validate_check_interval,
    validate_feed_url,
    validate_version,
)

logger = get_logger("appcast_notifier.main")


# Exit codes of the check command
EXIT_NO_UPDATE = 0
EXIT_ERROR = 1
EXIT_UPDATE_AVAILABLE = 10

EXIT_CODES = {
    OutcomeKind.NO_UPDATE: EXIT_NO_UPDATE,
    OutcomeKind.UPDATE_AVAILABLE: EXIT_UPDATE_AVAILABLE,
    OutcomeKind.ERROR: EXIT_ERROR,
}


def _settings_manager(ctx: click.Context) -> SettingsManager:
    """Get or create the settings manager for this invocation."""
    if ctx.obj.get("_settings_manager") is None:
        ctx.obj["_settings_manager"] = SettingsManager(ctx.obj["config_path"])
    return ctx.obj["_settings_manager"]


def _format_time(timestamp: int) -> str:
    if not timestamp:
        return "never"
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def _echo_outcome(outcome: CheckOutcome) -> None:
    if outcome.kind == OutcomeKind.UPDATE_AVAILABLE:
        entry = outcome.entry
        click.echo(f"Update available: {entry.display_version}")
        if entry.title.strip():
            click.echo(f"  Title: {entry.title.strip()}")
        click.echo(f"  Download: {entry.download_url}")
        if entry.release_notes_url.strip():
            click.echo(f"  Release notes: {entry.release_notes_url.strip()}")
    elif outcome.kind == OutcomeKind.NO_UPDATE:
        click.echo("No update available.")
    else:
        click.echo(f"Update check failed: {outcome.reason}", err=True)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default: platform settings location)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Log file (default: logs/app.log in the data directory)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__, prog_name="appcast-notifier")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    log_file: Optional[Path],
    verbose: bool
) -> None:
    """Appcast Notifier - check an appcast feed for application updates."""
    ctx.ensure_object(dict)
    setup_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        log_file=log_file or get_log_file_path(),
    )

    ctx.obj["config_path"] = config_path
    ctx.obj["_settings_manager"] = None


@cli.command()
@click.option("--manual", is_flag=True, help="Bypass caches and show skipped versions")
@click.option("--feed-url", default=None, help="Appcast URL (overrides settings)")
@click.option("--app-version", default=None, help="Running version (overrides settings)")
@click.option("--timeout", type=int, default=None, help="Request timeout in seconds")
@click.pass_context
def check(
    ctx: click.Context,
    manual: bool,
    feed_url: Optional[str],
    app_version: Optional[str],
    timeout: Optional[int]
) -> None:
    """Check the appcast for a newer release."""
    if feed_url is not None:
        valid, error = validate_feed_url(feed_url)
        if not valid:
            raise click.BadParameter(error, param_hint="--feed-url")

    manager = _settings_manager(ctx)
    store = SettingsStore(manager, appcast_url=feed_url, app_version=app_version)
    notifier = LoggingNotifier()

    with FeedClient(timeout=timeout or manager.settings.request_timeout) as client:
        if manual:
            checker = UpdateChecker.manual(store, client, notifier)
        else:
            checker = UpdateChecker.automatic(store, client, notifier)

        worker = CheckWorker(checker)
        worker.start()
        outcome = worker.wait_outcome()

    _echo_outcome(outcome)
    ctx.exit(EXIT_CODES[outcome.kind])


@cli.command()
@click.argument("version_a")
@click.argument("version_b")
def compare(version_a: str, version_b: str) -> None:
    """Compare two versions: prints -1, 0 or 1."""
    click.echo(compare_versions(version_a, version_b))


@cli.command()
@click.argument("version")
@click.pass_context
def skip(ctx: click.Context, version: str) -> None:
    """Stop automatic checks from reporting VERSION."""
    valid, error = validate_version(version)
    if not valid:
        raise click.BadParameter(error, param_hint="VERSION")

    SettingsStore(_settings_manager(ctx)).write_skip_preference(version)
    logger.info(f"Skipping version {version}")
    click.echo(f"Version {version} will be skipped by automatic checks.")


@cli.command()
@click.pass_context
def unskip(ctx: click.Context) -> None:
    """Clear the skipped version."""
    SettingsStore(_settings_manager(ctx)).clear_skip_preference()
    click.echo("No version is skipped.")


@cli.command()
@click.option("--every", "interval", default=None, help="Seconds between automatic checks")
@click.option(
    "--auto",
    type=click.Choice(["on", "off"]),
    default=None,
    help="Turn automatic checks on or off",
)
@click.pass_context
def schedule(ctx: click.Context, interval: Optional[str], auto: Optional[str]) -> None:
    """Configure automatic update checks."""
    changes = {}
    if interval is not None:
        valid, error = validate_check_interval(interval)
        if not valid:
            raise click.BadParameter(error, param_hint="--every")
        changes["check_interval"] = int(interval)
    if auto is not None:
        changes["auto_check_updates"] = auto == "on"

    manager = _settings_manager(ctx)
    settings = manager.update(**changes) if changes else manager.settings
    logger.info(f"Check schedule: {changes or 'unchanged'}")

    state = "on" if settings.auto_check_updates else "off"
    click.echo(f"Automatic checks: {state}, every {settings.check_interval} seconds.")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the saved update settings and check schedule."""
    settings = _settings_manager(ctx).settings
    now = time.time()

    click.echo(f"Appcast URL: {settings.appcast_url or '(not set)'}")
    click.echo(f"App version: {settings.app_version or '(not set)'}")
    click.echo(f"Skipped version: {settings.skip_this_version or '(none)'}")
    click.echo(f"Automatic checks: {'on' if settings.auto_check_updates else 'off'}")
    click.echo(f"Last check: {_format_time(settings.last_check_time)}")
    if settings.auto_check_updates:
        due = "now" if is_check_due(settings, now) else _format_time(next_check_time(settings))
        click.echo(f"Next check: {due}")


if __name__ == "__main__":
    cli()
