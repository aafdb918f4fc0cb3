"""Main CLI entry point for the roster-sync command.

This module provides the Typer application that serves as the entry point
for the roster-sync command-line tool. It uses options on the main command
rather than subcommands for a simpler user experience.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from roster_sync import __version__
from roster_sync.cli.config import SettingsLoader
from roster_sync.cli.models import ExitCode
from roster_sync.cli.output import OutputHandler
from roster_sync.cli.sync_command import SyncCommand

app = typer.Typer(
    name="roster-sync",
    help="""Reconcile a user registry into the directory service's users and groups.

QUICK START:
  roster-sync --CompanyId <id> --Psk <key> --UserRegistry users.csv            # Prompt per phase
  roster-sync --CompanyId <id> --Psk <key> --UserRegistry users.csv --WhatIf   # Preview changes
  roster-sync --CompanyId <id> --Psk <key> --UserRegistry users.csv --Confirm  # Apply unattended""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

# Module logger
logger = logging.getLogger(__name__)


LOG_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(asctime)s [%(levelname)8s] %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _run_log_path(logdir: str) -> Path:
    """Return a timestamped log file path in logdir, creating the directory."""
    directory = Path(logdir)
    directory.mkdir(parents=True, exist_ok=True)
    return directory / f"roster-sync_{datetime.now():%Y%m%d_%H%M%S}.log"


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> Optional[Path]:
    """Send the roster_sync loggers to stderr and, with logdir, to a run log.

    Verbosity 0, 1 and 2+ select WARNING, INFO and DEBUG. Handlers left by an
    earlier call are closed and replaced, so running the app twice in one
    process logs each record once. Loggers outside the roster_sync namespace
    (requests, urllib3) keep their own configuration.

    Args:
        verbosity: Number of -v flags
        logdir: Optional directory for a per-run log file

    Returns:
        Path of the run log file, or None without logdir
    """
    level = LOG_LEVELS[min(max(verbosity, 0), len(LOG_LEVELS) - 1)]

    app_logger = logging.getLogger("roster_sync")
    app_logger.setLevel(level)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    handlers = [(logging.StreamHandler(sys.stderr), CONSOLE_FORMAT)]
    log_file = None
    if logdir:
        log_file = _run_log_path(logdir)
        handlers.append((logging.FileHandler(log_file, encoding="utf-8"), FILE_FORMAT))

    for handler, fmt in handlers:
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(fmt, datefmt=DATE_FORMAT))
        app_logger.addHandler(handler)

    if log_file:
        logger.info(f"Logging to file: {log_file}")
    return log_file


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"roster-sync version {__version__}")
        raise typer.Exit()


@app.command()
def main_command(
    company_id: str = typer.Option(
        ...,
        "--CompanyId",
        "--company-id",
        help="Company identifier at the directory service",
        metavar="ID",
    ),
    psk: str = typer.Option(
        ...,
        "--Psk",
        "--psk",
        help="Pre-shared key issued for the company",
        metavar="KEY",
    ),
    user_registry: str = typer.Option(
        ...,
        "--UserRegistry",
        "--user-registry",
        help="Registry file of users and groups (.csv, .yaml, .yml or .json)",
        metavar="PATH",
    ),
    what_if: bool = typer.Option(
        False,
        "--WhatIf",
        "--what-if",
        help="Compute and display the changes without applying anything",
    ),
    confirm: bool = typer.Option(
        False,
        "--Confirm",
        "--confirm",
        help="Apply every change without prompting",
    ),
    config: str = typer.Option(
        SettingsLoader.DEFAULT_SETTINGS_FILE,
        "--config",
        help="Settings file (API URL, timeout, batch sizes)",
        metavar="PATH",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Reconcile a user registry into the directory service.

    \b
    PHASES (in order, each confirmed separately):
      1. Invite registry users missing from the directory
      2. Delete directory users missing from the registry
      3. Move users to their registry group (creating missing groups)

    \b
    At each prompt answer: y = apply, s = skip this phase, a = abort the run.
    --WhatIf and --Confirm cannot be combined.
    """
    if what_if and confirm:
        typer.echo("Error: --WhatIf and --Confirm cannot be used together", err=True)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    _configure_logging(verbosity, logdir)

    output = OutputHandler(verbosity=verbosity, no_color=no_color)
    sync_cmd = SyncCommand(settings_path=config, output_handler=output)

    exit_code = sync_cmd.run(
        company_id=company_id,
        psk=psk,
        user_registry=user_registry,
        what_if=what_if,
        confirm=confirm,
    )

    raise typer.Exit(exit_code)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m roster_sync.cli.main
if __name__ == "__main__":
    main()
