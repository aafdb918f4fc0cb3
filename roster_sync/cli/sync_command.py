"""Sync command orchestration for CLI.

This module provides the SyncCommand class that wires the CLI to the
reconciler. It loads settings and the registry, builds the directory API
client, runs the SyncOrchestrator in the requested mode, and translates
every failure into an ExitCode.
"""

import logging
from typing import Any, Optional

from rich.markup import escape

from roster_sync.cli.config import SettingsLoader
from roster_sync.cli.errors import CLIError, ConfigError
from roster_sync.cli.models import ExitCode, SyncSettings
from roster_sync.cli.output import OutputHandler
from roster_sync.directory_client.api_wrapper import DirectoryAPI
from roster_sync.directory_client.auth import Authenticator
from roster_sync.directory_client.errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
)
from roster_sync.reconciler.confirmation import ConfirmationGate, RunMode
from roster_sync.reconciler.errors import (
    GroupResolutionError,
    PartialApplyError,
    SyncAbortedError,
)
from roster_sync.reconciler.orchestrator import SyncOrchestrator
from roster_sync.registry.errors import RegistryError
from roster_sync.registry.reader import RegistryReader

logger = logging.getLogger(__name__)


def select_run_mode(what_if: bool, confirm: bool) -> RunMode:
    """Map the WhatIf/Confirm flags onto a single RunMode.

    Raises:
        CLIError: If both flags are set
    """
    if what_if and confirm:
        raise CLIError("Cannot use both --WhatIf and --Confirm")
    if what_if:
        return RunMode.DRY_RUN
    if confirm:
        return RunMode.AUTO_CONFIRM
    return RunMode.INTERACTIVE


class SyncCommand:
    """Orchestrates the complete sync workflow for the CLI.

    The sync workflow:
        1. Load settings (.roster-sync.yaml + environment)
        2. Read the user registry
        3. Build the directory API client from company ID and pre-shared key
        4. Run the Add, Delete and Move phases through SyncOrchestrator
        5. Print the summary and return an exit code

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> sync_cmd = SyncCommand(output_handler=output)
        >>> exit_code = sync_cmd.run("8675309", "s3cret", "users.csv", what_if=True)
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        settings_path: str = SettingsLoader.DEFAULT_SETTINGS_FILE,
        output_handler: Optional[OutputHandler] = None,
        api: Optional[Any] = None,
        settings: Optional[SyncSettings] = None,
    ):
        """Initialize sync command with dependencies.

        Args:
            settings_path: Path to the YAML settings file
            output_handler: OutputHandler for terminal output (optional)
            api: Directory API client (optional, built from credentials if None)
            settings: Pre-loaded settings (optional, loaded from settings_path if None)

        Note:
            Dependencies are optional to support testing. In production the
            API client is created from the command-line credentials.
        """
        self.settings_path = settings_path
        self.output_handler = output_handler or OutputHandler()
        self.api = api
        self.settings = settings

    def run(
        self,
        company_id: str,
        psk: str,
        user_registry: str,
        what_if: bool = False,
        confirm: bool = False,
    ) -> ExitCode:
        """Execute the sync.

        Args:
            company_id: Company identifier at the directory service
            psk: Pre-shared key for the company
            user_registry: Path to the registry file
            what_if: Preview changes without applying them
            confirm: Apply changes without prompting

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            mode = select_run_mode(what_if, confirm)

            if self.settings is None:
                logger.info(f"Loading settings from {self.settings_path}")
                self.settings = SettingsLoader.load(self.settings_path)

            with self.output_handler.spinner(f"Reading registry {user_registry}..."):
                external = RegistryReader.read(user_registry)
            self.output_handler.info(f"Registry: {len(external)} user(s) from {escape(user_registry)}")

            if self.api is None:
                authenticator = Authenticator(company_id, psk, api_url=self.settings.api_url)
                authenticator.get_credentials()
                self.api = DirectoryAPI(authenticator, timeout=self.settings.timeout)

            if mode is RunMode.DRY_RUN:
                self.output_handler.print_dryrun_banner()

            orchestrator = SyncOrchestrator(
                self.api,
                ConfirmationGate(mode, self.output_handler),
                invite_batch_size=self.settings.invite_batch_size,
                delete_batch_size=self.settings.delete_batch_size,
                move_batch_size=self.settings.move_batch_size,
            )
            report = orchestrator.run(external)

            self.output_handler.print_sync_summary(report, dry_run=mode is RunMode.DRY_RUN)
            return ExitCode.SUCCESS

        except SyncAbortedError as e:
            logger.warning(str(e))
            self.output_handler.warning(f"{e}. Phases already applied are kept.")
            return ExitCode.ABORTED

        except PartialApplyError as e:
            logger.error(f"Partial apply: {e}")
            self.output_handler.error(f"The directory did not process all users: {e}")
            for email in e.emails:
                self.output_handler.print(f"  • {escape(email)}")
            return ExitCode.PARTIAL_APPLY

        except InvalidCredentialsError as e:
            logger.error(f"Authentication failed: {e}")
            self.output_handler.error(f"Authentication failed: {e}")
            self.output_handler.info("Check the --CompanyId and --Psk values")
            return ExitCode.AUTH_ERROR

        except (APIUnreachableError, APIAccessError) as e:
            logger.error(f"API error: {e}")
            self.output_handler.error(f"API error: {e}")
            self.output_handler.info("Check your internet connection and the API URL, then re-run")
            return ExitCode.NETWORK_ERROR

        except GroupResolutionError as e:
            logger.exception("Group resolution failed after provisioning")
            self.output_handler.error(f"Internal error: {e}")
            return ExitCode.GENERAL_ERROR

        except (ConfigError, RegistryError) as e:
            logger.error(f"Input error: {e}")
            self.output_handler.error(str(e))
            return ExitCode.GENERAL_ERROR

        except CLIError as e:
            logger.error(f"CLI error: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during sync")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR
