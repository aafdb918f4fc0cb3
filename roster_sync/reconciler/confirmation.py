"""Confirmation gate in front of every mutating phase.

The gate decides whether a phase is applied, skipped, or whether the whole
run is aborted. Rendering and reading answers is delegated to a prompter
(the CLI's OutputHandler); this module only holds the decision logic and
the per-phase item renderers.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional, Protocol, Sequence

from .errors import SyncAbortedError
from .models import ExternalUserRecord, RemoteUserRecord

logger = logging.getLogger(__name__)


class RunMode(Enum):
    """How confirmation prompts are answered.

    DRY_RUN and AUTO_CONFIRM are two values of one setting, so a run can
    never ask for both.
    """
    DRY_RUN = "dry_run"
    AUTO_CONFIRM = "auto_confirm"
    INTERACTIVE = "interactive"


class GateDecision(Enum):
    """Outcome of a confirmation."""
    PROCEED = "proceed"
    SKIP = "skip"


class Prompter(Protocol):
    """Terminal side of the gate."""

    def show_confirmation(self, prompt: str, lines: Sequence[str]) -> None:
        ...

    def ask(self, question: str) -> str:
        ...


class ItemRenderer(ABC):
    """Formats one affected item of a phase for display."""

    @abstractmethod
    def format(self, item: Any) -> str:
        """Return the display line for item."""


class AddRenderer(ItemRenderer):
    """Renders registry records about to be invited."""

    def __init__(self, default_group_name: str = "Default"):
        self.default_group_name = default_group_name

    def format(self, item: ExternalUserRecord) -> str:
        return f"{item.email} (group: {item.group or self.default_group_name})"


class DeleteRenderer(ItemRenderer):
    """Renders directory users about to be deleted."""

    def format(self, item: RemoteUserRecord) -> str:
        return f"{item.email} (group: {item.group_name})"


class MoveRenderer(ItemRenderer):
    """Renders directory users about to change group."""

    def format(self, item: RemoteUserRecord) -> str:
        return f"{item.email}: {item.group_name} -> {item.pending_group_name}"


ANSWER_PROCEED = "y"
ANSWER_SKIP = "s"
ANSWER_ABORT = "a"

QUESTION = "Proceed? [y]es / [s]kip this step / [a]bort"


class ConfirmationGate:
    """Gates one phase of the sync behind a confirmation.

    Behaviour by mode:
    - nothing affected: prompt shown with "N/A", SKIP, no question asked
    - DRY_RUN: prompt and items shown, always SKIP
    - AUTO_CONFIRM: prompt and items shown, always PROCEED
    - INTERACTIVE: asks until y (PROCEED), s (SKIP) or a (abort) is given

    Example:
        >>> gate = ConfirmationGate(RunMode.INTERACTIVE, output_handler)
        >>> decision = gate.confirm("Users to delete", to_delete, DeleteRenderer())
    """

    def __init__(self, mode: RunMode, prompter: Optional[Prompter] = None):
        """Initialize the gate.

        Args:
            mode: How prompts are answered
            prompter: Terminal shim; required for INTERACTIVE mode
        """
        if mode is RunMode.INTERACTIVE and prompter is None:
            raise ValueError("Interactive confirmation requires a prompter")
        self.mode = mode
        self.prompter = prompter

    def confirm(
        self,
        prompt: str,
        affected: Sequence[Any],
        renderer: ItemRenderer,
        phase: Optional[str] = None,
    ) -> GateDecision:
        """Decide whether the phase described by prompt is applied.

        Args:
            prompt: Heading describing the phase
            affected: Items the phase would change
            renderer: Formats each item for display
            phase: Phase name, used in the abort message

        Returns:
            GateDecision.PROCEED or GateDecision.SKIP

        Raises:
            SyncAbortedError: If the user answers abort or input is closed
        """
        if not affected:
            self._show(prompt, ["N/A"])
            logger.debug(f"Nothing to do for '{prompt}', skipping")
            return GateDecision.SKIP

        self._show(prompt, [renderer.format(item) for item in affected])

        if self.mode is RunMode.DRY_RUN:
            logger.info(f"[DRYRUN] Would apply {len(affected)} change(s): {prompt}")
            return GateDecision.SKIP

        if self.mode is RunMode.AUTO_CONFIRM:
            logger.info(f"Auto-confirmed {len(affected)} change(s): {prompt}")
            return GateDecision.PROCEED

        while True:
            try:
                answer = (self.prompter.ask(QUESTION) or "").strip().lower()
            except EOFError as e:
                # stdin closed: an unattended run without --Confirm
                logger.warning(f"No answer available at: {prompt}")
                raise SyncAbortedError(phase, "no input available, use --Confirm to run unattended") from e
            if answer == ANSWER_PROCEED:
                return GateDecision.PROCEED
            if answer == ANSWER_SKIP:
                logger.info(f"User skipped: {prompt}")
                return GateDecision.SKIP
            if answer == ANSWER_ABORT:
                logger.warning(f"User aborted at: {prompt}")
                raise SyncAbortedError(phase)

    def _show(self, prompt: str, lines: Sequence[str]) -> None:
        if self.prompter is not None:
            self.prompter.show_confirmation(prompt, lines)
