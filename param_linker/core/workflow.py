"""Reconciliation workflow: decide whether to prompt, then apply the answer.

Per template, within one ``Session``::

    UNCHECKED -> CHECKING -> RESOLVED     existing association stands
                          -> SUPPRESSED   disabled, don't-ask, nothing to suggest
                          -> PROMPTING -> RESOLVED | SUPPRESSED | CANCELLED

Once a template has left UNCHECKED, further open/save events for it are
no-ops for the rest of the session. Collaborators that talk to the user
(dialog, picker, file browser) are injected, so the workflow never blocks on
anything it owns.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol

from param_linker.config import (
    DEFAULT_CHECK_FOR_MATCHING_PARAMETER_FILES,
    DEFAULT_STRICT_PARAMETERS_SCHEMA,
    ConfigKeys,
    setting_key,
)
from param_linker.core.association_store import AssociationStore
from param_linker.core.candidate_finder import (
    PossibleParamsFile,
    find_available_parameters_files,
)
from param_linker.core.content_sniffer import is_parameters_file
from param_linker.core.errors import (
    ConfigurationError,
    ParamLinkerError,
    UnexpectedResponseError,
)
from param_linker.core.global_state import DontAskList
from param_linker.core.paths import PathLike, absolute_path, normalize_path
from param_linker.core.selection import (
    RESPONSE_CHOOSE_ANOTHER,
    RESPONSE_NO,
    RESPONSE_YES,
    ItemKind,
    SelectionItem,
    build_selection_items,
    propose_association,
)
from param_linker.helpers.helpers_logging import print_debug, print_error, print_warning

FILE_SCHEME = "file"

MANUAL_ASSOCIATION_GUIDANCE = (
    "You can manually associate a parameters file with this template at any "
    + 'time by running "param-linker select <template>".'
)


class ReconcileState(str, Enum):
    UNCHECKED = "unchecked"
    CHECKING = "checking"
    RESOLVED = "resolved"
    PROMPTING = "prompting"
    SUPPRESSED = "suppressed"
    CANCELLED = "cancelled"


class SelectionOutcome(str, Enum):
    """Result of the manual selection surface."""

    ASSOCIATED = "associated"
    CLEARED = "cleared"
    UNCHANGED = "unchanged"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class TemplateDocument:
    """A document as reported by the editor host."""

    path: Path
    scheme: str = FILE_SCHEME

    @property
    def is_file_backed(self) -> bool:
        return self.scheme == FILE_SCHEME


class Dialog(Protocol):
    """Notification surface with named response buttons."""

    def show_warning(
        self,
        message: str,
        buttons: Sequence[str],
        *,
        modal: bool = False,
        learn_more_link: str | None = None,
    ) -> str | None:
        """Return the chosen button title, or None if dismissed."""
        ...

    def show_info(self, message: str) -> None:
        ...


class Picker(Protocol):
    """Single-selection list surface."""

    def pick(
        self,
        items: Sequence[SelectionItem],
        placeholder: str,
        *,
        suppress_persistence: bool = True,
    ) -> SelectionItem | None:
        """Return the chosen item, or None if dismissed."""
        ...


class FileBrowser(Protocol):
    def browse(self, default_path: Path) -> Path | None:
        """Return the chosen file, or None if dismissed."""
        ...


CandidateFinder = Callable[..., list[PossibleParamsFile]]


@dataclass
class Session:
    """Per-process reconciliation memory. Never persisted.

    Attributes:
        states: Last known workflow state per normalized template path.
        suppressed: Templates the user resolved or declined this session.
    """

    states: dict[str, ReconcileState] = field(default_factory=dict)
    suppressed: set[str] = field(default_factory=set)

    def state_of(self, template_path: PathLike) -> ReconcileState:
        return self.states.get(normalize_path(template_path), ReconcileState.UNCHECKED)

    def mark(self, template_path: PathLike, state: ReconcileState) -> ReconcileState:
        self.states[normalize_path(template_path)] = state
        return state

    def suppress(self, template_path: PathLike) -> None:
        self.suppressed.add(normalize_path(template_path))

    def is_suppressed(self, template_path: PathLike) -> bool:
        return normalize_path(template_path) in self.suppressed


class ParameterFileWorkflow:
    """Prompt-and-record workflow for template/parameters associations."""

    def __init__(
        self,
        store: AssociationStore,
        dont_ask: DontAskList,
        dialog: Dialog,
        picker: Picker,
        browser: FileBrowser,
        session: Session | None = None,
        finder: CandidateFinder = find_available_parameters_files,
        strict: bool | None = None,
    ) -> None:
        self.store = store
        self.dont_ask = dont_ask
        self.dialog = dialog
        self.picker = picker
        self.browser = browser
        self.session = session if session is not None else Session()
        self.finder = finder
        self._strict = strict

    @property
    def strict(self) -> bool:
        if self._strict is not None:
            return self._strict
        return self.store.stack.get_bool(
            setting_key(ConfigKeys.STRICT_PARAMETERS_SCHEMA),
            DEFAULT_STRICT_PARAMETERS_SCHEMA,
        )

    def _prompting_enabled(self) -> bool:
        return self.store.stack.get_bool(
            setting_key(ConfigKeys.CHECK_FOR_MATCHING_PARAMETER_FILES),
            DEFAULT_CHECK_FOR_MATCHING_PARAMETER_FILES,
        )

    def find_candidates(self, template: Path) -> list[PossibleParamsFile]:
        return self.finder(template, strict=self.strict)

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------

    def on_document_event(self, document: TemplateDocument) -> ReconcileState | None:
        """Host hook for document open/save.

        Engine errors are reported here and turned into a None result, so a
        failed check never reaches the editor.
        """
        try:
            return self.consider_querying(document)
        except ParamLinkerError as exc:
            print_error(f"Parameters file check failed for {document.path}: {exc}")
            return None

    def consider_querying(self, document: TemplateDocument) -> ReconcileState:
        """Run the reconciliation state machine for one document event.

        Returns:
            The template's state after this event. Documents that are not
            file-backed are ignored and report UNCHECKED.

        Raises:
            UnexpectedResponseError: If the dialog returns an unknown button
        """
        if not document.is_file_backed:
            return ReconcileState.UNCHECKED

        template = absolute_path(document.path)
        previous = self.session.state_of(template)
        if previous is not ReconcileState.UNCHECKED:
            return previous
        if self.session.is_suppressed(template):
            return self.session.mark(template, ReconcileState.SUPPRESSED)

        self.session.mark(template, ReconcileState.CHECKING)

        if self.store.resolve(template) is not None:
            return self.session.mark(template, ReconcileState.RESOLVED)
        if not self._prompting_enabled():
            return self.session.mark(template, ReconcileState.SUPPRESSED)
        if self.dont_ask.contains(template):
            print_debug(f"{template} is in the don't-ask list")
            return self.session.mark(template, ReconcileState.SUPPRESSED)

        proposal = propose_association(template, self.find_candidates(template))
        if proposal is None:
            return self.session.mark(template, ReconcileState.SUPPRESSED)

        self.session.mark(template, ReconcileState.PROMPTING)
        response = self.dialog.show_warning(
            proposal.message,
            proposal.buttons,
            learn_more_link=proposal.learn_more_link,
        )

        if response is None:
            return self.session.mark(template, ReconcileState.CANCELLED)
        if response == RESPONSE_YES:
            if self._associate(template, proposal.candidate.path):
                return ReconcileState.RESOLVED
            return self.session.mark(template, ReconcileState.SUPPRESSED)
        if response == RESPONSE_NO:
            self._decline(template)
            return self.session.mark(template, ReconcileState.SUPPRESSED)
        if response == RESPONSE_CHOOSE_ANOTHER:
            outcome = self.select_parameter_file(template)
            return self.session.mark(template, _state_after_selection(outcome))

        self.session.mark(template, ReconcileState.CANCELLED)
        raise UnexpectedResponseError(f"Unexpected response from association prompt: {response!r}")

    def _decline(self, template: Path) -> None:
        self.session.suppress(template)
        try:
            self.dont_ask.add(template)
        except ConfigurationError as exc:
            print_warning(f"Could not remember the answer for {template.name}: {exc}")
        self.dialog.show_info(MANUAL_ASSOCIATION_GUIDANCE)

    def _associate(self, template: Path, params_path: Path) -> bool:
        if not self.store.set(template, params_path):
            return False
        self.session.suppress(template)
        self.session.mark(template, ReconcileState.RESOLVED)
        return True

    # ------------------------------------------------------------------
    # Manual selection
    # ------------------------------------------------------------------

    def select_parameter_file(self, template_path: PathLike) -> SelectionOutcome:
        """Let the user pick the parameters file for a template.

        Dismissing any surface along the way leaves every store unmodified.
        """
        template = absolute_path(template_path)
        current = self.store.resolve(template)
        items = build_selection_items(template, self.find_candidates(template), current)

        choice = self.picker.pick(
            items,
            f"Select a parameters file to associate with template file {template}",
            suppress_persistence=True,
        )
        if choice is None:
            return SelectionOutcome.CANCELLED

        if choice.kind is ItemKind.NONE:
            if not self.store.set(template, None):
                return SelectionOutcome.FAILED
            self.session.suppress(template)
            self.session.mark(template, ReconcileState.SUPPRESSED)
            return SelectionOutcome.CLEARED

        if choice.kind is ItemKind.BROWSE:
            selected = self._browse_for_params_file(template)
            if selected is None:
                return SelectionOutcome.CANCELLED
            return self._associate_outcome(template, selected)

        if choice.is_current or choice.candidate is None:
            return SelectionOutcome.UNCHANGED
        return self._associate_outcome(template, choice.candidate.path)

    def _browse_for_params_file(self, template: Path) -> Path | None:
        selected = self.browser.browse(template)
        if selected is None:
            return None
        selected = absolute_path(selected)

        if not is_parameters_file(selected, strict=self.strict):
            answer = self.dialog.show_warning(
                f'"{selected}" does not appear to be a valid parameters file. '
                + "Select it anyway?",
                (RESPONSE_YES, RESPONSE_NO),
                modal=True,
            )
            if answer != RESPONSE_YES:
                return None
        return selected

    def _associate_outcome(self, template: Path, params_path: Path) -> SelectionOutcome:
        if self._associate(template, params_path):
            return SelectionOutcome.ASSOCIATED
        return SelectionOutcome.FAILED

    def describe(self, template_path: PathLike) -> str:
        return self.store.describe(template_path)


def _state_after_selection(outcome: SelectionOutcome) -> ReconcileState:
    if outcome in (SelectionOutcome.ASSOCIATED, SelectionOutcome.UNCHANGED):
        return ReconcileState.RESOLVED
    if outcome is SelectionOutcome.CANCELLED:
        return ReconcileState.CANCELLED
    return ReconcileState.SUPPRESSED
