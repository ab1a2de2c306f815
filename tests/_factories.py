"""File factories and scripted collaborators shared by the test suite.

Import from here instead of redefining fakes in each test file. The fakes
stand in for the interactive surfaces (dialog, picker, file browser), so
workflow tests never touch a terminal.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from param_linker.core.association_store import AssociationStore
from param_linker.core.global_state import DontAskList, GlobalState
from param_linker.core.scopes import MemoryScope
from param_linker.core.selection import SelectionItem
from param_linker.core.workflow import ParameterFileWorkflow

PARAMS_SCHEMA = "https://schema.management.azure.com/schemas/2019-04-01/deploymentParameters.json#"
TEMPLATE_SCHEMA = "https://schema.management.azure.com/schemas/2019-04-01/deploymentTemplate.json#"


# ---------------------------------------------------------------------------
# File factories
# ---------------------------------------------------------------------------


def params_document(schema: str = PARAMS_SCHEMA) -> str:
    return json.dumps(
        {
            "$schema": schema,
            "contentVersion": "1.0.0.0",
            "parameters": {"location": {"value": "westus"}},
        },
        indent=2,
    )


def write_params(folder: Path, name: str, schema: str = PARAMS_SCHEMA) -> Path:
    path = folder / name
    path.write_text(params_document(schema), encoding="utf-8")
    return path


def write_template(folder: Path, name: str = "template.json") -> Path:
    path = folder / name
    path.write_text(
        json.dumps({"$schema": TEMPLATE_SCHEMA, "resources": []}, indent=2),
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# Scripted collaborators
# ---------------------------------------------------------------------------


@dataclass
class FakeDialog:
    """Answers warnings from a scripted list; an exhausted script dismisses."""

    responses: list[str | None] = field(default_factory=list)
    warnings: list[tuple[str, tuple[str, ...], bool]] = field(default_factory=list)
    infos: list[str] = field(default_factory=list)

    def show_warning(
        self,
        message: str,
        buttons: Sequence[str],
        *,
        modal: bool = False,
        learn_more_link: str | None = None,
    ) -> str | None:
        self.warnings.append((message, tuple(buttons), modal))
        if not self.responses:
            return None
        return self.responses.pop(0)

    def show_info(self, message: str) -> None:
        self.infos.append(message)


Chooser = Callable[[Sequence[SelectionItem]], "SelectionItem | None"]


def dismiss(items: Sequence[SelectionItem]) -> SelectionItem | None:
    return None


@dataclass
class FakePicker:
    """Picks with ``chooser`` and records every list it was shown."""

    chooser: Chooser = dismiss
    shown: list[list[SelectionItem]] = field(default_factory=list)
    placeholders: list[str] = field(default_factory=list)

    def pick(
        self,
        items: Sequence[SelectionItem],
        placeholder: str,
        *,
        suppress_persistence: bool = True,
    ) -> SelectionItem | None:
        self.shown.append(list(items))
        self.placeholders.append(placeholder)
        return self.chooser(items)


@dataclass
class FakeBrowser:
    result: Path | None = None
    calls: int = 0

    def browse(self, default_path: Path) -> Path | None:
        self.calls += 1
        return self.result


def pick_label(label: str) -> Chooser:
    def _choose(items: Sequence[SelectionItem]) -> SelectionItem | None:
        for item in items:
            if item.label == label:
                return item
        raise AssertionError(f"No picker item labelled {label!r}")

    return _choose


@dataclass
class WorkflowHarness:
    workflow: ParameterFileWorkflow
    user: MemoryScope
    workspace: MemoryScope
    state: GlobalState
    dialog: FakeDialog
    picker: FakePicker
    browser: FakeBrowser

    @property
    def store(self) -> AssociationStore:
        return self.workflow.store

    @property
    def dont_ask(self) -> DontAskList:
        return self.workflow.dont_ask
