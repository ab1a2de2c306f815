"""Shared fixtures for the param-linker test suite.

Every test runs with user settings and global state redirected into its own
``tmp_path``, so nothing reads or writes the real home directory.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from param_linker.core.association_store import AssociationStore
from param_linker.core.global_state import DontAskList, GlobalState
from param_linker.core.scopes import MemoryScope, ScopeStack
from param_linker.core.workflow import ParameterFileWorkflow, Session
from tests._factories import (
    Chooser,
    FakeBrowser,
    FakeDialog,
    FakePicker,
    WorkflowHarness,
    dismiss,
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point user settings and global state at a throwaway directory."""
    home = tmp_path / "_param_linker_home"
    monkeypatch.setenv("PARAM_LINKER_HOME", str(home))
    monkeypatch.delenv("PARAM_LINKER_DEBUG", raising=False)
    return home


@pytest.fixture()
def infra_dir(tmp_path: Path) -> Path:
    folder = tmp_path / "infra"
    folder.mkdir()
    return folder


@pytest.fixture()
def make_harness() -> Callable[..., WorkflowHarness]:
    """Factory for a workflow wired to in-memory scopes and scripted fakes.

    Usage::

        harness = make_harness(responses=["Yes"])
        harness.workflow.consider_querying(TemplateDocument(path=template))
    """

    def _make(
        *,
        responses: list[str | None] | None = None,
        chooser: Chooser = dismiss,
        browse_result: Path | None = None,
        user_values: dict[str, Any] | None = None,
        workspace_values: dict[str, Any] | None = None,
        session: Session | None = None,
        **workflow_kwargs: Any,
    ) -> WorkflowHarness:
        user = MemoryScope("user", user_values)
        workspace = MemoryScope("workspace", workspace_values)
        state = GlobalState.in_memory()
        dialog = FakeDialog(responses=list(responses or []))
        picker = FakePicker(chooser=chooser)
        browser = FakeBrowser(result=browse_result)
        workflow = ParameterFileWorkflow(
            store=AssociationStore(ScopeStack([user, workspace], writable=workspace)),
            dont_ask=DontAskList(state),
            dialog=dialog,
            picker=picker,
            browser=browser,
            session=session,
            **workflow_kwargs,
        )
        return WorkflowHarness(workflow, user, workspace, state, dialog, picker, browser)

    return _make
