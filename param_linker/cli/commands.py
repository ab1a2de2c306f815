#!/usr/bin/env python3
"""param-linker CLI - Main Entry Point.

Usage:
    param-linker [--scope user|workspace] [--strict] <command> [args]

Commands:
    check        Run the association check for templates (as on open/save)
    select       Choose the parameters file for a template
    show         Show which parameters file a template validates against
    candidates   List parameters files found next to a template, ranked
    associate    Associate a parameters file with a template
    clear        Remove a template's association
    reset-state  Forget every "don't ask again" answer
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path

import click

from param_linker.cli.prompts import TerminalDialog, TerminalFileBrowser, TerminalPicker
from param_linker.config import EXTENSION_NAME
from param_linker.core.association_store import AssociationStore
from param_linker.core.content_sniffer import is_parameters_file
from param_linker.core.errors import ConfigurationError
from param_linker.core.global_state import DontAskList, GlobalState, reset_global_state
from param_linker.core.paths import absolute_path
from param_linker.core.scopes import ConfigurationTarget, build_scope_stack
from param_linker.core.selection import ItemKind, build_selection_items
from param_linker.core.workflow import (
    ParameterFileWorkflow,
    ReconcileState,
    SelectionOutcome,
    Session,
    TemplateDocument,
)
from param_linker.helpers.helpers_logging import (
    print_error,
    print_header,
    print_info,
    print_success,
    print_warning,
)

_EXIT_CANCELLED = 130

_STATE_MESSAGES: dict[ReconcileState, str] = {
    ReconcileState.UNCHECKED: "not a file-backed document, ignored",
    ReconcileState.RESOLVED: "parameters file associated",
    ReconcileState.SUPPRESSED: "no prompt needed",
    ReconcileState.CANCELLED: "prompt dismissed",
}


@dataclass
class CliContext:
    """State shared by every command in one invocation."""

    scope: ConfigurationTarget | None = None
    strict: bool | None = None
    session: Session = field(default_factory=Session)
    global_state: GlobalState = field(default_factory=GlobalState.from_file)

    def store_for(self, template: Path) -> AssociationStore:
        return AssociationStore(build_scope_stack(template, self.scope))

    def workflow_for(self, template: Path) -> ParameterFileWorkflow:
        return ParameterFileWorkflow(
            store=self.store_for(template),
            dont_ask=DontAskList(self.global_state),
            dialog=TerminalDialog(),
            picker=TerminalPicker(),
            browser=TerminalFileBrowser(),
            session=self.session,
            strict=self.strict,
        )


_TEMPLATE_ARG = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.group(invoke_without_command=True)
@click.option(
    "--scope",
    type=click.Choice([target.value for target in ConfigurationTarget]),
    default=None,
    help="Settings scope to write associations to (default: most specific available)",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Require an allow-listed $schema value when detecting parameters files",
)
@click.pass_context
def _click_cli(ctx: click.Context, scope: str | None, strict: bool | None) -> int:
    """Associate templates with their parameters files."""
    ctx.obj = CliContext(
        scope=ConfigurationTarget(scope) if scope else None,
        strict=strict,
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
    return 0


@_click_cli.command(name="check")
@click.argument("templates", nargs=-1, required=True, type=_TEMPLATE_ARG)
@click.pass_obj
def check_cmd(obj: CliContext, templates: tuple[Path, ...]) -> int:
    """Run the association check, as the editor does on open/save."""
    failed = False
    for template in templates:
        workflow = obj.workflow_for(absolute_path(template))
        state = workflow.on_document_event(TemplateDocument(path=template))
        if state is None:
            failed = True
            continue
        print_info(f"{template}: {_STATE_MESSAGES.get(state, state.value)}")
    return 1 if failed else 0


@_click_cli.command(name="select")
@click.argument("template", type=_TEMPLATE_ARG)
@click.pass_obj
def select_cmd(obj: CliContext, template: Path) -> int:
    """Choose the parameters file for TEMPLATE."""
    workflow = obj.workflow_for(absolute_path(template))
    outcome = workflow.select_parameter_file(template)

    if outcome is SelectionOutcome.CANCELLED:
        print_warning("Cancelled, nothing changed")
        return _EXIT_CANCELLED
    if outcome is SelectionOutcome.FAILED:
        print_error("Association could not be saved")
        return 1
    if outcome is SelectionOutcome.CLEARED:
        print_success(f"Removed parameters file association for {template.name}")
    elif outcome is SelectionOutcome.ASSOCIATED:
        print_success(workflow.describe(template))
    else:
        print_info("Association unchanged")
    return 0


@_click_cli.command(name="show")
@click.argument("template", type=_TEMPLATE_ARG)
@click.pass_obj
def show_cmd(obj: CliContext, template: Path) -> int:
    """Show which parameters file TEMPLATE validates against."""
    click.echo(obj.store_for(absolute_path(template)).describe(template))
    return 0


@_click_cli.command(name="candidates")
@click.argument("template", type=_TEMPLATE_ARG)
@click.pass_obj
def candidates_cmd(obj: CliContext, template: Path) -> int:
    """List parameters files next to TEMPLATE, best first."""
    workflow = obj.workflow_for(absolute_path(template))
    items = build_selection_items(
        template,
        workflow.find_candidates(absolute_path(template)),
        workflow.store.resolve(template),
    )

    print_header(f"Parameters files for {template.name}")
    files = [item for item in items if item.kind is ItemKind.PARAMS_FILE]
    if not files:
        print_info("No parameters files found")
        return 0
    for item in files:
        suffix = f"  {item.description}" if item.description else ""
        click.echo(f"  {item.label}{suffix}")
    return 0


@_click_cli.command(name="associate")
@click.argument("template", type=_TEMPLATE_ARG)
@click.argument("params", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def associate_cmd(obj: CliContext, template: Path, params: Path) -> int:
    """Associate PARAMS with TEMPLATE."""
    workflow = obj.workflow_for(absolute_path(template))
    if not is_parameters_file(params, strict=workflow.strict):
        print_warning(f'"{params}" does not appear to be a valid parameters file')

    store = workflow.store
    if not store.set(template, params):
        return 1
    print_success(store.describe(template))
    return 0


@_click_cli.command(name="clear")
@click.argument("template", type=_TEMPLATE_ARG)
@click.pass_obj
def clear_cmd(obj: CliContext, template: Path) -> int:
    """Remove TEMPLATE's association from the writable scope."""
    store = obj.store_for(absolute_path(template))
    if not store.set(template, None):
        return 1
    remaining = store.resolve(template)
    if remaining is not None:
        print_warning(f"Another settings scope still associates {remaining}")
    else:
        print_success(f"Removed parameters file association for {template.name}")
    return 0


@_click_cli.command(name="reset-state")
@click.pass_obj
def reset_state_cmd(obj: CliContext) -> int:
    """Forget every "don't ask again" answer (settings are not changed)."""
    if not click.confirm(
        f"Reset all global state for {EXTENSION_NAME} (settings will not be changed)?",
        default=False,
    ):
        return 0
    try:
        reset_global_state(obj.global_state)
    except ConfigurationError as exc:
        print_error(f"Could not reset global state: {exc}")
        return 1
    print_success(f"Global state for {EXTENSION_NAME} has been reset")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = sys.argv[1:] if argv is None else argv
    try:
        result = _click_cli.main(
            args=args,
            prog_name=EXTENSION_NAME,
            standalone_mode=False,
        )
    except click.Abort:
        print("\n⚠️  Cancelled by user")
        return _EXIT_CANCELLED
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    return 0 if result is None else int(result)


if __name__ == "__main__":
    sys.exit(main())
