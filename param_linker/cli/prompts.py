"""Terminal implementations of the interactive surfaces.

Picker, dialog and file browser are numbered-list/text prompts built on
click. Ctrl-C, EOF or choosing ``0`` count as dismissal and return None.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import click

from param_linker.core.selection import SelectionItem
from param_linker.helpers.helpers_logging import Colors, print_info, print_warning


def _prompt_index(prompt: str, count: int) -> int | None:
    """Ask for 1..count; 0 (or an abort) dismisses."""
    try:
        choice = click.prompt(
            prompt,
            type=click.IntRange(0, count),
            default=0,
            show_default=False,
        )
    except click.Abort:
        return None
    if choice == 0:
        return None
    return int(choice) - 1


class TerminalPicker:
    def pick(
        self,
        items: Sequence[SelectionItem],
        placeholder: str,
        *,
        suppress_persistence: bool = True,
    ) -> SelectionItem | None:
        if not items:
            return None

        print_info(f"\n{placeholder}")
        for i, item in enumerate(items, 1):
            suffix = f" {Colors.DIM}{item.description}{Colors.RESET}" if item.description else ""
            print(f"  {i}. {item.label}{suffix}")
        print("  0. Cancel")

        index = _prompt_index(f"\nSelect (1-{len(items)})", len(items))
        return None if index is None else items[index]


class TerminalDialog:
    def show_warning(
        self,
        message: str,
        buttons: Sequence[str],
        *,
        modal: bool = False,
        learn_more_link: str | None = None,
    ) -> str | None:
        print_warning(message)
        if learn_more_link:
            print(f"  {Colors.DIM}Learn more: {learn_more_link}{Colors.RESET}")
        for i, button in enumerate(buttons, 1):
            print(f"  {i}. {button}")
        print("  0. Dismiss")

        index = _prompt_index("Choose", len(buttons))
        return None if index is None else buttons[index]

    def show_info(self, message: str) -> None:
        print_info(message)


class TerminalFileBrowser:
    def browse(self, default_path: Path) -> Path | None:
        try:
            raw = click.prompt(
                "Parameters file path (empty to cancel)",
                default="",
                show_default=False,
            )
        except click.Abort:
            return None
        text = str(raw).strip()
        if not text:
            return None

        path = Path(text).expanduser()
        if not path.is_absolute():
            path = default_path.parent / path
        return path
