"""Pure decision logic for prompting and manual selection.

Nothing here performs I/O. The workflow feeds in the discovered candidates
and the current association, then applies the effects of whatever the user
answers.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from param_linker.core.candidate_finder import PossibleParamsFile
from param_linker.core.paths import PathLike, absolute_path, friendly_path, normalize_path

CURRENT_DESCRIPTION = "(Current)"
SIMILAR_FILENAME_DESCRIPTION = "(Similar filename)"
NONE_LABEL = "None"
BROWSE_LABEL = "Browse..."

RESPONSE_YES = "Yes"
RESPONSE_NO = "No"
RESPONSE_CHOOSE_ANOTHER = "Choose another"
LEARN_MORE_LINK = "https://aka.ms/vscode-azurearmtools-updateschema"


class ItemKind(str, Enum):
    """What a picker entry stands for."""

    PARAMS_FILE = "params-file"
    NONE = "none"
    BROWSE = "browse"


@dataclass(frozen=True)
class SelectionItem:
    """One entry of the manual-selection picker."""

    label: str
    kind: ItemKind
    candidate: PossibleParamsFile | None = None
    description: str | None = None
    is_current: bool = False


@dataclass(frozen=True)
class AssociationProposal:
    """A "use this parameters file?" question for the dialog surface."""

    template: Path
    candidate: PossibleParamsFile
    message: str
    buttons: tuple[str, ...] = (RESPONSE_YES, RESPONSE_NO, RESPONSE_CHOOSE_ANOTHER)
    learn_more_link: str = LEARN_MORE_LINK


def _path_sort_key(path: Path) -> str:
    return str(path).casefold()


def pick_closest_match(candidates: Sequence[PossibleParamsFile]) -> PossibleParamsFile | None:
    """Best name-matching candidate: the shortest absolute path wins.

    Equal lengths fall back to case-insensitive path order so the choice is
    deterministic.
    """
    close_matches = [candidate for candidate in candidates if candidate.is_close_name_match]
    if not close_matches:
        return None
    return min(
        close_matches,
        key=lambda candidate: (len(str(candidate.path)), _path_sort_key(candidate.path)),
    )


def propose_association(
    template_path: PathLike,
    candidates: Sequence[PossibleParamsFile],
    current: PathLike | None = None,
) -> AssociationProposal | None:
    """Decide whether to ask the user about a parameters file.

    Returns:
        The proposal to present, or None when the template already has an
        association or nothing is worth suggesting.
    """
    if current is not None:
        return None

    best = pick_closest_match(candidates)
    if best is None:
        return None

    template = absolute_path(template_path)
    message = (
        f'Detected a parameters file "{friendly_path(template, best.path)}". '
        + f'Do you want to associate it with the template file "{template.name}"? '
        + "Having a parameters file association enables additional functionality, "
        + "such as deeper validation."
    )
    return AssociationProposal(template=template, candidate=best, message=message)


def _with_current(
    candidates: Sequence[PossibleParamsFile],
    current: Path | None,
) -> tuple[list[PossibleParamsFile], PossibleParamsFile | None]:
    """Locate the current association among candidates, injecting it if absent."""
    possibilities = list(candidates)
    if current is None:
        return possibilities, None

    current_key = normalize_path(current)
    for candidate in possibilities:
        if normalize_path(candidate.path) == current_key:
            return possibilities, candidate

    # Associated file lives elsewhere (or no longer sniffs as parameters)
    synthesized = PossibleParamsFile(path=current, is_close_name_match=False)
    possibilities.append(synthesized)
    return possibilities, synthesized


def build_selection_items(
    template_path: PathLike,
    candidates: Sequence[PossibleParamsFile],
    current: PathLike | None = None,
) -> list[SelectionItem]:
    """Ranked entries for the manual-selection picker.

    Order:
        1. the current association
        2. "None"
        3. other close name matches
        4. remaining candidates
        5. "Browse..."

    Groups 3 and 4 are sorted by case-insensitive absolute path.
    """
    template = absolute_path(template_path)
    current_path = absolute_path(current) if current is not None else None
    possibilities, current_candidate = _with_current(candidates, current_path)

    ranked: list[tuple[int, str, SelectionItem]] = []
    for candidate in possibilities:
        is_current = candidate is current_candidate
        if is_current:
            rank, description = 0, CURRENT_DESCRIPTION
        elif candidate.is_close_name_match:
            rank, description = 2, SIMILAR_FILENAME_DESCRIPTION
        else:
            rank, description = 3, None
        item = SelectionItem(
            label=friendly_path(template, candidate.path),
            kind=ItemKind.PARAMS_FILE,
            candidate=candidate,
            description=description,
            is_current=is_current,
        )
        ranked.append((rank, _path_sort_key(candidate.path), item))

    none_item = SelectionItem(
        label=NONE_LABEL,
        kind=ItemKind.NONE,
        description=None if current_candidate is not None else CURRENT_DESCRIPTION,
    )
    ranked.append((1, "", none_item))
    ranked.append((4, "", SelectionItem(label=BROWSE_LABEL, kind=ItemKind.BROWSE)))

    ranked.sort(key=lambda entry: (entry[0], entry[1]))
    return [item for _rank, _key, item in ranked]
