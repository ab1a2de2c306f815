"""Discovery of parameters files that could belong to a template."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from param_linker.core.content_sniffer import DEFAULT_MAX_BYTES, is_parameters_file
from param_linker.core.name_matcher import is_likely_matching_params_file
from param_linker.core.paths import PathLike, absolute_path
from param_linker.helpers.helpers_logging import print_debug


@dataclass(frozen=True)
class PossibleParamsFile:
    """A parameters file found next to a template.

    Attributes:
        path: Absolute path of the candidate.
        is_close_name_match: Candidate name is prefixed by the template's name.
    """

    path: Path
    is_close_name_match: bool


def find_available_parameters_files(
    template_path: PathLike,
    *,
    strict: bool = False,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> list[PossibleParamsFile]:
    """List parameters files in the template's folder (non-recursive).

    Each file is sniffed in turn; those that look like parameters files are
    annotated with the name heuristic. An unreadable folder yields an empty
    list.

    Returns:
        Candidates in file-name order. Callers own presentation ordering.
    """
    template = absolute_path(template_path)
    folder = template.parent

    try:
        with os.scandir(folder) as entries:
            files = sorted(
                (entry.name for entry in entries if entry.is_file()),
                key=str.casefold,
            )
    except OSError as exc:
        print_debug(f"Could not list {folder}: {exc}")
        return []

    candidates: list[PossibleParamsFile] = []
    for name in files:
        full_path = folder / name
        if not is_parameters_file(full_path, strict=strict, max_bytes=max_bytes):
            continue
        candidates.append(
            PossibleParamsFile(
                path=full_path,
                is_close_name_match=is_likely_matching_params_file(template.name, name),
            )
        )
    return candidates
