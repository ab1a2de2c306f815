"""Path normalization shared by the association store and the workflow.

Normalization rules, applied in this order:

1. Backslashes become forward slashes, so Windows-style and POSIX-style
   spellings of one path compare equal.
2. ``.``/``..`` segments and repeated separators are collapsed.
3. The result is casefolded. Template keys are compared case-insensitively on
   every platform, so ``C:\\Proj\\template.json`` and
   ``c:/proj/TEMPLATE.json`` are the same key.

Normalized strings are comparison keys only. They are never written to
settings, never used to open files, and never used to decide whether a file
lies inside a folder.
"""

from __future__ import annotations

import os
import posixpath
from pathlib import Path

PathLike = str | os.PathLike[str]


def normalize_path(path: PathLike) -> str:
    """Return the canonical comparison key for ``path``."""
    text = os.fspath(path).replace("\\", "/")
    if not text:
        return ""
    return posixpath.normpath(text).casefold()


def paths_equal(left: PathLike, right: PathLike) -> bool:
    return normalize_path(left) == normalize_path(right)


def absolute_path(path: PathLike) -> Path:
    """Absolute, lexically normalized path (symlinks are not resolved)."""
    return Path(os.path.normpath(os.path.abspath(os.fspath(path))))


def is_within_folder(folder: PathLike, path: PathLike) -> bool:
    """True when ``path`` is ``folder`` itself or lies anywhere below it.

    Compared on the real absolute paths, not on normalized keys: a sibling
    folder that differs only by case is a different folder on a
    case-sensitive filesystem.
    """
    return absolute_path(path).is_relative_to(absolute_path(folder))


def stored_path_for(template_path: PathLike, params_path: PathLike) -> str:
    """Path to record for ``params_path`` in the association settings.

    Relative to the template's folder when the parameters file lives inside
    that folder, so the mapping survives moving the whole project. Absolute
    otherwise.
    """
    template_dir = absolute_path(template_path).parent
    params_abs = absolute_path(params_path)
    if is_within_folder(template_dir, params_abs):
        return os.path.relpath(params_abs, template_dir)
    return str(params_abs)


def resolve_stored_path(template_path: PathLike, stored: str) -> Path:
    """Turn a recorded parameters path back into an absolute path.

    Relative values are resolved against the template's folder.
    """
    if os.sep == "/" and "\\" in stored:
        stored = stored.replace("\\", "/")
    template_dir = absolute_path(template_path).parent
    return absolute_path(template_dir / stored)


def friendly_path(template_path: PathLike, params_path: PathLike) -> str:
    """Display form of ``params_path``, using the same rule as storage."""
    return stored_path_for(template_path, params_path)
