"""Content-based detection of parameters files.

Reading is bounded: at most ``max_bytes`` are pulled from any file, and
reading stops as soon as the schema marker is seen. The check runs on every
document open/save, so a large unrelated JSON file next to a template must
not be read in full.
"""

from __future__ import annotations

import codecs
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from param_linker.core.paths import PathLike
from param_linker.core.schemas import (
    SUPPORTED_PARAMS_EXTENSIONS,
    contains_params_schema,
    has_known_params_schema,
)
from param_linker.helpers.helpers_logging import print_debug

DEFAULT_MAX_BYTES = 50 * 1024
DEFAULT_CHUNK_SIZE = 4 * 1024
STRICT_MAX_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class SniffResult:
    """Outcome of a bounded read.

    Attributes:
        matched: True if the predicate accepted the accumulated text.
        bytes_read: Total bytes consumed from the file.
    """

    matched: bool
    bytes_read: int


def has_supported_params_extension(path: PathLike) -> bool:
    """True for ``.json``/``.jsonc`` files, compared case-insensitively."""
    return Path(path).suffix.lower() in SUPPORTED_PARAMS_EXTENSIONS


def read_until_match(
    path: PathLike,
    predicate: Callable[[str], bool],
    max_bytes: int = DEFAULT_MAX_BYTES,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> SniffResult:
    """Stream ``path`` until ``predicate`` accepts the text read so far.

    The predicate is evaluated after every chunk against everything read so
    far. Reading stops at the first acceptance, at end of file, or once
    ``max_bytes`` have been consumed.

    Raises:
        OSError: If the file cannot be opened or read
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    content = ""
    bytes_read = 0

    with Path(path).open("rb") as stream:
        while bytes_read < max_bytes:
            chunk = stream.read(min(chunk_size, max_bytes - bytes_read))
            if not chunk:
                break
            bytes_read += len(chunk)
            content += decoder.decode(chunk)
            if predicate(content):
                return SniffResult(matched=True, bytes_read=bytes_read)

    return SniffResult(matched=False, bytes_read=bytes_read)


def _passes_strict_check(path: Path) -> bool:
    if path.stat().st_size > STRICT_MAX_BYTES:
        return False
    text = path.read_text(encoding="utf-8", errors="replace")
    return has_known_params_schema(text)


def is_parameters_file(
    path: PathLike,
    *,
    strict: bool = False,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> bool:
    """Decide whether ``path`` is plausibly a deployment parameters file.

    Args:
        path: File to inspect
        strict: Also require an allow-listed top-level ``$schema`` value
        max_bytes: Ceiling on bytes read while looking for the marker

    Returns:
        True if the file looks like a parameters file. Unreadable files are
        reported as False, never raised.
    """
    if not has_supported_params_extension(path):
        return False

    try:
        result = read_until_match(path, contains_params_schema, max_bytes)
        if not result.matched:
            return False
        if strict:
            return _passes_strict_check(Path(path))
        return True
    except (OSError, UnicodeError) as exc:
        print_debug(f"Could not sniff {path}: {exc}")
        return False
