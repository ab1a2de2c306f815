"""Process-durable key/value state (not user settings).

Holds the Don't-Ask list: templates for which the user permanently declined
the "associate this parameters file?" prompt.
"""

from __future__ import annotations

from pathlib import Path

from param_linker import config
from param_linker.config import GlobalStateKeys
from param_linker.core.errors import ConfigReadError
from param_linker.core.paths import PathLike, absolute_path, normalize_path
from param_linker.core.scopes import ConfigScope, MemoryScope, Transform, YamlFileScope
from param_linker.helpers.helpers_logging import print_debug


class GlobalState:
    """Key/value store with get-with-default and delete-by-``None``."""

    def __init__(self, backend: ConfigScope) -> None:
        self.backend = backend

    @classmethod
    def in_memory(cls) -> GlobalState:
        return cls(MemoryScope("globalState"))

    @classmethod
    def from_file(cls, path: Path | None = None) -> GlobalState:
        return cls(YamlFileScope("globalState", path or config.get_global_state_path()))

    def get(self, key: str, default: object = None) -> object:
        try:
            return self.backend.read().get(key, default)
        except ConfigReadError as exc:
            print_debug(f"Global state unreadable, using default for '{key}': {exc}")
            return default

    def update(self, key: str, value: object | None) -> None:
        """Store ``value`` under ``key``; ``None`` deletes the key.

        Raises:
            ConfigWriteError: If the backend cannot be written
        """
        self.backend.update(key, value)

    def modify(self, key: str, transform: Transform) -> None:
        """Replace ``key`` with ``transform(current)`` as one locked step.

        Raises:
            ConfigWriteError: If the backend cannot be written
        """
        self.backend.modify(key, transform)


class DontAskList:
    """Persisted set of templates that must never be prompted about again."""

    key = GlobalStateKeys.DONT_ASK_ABOUT_PARAMETER_FILES

    def __init__(self, state: GlobalState) -> None:
        self.state = state

    def entries(self) -> list[str]:
        raw = self.state.get(self.key, [])
        if not isinstance(raw, list):
            return []
        return [str(item) for item in raw if isinstance(item, str)]

    def contains(self, template_path: PathLike) -> bool:
        template_key = normalize_path(absolute_path(template_path))
        return any(normalize_path(entry) == template_key for entry in self.entries())

    def add(self, template_path: PathLike) -> None:
        """Remember ``template_path``.

        Raises:
            ConfigWriteError: If the state could not be saved
        """
        if self.contains(template_path):
            return
        entry = str(absolute_path(template_path))
        template_key = normalize_path(entry)

        def _append(current: object) -> object:
            if not isinstance(current, list):
                current = []
            entries = [item for item in current if isinstance(item, str)]
            if any(normalize_path(item) == template_key for item in entries):
                return entries
            return [*entries, entry]

        self.state.modify(self.key, _append)

    def clear(self) -> None:
        self.state.update(self.key, None)


# Every persisted global-state key owned by this package
OWNED_GLOBAL_STATE_KEYS = (GlobalStateKeys.DONT_ASK_ABOUT_PARAMETER_FILES,)


def reset_global_state(state: GlobalState) -> None:
    """Clear all persisted global state. User settings are not touched.

    Raises:
        ConfigWriteError: If the state could not be saved
    """
    for key in OWNED_GLOBAL_STATE_KEYS:
        state.update(key, None)
