"""Layered configuration scopes.

A ``ScopeStack`` merges any number of scopes for reads, lowest precedence
first (user, then workspace), and writes to exactly one designated scope.

Writes go through ``modify``: the current value is read, transformed and
written back while the scope's lock is held, so two writers of the same key
never both start from the same old value.
"""

from __future__ import annotations

import copy
import os
import threading
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from pathlib import Path
from typing import Protocol, cast

from ruamel.yaml.error import YAMLError

from param_linker import config
from param_linker.core.errors import ConfigReadError, ConfigWriteError
from param_linker.helpers.yaml_loader import ConfigDict, load_yaml_mapping, save_yaml_file

# Receives the key's current value (None when unset); returning None removes it
Transform = Callable[[object], object]


class ConfigurationTarget(str, Enum):
    """Named scopes, in ascending precedence."""

    USER = "user"
    WORKSPACE = "workspace"


class ConfigScope(Protocol):
    """One named layer of settings."""

    name: str

    def read(self) -> Mapping[str, object]:
        """Return a snapshot of every key defined in this scope."""
        ...

    def update(self, key: str, value: object | None) -> None:
        """Set ``key`` to ``value``; ``None`` removes the key.

        Raises:
            ConfigWriteError: If the scope cannot be written
        """
        ...

    def modify(self, key: str, transform: Transform) -> None:
        """Replace ``key`` with ``transform(current)`` in one locked step.

        An exception raised by ``transform`` leaves the scope unchanged and
        propagates.

        Raises:
            ConfigWriteError: If the scope cannot be written
        """
        ...


class MemoryScope:
    """In-memory scope, for hosts that keep settings themselves and for tests."""

    def __init__(self, name: str, values: Mapping[str, object] | None = None) -> None:
        self.name = name
        self._values: dict[str, object] = dict(values or {})
        self._lock = threading.Lock()

    def read(self) -> Mapping[str, object]:
        with self._lock:
            return copy.deepcopy(self._values)

    def update(self, key: str, value: object | None) -> None:
        self.modify(key, lambda _current: value)

    def modify(self, key: str, transform: Transform) -> None:
        with self._lock:
            value = transform(copy.deepcopy(self._values.get(key)))
            if value is None:
                self._values.pop(key, None)
            else:
                self._values[key] = copy.deepcopy(value)


_FILE_LOCKS: dict[str, threading.Lock] = {}
_FILE_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    """One lock per settings file, shared by every scope object that opens it."""
    key = os.path.normcase(os.path.abspath(path))
    with _FILE_LOCKS_GUARD:
        return _FILE_LOCKS.setdefault(key, threading.Lock())


class YamlFileScope:
    """Scope backed by one YAML settings file.

    Every write re-reads the file, applies the change and replaces the whole
    document while holding the file's lock. Writers in this process are
    serialized, and a reader never sees a half-written file.
    """

    def __init__(self, name: str, path: Path) -> None:
        self.name = name
        self.path = path
        self._lock = _lock_for(path)

    def read(self) -> Mapping[str, object]:
        try:
            return load_yaml_mapping(self.path)
        except (OSError, ValueError, YAMLError) as exc:
            raise ConfigReadError(f"Cannot read settings file {self.path}: {exc}") from exc

    def update(self, key: str, value: object | None) -> None:
        self.modify(key, lambda _current: value)

    def modify(self, key: str, transform: Transform) -> None:
        with self._lock:
            try:
                data = cast(ConfigDict, self.read())
            except ConfigReadError as exc:
                raise ConfigWriteError(str(exc)) from exc
            value = transform(data.get(key))
            if value is None:
                if key not in data:
                    return
                del data[key]
            else:
                data[key] = value  # type: ignore[assignment]
            try:
                save_yaml_file(data, self.path)
            except OSError as exc:
                raise ConfigWriteError(f"Cannot write settings file {self.path}: {exc}") from exc

    def __repr__(self) -> str:
        return f"YamlFileScope({self.name!r}, {str(self.path)!r})"


class ScopeStack:
    """Ordered scopes (lowest precedence first) plus one writable scope."""

    def __init__(
        self,
        scopes: Sequence[ConfigScope],
        writable: ConfigScope | None = None,
    ) -> None:
        self.scopes: list[ConfigScope] = list(scopes)
        self.writable = writable

    def scopes_highest_first(self) -> list[ConfigScope]:
        return list(reversed(self.scopes))

    def get(self, key: str, default: object = None) -> object:
        """Value of ``key`` from the highest-precedence scope defining it.

        Unreadable scopes are skipped.
        """
        for scope in self.scopes_highest_first():
            try:
                values = scope.read()
            except ConfigReadError:
                continue
            if key in values:
                return values[key]
        return default

    def get_bool(self, key: str, default: bool) -> bool:
        value = self.get(key, default)
        return value if isinstance(value, bool) else default

    def update(self, key: str, value: object | None) -> None:
        """Write ``key`` in the writable scope.

        Raises:
            ConfigWriteError: If there is no writable scope or the write fails
        """
        self._require_writable().update(key, value)

    def modify(self, key: str, transform: Transform) -> None:
        """Read-transform-write ``key`` in the writable scope as one step.

        Raises:
            ConfigWriteError: If there is no writable scope or the write fails
        """
        self._require_writable().modify(key, transform)

    def _require_writable(self) -> ConfigScope:
        if self.writable is None:
            raise ConfigWriteError("No writable configuration scope is available")
        return self.writable


def build_scope_stack(
    template_path: Path,
    target: ConfigurationTarget | None = None,
) -> ScopeStack:
    """Assemble the user + workspace stack for a template on disk.

    Args:
        template_path: Template whose enclosing workspace selects the
            workspace scope
        target: Scope to write to. ``None`` picks the most specific scope
            available (workspace when the template is inside one).

    Returns:
        Stack whose writable scope is None when ``target`` names a scope that
        does not exist for this template.
    """
    user_scope = YamlFileScope(ConfigurationTarget.USER.value, config.get_user_settings_path())
    scopes: list[ConfigScope] = [user_scope]
    workspace_scope: YamlFileScope | None = None

    workspace_root = config.find_workspace_root(template_path)
    if workspace_root is not None:
        workspace_scope = YamlFileScope(
            ConfigurationTarget.WORKSPACE.value,
            config.get_workspace_settings_path(workspace_root),
        )
        scopes.append(workspace_scope)

    if target is None:
        writable: ConfigScope | None = workspace_scope or user_scope
    elif target is ConfigurationTarget.WORKSPACE:
        writable = workspace_scope
    else:
        writable = user_scope

    return ScopeStack(scopes, writable)
