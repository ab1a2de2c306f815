"""Persisted template -> parameters-file associations.

Associations live under the ``paramLinker.parameterFiles`` setting as a
mapping from template path to parameters path. Reads merge every scope in
the stack, highest precedence first. Writes only ever touch the stack's
writable scope.

Settings example (workspace ``.param-linker.yaml``):

```yaml
paramLinker.parameterFiles:
  /work/infra/main.json: main.parameters.dev.json
  /work/infra/network.json: /shared/params/network.parameters.json
```
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import cast

from param_linker.config import ConfigKeys, setting_key
from param_linker.core.errors import ConfigReadError, ConfigurationError, ConfigWriteError
from param_linker.core.paths import (
    PathLike,
    absolute_path,
    normalize_path,
    resolve_stored_path,
    stored_path_for,
)
from param_linker.core.scopes import ScopeStack
from param_linker.helpers.helpers_logging import print_debug, print_warning

PARAMETER_FILES_KEY = setting_key(ConfigKeys.PARAMETER_FILES)

STATUS_VALIDATING = "Validating against parameters file {path}"
STATUS_NOT_ASSOCIATED = "Select a parameters file to enable full validation"


def _find_in_mapping(mapping: Mapping[object, object], template_key: str) -> str | None:
    """Stored parameters path for ``template_key`` in one scope's mapping.

    Keys are compared normalized. If several keys collapse to the same
    template, the last one wins.
    """
    found: str | None = None
    for key, value in mapping.items():
        if not isinstance(key, str) or not isinstance(value, str) or not value:
            continue
        if normalize_path(key) == template_key:
            found = value
    return found


class AssociationStore:
    """Resolve and record which parameters file belongs to a template."""

    def __init__(self, stack: ScopeStack) -> None:
        self.stack = stack

    def resolve(self, template_path: PathLike) -> Path | None:
        """Parameters file associated with ``template_path``, if any.

        Scopes are consulted highest precedence first; the first scope with an
        entry for this template decides. Relative entries are resolved against
        the template's folder.
        """
        template = absolute_path(template_path)
        template_key = normalize_path(template)

        for scope in self.stack.scopes_highest_first():
            try:
                raw = scope.read().get(PARAMETER_FILES_KEY)
            except ConfigReadError as exc:
                print_debug(f"Skipping unreadable scope '{scope.name}': {exc}")
                continue
            if not isinstance(raw, Mapping):
                continue
            stored = _find_in_mapping(cast(Mapping[object, object], raw), template_key)
            if stored is not None:
                return resolve_stored_path(template, stored)

        return None

    def set(self, template_path: PathLike, params_path: PathLike | None) -> bool:
        """Record (or clear, with ``None``) the association for a template.

        Only the writable scope is modified. Existing entries whose key
        normalizes to the same template are pruned first, so case or
        separator variants cannot pile up.

        Returns:
            True if the association was persisted, False if the writable scope
            could not be written.
        """
        try:
            self._write(template_path, params_path)
        except ConfigurationError as exc:
            print_warning(f"Could not save parameters file association: {exc}")
            return False
        return True

    def _write(self, template_path: PathLike, params_path: PathLike | None) -> None:
        template = absolute_path(template_path)
        template_key = normalize_path(template)
        stored = stored_path_for(template, params_path) if params_path is not None else None

        def _replace_entry(existing: object) -> object:
            if existing is None:
                existing = {}
            if not isinstance(existing, Mapping):
                raise ConfigWriteError(
                    f"Setting '{PARAMETER_FILES_KEY}' is not a mapping "
                    + f"(found {type(existing).__name__})"
                )

            new_map: dict[str, object] = {
                str(key): value
                for key, value in cast(Mapping[object, object], existing).items()
                if normalize_path(str(key)) != template_key
            }
            if stored is not None:
                new_map[str(template)] = stored
            return new_map or None

        self.stack.modify(PARAMETER_FILES_KEY, _replace_entry)

    def describe(self, template_path: PathLike) -> str:
        """Status-line text for the template's association."""
        params = self.resolve(template_path)
        if params is None:
            return STATUS_NOT_ASSOCIATED
        return STATUS_VALIDATING.format(path=params)
