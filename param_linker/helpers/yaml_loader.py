"""
Type-safe YAML loader for settings and state files.
Provides a validated ruamel.yaml instance that preserves comments on rewrite.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Protocol, TextIO, Union, cast

from ruamel.yaml import YAML

# Recursive type for nested YAML structures
ConfigValue = Union[str, int, float, bool, None, 'ConfigDict', list['ConfigValue']]
ConfigDict = dict[str, ConfigValue]


class YAMLLoader(Protocol):
    """Protocol for YAML loader with comment preservation."""
    preserve_quotes: bool
    default_flow_style: bool

    def load(self, stream: TextIO) -> ConfigValue:
        """Load YAML from stream."""
        ...

    def dump(self, data: object, stream: TextIO) -> None:
        """Dump YAML to stream."""
        ...


def _validate_yaml_loader(obj: object) -> None:
    """Runtime validation: Ensure YAML object has expected interface.

    Raises:
        AttributeError: If required attributes/methods are missing
        TypeError: If methods are not callable
    """
    for attr in ('load', 'dump', 'preserve_quotes', 'default_flow_style'):
        if not hasattr(obj, attr):
            raise AttributeError(f"YAML object missing required attribute: {attr}")

    if not callable(obj.load):  # type: ignore[attr-defined]
        raise TypeError("YAML.load is not callable")
    if not callable(obj.dump):  # type: ignore[attr-defined]
        raise TypeError("YAML.dump is not callable")


def _create_yaml_loader() -> YAMLLoader:
    """Create and validate a round-trip YAML loader instance."""
    yaml_obj = YAML()
    yaml_obj.preserve_quotes = True
    yaml_obj.default_flow_style = False
    _validate_yaml_loader(yaml_obj)
    return cast(YAMLLoader, yaml_obj)


yaml: YAMLLoader = _create_yaml_loader()


def load_yaml_mapping(file_path: Path) -> ConfigDict:
    """Load a YAML file whose top level is a mapping.

    A missing or empty file loads as an empty mapping. Settings files are
    optional, so absence is not an error here.

    Raises:
        ValueError: If the document's top level is not a mapping
        OSError: If the file exists but cannot be read
    """
    if not file_path.exists():
        return {}

    with file_path.open(encoding='utf-8') as f:
        raw: ConfigValue = yaml.load(f)

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a mapping at the top of {file_path}")
    return cast(ConfigDict, raw)


def save_yaml_file(data: ConfigDict, file_path: Path) -> None:
    """Replace a YAML file with ``data`` in one step.

    The document is written to a sibling temp file and moved into place, so
    readers never observe a partially written settings file.
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{file_path.name}.", suffix=".tmp", dir=file_path.parent
    )
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            yaml.dump(data, f)
        os.replace(tmp_name, file_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
