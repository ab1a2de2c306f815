"""Filename affinity between a template and a candidate parameters file.

Common pairings:
    template.json  ->  template.params.json
    template.json  ->  template.parameters.json
    template.json  ->  template.parameters.dev.json
"""

from pathlib import Path

from param_linker.core.content_sniffer import has_supported_params_extension
from param_linker.core.paths import PathLike


def remove_all_extensions(file_name: str) -> str:
    """Strip every extension, e.g. ``a.params.dev.json`` -> ``a``.

    A leading dot is part of the name, not an extension separator.
    """
    dot = file_name.find(".", 1)
    return file_name if dot < 0 else file_name[:dot]


def is_likely_matching_params_file(
    template_file_name: PathLike,
    candidate_file_name: PathLike,
) -> bool:
    """True when the candidate's name suggests it belongs to the template.

    The candidate must have a supported extension, and its stem (all
    extensions stripped, lower-cased) must start with the template's stem.
    Trailing qualifiers such as ``.params`` or ``.dev`` are tolerated. Names
    that only share a substring elsewhere are not.
    """
    if not has_supported_params_extension(candidate_file_name):
        return False

    template_stem = remove_all_extensions(Path(template_file_name).name).lower()
    candidate_stem = remove_all_extensions(Path(candidate_file_name).name).lower()
    return candidate_stem.startswith(template_stem)
