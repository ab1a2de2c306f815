"""Parameters-file schema detection.

Two levels of evidence are supported:

- ``contains_params_schema``: cheap substring-level check that the
  deployment-parameters schema URI appears somewhere in the text.
- ``has_known_params_schema``: parses the document and checks that its
  top-level ``$schema`` value is one of ``KNOWN_PARAMETERS_SCHEMAS``.
"""

from __future__ import annotations

import json
import re

SUPPORTED_PARAMS_EXTENSIONS = frozenset({".json", ".jsonc"})

_PARAMS_SCHEMA_MARKER = re.compile(
    r"https?://schema\.management\.azure\.com/schemas/[^\"'\s/]+/deploymentParameters\.json",
    re.IGNORECASE,
)

KNOWN_PARAMETERS_SCHEMAS = frozenset({
    "https://schema.management.azure.com/schemas/2015-01-01/deploymentParameters.json#",
    "https://schema.management.azure.com/schemas/2015-01-01/deploymentParameters.json",
    "http://schema.management.azure.com/schemas/2015-01-01/deploymentParameters.json#",
    "http://schema.management.azure.com/schemas/2015-01-01/deploymentParameters.json",
    "https://schema.management.azure.com/schemas/2019-04-01/deploymentParameters.json#",
    "https://schema.management.azure.com/schemas/2019-04-01/deploymentParameters.json",
    "http://schema.management.azure.com/schemas/2019-04-01/deploymentParameters.json#",
    "http://schema.management.azure.com/schemas/2019-04-01/deploymentParameters.json",
})

# Strings are matched first so comment markers inside them are left alone
_COMMENT_OR_STRING = re.compile(
    r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/',
    re.DOTALL,
)
_TRAILING_COMMA_OR_STRING = re.compile(
    r'("(?:\\.|[^"\\])*")|,(\s*[}\]])',
)


def contains_params_schema(text: str) -> bool:
    """True when ``text`` mentions a deployment-parameters schema URI."""
    return _PARAMS_SCHEMA_MARKER.search(text) is not None


def strip_jsonc(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments and trailing commas from JSONC."""
    without_comments = _COMMENT_OR_STRING.sub(
        lambda m: m.group(1) if m.group(1) is not None else "",
        text,
    )
    return _TRAILING_COMMA_OR_STRING.sub(
        lambda m: m.group(1) if m.group(1) is not None else m.group(2),
        without_comments,
    )


def parse_jsonc(text: str) -> object:
    """Parse JSON-with-comments text.

    Raises:
        ValueError: If the text is not valid JSONC
        RecursionError: If the document nests deeper than the parser allows
    """
    return json.loads(strip_jsonc(text.lstrip("\ufeff")))


def has_known_params_schema(text: str) -> bool:
    """True when the document's ``$schema`` is an allow-listed parameters schema.

    A marker inside a comment, or inside some unrelated property, does not
    count.
    """
    try:
        data = parse_jsonc(text)
    except (ValueError, RecursionError):
        return False

    if not isinstance(data, dict):
        return False
    schema = data.get("$schema")
    return isinstance(schema, str) and schema.strip() in KNOWN_PARAMETERS_SCHEMAS
