"""
Name normalization for generated TypeScript artifacts.

Two separate rules live here:

* ``to_interface_name`` turns a raw Builder.io model name into a PascalCase
  TypeScript identifier (``hvac-unit-series`` -> ``IHVACUnitSeries``).
* ``to_slug`` turns the same raw name into a filesystem-safe file stem
  (``HVAC Unit Series`` -> ``hvac-unit-series``).

Both are pure and deterministic.
"""

import re
from typing import List

# Tokens rendered fully upper-case when matched case-insensitively
ACRONYMS = frozenset({"HVAC", "API", "URL", "HTML", "CSS", "JS", "TS", "ID", "UUID"})

INTERFACE_PREFIX = "I"

# Used when a name contains no alphanumeric characters at all
PLACEHOLDER_TOKEN = "Unnamed"
PLACEHOLDER_SLUG = "unnamed"

_SEPARATOR_RE = re.compile(r"[^A-Za-z0-9]+")
# Splits camelCase / PascalCase runs, keeping acronyms together: HVACUnit -> HVAC, Unit
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")
_SLUG_RE = re.compile(r"[^a-z0-9]+")


def split_words(name: str) -> List[str]:
    """Split a raw name into word tokens."""
    words = []
    for chunk in _SEPARATOR_RE.split(name or ""):
        if chunk:
            words.extend(_WORD_RE.findall(chunk))
    return words


def _render_word(word: str) -> str:
    upper = word.upper()
    if upper in ACRONYMS:
        return upper
    return word[:1].upper() + word[1:].lower()


def to_pascal_case(name: str) -> str:
    """
    Convert a raw name to PascalCase, keeping known acronyms upper-case.

    A name made only of separators yields ``PLACEHOLDER_TOKEN``.
    """
    words = split_words(name)
    if not words:
        return PLACEHOLDER_TOKEN
    return "".join(_render_word(word) for word in words)


def to_interface_name(name: str, use_prefix: bool = True) -> str:
    """
    Build the TypeScript interface name for a model.

    Args:
        name: Raw model name
        use_prefix: Prepend ``INTERFACE_PREFIX`` (``I``)

    Returns:
        A valid TypeScript identifier
    """
    pascal = to_pascal_case(name)
    if use_prefix:
        return f"{INTERFACE_PREFIX}{pascal}"
    if pascal[0].isdigit():
        return f"_{pascal}"
    return pascal


def to_slug(name: str) -> str:
    """Lower-case file stem with non-alphanumeric runs collapsed to ``-``."""
    slug = _SLUG_RE.sub("-", (name or "").lower()).strip("-")
    return slug or PLACEHOLDER_SLUG
