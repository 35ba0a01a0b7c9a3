"""Total accessors over values produced by `yaml.safe_load`.

A loaded YAML value is one of four kinds: mapping, sequence, scalar or
null. Every accessor here checks the kind first and falls back to a
default instead of assuming a field is present.
"""

from enum import Enum
from typing import Any


class NodeKind(Enum):
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"
    NULL = "null"


def kind_of(value: Any) -> NodeKind:
    if value is None:
        return NodeKind.NULL
    if isinstance(value, dict):
        return NodeKind.MAPPING
    if isinstance(value, list):
        return NodeKind.SEQUENCE
    return NodeKind.SCALAR


def as_mapping(value: Any) -> dict:
    """Return `value` if it is a mapping, else an empty dict."""
    return value if kind_of(value) is NodeKind.MAPPING else {}


def as_sequence(value: Any) -> list:
    """Return `value` if it is a sequence, else an empty list."""
    return value if kind_of(value) is NodeKind.SEQUENCE else []


def scalar_text(value: Any) -> str | None:
    """Render a scalar as text the way it would read in YAML.

    Returns None for null, mappings and sequences.
    """
    if kind_of(value) is not NodeKind.SCALAR:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def get_text(mapping: dict, key: str, default: str) -> str:
    """Read `mapping[key]` as text, using `default` when it is absent or not a scalar."""
    text = scalar_text(mapping.get(key))
    return default if text is None else text


def get_mapping(mapping: dict, *keys: str) -> dict:
    """Walk nested mappings along `keys`; any missing level yields an empty dict."""
    current = mapping
    for key in keys:
        current = as_mapping(current.get(key))
    return current
