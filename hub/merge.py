from __future__ import annotations

from typing import Any, Dict


def deep_merge(target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
    """Return a new dict with *source* merged recursively on top of *target*.

    Nested dicts present on both sides are merged key by key. Anything else
    (lists, scalars, None, mismatched types) from *source* replaces the value
    in *target*, so lists are always swapped wholesale. Keys absent from
    *source* keep their old value. Neither argument is mutated; untouched
    nested values are shared with *target*.
    """
    result = dict(target)
    for key, value in source.items():
        existing = result.get(key)
        if isinstance(value, dict) and isinstance(existing, dict):
            result[key] = deep_merge(existing, value)
        else:
            result[key] = value
    return result
