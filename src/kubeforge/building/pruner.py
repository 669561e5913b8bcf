#!/usr/bin/env python3
"""
KUBEFORGE PRUNER - The Janitor
------------------------------
Recursively strips editor noise from a configuration tree before it is
emitted: unset values, empty strings, empty maps and lists, and the
synthetic `id` keys the form editor attaches to list rows.

Numbers and booleans are data, never noise: `0` and `False` always survive.

Author: KubeForge Team
Date: 2026-10-18
"""

from typing import Any, Dict, Iterable, List, Mapping

SYNTHETIC_KEYS = frozenset({"id"})


def is_set(value: Any) -> bool:
    """Presence check used by every builder: None and "" mean unset."""
    return value is not None and value != ""


def has_items(value: Any) -> bool:
    """True for a non-empty list/tuple or mapping."""
    return isinstance(value, (list, tuple, Mapping)) and len(value) > 0


def copy_fields(target: Dict[str, Any], source: Mapping, keys: Iterable[str]) -> Dict[str, Any]:
    """Copies each key of `source` that is set into `target`, preserving key order."""
    for key in keys:
        value = source.get(key)
        if isinstance(value, (list, tuple, Mapping)):
            if has_items(value):
                target[key] = value
        elif is_set(value):
            target[key] = value
    return target


def _prune_list(items: List[Any]) -> List[Any]:
    cleaned = []
    for item in items:
        if isinstance(item, Mapping):
            item = _prune_map(item)
            if item:
                cleaned.append(item)
        elif isinstance(item, (list, tuple)):
            item = _prune_list(item)
            if item:
                cleaned.append(item)
        elif is_set(item):
            cleaned.append(item)
    return cleaned


def _prune_map(data: Mapping) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key, value in data.items():
        if key in SYNTHETIC_KEYS or not is_set(value):
            continue

        if isinstance(value, Mapping):
            nested = _prune_map(value)
            if nested:
                cleaned[key] = nested
        elif isinstance(value, (list, tuple)):
            nested = _prune_list(value)
            if nested:
                cleaned[key] = nested
        else:
            # Scalars (including 0 and False) are kept verbatim
            cleaned[key] = value
    return cleaned


def prune(value: Any) -> Any:
    """
    Returns a pruned copy of `value`; the input is never mutated.

    A top-level list comes back as a list even when every element was
    pruned away, so callers must check its length before assigning it.
    """
    if isinstance(value, Mapping):
        return _prune_map(value)
    if isinstance(value, (list, tuple)):
        return _prune_list(value)
    return value
