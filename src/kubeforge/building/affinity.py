#!/usr/bin/env python3
"""
KUBEFORGE AFFINITY TRANSLATOR
-----------------------------
The editor lets a user build at most one required and one preferred term
per affinity axis. Kubernetes expects lists of terms under the
`...DuringSchedulingIgnoredDuringExecution` keys. This module is the single
place that bridges the two cardinalities.

An axis that carries no usable term is left out entirely. It must never be
emitted as an empty list: an empty `nodeSelectorTerms` matches no node at all,
which is very different from having no affinity.

Author: KubeForge Team
Date: 2026-10-18
"""

from typing import Any, Dict, List, Mapping, Optional

from kubeforge.building.pruner import has_items, is_set, prune

REQUIRED_KEY = "requiredDuringSchedulingIgnoredDuringExecution"
PREFERRED_KEY = "preferredDuringSchedulingIgnoredDuringExecution"
DEFAULT_WEIGHT = 1

VALUELESS_OPERATORS = ("Exists", "DoesNotExist")


def _unwrap(entry: Any, wrapper_key: str) -> Optional[Dict[str, Any]]:
    """
    Finds the term inside an editor scheduling entry. The term may sit under
    the editor's wrapper key, under `term`, or be the entry itself.

    The term comes back pruned, so blank editor rows never count as content.
    """
    if not isinstance(entry, Mapping):
        return None
    for key in (wrapper_key, "term"):
        if isinstance(entry.get(key), Mapping):
            return prune(entry[key])
    return prune(entry)


def _weight(entry: Mapping, term: Mapping) -> Any:
    for source in (entry, term):
        if is_set(source.get("weight")):
            return source["weight"]
    return DEFAULT_WEIGHT


def selector_from_rows(selector: Any) -> Any:
    """
    Converts an editor selector (`matches` rows tagged label/expression) into
    `matchLabels` / `matchExpressions`. Canonical selectors pass through.
    """
    if not isinstance(selector, Mapping) or "matches" not in selector:
        return selector

    canonical: Dict[str, Any] = {k: v for k, v in selector.items() if k != "matches"}
    labels = dict(canonical.get("matchLabels") or {})
    expressions: List[Dict[str, Any]] = list(canonical.get("matchExpressions") or [])

    for row in selector.get("matches") or []:
        if not isinstance(row, Mapping) or not is_set(row.get("key")):
            continue
        if row.get("type", "label") == "label":
            labels[row["key"]] = row.get("value")
            continue
        expression = {"key": row["key"], "operator": row.get("operator")}
        if row.get("operator") not in VALUELESS_OPERATORS and has_items(row.get("values")):
            expression["values"] = list(row["values"])
        expressions.append(expression)

    if labels:
        canonical["matchLabels"] = labels
    if expressions:
        canonical["matchExpressions"] = expressions
    return canonical


def _node_term(entry: Any) -> Optional[Dict[str, Any]]:
    term = _unwrap(entry, "nodeAffinityTerm")
    if term is None:
        return None
    if not (has_items(term.get("matchExpressions")) or has_items(term.get("matchFields"))):
        return None
    return term


def _pod_term(entry: Any) -> Optional[Dict[str, Any]]:
    term = _unwrap(entry, "podAffinityTerm")
    if term is None:
        return None
    topology_key = term.get("topologyKey")
    if not isinstance(topology_key, str) or not topology_key:
        return None
    for key in ("labelSelector", "namespaceSelector"):
        if key in term:
            term[key] = selector_from_rows(term[key])
    return term


def _translate_node(axis: Mapping) -> Dict[str, Any]:
    result: Dict[str, Any] = {}

    term = _node_term(axis.get("requiredDuringScheduling"))
    if term is not None:
        term.pop("weight", None)
        result[REQUIRED_KEY] = {"nodeSelectorTerms": [term]}

    entry = axis.get("preferredDuringScheduling")
    term = _node_term(entry)
    if term is not None:
        weight = _weight(entry, term)
        term.pop("weight", None)
        result[PREFERRED_KEY] = [{"weight": weight, "preference": term}]

    return result


def _translate_pod(axis: Mapping) -> Dict[str, Any]:
    result: Dict[str, Any] = {}

    term = _pod_term(axis.get("requiredDuringScheduling"))
    if term is not None:
        term.pop("weight", None)
        result[REQUIRED_KEY] = [term]

    entry = axis.get("preferredDuringScheduling")
    term = _pod_term(entry)
    if term is not None:
        weight = _weight(entry, term)
        term.pop("weight", None)
        result[PREFERRED_KEY] = [{"weight": weight, "podAffinityTerm": term}]

    return result


def translate_affinity(ui_affinity: Any) -> Optional[Dict[str, Any]]:
    """Returns the canonical affinity block, or None when no axis has content."""
    if not isinstance(ui_affinity, Mapping):
        return None

    affinity: Dict[str, Any] = {}
    translators = (
        ("nodeAffinity", _translate_node),
        ("podAffinity", _translate_pod),
        ("podAntiAffinity", _translate_pod),
    )
    for axis_name, translate in translators:
        axis = ui_affinity.get(axis_name)
        if not isinstance(axis, Mapping):
            continue
        translated = translate(axis)
        if translated:
            affinity[axis_name] = translated

    return affinity or None
