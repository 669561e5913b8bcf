#!/usr/bin/env python3
"""
KUBEFORGE WORKLOAD BUILDER
--------------------------
Replica-style controllers: Deployment, ReplicaSet and DaemonSet.

All three share one assembly path (metadata + controller spec + pod
template), but each kind only accepts the spec fields Kubernetes defines
for it. Anything else the editor recorded is dropped with a warning, so a
DaemonSet can never carry `replicas`.

Author: KubeForge Team
Date: 2026-10-18
"""

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from kubeforge.building.pod import build_metadata, build_pod_template
from kubeforge.building.pruner import copy_fields, is_set
from kubeforge.core.catalog import WORKLOAD_SPEC_FIELDS, api_version_for
from kubeforge.core.errors import BuildError

logger = logging.getLogger("kubeforge.builders")

# Every controller field the editor can record, in emission order
CONTROLLER_FIELDS = (
    "replicas", "minReadySeconds", "progressDeadlineSeconds", "revisionHistoryLimit",
    "paused", "selector", "strategy", "updateStrategy", "serviceName", "podManagementPolicy",
)
STRATEGY_FIELDS = ("strategy", "updateStrategy")

ROLLING_KEYS = {
    "Deployment": ("maxSurge", "maxUnavailable"),
    "DaemonSet": ("maxSurge", "maxUnavailable"),
    "StatefulSet": ("partition", "maxUnavailable"),
}


def build_update_strategy(source: Any, rolling_keys: Sequence[str]) -> Dict[str, Any]:
    """`{type, rollingUpdate: {...}}` with only the rolling keys that are set."""
    if not isinstance(source, Mapping):
        return {}
    strategy = copy_fields({}, source, ("type",))
    rolling = source.get("rollingUpdate")
    if isinstance(rolling, Mapping):
        rolling_update = copy_fields({}, rolling, rolling_keys)
        if rolling_update:
            strategy["rollingUpdate"] = rolling_update
    return strategy


def build_workload(name: str, config: Optional[Mapping], containers: Any, kind: str,
                   namespace: Optional[str] = None) -> Dict[str, Any]:
    """
    Assembles a Deployment, ReplicaSet or DaemonSet manifest tree.
    The result is not pruned yet; the engine prunes the whole document.
    """
    if kind not in WORKLOAD_SPEC_FIELDS:
        raise BuildError(f"'{kind}' is not a replica-style workload kind.")

    config = config or {}
    source = config.get("spec") or {}
    allowed = WORKLOAD_SPEC_FIELDS[kind]

    spec: Dict[str, Any] = {}
    for field in CONTROLLER_FIELDS:
        value = source.get(field)
        if not is_set(value):
            continue
        if field not in allowed:
            logger.warning(f"Dropping '{field}' from {kind} '{name}': not a {kind} spec field.")
            continue
        if field in STRATEGY_FIELDS:
            strategy = build_update_strategy(value, ROLLING_KEYS.get(kind, ()))
            if strategy:
                spec[field] = strategy
        else:
            copy_fields(spec, source, (field,))

    spec["template"] = build_pod_template(config.get("template"), containers)

    return {
        "apiVersion": api_version_for(kind),
        "kind": kind,
        "metadata": build_metadata(name, config, namespace),
        "spec": spec,
    }
