#!/usr/bin/env python3
"""
KUBEFORGE STATEFULSET BUILDER
-----------------------------
StatefulSets get their own builder because of volume claim templates,
ordinals and the PVC retention policy.

Author: KubeForge Team
Date: 2026-10-18
"""

from typing import Any, Dict, List, Mapping, Optional

from kubeforge.building.pod import METADATA_FIELDS, build_metadata, build_pod_template
from kubeforge.building.pruner import copy_fields, prune
from kubeforge.building.workloads import ROLLING_KEYS, build_update_strategy
from kubeforge.core.catalog import api_version_for

CLAIM_SPEC_FIELDS = (
    "accessModes", "storageClassName", "volumeName", "volumeMode",
    "volumeAttributesClassName", "resources", "dataSource", "dataSourceRef", "selector",
)
SCALAR_FIELDS = ("replicas", "minReadySeconds", "revisionHistoryLimit", "serviceName", "podManagementPolicy")


def build_volume_claim_template(template: Mapping) -> Dict[str, Any]:
    """One PVC blueprint, metadata and spec pruned independently."""
    metadata = template.get("metadata") or {}
    spec = template.get("spec") or {}
    return {
        "metadata": prune(copy_fields({}, metadata, ("name",) + METADATA_FIELDS)),
        "spec": prune(copy_fields({}, spec, CLAIM_SPEC_FIELDS)),
    }


def build_volume_claim_templates(templates: Any) -> List[Dict[str, Any]]:
    if not templates:
        return []
    built = (build_volume_claim_template(t) for t in templates if isinstance(t, Mapping))
    return prune(list(built))


def build_statefulset(name: str, config: Optional[Mapping], containers: Any,
                      namespace: Optional[str] = None) -> Dict[str, Any]:
    config = config or {}
    source = config.get("spec") or {}

    spec = copy_fields({}, source, SCALAR_FIELDS)
    copy_fields(spec, source, ("selector",))

    strategy = build_update_strategy(source.get("updateStrategy"), ROLLING_KEYS["StatefulSet"])
    if strategy:
        spec["updateStrategy"] = strategy

    ordinals = source.get("ordinals")
    if isinstance(ordinals, Mapping):
        start = copy_fields({}, ordinals, ("start",))
        if start:
            spec["ordinals"] = start

    retention = source.get("persistentVolumeClaimRetentionPolicy")
    if isinstance(retention, Mapping):
        policy = copy_fields({}, retention, ("whenDeleted", "whenScaled"))
        if policy:
            spec["persistentVolumeClaimRetentionPolicy"] = policy

    claims = build_volume_claim_templates(source.get("volumeClaimTemplates"))
    if claims:
        spec["volumeClaimTemplates"] = claims

    spec["template"] = build_pod_template(config.get("template"), containers)

    return {
        "apiVersion": api_version_for("StatefulSet"),
        "kind": "StatefulSet",
        "metadata": build_metadata(name, config, namespace),
        "spec": spec,
    }
