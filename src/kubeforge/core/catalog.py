#!/usr/bin/env python3
"""
KUBEFORGE KIND CATALOG
----------------------
Static knowledge about the resource kinds the engine can emit:
apiVersion per kind, which kinds are cluster-scoped, and which spec
fields each replica-style workload accepts.

Author: KubeForge Team
Date: 2026-10-18
"""

from typing import Dict, FrozenSet

DEFAULT_API_VERSION = "v1"

API_VERSIONS: Dict[str, str] = {
    # Workloads
    "Pod": "v1",
    "Deployment": "apps/v1",
    "ReplicaSet": "apps/v1",
    "DaemonSet": "apps/v1",
    "StatefulSet": "apps/v1",
    "Job": "batch/v1",
    "CronJob": "batch/v1",
    # Core resources
    "Service": "v1",
    "ConfigMap": "v1",
    "Secret": "v1",
    "PersistentVolume": "v1",
    "PersistentVolumeClaim": "v1",
    "LimitRange": "v1",
    "Namespace": "v1",
    "ServiceAccount": "v1",
    "ResourceQuota": "v1",
    # Gateway API
    "HTTPRoute": "gateway.networking.k8s.io/v1beta1",
    "GRPCRoute": "gateway.networking.k8s.io/v1",
    "Gateway": "gateway.networking.k8s.io/v1",
    # Storage / node
    "StorageClass": "storage.k8s.io/v1",
    "VolumeAttributesClass": "storage.k8s.io/v1alpha1",
    "RuntimeClass": "node.k8s.io/v1",
    # Platform companions
    "NetworkPolicy": "networking.k8s.io/v1",
    "Role": "rbac.authorization.k8s.io/v1",
    "RoleBinding": "rbac.authorization.k8s.io/v1",
    "Certificate": "cert-manager.io/v1",
}

# Resources that should NOT have a namespace
CLUSTER_SCOPED: FrozenSet[str] = frozenset({
    "Namespace", "StorageClass", "PersistentVolume",
    "RuntimeClass", "VolumeAttributesClass",
})

WORKLOAD_KINDS: FrozenSet[str] = frozenset({
    "Pod", "Deployment", "ReplicaSet", "DaemonSet", "StatefulSet", "Job", "CronJob",
})

# Spec fields (besides template) each replica-style controller accepts
WORKLOAD_SPEC_FIELDS: Dict[str, FrozenSet[str]] = {
    "Deployment": frozenset({
        "replicas", "minReadySeconds", "progressDeadlineSeconds",
        "revisionHistoryLimit", "paused", "selector", "strategy",
    }),
    "ReplicaSet": frozenset({"replicas", "minReadySeconds", "selector"}),
    "DaemonSet": frozenset({
        "minReadySeconds", "revisionHistoryLimit", "selector", "updateStrategy",
    }),
}


def api_version_for(kind: str) -> str:
    """Unknown kinds fall back to the core group."""
    return API_VERSIONS.get(kind, DEFAULT_API_VERSION)


def is_cluster_scoped(kind: str) -> bool:
    return kind in CLUSTER_SCOPED
