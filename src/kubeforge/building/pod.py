#!/usr/bin/env python3
"""
KUBEFORGE POD BUILDER
---------------------
Assembles pod specs (containers, scheduling, security, networking, volumes,
affinity) from an editor pod record, plus the object metadata and pod
template blocks every workload builder shares.

Presence, not truthiness, decides whether a field is emitted, so
`hostNetwork: false` and `priority: 0` survive.

Author: KubeForge Team
Date: 2026-10-18
"""

from typing import Any, Dict, List, Mapping, Optional

from kubeforge.building.affinity import translate_affinity
from kubeforge.building.container import build_containers
from kubeforge.building.pruner import copy_fields, has_items, is_set
from kubeforge.core.catalog import api_version_for

METADATA_FIELDS = ("labels", "annotations", "ownerReferences", "deletionGracePeriodSeconds")

POD_SCALAR_FIELDS = (
    "terminationGracePeriodSeconds", "restartPolicy",
    "nodeName", "priority", "priorityClassName", "preemptionPolicy", "schedulerName",
    "serviceAccountName", "automountServiceAccountToken",
    "hostname", "subdomain", "setHostnameAsFQDN", "dnsPolicy", "enableServiceLinks",
    "hostIPC", "hostNetwork", "hostPID", "hostUsers", "shareProcessNamespace",
    "runtimeClassName",
)
POD_MAP_FIELDS = ("nodeSelector", "os", "overhead")
POD_LIST_FIELDS = (
    "hostAliases", "tolerations", "topologySpreadConstraints",
    "readinessGates", "schedulingGates",
)


def build_metadata(name: str, config: Mapping, namespace: Optional[str] = None,
                   cluster_scoped: bool = False) -> Dict[str, Any]:
    """
    Object metadata for any kind. An explicit `namespace` argument wins over
    the one recorded in the config; cluster-scoped kinds never get one.
    """
    metadata: Dict[str, Any] = {"name": name}
    if not cluster_scoped:
        target = namespace if is_set(namespace) else config.get("namespace")
        if is_set(target):
            metadata["namespace"] = target
    return copy_fields(metadata, config, METADATA_FIELDS)


def _dns_config(source: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(source, Mapping):
        return None
    dns: Dict[str, Any] = {}
    nameservers = source.get("nameServers") or source.get("nameservers")
    if has_items(nameservers):
        dns["nameservers"] = nameservers
    copy_fields(dns, source, ("searches", "options"))
    return dns or None


def _image_pull_secrets(source: Any) -> List[Dict[str, Any]]:
    if not has_items(source) or isinstance(source, Mapping):
        return []
    return [{"name": s} if isinstance(s, str) else s for s in source]


def build_pod_spec(pod_config: Optional[Mapping], containers: Any) -> Dict[str, Any]:
    """Builds a pod spec; `containers` always maps 1:1 onto spec.containers."""
    config = pod_config or {}
    spec: Dict[str, Any] = {"containers": build_containers(containers)}

    for key in ("initContainers", "ephemeralContainers"):
        built = build_containers(config.get(key))
        if built:
            spec[key] = built

    deadline = config.get("activeDeadlineSeconds", config.get("podDeathTime"))
    if is_set(deadline):
        spec["activeDeadlineSeconds"] = deadline

    copy_fields(spec, config, POD_SCALAR_FIELDS)
    copy_fields(spec, config, POD_MAP_FIELDS)

    dns = _dns_config(config.get("dnsConfig"))
    if dns:
        spec["dnsConfig"] = dns

    copy_fields(spec, config, POD_LIST_FIELDS)

    affinity = translate_affinity(config.get("affinity"))
    if affinity:
        spec["affinity"] = affinity

    secrets = _image_pull_secrets(config.get("imagePullSecrets"))
    if secrets:
        spec["imagePullSecrets"] = secrets

    copy_fields(spec, config, ("volumes", "securityContext"))
    return spec


def build_pod_template(template: Optional[Mapping], containers: Any) -> Dict[str, Any]:
    """
    Pod template block for controllers. Pod-level fields may sit flat on the
    template record or under `template.spec`.
    """
    template = template or {}
    pod_config = template.get("spec") if isinstance(template.get("spec"), Mapping) else template

    metadata = copy_fields({}, template, ("labels", "annotations", "namespace"))
    return {
        "metadata": metadata,
        "spec": build_pod_spec(pod_config, containers),
    }


def build_pod(name: str, config: Optional[Mapping], containers: Any,
              namespace: Optional[str] = None) -> Dict[str, Any]:
    """Bare Pod manifest: metadata and pod fields share the same record."""
    config = config or {}
    return {
        "apiVersion": api_version_for("Pod"),
        "kind": "Pod",
        "metadata": build_metadata(name, config, namespace),
        "spec": build_pod_spec(config, containers),
    }
