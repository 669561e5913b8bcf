#!/usr/bin/env python3
"""
KUBEFORGE CONTAINER BUILDER
---------------------------
Maps one editor container record onto a canonical container spec.
Only `name` and `image` are always emitted; every other group appears
only when the editor actually filled it in.

Author: KubeForge Team
Date: 2026-10-18
"""

from typing import Any, Dict, Mapping

from kubeforge.building.pruner import copy_fields

# Emitted in this order when present
SCALAR_FIELDS = ("imagePullPolicy", "workingDir", "stdin", "stdinOnce", "tty")
LIST_FIELDS = ("command", "args", "ports", "env", "envFrom", "volumeMounts", "volumeDevices")
PROBE_FIELDS = ("startupProbe", "livenessProbe", "readinessProbe")
TAIL_FIELDS = (
    "resizePolicy", "restartPolicy", "restartPolicyRules",
    "terminationMessagePath", "terminationMessagePolicy", "securityContext",
)


def _sub_map(source: Any, keys) -> Dict[str, Any]:
    if not isinstance(source, Mapping):
        return {}
    return copy_fields({}, source, keys)


def build_container(container: Mapping) -> Dict[str, Any]:
    """
    Builds a container spec from an editor record.
    Image references, port ranges and probe shapes pass through unchecked.
    """
    spec: Dict[str, Any] = {
        "name": container.get("name"),
        "image": container.get("image"),
    }

    copy_fields(spec, container, SCALAR_FIELDS)
    copy_fields(spec, container, LIST_FIELDS)

    lifecycle = _sub_map(container.get("lifecycle"), ("postStart", "preStop"))
    if lifecycle:
        spec["lifecycle"] = lifecycle

    resources = _sub_map(container.get("resources"), ("limits", "requests", "claims"))
    if resources:
        spec["resources"] = resources

    copy_fields(spec, container, PROBE_FIELDS)
    copy_fields(spec, container, TAIL_FIELDS)

    return spec


def build_containers(containers: Any) -> list:
    """Order-preserving 1:1 map over a container list; empty input gives []."""
    if not containers:
        return []
    return [build_container(c) for c in containers]
