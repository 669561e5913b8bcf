#!/usr/bin/env python3
"""
KUBEFORGE RESOURCE BUILDER
--------------------------
Per-kind assembly for everything that is not a workload: Services, Gateway
API routes, ConfigMaps, Secrets, storage and runtime classes. Unknown kinds
get their `spec` copied through untouched.

Gateway API routes are always attached to the platform gateway from
RouteDefaults, and every backend they point at lives in the route's own
namespace; the editor's namespace fields for backends are ignored.

Author: KubeForge Team
Date: 2026-10-18
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from kubeforge.building.pod import build_metadata
from kubeforge.building.pruner import copy_fields, is_set, prune
from kubeforge.core.catalog import api_version_for, is_cluster_scoped
from kubeforge.core.models import RouteDefaults

logger = logging.getLogger("kubeforge.builders")

SERVICE_FIELDS = ("type", "clusterIP", "clusterIPs", "externalName", "ipFamilyPolicy")
SERVICE_TAIL_FIELDS = ("selector", "publishNotReadyAddresses", "trafficDistribution", "sessionAffinity")
SERVICE_PORT_FIELDS = ("name", "port", "targetPort", "protocol", "nodePort", "appProtocol")

HEADER_FILTERS = {
    "RequestHeaderModifier": "requestHeaderModifier",
    "ResponseHeaderModifier": "responseHeaderModifier",
}
ROUTE_FILTERS = {
    "HTTPRoute": dict(HEADER_FILTERS, RequestRedirect="requestRedirect",
                      URLRewrite="urlRewrite", RequestMirror="requestMirror"),
    "GRPCRoute": dict(HEADER_FILTERS, RequestMirror="requestMirror"),
}

# Kinds whose payload lives at the top level instead of under `spec`
TOP_LEVEL_FIELDS = {
    "ConfigMap": ("immutable", "data", "binaryData"),
    "Secret": ("type", "immutable", "data", "stringData"),
    "StorageClass": ("provisioner", "parameters", "reclaimPolicy", "volumeBindingMode",
                     "allowVolumeExpansion", "mountOptions", "allowedTopologies"),
    "RuntimeClass": ("handler", "overhead", "scheduling"),
    "VolumeAttributesClass": ("driverName", "parameters"),
}


# --- Service ---

def _session_timeout(source: Mapping) -> Any:
    timeout = source.get("sessionAffinityTimeoutSeconds")
    if is_set(timeout):
        return timeout
    nested = source.get("sessionAffinityConfig") or {}
    return (nested.get("clientIP") or {}).get("timeoutSeconds")


def build_service_spec(source: Mapping, **_) -> Dict[str, Any]:
    spec = copy_fields({}, source, SERVICE_FIELDS)

    ports = [prune(copy_fields({}, p, SERVICE_PORT_FIELDS))
             for p in source.get("ports") or [] if isinstance(p, Mapping)]
    ports = [p for p in ports if p]
    if ports:
        spec["ports"] = ports

    copy_fields(spec, source, SERVICE_TAIL_FIELDS)

    timeout = _session_timeout(source)
    if source.get("sessionAffinity") == "ClientIP" and is_set(timeout):
        spec["sessionAffinityConfig"] = {"clientIP": {"timeoutSeconds": timeout}}
    return spec


# --- Gateway API routes ---

def _backend_ref(ref: Mapping, namespace: str) -> Dict[str, Any]:
    backend = dict(ref)
    backend["namespace"] = namespace
    return backend


def _route_filter(entry: Mapping, allowed: Mapping[str, str], namespace: str) -> Dict[str, Any]:
    built = copy_fields({}, entry, ("type",))
    for key in allowed.values():
        payload = entry.get(key)
        if not isinstance(payload, Mapping):
            continue
        mirror_ref = payload.get("backendRef") if key == "requestMirror" else None
        # Only an editor-supplied backend is pinned to the route namespace
        if isinstance(mirror_ref, Mapping) and mirror_ref:
            payload = dict(payload)
            payload["backendRef"] = _backend_ref(mirror_ref, namespace)
        built[key] = payload
    return built


def _route_rule(rule: Mapping, kind: str, namespace: str) -> Dict[str, Any]:
    allowed = ROUTE_FILTERS[kind]
    built = copy_fields({}, rule, ("name", "matches"))

    filters = [_route_filter(f, allowed, namespace)
               for f in rule.get("filters") or [] if isinstance(f, Mapping)]
    if filters:
        built["filters"] = filters

    refs = [_backend_ref(r, namespace) for r in rule.get("backendRefs") or [] if isinstance(r, Mapping)]
    if refs:
        built["backendRefs"] = refs

    if kind == "HTTPRoute":
        copy_fields(built, rule, ("timeouts",))
    return built


def build_route_spec(source: Mapping, kind: str = "HTTPRoute", namespace: Optional[str] = None,
                     route_defaults: Optional[RouteDefaults] = None, **_) -> Dict[str, Any]:
    defaults = route_defaults or RouteDefaults()
    target_namespace = namespace if is_set(namespace) else defaults.fallback_namespace

    if source.get("parentRefs"):
        logger.debug(f"Ignoring editor parentRefs on {kind}; routes attach to '{defaults.gateway_name}'.")

    spec: Dict[str, Any] = {"parentRefs": defaults.parent_refs()}
    copy_fields(spec, source, ("hostnames",))

    rules = [_route_rule(r, kind, target_namespace)
             for r in source.get("rules") or [] if isinstance(r, Mapping)]
    if rules:
        spec["rules"] = rules
    return spec


SPEC_BUILDERS: Dict[str, Callable[..., Dict[str, Any]]] = {
    "Service": build_service_spec,
    "HTTPRoute": build_route_spec,
    "GRPCRoute": build_route_spec,
}


def build_resource(name: str, kind: str, config: Optional[Mapping], namespace: Optional[str] = None,
                   route_defaults: Optional[RouteDefaults] = None) -> Dict[str, Any]:
    """Dispatches on `kind`; unknown kinds fall back to a shallow copy of `config.spec`."""
    config = config or {}
    cluster_scoped = is_cluster_scoped(kind)
    metadata = build_metadata(name, config, namespace, cluster_scoped=cluster_scoped)

    doc: Dict[str, Any] = {
        "apiVersion": api_version_for(kind),
        "kind": kind,
        "metadata": metadata,
    }
    source = config.get("spec") or {}

    if kind in SPEC_BUILDERS:
        doc["spec"] = SPEC_BUILDERS[kind](
            source, kind=kind, namespace=metadata.get("namespace"), route_defaults=route_defaults,
        )
    elif kind in TOP_LEVEL_FIELDS:
        # ConfigMap/Secret payloads sit on the record itself, class kinds on its spec
        payload = config if kind in ("ConfigMap", "Secret") else source
        copy_fields(doc, payload, TOP_LEVEL_FIELDS[kind])
        if kind == "Secret" and "type" not in doc:
            copy_fields(doc, source, ("type",))
    else:
        doc["spec"] = dict(source)

    return doc

