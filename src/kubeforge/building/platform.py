#!/usr/bin/env python3
"""
KUBEFORGE PLATFORM BUNDLE
-------------------------
Namespace-level companion manifests generated next to a set of workloads:
the namespace itself, one ClusterIP Service per workload that exposes
ports, a single HTTPRoute on the platform gateway, and the baseline
policy objects (network policy, RBAC, quota, rate limit, certificate,
backup schedule).

Author: KubeForge Team
Date: 2026-10-18
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from kubeforge.building.pruner import is_set
from kubeforge.core.catalog import api_version_for
from kubeforge.core.models import RouteDefaults

BACKEND_PORT = 80
DNS_PORT = 53
BACKUP_SCHEDULE = "0 2 * * *"
BACKUP_RETENTION_DAYS = "30"

# Editor quota field -> ResourceQuota hard key
QUOTA_KEYS = (
    ("requestsCPU", "requests.cpu"),
    ("requestsMemory", "requests.memory"),
    ("limitsCPU", "limits.cpu"),
    ("limitsMemory", "limits.memory"),
    ("requestsStorage", "requests.storage"),
    ("persistentVolumeClaimsLimit", "persistentvolumeclaims"),
)
ISSUERS = {"production": "letsencrypt-prod", "staging": "letsencrypt-staging"}


def _doc(kind: str, name: str, namespace: Optional[str] = None, **body) -> Dict[str, Any]:
    metadata = {"name": name}
    if namespace:
        metadata["namespace"] = namespace
    doc = {"apiVersion": api_version_for(kind), "kind": kind, "metadata": metadata}
    doc.update(body)
    return doc


def workload_ports(workloads: Sequence[Mapping]) -> Dict[str, List[int]]:
    """Unique containerPort values per workload name, in first-seen order."""
    mapping: Dict[str, List[int]] = {}
    for workload in workloads:
        ports: List[int] = []
        for container in workload.get("containers") or []:
            for port in container.get("ports") or []:
                number = port.get("containerPort")
                if is_set(number) and number not in ports:
                    ports.append(number)
        mapping[workload["name"]] = ports
    return mapping


def cluster_ip_name(workload_name: str) -> str:
    return f"{workload_name.lower()}-clusterip"


def build_cluster_ip_service(workload_name: str, namespace: str, ports: Sequence[int]) -> Dict[str, Any]:
    return _doc(
        "Service", cluster_ip_name(workload_name), namespace,
        spec={
            "selector": {"app": workload_name.lower()},
            "ports": [{"port": p, "targetPort": p} for p in ports],
            "type": "ClusterIP",
        },
    )


def build_http_route(workload_names: Sequence[str], namespace: str, domain: Optional[str],
                     cluster_ip_names: Optional[Sequence[str]] = None,
                     route_defaults: Optional[RouteDefaults] = None) -> Dict[str, Any]:
    """One route for the namespace; user-created ClusterIP names win by position."""
    defaults = route_defaults or RouteDefaults()
    names = list(cluster_ip_names or [])
    backends = []
    for index, workload_name in enumerate(workload_names):
        service = names[index] if index < len(names) and names[index] else cluster_ip_name(workload_name)
        backends.append({"name": service, "port": BACKEND_PORT})

    spec: Dict[str, Any] = {"parentRefs": defaults.parent_refs()}
    if domain:
        spec["hostnames"] = [domain]
    spec["rules"] = [{
        "matches": [{"path": {"type": "PathPrefix", "value": "/"}}],
        "backendRefs": backends,
    }]
    return _doc("HTTPRoute", f"{namespace}-route", namespace, spec=spec)


def build_network_policy(namespace: str) -> Dict[str, Any]:
    same_namespace = {"namespaceSelector": {"matchLabels": {"name": namespace}}}
    return _doc(
        "NetworkPolicy", "default-network-policy", namespace,
        spec={
            "podSelector": {},
            "policyTypes": ["Ingress", "Egress"],
            "ingress": [{"from": [same_namespace]}],
            "egress": [
                {"to": [same_namespace]},
                {
                    "to": [{"namespaceSelector": {}}],
                    "ports": [
                        {"protocol": "TCP", "port": DNS_PORT},
                        {"protocol": "UDP", "port": DNS_PORT},
                    ],
                },
            ],
        },
    )


def build_rbac(namespace: str) -> List[Dict[str, Any]]:
    return [
        _doc("ServiceAccount", "default", namespace),
        _doc(
            "Role", "default-role", namespace,
            rules=[
                {"apiGroups": [""], "resources": ["pods", "pods/log"], "verbs": ["get", "list", "watch"]},
                {"apiGroups": [""], "resources": ["pods/exec"], "verbs": ["create"]},
            ],
        ),
        _doc(
            "RoleBinding", "default-rolebinding", namespace,
            roleRef={"apiGroup": "rbac.authorization.k8s.io", "kind": "Role", "name": "default-role"},
            subjects=[{"kind": "ServiceAccount", "name": "default", "namespace": namespace}],
        ),
    ]


def build_resource_quota(namespace: str, quota: Mapping) -> Optional[Dict[str, Any]]:
    hard = {key: quota[field] for field, key in QUOTA_KEYS if is_set(quota.get(field))}
    if not hard:
        return None
    return _doc("ResourceQuota", "namespace-quota", namespace, spec={"hard": hard})


def build_rate_limit(namespace: str, requests_per_second: Any) -> Dict[str, Any]:
    return _doc("ConfigMap", "ratelimit-config", namespace,
                data={"requests-per-second": str(requests_per_second)})


def build_certificate(namespace: str, domain: str, environment: str = "production") -> Dict[str, Any]:
    return _doc(
        "Certificate", f"{namespace}-cert-{environment}", namespace,
        spec={
            "secretName": f"{namespace}-tls-{environment}",
            "issuerRef": {"name": ISSUERS.get(environment, ISSUERS["staging"]), "kind": "ClusterIssuer"},
            "dnsNames": [domain, f"*.{domain}"],
        },
    )


def build_backup_schedule(namespace: str) -> Dict[str, Any]:
    return _doc(
        "ConfigMap", "backup-schedule", namespace,
        data={"schedule": BACKUP_SCHEDULE, "retention-days": BACKUP_RETENTION_DAYS, "backup-type": "full"},
    )


def build_platform_bundle(workloads: Sequence[Mapping], global_config: Mapping,
                          create_cluster_ip: bool, create_http_route: bool,
                          cluster_ip_names: Optional[Sequence[str]] = None,
                          route_defaults: Optional[RouteDefaults] = None) -> List[Dict[str, Any]]:
    """
    Returns the companion documents in emission order: namespace, services,
    route, rate limit, quota, network policy, RBAC, certificate, backup.
    Nothing is produced unless services or a route were requested.
    """
    if not create_cluster_ip and not create_http_route:
        return []

    namespace = global_config.get("namespace") or (route_defaults or RouteDefaults()).fallback_namespace
    domain = global_config.get("domain")
    ports = workload_ports(workloads)
    exposed = [w["name"] for w in workloads if ports.get(w["name"])]

    docs: List[Dict[str, Any]] = [_doc("Namespace", namespace)]

    if create_cluster_ip:
        docs.extend(build_cluster_ip_service(name, namespace, ports[name]) for name in exposed)

    if create_http_route and exposed:
        docs.append(build_http_route(exposed, namespace, domain, cluster_ip_names, route_defaults))

    if is_set(global_config.get("requestsPerSecond")):
        docs.append(build_rate_limit(namespace, global_config["requestsPerSecond"]))

    quota = build_resource_quota(namespace, global_config.get("resourceQuota") or {})
    if quota:
        docs.append(quota)

    docs.append(build_network_policy(namespace))
    docs.extend(build_rbac(namespace))

    if domain:
        docs.append(build_certificate(namespace, domain))

    docs.append(build_backup_schedule(namespace))
    return docs
