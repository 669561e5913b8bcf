#!/usr/bin/env python3
"""
KUBEFORGE ENGINE - The Orchestrator
-----------------------------------
The ManifestEngine drives one generation call end to end:
dispatch to the kind's builder, prune the whole tree, optionally validate,
and hand the result to the exporter. Every call is a pure function of its
inputs; an engine instance holds configuration only and can be reused.

The module-level generate_*_yaml functions are the public entry points and
run on a shared default engine.

Author: KubeForge Team
Date: 2026-10-18
"""

import logging
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from kubeforge.building.batch import build_cronjob, build_job
from kubeforge.building.platform import build_platform_bundle
from kubeforge.building.pod import build_pod
from kubeforge.building.pruner import prune
from kubeforge.building.resources import build_resource
from kubeforge.building.statefulset import build_statefulset
from kubeforge.building.workloads import build_workload
from kubeforge.core.catalog import WORKLOAD_KINDS, api_version_for
from kubeforge.core.errors import BuildError, ValidationError
from kubeforge.core.models import GenerationResult, RouteDefaults
from kubeforge.emit.exporter import KubeExporter
from kubeforge.validator.validator import ManifestValidator

# Setup standardized logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("kubeforge.engine")

WORKLOAD_BUILDERS: Dict[str, Callable[..., Dict[str, Any]]] = {
    "Pod": build_pod,
    "Deployment": partial(build_workload, kind="Deployment"),
    "ReplicaSet": partial(build_workload, kind="ReplicaSet"),
    "DaemonSet": partial(build_workload, kind="DaemonSet"),
    "StatefulSet": build_statefulset,
    "Job": build_job,
    "CronJob": build_cronjob,
}


class ManifestEngine:
    """
    Principal orchestrator for manifest generation.
    Holds the injected platform defaults, the exporter and the validator.
    """

    def __init__(self, route_defaults: Optional[RouteDefaults] = None,
                 exporter: Optional[KubeExporter] = None, strict: bool = False):
        self.route_defaults = route_defaults or RouteDefaults()
        self.exporter = exporter or KubeExporter()
        self.validator = ManifestValidator()
        self.strict = strict

    def build(self, kind: str, name: str, config: Optional[Mapping] = None,
              containers: Optional[Sequence[Mapping]] = None,
              namespace: Optional[str] = None) -> Dict[str, Any]:
        """Returns the pruned manifest tree for one object."""
        config, containers = self._check_input(kind, config, containers)
        logger.debug(f"Building {kind} '{name}' ({len(containers)} containers)")

        if kind in WORKLOAD_BUILDERS:
            doc = WORKLOAD_BUILDERS[kind](name, config, containers, namespace=namespace)
        else:
            doc = build_resource(name, kind, config, namespace, route_defaults=self.route_defaults)

        return prune(doc)

    def render(self, kind: str, name: str, config: Optional[Mapping] = None,
               containers: Optional[Sequence[Mapping]] = None,
               namespace: Optional[str] = None) -> GenerationResult:
        """
        Builds, validates and exports one object.
        In strict mode an invalid manifest raises ValidationError instead of
        being returned with its issues.
        """
        manifest = self.build(kind, name, config, containers, namespace)
        valid, issues = self.validator.validate(manifest)

        if not valid and self.strict:
            raise ValidationError(f"{kind} '{name}' failed validation", issues)

        return GenerationResult(
            kind=kind,
            api_version=manifest.get("apiVersion", api_version_for(kind)),
            manifest=manifest,
            yaml_text=self.exporter.export(manifest),
            issues=issues,
        )

    def generate(self, kind: str, name: str, config: Optional[Mapping] = None,
                 containers: Optional[Sequence[Mapping]] = None,
                 namespace: Optional[str] = None) -> str:
        return self.render(kind, name, config, containers, namespace).yaml_text

    def generate_manifest(self, workloads: Sequence[Mapping], resources: Sequence[Mapping],
                          namespace: Optional[str] = None) -> str:
        """
        Renders several objects into one multi-document stream, workloads first.
        Each entry is `{name, type, config?, containers?, namespace?}`; a
        resource entry without `config` is its own config record.
        """
        docs = [self.build_entry(entry, namespace) for entry in list(workloads) + list(resources)]
        return self.exporter.export(docs)

    def build_entry(self, entry: Mapping, namespace: Optional[str] = None) -> Dict[str, Any]:
        return self.build(*self._entry_args(entry, namespace))

    def render_entry(self, entry: Mapping, namespace: Optional[str] = None) -> GenerationResult:
        return self.render(*self._entry_args(entry, namespace))

    def _entry_args(self, entry: Any, namespace: Optional[str]):
        if not isinstance(entry, Mapping) or not entry.get("type"):
            raise BuildError("Every entry needs a 'type' naming its kind.")
        return (
            entry["type"], entry.get("name"), entry.get("config", entry),
            entry.get("containers"), entry.get("namespace") or namespace,
        )

    def generate_platform(self, workloads: Sequence[Mapping], global_config: Mapping,
                          create_cluster_ip: bool = True, create_http_route: bool = True,
                          cluster_ip_names: Optional[Sequence[str]] = None) -> str:
        """Companion documents are emitted verbatim; empty selectors are meaningful there."""
        docs = build_platform_bundle(
            workloads, global_config, create_cluster_ip, create_http_route,
            cluster_ip_names=cluster_ip_names, route_defaults=self.route_defaults,
        )
        logger.debug(f"Platform bundle: {len(docs)} documents")
        return self.exporter.export(docs)

    def _check_input(self, kind: str, config: Any, containers: Any):
        if not kind:
            raise BuildError("A resource kind is required.")
        if config is None:
            config = {}
        if not isinstance(config, Mapping):
            raise BuildError(f"{kind} config must be a mapping, got {type(config).__name__}.")
        if containers is None:
            containers = []
        if not isinstance(containers, (list, tuple)):
            raise BuildError(f"{kind} containers must be a list, got {type(containers).__name__}.")
        for index, container in enumerate(containers):
            if not isinstance(container, Mapping):
                raise BuildError(f"{kind} container #{index} must be a mapping.")
        return config, list(containers)


_default_engine = ManifestEngine()


def _generate_workload(kind: str, name: str, config: Optional[Mapping],
                       containers: Optional[Sequence[Mapping]], namespace: Optional[str]) -> str:
    if kind not in WORKLOAD_KINDS:
        raise BuildError(f"'{kind}' is not a workload kind.")
    return _default_engine.generate(kind, name, config, containers, namespace)


def generate_pod_yaml(pod_name: str, pod_config: Optional[Mapping], containers: Sequence[Mapping],
                      namespace: Optional[str] = None) -> str:
    return _generate_workload("Pod", pod_name, pod_config, containers, namespace)


def generate_deployment_yaml(name: str, config: Optional[Mapping], containers: Sequence[Mapping],
                             namespace: Optional[str] = None) -> str:
    return _generate_workload("Deployment", name, config, containers, namespace)


def generate_replicaset_yaml(name: str, config: Optional[Mapping], containers: Sequence[Mapping],
                             namespace: Optional[str] = None) -> str:
    return _generate_workload("ReplicaSet", name, config, containers, namespace)


def generate_statefulset_yaml(name: str, config: Optional[Mapping], containers: Sequence[Mapping],
                              namespace: Optional[str] = None) -> str:
    return _generate_workload("StatefulSet", name, config, containers, namespace)


def generate_daemonset_yaml(name: str, config: Optional[Mapping], containers: Sequence[Mapping],
                            namespace: Optional[str] = None) -> str:
    return _generate_workload("DaemonSet", name, config, containers, namespace)


def generate_job_yaml(name: str, config: Optional[Mapping], containers: Sequence[Mapping],
                      namespace: Optional[str] = None) -> str:
    return _generate_workload("Job", name, config, containers, namespace)


def generate_cronjob_yaml(name: str, config: Optional[Mapping], containers: Sequence[Mapping],
                          namespace: Optional[str] = None) -> str:
    return _generate_workload("CronJob", name, config, containers, namespace)


def generate_resource_yaml(name: str, resource_type: str, config: Optional[Mapping],
                           namespace: Optional[str] = None) -> str:
    return _default_engine.generate(resource_type, name, config, None, namespace)


def generate_manifest(workloads: Sequence[Mapping], resources: Sequence[Mapping],
                      namespace: Optional[str] = None) -> str:
    return _default_engine.generate_manifest(workloads, resources, namespace)


def generate_platform_yaml(workloads: Sequence[Mapping], global_config: Mapping,
                           create_cluster_ip: bool = True, create_http_route: bool = True,
                           cluster_ip_names: Optional[List[str]] = None) -> str:
    return _default_engine.generate_platform(
        workloads, global_config, create_cluster_ip, create_http_route, cluster_ip_names,
    )
