#!/usr/bin/env python3
"""
KUBEFORGE CORE MODELS
---------------------
Defines the small data structures shared across the KubeForge engine:
injected platform defaults, validation issues and generation results.

Author: KubeForge Team
Date: 2026-10-18
"""

from dataclasses import dataclass, field
from typing import Optional, Any, Dict, List


@dataclass(frozen=True)
class RouteDefaults:
    """
    Platform values injected into every Gateway API route.

    HTTPRoute and GRPCRoute manifests are always attached to the shared
    platform gateway; backends without an enclosing namespace fall back
    to `fallback_namespace`.
    """
    gateway_name: str = "platform-gateway"
    gateway_namespace: str = "envoy-gateway-system"
    fallback_namespace: str = "default"

    def parent_refs(self) -> List[Dict[str, str]]:
        return [{"name": self.gateway_name, "namespace": self.gateway_namespace}]


@dataclass
class Issue:
    """A single finding reported by the ManifestValidator."""
    path: str                    # Dotted location inside the manifest (e.g. spec.containers[0].image)
    message: str                 # Human-readable explanation
    severity: str = "error"      # 'error' invalidates the manifest, 'warning' does not

    @property
    def is_error(self) -> bool:
        return self.severity == "error"


@dataclass
class GenerationResult:
    """
    Outcome of one ManifestEngine.render() call.
    Carries the pruned manifest tree next to its YAML text so callers can
    inspect either without re-parsing.
    """
    kind: str
    api_version: str
    manifest: Dict[str, Any]
    yaml_text: str = ""
    issues: List[Issue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not any(issue.is_error for issue in self.issues)

    @property
    def name(self) -> Optional[str]:
        return self.manifest.get("metadata", {}).get("name")
