#!/usr/bin/env python3
"""
KUBEFORGE ERRORS
----------------
Exception types raised by the engine. The builders themselves never raise for
missing fields; these only surface through the ManifestEngine.

Author: KubeForge Team
Date: 2026-10-18
"""

from typing import List, Any


class KubeForgeError(Exception):
    """Base class for every error the engine raises on purpose."""


class BuildError(KubeForgeError):
    """The caller handed over a structurally malformed configuration."""


class ValidationError(KubeForgeError):
    """A generated manifest is missing fields Kubernetes requires."""

    def __init__(self, message: str, issues: List[Any] = None):
        super().__init__(message)
        self.issues = list(issues or [])
