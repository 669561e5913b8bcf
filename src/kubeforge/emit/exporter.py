#!/usr/bin/env python3
"""
KUBEFORGE EXPORTER - Canonical YAML Emission
--------------------------------------------
Converts finished manifest trees into YAML text with ruamel.yaml.
Top-level keys follow the conventional Kubernetes order; nested keys keep
the order the builders produced them in.

Author: KubeForge Team
Date: 2026-10-18
"""

import io
from typing import Any, List, Mapping, Union
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq


class KubeExporter:
    """
    The Printer: turns plain dict/list trees into block-style YAML.
    """

    def __init__(self, width: int = 4096):
        self.yaml = YAML(typ='rt')
        # Standard K8s: 2 spaces, but sequences are indented 4 (offset 2)
        # so list items sit under their parent key.
        self.yaml.indent(mapping=2, sequence=4, offset=2)
        self.yaml.width = width
        self.yaml.default_flow_style = False
        self.preferred_order = ["apiVersion", "kind", "metadata", "spec", "data", "stringData", "binaryData"]

    def _to_commented(self, data: Any) -> Any:
        """Recursively rebuilds plain containers as ruamel round-trip containers."""
        if isinstance(data, Mapping):
            node = CommentedMap()
            for key, value in data.items():
                node[key] = self._to_commented(value)
            return node
        if isinstance(data, (list, tuple)):
            return CommentedSeq(self._to_commented(item) for item in data)
        return data

    def _get_sorted_map(self, data: Mapping) -> CommentedMap:
        """Orders top-level keys; unknown keys keep their relative original position."""
        keys = list(data.keys())

        def sort_logic(key):
            if key in self.preferred_order:
                return self.preferred_order.index(key)
            return len(self.preferred_order) + keys.index(key)

        sorted_map = CommentedMap()
        for key in sorted(keys, key=sort_logic):
            sorted_map[key] = self._to_commented(data[key])
        return sorted_map

    def export(self, docs: Union[Mapping, List[Mapping]]) -> str:
        """
        Exports one document or a list of documents into a single string.
        Multi-document output gets an explicit `---` separator between documents.
        """
        stream = io.StringIO()

        # Ensure we always treat input as a list for consistent processing
        documents = [docs] if isinstance(docs, Mapping) else list(docs)

        written = 0
        for doc in documents:
            if not doc:
                continue
            if written > 0:
                stream.write("---\n")
            self.yaml.dump(self._get_sorted_map(doc), stream)
            written += 1

        return stream.getvalue()
