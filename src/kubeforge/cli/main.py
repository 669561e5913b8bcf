#!/usr/bin/env python3
"""
KUBEFORGE CLI
-------------
Command-line front end for the manifest engine.

    kubeforge generate workloads.yaml -o manifest.yaml --diff
    kubeforge platform platform.yaml
    kubeforge kinds

Input files are YAML or JSON (JSON is read as YAML).

Author: KubeForge Team
Date: 2026-10-18
"""

import sys
import argparse
from pathlib import Path
from typing import Any, List

from rich.console import Console
from rich.panel import Panel
from ruamel.yaml import YAML, YAMLError

# Core Engine import
from kubeforge.core.catalog import API_VERSIONS, CLUSTER_SCOPED
from kubeforge.core.engine import ManifestEngine
from kubeforge.core.errors import BuildError, KubeForgeError, ValidationError
from kubeforge.core.models import RouteDefaults
from kubeforge.cli.formatter import KubeFormatter

VERSION = "kubeforge v1.0.0"

# Global console for consistent styling across the application
console = Console()


class KubeForgeCLI:
    """
    CLI wrapper that translates user commands into engine actions.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="kubeforge",
            description="KubeForge - Kubernetes manifest generator",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = KubeFormatter(console)
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("-v", "--version", action="version", version=VERSION)
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        gen_parser = subparsers.add_parser("generate", help="Render workloads/resources to YAML")
        gen_parser.add_argument("path", help="YAML/JSON file with one entry or a list of entries")
        gen_parser.add_argument("-o", "--output", help="Write the manifest to this file")
        gen_parser.add_argument("-n", "--namespace", help="Namespace for entries that do not set one")
        gen_parser.add_argument("--strict", action="store_true", help="Fail when a manifest misses required fields")
        gen_parser.add_argument("--diff", action="store_true", help="Compare against the existing output file")
        self._add_gateway_args(gen_parser)

        platform_parser = subparsers.add_parser("platform", help="Render namespace companion manifests")
        platform_parser.add_argument("path", help="YAML/JSON file with workloads and global settings")
        platform_parser.add_argument("-o", "--output", help="Write the manifest to this file")
        self._add_gateway_args(platform_parser)

        subparsers.add_parser("kinds", help="List supported kinds and apiVersions")

    @staticmethod
    def _add_gateway_args(parser: argparse.ArgumentParser):
        defaults = RouteDefaults()
        parser.add_argument("--gateway-name", default=defaults.gateway_name,
                            help=f"Gateway routes attach to (default: {defaults.gateway_name})")
        parser.add_argument("--gateway-namespace", default=defaults.gateway_namespace,
                            help=f"Namespace of that gateway (default: {defaults.gateway_namespace})")

    def print_header(self, subtitle: str):
        console.print(Panel.fit(f"[bold cyan]{VERSION}[/bold cyan]", title=f"[bold white]{subtitle}[/bold white]",
                                border_style="cyan"))

    def _engine(self, args: argparse.Namespace, strict: bool = False) -> ManifestEngine:
        defaults = RouteDefaults(gateway_name=args.gateway_name, gateway_namespace=args.gateway_namespace)
        return ManifestEngine(route_defaults=defaults, strict=strict)

    def _load(self, path: str) -> Any:
        input_path = Path(path)
        if not input_path.is_file():
            raise BuildError(f"Input file '{path}' not found.")
        try:
            return YAML(typ="safe").load(input_path.read_text(encoding="utf-8-sig"))
        except YAMLError as e:
            raise BuildError(f"Input file '{path}' is not valid YAML/JSON: {e}")

    def _emit(self, text: str, args: argparse.Namespace, title: str):
        """Prints the manifest, or writes it (showing a comparison first if asked)."""
        if not args.output:
            self.formatter.show_yaml(text, title)
            return
        target = Path(args.output)
        if getattr(args, "diff", False) and target.exists():
            self.formatter.show_side_by_side(target.read_text(encoding="utf-8"), text, target.name)
        target.write_text(text, encoding="utf-8")
        console.print(f"[bold green]Wrote[/bold green] {target}")

    def _run_generate(self, args: argparse.Namespace):
        data = self._load(args.path)
        entries: List[Any] = data if isinstance(data, list) else [data]
        engine = self._engine(args, strict=args.strict)

        results = [engine.render_entry(entry, args.namespace) for entry in entries]
        for result in results:
            self.formatter.show_issues(result)

        text = engine.exporter.export([r.manifest for r in results])
        self._emit(text, args, f"{len(results)} manifest(s)")
        self.formatter.show_summary(results)

    def _run_platform(self, args: argparse.Namespace):
        data = self._load(args.path) or {}
        if not isinstance(data, dict):
            raise BuildError("Platform input must be a mapping.")
        engine = self._engine(args)
        text = engine.generate_platform(
            data.get("workloads") or [],
            data.get("global") or {},
            create_cluster_ip=bool(data.get("clusterIP", True)),
            create_http_route=bool(data.get("httpRoute", True)),
            cluster_ip_names=data.get("clusterIPNames"),
        )
        if not text:
            console.print("[bold yellow]⚠️  Nothing to generate: enable clusterIP or httpRoute.[/bold yellow]")
            return
        self._emit(text, args, "Platform bundle")

    def run(self, argv: List[str] = None) -> int:
        """Primary routing entry point; returns the process exit code."""
        args = self.parser.parse_args(argv)
        try:
            if args.command == "generate":
                self.print_header("Manifest Generator")
                self._run_generate(args)
            elif args.command == "platform":
                self.print_header("Platform Bundle")
                self._run_platform(args)
            elif args.command == "kinds":
                self.formatter.show_kinds(API_VERSIONS, CLUSTER_SCOPED)
            else:
                self.parser.print_help()
        except ValidationError as e:
            self.formatter.show_error(str(e))
            for issue in e.issues:
                console.print(f"  [red]•[/red] {issue.path}: {issue.message}")
            return 1
        except KubeForgeError as e:
            self.formatter.show_error(str(e))
            return 1
        return 0


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(KubeForgeCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
