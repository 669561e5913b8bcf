# src/kubeforge/cli/formatter.py
from typing import Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from kubeforge.core.models import GenerationResult, Issue

# Initialize the Rich console for high-quality terminal output
console = Console()


class KubeFormatter:
    """
    KubeFormatter: the visual side of the CLI.
    Renders generated YAML, side-by-side comparisons and validation findings.
    """

    def __init__(self, output: Console = None):
        self.console = output or console

    def show_yaml(self, yaml_text: str, title: str):
        syntax = Syntax(yaml_text.rstrip(), "yaml", theme="monokai", line_numbers=False)
        self.console.print(Panel(syntax, title=f"[bold green]{title}[/bold green]", border_style="green"))

    def show_side_by_side(self, old_content: str, new_content: str, file_name: str):
        """
        Renders the current file next to the freshly generated text.
        Height is left unbounded so large manifests scroll naturally.
        """
        if old_content.strip() == new_content.strip():
            self.console.print(f"[dim]ℹ {file_name} is already up to date.[/dim]")
            return

        old_syntax = Syntax(old_content.strip(), "yaml", theme="ansi_dark", line_numbers=True)
        new_syntax = Syntax(new_content.strip(), "yaml", theme="monokai", line_numbers=True)

        layout_table = Table.grid(expand=True, padding=1)
        layout_table.add_column(ratio=1)
        layout_table.add_column(ratio=1)
        layout_table.add_row(
            Panel(old_syntax, title=f"[bold red]CURRENT: {file_name}[/bold red]", border_style="red"),
            Panel(new_syntax, title="[bold green]GENERATED[/bold green]", border_style="green"),
        )
        self.console.print(layout_table)

    def show_issues(self, result: GenerationResult):
        if not result.issues:
            return
        table = Table(title=f"Findings for {result.kind} '{result.name}'", header_style="bold magenta")
        table.add_column("Severity")
        table.add_column("Path", style="cyan")
        table.add_column("Message")
        for issue in result.issues:
            table.add_row(self._severity(issue), issue.path, issue.message)
        self.console.print(table)

    def show_kinds(self, api_versions: Dict[str, str], cluster_scoped):
        table = Table(title="Supported Kinds", show_header=True, header_style="bold magenta")
        table.add_column("Kind", style="cyan")
        table.add_column("apiVersion")
        table.add_column("Scope", justify="center")
        for kind, api_version in sorted(api_versions.items()):
            table.add_row(kind, api_version, "Cluster" if kind in cluster_scoped else "Namespaced")
        self.console.print(table)

    def show_summary(self, results: List[GenerationResult]):
        table = Table(title="KubeForge Generation Report", show_lines=True, header_style="bold magenta")
        table.add_column("Name", style="cyan")
        table.add_column("Kind")
        table.add_column("apiVersion")
        table.add_column("Result", justify="center")
        for r in results:
            table.add_row(str(r.name), r.kind, r.api_version, "✅" if r.valid else "❌")
        self.console.print(table)

    def show_error(self, message: str):
        self.console.print(Panel(f"[bold red]{message}[/bold red]", title="Error", border_style="red", expand=False))

    @staticmethod
    def _severity(issue: Issue) -> str:
        return "[red]error[/red]" if issue.is_error else "[yellow]warning[/yellow]"
