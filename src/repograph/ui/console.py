"""Rich-powered console output for RepoGraph."""

from __future__ import annotations

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from repograph import __version__
from repograph.context.models import BudgetSelection, SelectionStatus
from repograph.graph.communities import Partition
from repograph.graph.cycles import CycleGroup
from repograph.graph.metrics import MetricsReport
from repograph.graph.models import BuildStats
from repograph.scoring.categories import LanguageStat
from repograph.scoring.scorer import SignificanceScore

_STATUS_STYLES = {
    SelectionStatus.WHOLE: "green",
    SelectionStatus.TRUNCATED: "yellow",
    SelectionStatus.EXCLUDED: "dim",
}


class Console:
    """Terminal output for RepoGraph using Rich."""

    def __init__(self, console: RichConsole | None = None) -> None:
        self.console = console or RichConsole()

    def banner(self) -> None:
        self.console.print(
            Panel(
                f"[bold cyan]RepoGraph[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Ranked, clustered dependency maps for bounded code context[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def show_build_stats(self, stats: BuildStats, metrics: MetricsReport | None = None) -> None:
        """Display graph construction statistics in a table."""
        table = Table(title="Dependency Graph", border_style="cyan")
        table.add_column("Metric", style="bold")
        table.add_column("Count", justify="right", style="cyan")

        table.add_row("Files", str(stats.total_files))
        table.add_row("Edges supplied", str(stats.total_edges))
        table.add_row("Edges retained", str(stats.retained_edges))
        table.add_row("Unique edges", str(stats.unique_edges))
        table.add_row("Dropped (unknown source)", str(stats.unknown_source_edges))
        table.add_row("Unresolved imports", str(stats.unresolved_imports))
        if metrics is not None:
            table.add_section()
            table.add_row("Importance iterations", str(metrics.iterations))
            table.add_row("Converged", "yes" if metrics.converged else "no")
            if metrics.betweenness_sampled:
                table.add_row("Betweenness sources", str(metrics.betweenness_sources))

        self.console.print(table)

    def show_ranking(self, scores: list[SignificanceScore], limit: int = 20) -> None:
        table = Table(title="File Significance", border_style="cyan")
        table.add_column("#", justify="right", style="dim")
        table.add_column("File", style="bold")
        table.add_column("Name", justify="right")
        table.add_column("Path", justify="right")
        table.add_column("Structure", justify="right")
        table.add_column("Connectivity", justify="right")
        table.add_column("Total", justify="right", style="cyan")

        for s in scores[:limit]:
            table.add_row(
                str(s.rank),
                s.path,
                f"{s.name_score:.0f}",
                f"{s.path_score:.0f}",
                f"{s.structure_score:.0f}",
                f"{s.connectivity_score:.1f}",
                f"{s.total:.1f}",
            )
        if len(scores) > limit:
            table.caption = f"{len(scores) - limit} more files not shown"

        self.console.print(table)

    def show_cycles(self, cycles: list[CycleGroup]) -> None:
        if not cycles:
            self.success("No circular dependencies")
            return

        tree = Tree(f"[bold red]{len(cycles)} circular dependency groups[/bold red]")
        for group in cycles:
            label = "self-import" if group.self_loop else f"{group.size} files"
            branch = tree.add(f"[bold]cycle {group.id}[/bold] [dim]({label})[/dim]")
            for member in group.members:
                branch.add(member)
        self.console.print(tree)

    def show_communities(self, partition: Partition, max_members: int = 8) -> None:
        tree = Tree(
            f"[bold cyan]{len(partition.communities)} communities[/bold cyan] "
            f"[dim](modularity {partition.modularity:.3f})[/dim]"
        )
        for community in partition.communities:
            branch = tree.add(
                f"[bold]{community.label}[/bold] [dim]#{community.id}, "
                f"{community.size} files[/dim]"
            )
            for member in community.members[:max_members]:
                branch.add(member)
            if community.size > max_members:
                branch.add(f"[dim]... {community.size - max_members} more[/dim]")
        self.console.print(tree)

    def show_selection(self, selection: BudgetSelection, limit: int = 30) -> None:
        table = Table(
            title=(
                f"Context Selection: {selection.total_tokens:,} / "
                f"{selection.token_budget:,} tokens ({selection.budget_used_pct:.0f}%)"
            ),
            border_style="cyan",
        )
        table.add_column("#", justify="right", style="dim")
        table.add_column("File", style="bold")
        table.add_column("Status")
        table.add_column("Tokens", justify="right")
        table.add_column("Reason", style="dim")

        for d in selection.decisions[:limit]:
            style = _STATUS_STYLES[d.status]
            table.add_row(
                str(d.rank),
                d.path,
                f"[{style}]{d.status.value}[/{style}]",
                f"{d.selected_tokens}/{d.tokens}",
                d.reason,
            )
        self.console.print(table)

    def show_layers(self, layers: dict[str, list[str]]) -> None:
        table = Table(title="Architectural Layers", border_style="cyan")
        table.add_column("Layer", style="bold")
        table.add_column("Files", justify="right", style="cyan")
        for layer, members in layers.items():
            table.add_row(layer, str(len(members)))
        self.console.print(table)

    def show_languages(self, languages: list[LanguageStat]) -> None:
        table = Table(title="Languages", border_style="cyan")
        table.add_column("Extension", style="bold")
        table.add_column("Language")
        table.add_column("Files", justify="right", style="cyan")
        for stat in languages:
            table.add_row(stat.extension, stat.language or "-", str(stat.file_count))
        self.console.print(table)

    def show_categories(self, categories: dict[str, list[str]], max_members: int = 5) -> None:
        """Display named file groups (entry points, domains, ...) as a tree."""
        tree = Tree("[bold cyan]File categories[/bold cyan]")
        for name, members in categories.items():
            if not members:
                continue
            branch = tree.add(f"[bold]{name}[/bold] [dim]({len(members)})[/dim]")
            for member in members[:max_members]:
                branch.add(member)
            if len(members) > max_members:
                branch.add(f"[dim]... {len(members) - max_members} more[/dim]")
        self.console.print(tree)
