"""
Utility functions for the File System Mirror Tool.

Includes:
- Console message helpers
- Size/time formatting
- Tree, search result and node detail rendering
"""

from datetime import datetime
from typing import Any, Iterable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

# Global console instance
console = Console()

DIR_ICON = "📁"
FILE_ICON = "📄"

SIZE_UNITS = ("B", "KB", "MB", "GB")


def print_header(title: str, subtitle: str = ""):
    """Print a styled header."""
    console.print(Panel(f"[bold blue]{escape(title)}[/bold blue]\n[italic]{escape(subtitle)}[/italic]", expand=False))

def print_error(msg: str):
    console.print(f"[bold red]ERROR:[/bold red] {escape(msg)}")

def print_warning(msg: str):
    console.print(f"[bold yellow]WARNING:[/bold yellow] {escape(msg)}")

def print_success(msg: str):
    console.print(f"[bold green]SUCCESS:[/bold green] {escape(msg)}")


def print_result(result) -> bool:
    """Report an OpResult and return whether it succeeded."""
    if result:
        print_success(result.message)
    else:
        print_error(result.message)
    return bool(result)


def format_size(num_bytes: int) -> str:
    """
    Format a byte count with two decimals, stopping at GB.

    Examples: 0 -> "0.00B", 1536 -> "1.50KB".
    """
    size = float(num_bytes)
    unit = 0
    while size >= 1024 and unit < len(SIZE_UNITS) - 1:
        size /= 1024
        unit += 1
    return f"{size:.2f}{SIZE_UNITS[unit]}"


def format_time(timestamp: float | None) -> str:
    """Format a POSIX timestamp in local time; the missing-metadata sentinel renders as '-'."""
    if timestamp is None:
        return "-"
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def node_label(node: Any, show_details: bool = False) -> str:
    icon = DIR_ICON if node.is_dir else FILE_ICON
    label = f"{icon} {escape(node.name)}"
    if show_details:
        label += f"  [cyan]{format_size(node.size)}[/cyan]  [dim]{format_time(node.modified_time)}[/dim]"
    return label


def build_rich_tree(root: Any, show_details: bool = False) -> Tree:
    """Render the mirror as a rich Tree. Read-only with respect to the nodes."""
    tree = Tree(node_label(root, show_details))
    stack = [(root, tree)]
    while stack:
        node, branch = stack.pop()
        pending = []
        for child in node.children:
            child_branch = branch.add(node_label(child, show_details))
            pending.append((child, child_branch))
        stack.extend(reversed(pending))
    return tree


def print_tree(root: Any, show_details: bool = False):
    if root is None:
        console.print("[dim]Tree is empty.[/dim]")
        return
    console.print(build_rich_tree(root, show_details))


def print_search_results(pattern: str, results: Iterable[Any]):
    """Print a table of search matches."""
    results = list(results)
    if not results:
        console.print(f"No results found for: [bold]{escape(pattern)}[/bold]")
        return

    table = Table(title=f"Search results ({len(results)}) for: {escape(pattern)}")
    table.add_column("", width=2)
    table.add_column("Name", style="cyan")
    table.add_column("Path", style="magenta")

    for node in results:
        table.add_row(DIR_ICON if node.is_dir else FILE_ICON, escape(node.name), escape(str(node.path)))

    console.print(table)


def print_node_info(node: Any, extra: dict | None = None):
    """Print a details table for one node, plus any extra key/value rows."""
    table = Table(title=escape(node.name), show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Kind", node.kind.value)
    table.add_row("Path", escape(str(node.path)))
    table.add_row("Size", format_size(node.size))
    table.add_row("Modified", format_time(node.modified_time))
    if node.is_dir:
        table.add_row("Entries", str(len(node.children)))

    for key, value in (extra or {}).items():
        if value is not None:
            table.add_row(key, escape(str(value)))

    console.print(table)
