# display.py
# All terminal output for the binary search visualizer.
#
# This module owns presentation entirely. The stepper and session never format
# anything for the terminal — run.py calls named functions here. Swap this file
# to change the entire UI.
#
# Colour language:
#   blue    — inside the current search window
#   yellow  — the element at mid
#   green   — found
#   red     — errors, not found
#   dim     — outside the window

from collections.abc import Sequence

from rich import box
from rich.console import Console, Group
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from search_visualizer.models import Comparison, SearchStep

console = Console()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _label(tag: str, color: str) -> Text:
    t = Text()
    t.append(f" {tag} ", style=f"bold white on {color}")
    return t


def _cell_style(index: int, step: SearchStep | None) -> str:
    if step is None or step.is_sentinel:
        return "white"
    if index == step.mid:
        return "bold black on green" if step.found else "bold black on yellow"
    if step.left <= index <= step.right:
        return "bold white on blue"
    return "dim"


def _marker(index: int, step: SearchStep | None) -> Text:
    if step is None or step.is_sentinel:
        return Text("")
    tags = []
    if index == step.left:
        tags.append(("start", "blue"))
    if index == step.mid:
        tags.append(("mid", "yellow"))
    if index == step.right:
        tags.append(("end", "blue"))
    marker = Text()
    for i, (tag, color) in enumerate(tags):
        if i:
            marker.append("/", style="dim")
        marker.append(tag, style=f"bold {color}")
    return marker


def array_table(sequence: Sequence[int], step: SearchStep | None) -> Table:
    """Index row, marker row and value row for the whole sequence."""
    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 1))
    for _ in sequence:
        table.add_column(justify="center", min_width=5)

    table.add_row(*[Text(str(i), style="dim") for i in range(len(sequence))])
    table.add_row(*[_marker(i, step) for i in range(len(sequence))])
    table.add_row(*[Text(f" {v} ", style=_cell_style(i, step)) for i, v in enumerate(sequence)])
    return table


# ---------------------------------------------------------------------------
# Session entry
# ---------------------------------------------------------------------------


def banner(sequence: Sequence[int], target: int) -> None:
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]Binary Search Visualizer[/bold cyan]\n"
            "[dim]Numbers are automatically sorted in ascending order[/dim]\n\n"
            f"[dim]Array  :[/dim] [white]{', '.join(str(v) for v in sequence)}[/white]\n"
            f"[dim]Target :[/dim] [white]{target}[/white]",
            border_style="cyan",
            padding=(1, 4),
        )
    )


def how_it_works() -> None:
    console.print()
    console.print(
        Panel(
            "1. The array must be sorted (numbers are automatically sorted)\n"
            "2. Find the middle element and compare it with the target\n"
            "3. If the middle element is the target, we're done!\n"
            "4. If the target is smaller, search the left half\n"
            "5. If the target is larger, search the right half\n"
            "6. Repeat until the target is found or the search range is empty",
            title=_label("HOW BINARY SEARCH WORKS", "blue"),
            border_style="blue",
            padding=(0, 2),
        )
    )


def more_info() -> None:
    console.print()
    console.print(
        Panel(
            "[bold]What is Binary Search?[/bold]\n"
            "Binary search is an efficient algorithm for finding a target value within a sorted "
            "array. It works by repeatedly dividing the search interval in half, making it much "
            "faster than checking each element one by one.\n\n"
            "[bold]Time Complexity[/bold]\n"
            "Binary Search has a time complexity of O(log n), where n is the size of the array. "
            "In an array of 1 million elements, it would take at most 20 steps to find any "
            "element.\n\n"
            "[bold]Requirements[/bold]\n"
            "  • The array must be sorted\n"
            "  • Random access to elements (array-like data structure)\n"
            "  • Clear ordering relationship between elements\n\n"
            "[bold]Common Applications[/bold]\n"
            "  • Finding elements in sorted arrays\n"
            "  • Dictionary lookups\n"
            "  • Database indexing\n"
            "  • Finding insertion points in sorted data",
            title=_label("MORE ABOUT BINARY SEARCH", "blue"),
            border_style="blue",
            padding=(1, 2),
        )
    )


# ---------------------------------------------------------------------------
# Stepping
# ---------------------------------------------------------------------------


def search_start(length: int) -> None:
    console.print()
    console.print(Rule(f"[cyan]SEARCHING — {length} element(s)[/cyan]", style="cyan"))


def step_frame(sequence: Sequence[int], step: SearchStep, description: str) -> Panel:
    """Build the renderable for one beat. Pure; does not print."""
    if step.found:
        title, color = _label("FOUND ✓", "green"), "green"
    elif step.is_sentinel:
        title, color = _label("NOT FOUND ✗", "red"), "red"
    elif step.comparison is Comparison.UNSET:
        title, color = _label("INSPECT", "yellow"), "yellow"
    else:
        title, color = _label(f"VERDICT: {step.comparison.value.upper()}", "magenta"), "magenta"

    return Panel(
        Group(array_table(sequence, step), Text(description, style="white")),
        title=title,
        border_style=color,
        padding=(0, 1),
    )


def show_step(sequence: Sequence[int], step: SearchStep, description: str) -> None:
    console.print(step_frame(sequence, step, description))


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


def error(message: str) -> None:
    console.print()
    console.print(
        Panel(
            f"[bold white]{message}[/bold white]",
            title=_label("ERROR", "red"),
            border_style="red",
            padding=(0, 2),
        )
    )
    console.print()


def cancelled() -> None:
    console.print()
    console.print(_label("RESET", "red"), "[red] Search cancelled.[/red]")
    console.print()
