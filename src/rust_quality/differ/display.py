"""Console output for the ``diff`` command."""

from __future__ import annotations

from typing import Mapping, Sequence

from rich.console import Console
from rich.markup import escape

from rust_quality.differ.grouping import group_imports
from rust_quality.differ.render import DiffBlock, RenderedDiff, render, summarize
from rust_quality.model import REGISTRY_ORDER, DiffMode
from rust_quality.model.fix import ImportFix
from rust_quality.model.issue import Issue

SEPARATOR = "─" * 40
FOOTER = "═" * 40


def print_block(block: DiffBlock, console: Console, indent: str = "    ") -> None:
    console.print(f"[cyan]{escape(block.title)}[/]")
    for text in block.removed:
        console.print(f"[red]-{indent}{escape(text)}[/]")
    for text in block.added:
        console.print(f"[green]+{indent}{escape(text)}[/]")


def print_rendered(rendered: RenderedDiff, console: Console) -> None:
    """Full rendering of one issue, as shown in interactive mode."""
    for block in rendered.blocks:
        print_block(block, console, indent=" ")


def show_file(path: str, text: str, issues: Sequence[Issue], console: Console) -> int:
    """Full diff for one file; returns the number of changes shown."""
    fixable = [i for i in issues if i.is_fixable]
    console.print(f"[bold cyan]File: {escape(path)}[/]")
    console.print(f"[dim]{SEPARATOR}[/]")

    imports = [i.fix.import_path for i in fixable if isinstance(i.fix, ImportFix)]
    if imports:
        console.print("[dim]Imports (file top)[/]")
        for line in group_imports(imports):
            console.print(f"[green]+    {escape(line)}[/]")
        console.print()

    for aid in REGISTRY_ORDER:
        mine = [i for i in fixable if i.analyzer_id == aid]
        if not mine:
            continue
        console.print(f"[bold green]{aid} ({len(mine)} issues)[/]")
        console.print()
        for issue in mine:
            rendered = render(issue, text, DiffMode.FULL)
            # The import hunk is already shown, grouped, at the top.
            for block in rendered.blocks:
                if block.line:
                    print_block(block, console)
            console.print()

    console.print(f"[dim]{FOOTER}[/]")
    return len(fixable)


def show_full(
    results: Mapping[str, Sequence[Issue]],
    sources: Mapping[str, str],
    console: Console,
) -> None:
    console.print("\n[bold]DIFF OUTPUT[/]\n")
    total = files = 0
    for path, issues in results.items():
        if not any(i.is_fixable for i in issues):
            continue
        files += 1
        total += show_file(path, sources[path], issues, console)
        console.print()
    if total == 0:
        console.print("No changes proposed")
        return
    console.print(f"[bold yellow]Total: {total} changes in {files} files[/]")


def show_summary(results: Mapping[str, Sequence[Issue]], console: Console) -> None:
    console.print("\n[bold]DIFF SUMMARY[/]\n")
    lines = summarize(results)
    for line in lines[:-1]:
        if line and not line.startswith(" "):
            console.print(f"[bold cyan]{escape(line)}[/]")
        else:
            console.print(escape(line))
    console.print(f"[bold yellow]{escape(lines[-1])}[/]")
