"""
Terminal output helpers (rich).

The fmt_* functions return rich markup strings so chapter text can be kept
as data; the print functions write them out. Arguments that are literal
key names are escaped, since keys like "Ctrl+B [" look like markup.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule

WIDTH = 70

console = Console(highlight=False)


def fmt_info(text: str) -> str:
    return f"  [blue]ℹ[/]  {text}"


def fmt_key(keys: str, description: str) -> str:
    return f"  [yellow]⌨[/]  [bold]{escape(keys)}[/bold] - {escape(description)}"


def fmt_action(text: str) -> str:
    return f"  [green]▶[/]  {text}"


def fmt_challenge(text: str) -> str:
    return f"\n  [bold white on magenta] CHALLENGE [/] {text}"


def fmt_success(text: str) -> str:
    return f"  [green]✓[/]  {text}"


def fmt_fail(text: str) -> str:
    return f"  [red]✗[/]  {text}"


def fmt_warning(text: str) -> str:
    return f"  [yellow]⚠[/]  {text}"


def fmt_code(text: str) -> str:
    return f"  [dim]{escape(text)}[/dim]"


def print_lines(lines: Iterable[str]) -> None:
    for line in lines:
        console.print(line)


def print_header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold white]{escape(title)}[/]", style="on blue", width=WIDTH))
    console.print()


def print_subheader(title: str) -> None:
    console.print()
    console.print(f"[cyan bold]── {escape(title)} ──[/]")
    console.print()


def separator() -> None:
    console.print(Rule(style="dim"), width=WIDTH)


def info(text: str) -> None:
    console.print(fmt_info(text))


def key(keys: str, description: str) -> None:
    console.print(fmt_key(keys, description))


def action(text: str) -> None:
    console.print(fmt_action(text))


def success(text: str) -> None:
    console.print(fmt_success(text))


def fail(text: str) -> None:
    console.print(fmt_fail(text))


def warning(text: str) -> None:
    console.print(fmt_warning(text))


def blank() -> None:
    console.print()


def clear() -> None:
    console.clear()


def prompt(text: str) -> str:
    """Read one line; end of input reads as an empty answer."""
    try:
        return console.input(f"  [bold]{escape(text)}[/bold]")
    except EOFError:
        return ""


def wait_for_enter(message: str = "Press Enter to continue...") -> None:
    console.print()
    try:
        console.input(f"  [dim]{escape(message)}[/dim]")
    except EOFError:
        pass
