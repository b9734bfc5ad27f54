"""Clack-style interactive prompts using Rich + simple-term-menu."""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import TypeVar

from rich.console import Console
from rich.markup import escape
from simple_term_menu import TerminalMenu

from webseed.core.errors import FetchFailed
from webseed.core.naming import validate_project_name
from webseed.core.types import ManifestVariant

_console = Console()

T = TypeVar("T")

DEFAULT_PROJECT_NAME = "my-app"


def _print_bar() -> None:
    _console.print("[dim]│[/]")


def _clear_lines(n: int) -> None:
    """Move cursor up *n* lines and clear to end of screen."""
    sys.stdout.write(f"\033[{n}A\033[J")
    sys.stdout.flush()


def _select(question: str, options: list[T], labels: list[str]) -> T:
    """Display a clack-style selection prompt and return the chosen option."""
    _console.print(f"[bold cyan]◆[/]  {question}")
    _print_bar()

    menu = TerminalMenu(
        labels,
        menu_cursor="│  ● ",
        menu_cursor_style=("fg_cyan", "bold"),
        menu_highlight_style=("fg_cyan",),
    )
    raw_index = menu.show()

    if raw_index is None:
        raise SystemExit(1)

    index: int = int(raw_index)
    selected = options[index]

    # Overwrite the ◆ question + │ bar that stayed on screen
    _clear_lines(2)

    _console.print(f"[bold green]◇[/]  {question}")
    for i, lbl in enumerate(labels):
        if i == index:
            _console.print(f"[dim]│[/]  [bold green]●[/] {lbl}")
        else:
            _console.print(f"[dim]│[/]    [dim s]{lbl}[/]")
    _print_bar()

    return selected


def _confirm(question: str, default: bool = True) -> bool:
    """Display a clack-style yes/no prompt."""
    _console.print(f"[bold cyan]◆[/]  {question}")
    _print_bar()

    suffix = " [Y/n] " if default else " [y/N] "
    _console.print("[dim]│[/]  ", end="")
    answer = input(suffix).strip().lower()

    result = default if answer == "" else answer in ("y", "yes")

    display = "Yes" if result else "No"

    # Overwrite the ◆ question + │ bar + │ [Y/n] input line
    _clear_lines(3)

    _console.print(f"[bold green]◇[/]  {question}")
    _console.print(f"[dim]│[/]  {display}")
    _print_bar()

    return result


def _text(question: str, default: str, validate: Callable[[str], list[str]]) -> str:
    """Display a clack-style free-text prompt, asking again until *validate* passes."""
    while True:
        _console.print(f"[bold cyan]◆[/]  {question}")
        _console.print("[dim]│[/]  ", end="")
        answer = input(f"({default}) ").strip() or default

        problems = validate(answer)
        if not problems:
            break
        _console.print(f"[dim]│[/]  [yellow]Invalid name:[/] {escape(problems[0])}")

    _console.print(f"[bold green]◇[/]  {question}")
    _console.print(f"[dim]│[/]  {escape(answer)}")
    _print_bar()
    return answer


def _validate_path_name(answer: str) -> list[str]:
    return validate_project_name(answer.rstrip("/").rsplit("/", 1)[-1])


def prompt_project_name() -> str:
    """Prompt user for the project directory."""
    return _text("What is your project named?", DEFAULT_PROJECT_NAME, _validate_path_name)


def prompt_variant() -> ManifestVariant:
    """Prompt user to choose JavaScript or TypeScript."""
    variants = list(ManifestVariant)
    labels = [v.label for v in variants]
    return _select("Which language do you want to use?", variants, labels)


def prompt_fallback(failure: FetchFailed) -> bool:
    """Ask whether to use the default template after a failed download."""
    _console.print(f"[dim]│[/]  [yellow]{escape(str(failure))}[/]")
    return _confirm("Do you want to use the default template instead?", default=True)
