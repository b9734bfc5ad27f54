"""Typer CLI application for webseed."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Annotated

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from typer import Argument, Exit, Option, Typer
from typer.core import TyperCommand

import webseed
from webseed.cli._installer import install
from webseed.cli._prompts import prompt_fallback, prompt_project_name, prompt_variant
from webseed.core import (
    EXAMPLES,
    Environment,
    ExamplesSource,
    ManifestVariant,
    PackageManager,
    ProjectRequest,
    TargetValidator,
    TemplateFetcher,
    WebseedError,
    create_project,
)

app = Typer(add_completion=False, context_settings={"help_option_names": ["-h", "--help"]})
_console = Console()
_err_console = Console(stderr=True)


@app.callback()
def main() -> None:
    """webseed — bootstrap web-application projects from templates and examples."""


_FILE_DESCRIPTIONS: dict[str, str] = {
    "package.json": "project manifest",
    ".gitignore": "version control ignores",
    "tsconfig.json": "TypeScript configuration",
    "next-env.d.ts": "type declarations",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=_err_console, show_path=False, show_time=False)],
        force=True,
    )


def _fail(message: str, code: int = 1) -> Exit:
    _err_console.print(f"[bold red]Error:[/] {escape(message)}")
    return Exit(code=code)


def _print_examples() -> None:
    _console.print()
    _console.print("[bold cyan]◆[/]  Available examples")
    _console.print("[dim]│[/]")
    for name, description in EXAMPLES.items():
        if name.startswith("__"):
            continue
        _console.print(f"[dim]│[/]  [bold cyan]{name:<22}[/] [dim]{description}[/]")
    _console.print("[dim]│[/]")
    _console.print(
        f"[dim]│[/]  Any {escape('https://github.com/<owner>/<repo>[/tree/<branch>/<path>]')} URL"
    )
    _console.print("[dim]│[/]  is accepted as well.")
    _console.print()


def _list_examples_callback(value: bool) -> None:
    if value:
        _print_examples()
        raise Exit()


def _explicit_package_manager(npm: bool, pnpm: bool, yarn: bool) -> PackageManager | None:
    flags = {PackageManager.NPM: npm, PackageManager.PNPM: pnpm, PackageManager.YARN: yarn}
    chosen = [pm for pm, enabled in flags.items() if enabled]
    if len(chosen) > 1:
        raise _fail("Only one of --use-npm, --use-pnpm and --use-yarn may be given.", code=2)
    return chosen[0] if chosen else None


_EXAMPLE_FLAGS = ("--example", "-e")


class _CreateCommand(TyperCommand):
    """Let ``--example`` appear without a value; it then resolves as an empty reference."""

    def parse_args(self, ctx, args: list[str]) -> list[str]:
        normalized: list[str] = []
        for index, arg in enumerate(args):
            normalized.append(arg)
            if arg == "--":
                normalized.extend(args[index + 1 :])
                break
            if arg in _EXAMPLE_FLAGS:
                following = args[index + 1] if index + 1 < len(args) else None
                if following is None or following.startswith("-"):
                    normalized.append("")
        return super().parse_args(ctx, normalized)


@app.command(cls=_CreateCommand)
def create(
    project_dir: Annotated[
        str | None,
        Argument(help="Directory for the new project. Prompted for when omitted.", show_default=False),
    ] = None,
    example: Annotated[
        str | None,
        Option(
            "--example",
            "-e",
            help="Example name or GitHub URL to bootstrap from. Run with --list-examples to see names.",
            show_default=False,
        ),
    ] = None,
    example_path: Annotated[
        str | None,
        Option(
            "--example-path",
            help="Directory inside the repository. Takes precedence over a path in the URL.",
            show_default=False,
        ),
    ] = None,
    typescript: Annotated[
        bool | None,
        Option("--ts/--js", help="Use the TypeScript or JavaScript variant of the default template."),
    ] = None,
    use_npm: Annotated[bool, Option("--use-npm", help="Install dependencies with npm.")] = False,
    use_pnpm: Annotated[bool, Option("--use-pnpm", help="Install dependencies with pnpm.")] = False,
    use_yarn: Annotated[bool, Option("--use-yarn", help="Install dependencies with yarn.")] = False,
    skip_install: Annotated[
        bool, Option("--skip-install", help="Write the project without installing dependencies.")
    ] = False,
    verbose: Annotated[bool, Option("--verbose", "-v", help="Show debug logging.")] = False,
    list_examples: Annotated[
        bool,
        Option(
            "--list-examples",
            "-l",
            help="List the named examples and exit.",
            callback=_list_examples_callback,
            is_eager=True,
            expose_value=False,
        ),
    ] = False,
) -> None:
    """Create a new web application."""
    _configure_logging(verbose)

    explicit_pm = _explicit_package_manager(use_npm, use_pnpm, use_yarn)
    environment = Environment.capture()
    interactive = not environment.ci

    try:
        examples = ExamplesSource.from_env(os.environ)
    except ValueError as exc:
        raise _fail(str(exc)) from None

    # Header
    _console.print()
    _console.print(f"[bold cyan]●[/]  webseed v{webseed.__version__}")
    _console.print("[dim]│[/]")

    if project_dir is None:
        if not interactive:
            raise _fail("Please specify the project directory.")
        try:
            project_dir = prompt_project_name()
        except EOFError:
            raise _fail("Please specify the project directory.") from None

    if typescript is None:
        if example is None and interactive and sys.stdin.isatty():
            variant = prompt_variant()
        else:
            variant = ManifestVariant.JAVASCRIPT
    else:
        variant = ManifestVariant.TYPESCRIPT if typescript else ManifestVariant.JAVASCRIPT

    request = ProjectRequest(
        directory=Path(project_dir),
        template=example,
        subpath=example_path,
        variant=variant,
        package_manager=explicit_pm,
    )
    fetcher = TemplateFetcher(confirm_fallback=prompt_fallback if interactive else None)

    _console.print(f"[bold green]◇[/]  Creating {escape(project_dir)}...")
    try:
        project = create_project(
            request,
            fetcher=fetcher,
            validator=TargetValidator(),
            environment=environment,
            examples=examples,
        )
    except WebseedError as exc:
        raise _fail(str(exc), code=exc.exit_code) from None

    for name in project.files:
        desc = _FILE_DESCRIPTIONS.get(name, "")
        desc_str = f" [dim]— {desc}[/]" if desc else ""
        _console.print(f"[dim]│[/]  {escape(name)}{desc_str}")
    _console.print("[dim]│[/]")

    if skip_install:
        _console.print("[bold green]◇[/]  Skipping dependency installation")
    else:
        pm = project.package_manager.value
        _console.print(f"[bold green]◇[/]  Installing dependencies with {pm}...")
        try:
            install(project.package_manager, project.path)
        except WebseedError as exc:
            raise _fail(str(exc), code=exc.exit_code) from None
    _console.print("[dim]│[/]")

    run = project.package_manager.run_command
    if project.path == Path.cwd():
        _console.print(f"[bold cyan]●[/]  Done! {run} dev")
    else:
        _console.print(f"[bold cyan]●[/]  Done! cd {escape(project_dir)} && {run} dev")
    _console.print()
