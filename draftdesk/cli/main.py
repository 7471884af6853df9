"""Main CLI entry point using Typer."""
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .. import __version__
from ..analysis import COLOR_KEY, SpellChecker, highlight, score
from ..config import get_settings
from ..errors import DraftDeskError
from ..export import TextExporter
from ..models import Chapter, Project
from ..storage import PersistenceManager
from ..utils.logging import setup_logging


app = typer.Typer(
    name="draftdesk",
    help="DraftDesk - distraction-free terminal writing with prose analysis",
    add_completion=True,
    rich_markup_mode="rich",
)

console = Console()


def _load_project(file: str) -> Project:
    settings = get_settings()
    return PersistenceManager().load(settings.resolve_path(file))


def _pick_chapter(project: Project, number: int) -> Chapter:
    if not 1 <= number <= len(project.chapters):
        raise typer.BadParameter(
            f"Chapter {number} does not exist (project has {len(project.chapters)})",
            param_hint="--chapter",
        )
    return project.chapters[number - 1]


@app.command(name="edit", help="Open the full-screen editor")
def edit(
    file: Optional[str] = typer.Argument(
        None,
        help="Project file to open (.json is added when there is no extension)"
    )
):
    """Start the full-screen editor."""
    from .editor_app import EditorApp
    from .interactive import EditorSession

    settings = get_settings()
    logger = setup_logging(level=settings.log_level)

    try:
        session = EditorSession(settings)
        if file:
            session.open_file(settings.resolve_path(file))

        EditorApp(session).run()

    except DraftDeskError as e:
        console.print(f"[red]{e.title}: {escape(e.message)}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
    except Exception as e:
        logger.error("Editor crashed", exc_info=True)
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command(help="Print style highlighting and readability for a chapter")
def analyze(
    file: str = typer.Argument(..., help="Project file"),
    chapter: int = typer.Option(1, "--chapter", "-c", help="Chapter number (1-based)")
):
    """Analyze one chapter and print the highlighted text."""
    settings = get_settings()
    setup_logging(level=settings.log_level, console_output=settings.verbose)

    try:
        project = _load_project(file)
        selected = _pick_chapter(project, chapter)
    except DraftDeskError as e:
        console.print(f"[red]{e.title}: {escape(e.message)}[/red]")
        raise typer.Exit(1)

    highlighted = highlight(selected.content)
    console.print(f"[bold cyan]Chapter {chapter}: {escape(selected.title)}[/bold cyan]\n")
    console.print(highlighted.to_markup())
    console.print()
    console.print(f"[bold]{score(selected.content)}[/bold]")
    console.print(COLOR_KEY)


@app.command(help="Export the manuscript as plain text")
def export(
    file: str = typer.Argument(..., help="Project file"),
    output: str = typer.Argument(..., help="Output file (.txt is added when there is no extension)")
):
    """Export all chapters to a text file."""
    settings = get_settings()
    setup_logging(level=settings.log_level, console_output=settings.verbose)

    try:
        project = _load_project(file)
        path = TextExporter(project).export(settings.resolve_path(output))
    except DraftDeskError as e:
        console.print(f"[red]{e.title}: {escape(e.message)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Exported {len(project.chapters)} chapters to {escape(str(path))}[/green]")


@app.command(help="Spell check a chapter against the dictionary")
def spellcheck(
    file: str = typer.Argument(..., help="Project file"),
    chapter: int = typer.Option(1, "--chapter", "-c", help="Chapter number (1-based)")
):
    """List words missing from the dictionary."""
    settings = get_settings()
    setup_logging(level=settings.log_level, console_output=settings.verbose)

    try:
        project = _load_project(file)
        selected = _pick_chapter(project, chapter)
        report = SpellChecker(settings.dictionary_path).check(selected.content)
    except DraftDeskError as e:
        console.print(f"[red]{e.title}: {escape(e.message)}[/red]")
        raise typer.Exit(1)

    style = "green" if report.clean else "yellow"
    console.print(f"[{style}]{escape(report.render(settings.spell_display_limit))}[/{style}]")


@app.command(help="Show or set configuration")
def config(
    key: Optional[str] = typer.Argument(None, help="Config key to show/set"),
    value: Optional[str] = typer.Argument(None, help="Value to set"),
):
    """Show or set configuration values."""
    try:
        settings = get_settings()

        if not key:
            table = Table(title="Configuration")
            table.add_column("Key", style="cyan")
            table.add_column("Value")

            for k in type(settings).model_fields:
                table.add_row(k, escape(str(getattr(settings, k))))

            console.print(table)

        elif not hasattr(settings, key):
            console.print(f"[red]Unknown config key: {escape(key)}[/red]")
            raise typer.Exit(1)

        elif value is None:
            console.print(f"{key}: {escape(str(getattr(settings, key)))}")

        else:
            # Assignment is validated, so the string is coerced to the field type
            setattr(settings, key, value)
            settings.save_config_file(Path("config.yaml"))
            console.print(f"[green]✓ Set {key} = {escape(str(getattr(settings, key)))}[/green]")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command(help="Show version information")
def version():
    """Show version information."""
    console.print(f"[cyan]DraftDesk v{__version__}[/cyan]")
    console.print("[dim]Distraction-free terminal writing[/dim]")


# Default command when no subcommand is provided
@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version", "-v",
        help="Show version"
    )
):
    """
    DraftDesk - distraction-free terminal writing.

    Run without arguments to start the editor on a new project.
    """
    if version:
        console.print(f"[cyan]DraftDesk v{__version__}[/cyan]")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        edit(None)


if __name__ == "__main__":
    app()
