"""Console script for plagiarism_session."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .config import ConfigLoader
from .output import render_results, render_stats, render_viewer_status
from .scanner import EnvTokenProvider, StaticTokenProvider
from .session import (
    MIN_ASSIGNMENTS,
    PlagiarismSessionController,
    Role,
    ScanPhase,
    ScanSession,
    Viewer,
    compute_stats,
    get_viewer_status,
)
from .utils import setup_logging

app = typer.Typer(
    name="plagiarism-session",
    help="Run class plagiarism checks and review the results",
    add_completion=False,
)
console = Console()


def _parse_id(value: str) -> int | str:
    """Numeric IDs on the command line match the integer IDs the service returns."""
    return int(value) if value.isdigit() else value


async def _scan(controller: PlagiarismSessionController, share_with_students: bool) -> ScanSession:
    """Run one scan and hand back the finished session state."""
    async with controller:
        if not controller.can_check_plagiarism:
            console.print(
                f"[red]Need at least {MIN_ASSIGNMENTS} assignments to check for plagiarism[/red]"
            )
            raise typer.Exit(1)

        with console.status("Analyzing..."):
            await controller.start_scan()

        if controller.phase is not ScanPhase.SUCCEEDED:
            raise typer.Exit(1)

        if share_with_students:
            controller.set_student_view(True)
        return controller.session


def _run(
    class_id: str,
    lecturer_id: str,
    assignments: int,
    config: Optional[Path],
    token: Optional[str],
    verbose: bool,
    share_with_students: bool = False,
) -> ScanSession:
    setup_logging(level=logging.DEBUG if verbose else logging.WARNING)
    settings = ConfigLoader().load_settings(config)
    token_provider = StaticTokenProvider(token) if token else EnvTokenProvider(settings.token_env_var)

    controller = PlagiarismSessionController(
        class_id=class_id,
        viewer=Viewer(user_id=_parse_id(lecturer_id), role=Role.LECTURER),
        assignment_count=assignments,
        token_provider=token_provider,
        settings=settings,
    )
    return asyncio.run(_scan(controller, share_with_students))


CLASS_ID = typer.Argument(..., help="Class whose submissions are compared")
LECTURER_ID = typer.Option(..., "--lecturer-id", "-l", help="User ID of the lecturer running the check")
ASSIGNMENTS = typer.Option(..., "--assignments", "-a", help="Number of assignments in the class", min=0)
CONFIG = typer.Option(None, "--config", "-c", help="YAML file with service settings", exists=True)
TOKEN = typer.Option(None, "--token", "-t", help="Access token (defaults to the configured env var)")
VERBOSE = typer.Option(False, "--verbose", "-v", help="Enable debug logging")


@app.command()
def scan(
    class_id: str = CLASS_ID,
    lecturer_id: str = LECTURER_ID,
    assignments: int = ASSIGNMENTS,
    config: Optional[Path] = CONFIG,
    token: Optional[str] = TOKEN,
    verbose: bool = VERBOSE,
):
    """Run a plagiarism check for a class and print the results."""
    session = _run(class_id, lecturer_id, assignments, config, token, verbose)

    console.print(render_stats(compute_stats(session.results)))
    console.print(render_results(session.results))


@app.command()
def status(
    class_id: str = CLASS_ID,
    student_id: str = typer.Option(..., "--student-id", "-s", help="Student whose status is shown"),
    lecturer_id: str = LECTURER_ID,
    assignments: int = ASSIGNMENTS,
    config: Optional[Path] = CONFIG,
    token: Optional[str] = TOKEN,
    verbose: bool = VERBOSE,
):
    """Run a plagiarism check and print one student's originality status."""
    session = _run(class_id, lecturer_id, assignments, config, token, verbose, share_with_students=True)

    student = Viewer(user_id=_parse_id(student_id), role=Role.STUDENT)
    console.print(render_viewer_status(get_viewer_status(student, session)))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
