"""
quizcore CLI - run the assessment core over JSON files.

Usage:
    quizcore validate test.json                 # Save-time validation report
    quizcore check test.json answers.json       # Which questions still need an answer
    quizcore score test.json answers.json       # Submit and show the score
    quizcore score test.json answers.json --timed-out --json

The test file holds one stored test document; the answers file maps 0-based
question indices to answers in their stored form.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import get_settings
from quizcore.models import Test
from quizcore.questions.base import Severity
from quizcore.scoring import score as score_questions
from quizcore.submission import check_completeness, load_answers, submit
from quizcore.validation import validate_test

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="quizcore",
    help="Quiz assessment engine - validate tests, check and score submissions",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Cannot read {path}: {e}[/red]")
        raise typer.Exit(2) from None


def _load_test(path: Path) -> Test:
    data = _read_json(path)
    if not isinstance(data, dict):
        console.print(f"[red]{path} does not contain a test document[/red]")
        raise typer.Exit(2)
    return Test.from_dict(data)


def _load_answers(path: Path, test: Test) -> dict[int, Any]:
    data = _read_json(path)
    if not isinstance(data, dict):
        console.print(f"[red]{path} does not contain an answers object[/red]")
        raise typer.Exit(2)
    return load_answers(test.questions, data)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def validate(
    test_file: Annotated[Path, typer.Argument(help="Test JSON file")],
) -> None:
    """
    Validate a test before saving.

    Exits with status 1 when any issue blocks saving.
    """
    test = _load_test(test_file)
    report = validate_test(test)

    if not report.issues:
        console.print(f"[green]✓ {test.title or test.id}: ready to save ({len(test.questions)} questions)[/green]")
        return

    table = Table(title=f"Validation: {test.title or test.id}")
    table.add_column("Where", style="cyan")
    table.add_column("Severity")
    table.add_column("Problem", style="white")
    for issue in report.issues:
        style = "red" if issue.severity == Severity.ERROR else "yellow"
        table.add_row(issue.location, f"[{style}]{issue.severity.value}[/{style}]", issue.message)
    console.print(table)

    if not report.ok:
        console.print(f"[red]{len(report.errors)} error(s) must be fixed before saving[/red]")
        raise typer.Exit(1)
    console.print(f"[yellow]{len(report.warnings)} warning(s); saving is allowed[/yellow]")


@app.command()
def check(
    test_file: Annotated[Path, typer.Argument(help="Test JSON file")],
    answers_file: Annotated[Path, typer.Argument(help="Answers JSON file")],
) -> None:
    """
    List the questions that still need an answer.

    Exits with status 1 when the submission would be blocked.
    """
    test = _load_test(test_file)
    answers = _load_answers(answers_file, test)
    report = check_completeness(test.questions, answers)

    if report.ok:
        console.print("[green]✓ Every question has an answer[/green]")
        return
    numbers = ", ".join(str(n) for n in report.incomplete)
    console.print(f"[yellow]Questions still needing an answer: {numbers}[/yellow]")
    raise typer.Exit(1)


@app.command()
def score(
    test_file: Annotated[Path, typer.Argument(help="Test JSON file")],
    answers_file: Annotated[Path, typer.Argument(help="Answers JSON file")],
    student: Annotated[
        str, typer.Option("--student", "-s", help="Student id stored on the record")
    ] = "anonymous",
    timed_out: Annotated[
        bool, typer.Option("--timed-out", help="Time limit reached; skip the completeness check")
    ] = False,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the submission record as JSON")
    ] = False,
) -> None:
    """
    Submit answers and show the score.

    Exits with status 1 when the submission is blocked.
    """
    test = _load_test(test_file)
    answers = _load_answers(answers_file, test)
    result = submit(test, student, answers, timed_out=timed_out)

    if not result.accepted:
        numbers = ", ".join(str(n) for n in result.incomplete)
        console.print(f"[yellow]Submission blocked. Questions still needing an answer: {numbers}[/yellow]")
        raise typer.Exit(1)

    record = result.record
    if as_json:
        typer.echo(json.dumps(record.to_dict(), ensure_ascii=False, indent=2))
        return

    breakdown = score_questions(test.questions, answers)
    table = Table(title=f"Score: {test.title or test.id}")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Type")
    table.add_column("Earned", justify="right")
    table.add_column("Max", justify="right")
    for number, (question, unit) in enumerate(zip(test.questions, breakdown.per_question), 1):
        style = "green" if unit.correct else "red" if unit.earned == 0 else "yellow"
        table.add_row(str(number), question.type.value, f"[{style}]{unit.earned}[/{style}]", str(unit.max))
    console.print(table)

    pct = f"{record.percentage}%" if record.graded else "ungraded"
    console.print(
        Panel(
            f"[bold]{record.score} / {record.max_score}[/bold]  ({pct})",
            title=f"[bold cyan]{student}[/bold cyan]",
            border_style="cyan",
        )
    )


# =============================================================================
# Entry Point
# =============================================================================


def configure_logging() -> None:
    """Route loguru to stderr (and the optional log file) at the configured level."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB")


def main() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
