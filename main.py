"""
Mutual Transfer Matching
========================
Entry point. Run with: python main.py --help
"""

import asyncio
import logging
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from src.config import settings
from src.domain.enums import MatchType
from src.infrastructure.database import Database
from src.services.schemas import MatchFilter
from src.services.transfers import TransferService, TransferServiceError

logging.basicConfig(level=settings.log_level)

app = typer.Typer(
    name="transfer-match",
    help="Mutual transfer matching for government teachers.",
    add_completion=False,
)
console = Console()


async def _with_service(action):
    async with Database(settings.database_url, echo=settings.database_echo) as db:
        async with db.session() as session:
            return await action(TransferService(session, settings))


@app.command("init-db")
def init_db():
    """Create all tables."""

    async def _run():
        async with Database(settings.database_url, echo=settings.database_echo) as db:
            await db.create_all()

    asyncio.run(_run())
    console.print("[green]Tables created.[/green]")


@app.command()
def seed():
    """Populate the database with sample teachers."""
    import seed as seed_script

    asyncio.run(seed_script.main())


@app.command()
def matches(
    teacher_id: int = typer.Argument(..., help="Teacher to find matches for"),
    match_type: Optional[str] = typer.Option(
        None, "--match-type", "-t", help="perfect, nearby or all"
    ),
    max_distance: Optional[float] = typer.Option(
        None, "--max-distance", "-d", help="Drop matches farther than this (km)"
    ),
    subject: Optional[str] = typer.Option(
        None, "--subject", "-s", help="Subject substring"
    ),
):
    """List ranked transfer matches for a teacher."""
    try:
        filters = MatchFilter(
            match_type=match_type, max_distance=max_distance, subject=subject
        )
        results = asyncio.run(
            _with_service(lambda svc: svc.find_matches(teacher_id, filters))
        )
    except TransferServiceError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc))

    table = Table(title=f"Matches for teacher {teacher_id}")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name")
    table.add_column("District")
    table.add_column("Subjects")
    table.add_column("Type")
    table.add_column("Distance (km)", justify="right")
    table.add_column("Score", justify="right")

    for m in results:
        style = "green" if m.match_type is MatchType.PERFECT else "yellow"
        table.add_row(
            str(m.teacher.id),
            m.teacher.name,
            m.teacher.current_district,
            ", ".join(m.teacher.subjects),
            f"[{style}]{m.match_type.value}[/{style}]",
            f"{m.distance:.1f}",
            str(m.score),
        )
    console.print(table)


@app.command()
def stats(teacher_id: int = typer.Argument(..., help="Teacher to summarise")):
    """Show dashboard counts for a teacher."""
    try:
        result = asyncio.run(
            _with_service(lambda svc: svc.dashboard_stats(teacher_id))
        )
    except TransferServiceError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=f"Dashboard for teacher {teacher_id}")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")
    for name, value in result.model_dump().items():
        table.add_row(name.replace("_", " ").capitalize(), str(value))
    console.print(table)


if __name__ == "__main__":
    app()
