"""Main CLI interface for the live scoring engine."""

import asyncio
import json
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger as loguru_logger
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..config import settings
from ..database import create_tables, drop_tables
from ..engine import BallOutcome, MatchOutcome, MatchSession, ScoringError, ValidationResult
from ..engine.overs import economy, format_overs, strike_rate
from ..engine.phase import PhaseEvent
from ..persistence import CareerStatsService, DatabaseRosterProvider, MatchStore, create_player
from ..schemas import MatchCreate, PlayerCreate, ScorecardData, parse_commands
from ..schemas.scorecard import DismissalKind

# Initialize rich console
console = Console()


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Setup logging configuration."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Setup console handler with rich
    console_handler = RichHandler(console=console, show_time=True, show_path=False)
    console_handler.setLevel(log_level)

    handlers = [console_handler]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True
    )

    # Persistence modules log through loguru; send them to the same handlers
    loguru_logger.remove()
    for handler in handlers:
        loguru_logger.add(handler, level=logging.getLevelName(log_level), format="{name} - {message}")


app = typer.Typer(
    name="cricket-scoring",
    help="Cricket live scoring engine - ball-by-ball scoring, scorecards and career stats",
    no_args_is_help=True
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Log file path"),
):
    """Cricket live scoring engine."""
    log_level = "DEBUG" if verbose else settings.logging.level
    setup_logging(log_level, log_file or settings.logging.file)

    if not verbose:
        console.print("\n[bold blue]🏏 Cricket Live Scoring[/bold blue]\n")


@app.command("setup-db")
def setup_db(force: bool = typer.Option(False, "--force", help="Force recreation of tables")):
    """Initialize database schema."""
    console.print("[bold]Setting up database schema...[/bold]")

    try:
        if force:
            console.print("Dropping existing tables...")
            drop_tables()

        console.print("Creating database tables...")
        create_tables()

        console.print("[green]✅ Database schema initialized successfully![/green]")

    except Exception as e:
        console.print(f"[red]❌ Database setup failed: {e}[/red]")
        raise typer.Exit(1)


@app.command("add-player")
def add_player(
    name: str = typer.Argument(..., help="Player name"),
    role: Optional[str] = typer.Option(None, "--role", help="Batsman, Bowler, All-rounder or Wicket-keeper"),
):
    """Add a player to the home roster."""
    try:
        player = create_player(PlayerCreate(name=name, role=role))
    except (ValidationError, ScoringError) as e:
        console.print(f"[red]❌ Could not add player: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✅ Added {player.name} (id={player.id})[/green]")


def _split(value: Optional[str]) -> List[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


@app.command("new-match")
def new_match(
    opponent: str = typer.Argument(..., help="Opponent name"),
    overs: Optional[int] = typer.Option(None, "--overs", help="Overs per innings"),
    match_date: Optional[str] = typer.Option(None, "--date", help="Match date (YYYY-MM-DD)"),
    venue: Optional[str] = typer.Option(None, "--venue", help="Venue"),
    tournament: Optional[str] = typer.Option(None, "--tournament", help="Tournament name"),
    squad: Optional[str] = typer.Option(None, "--squad", help="Comma-separated home player ids"),
    opponent_squad: Optional[str] = typer.Option(None, "--opponent-squad", help="Comma-separated opponent names"),
):
    """Create a fixture to score."""
    try:
        data = MatchCreate(
            opponent=opponent,
            match_date=date.fromisoformat(match_date) if match_date else None,
            venue=venue,
            tournament=tournament,
            total_overs=overs,
            squad=_split(squad),
            opponent_squad=_split(opponent_squad),
        )
        match = asyncio.run(MatchStore().create_match(data))
    except (ValueError, ScoringError) as e:
        console.print(f"[red]❌ Could not create match: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✅ Created match {match.id} vs {match.opponent} ({match.total_overs} overs)[/green]")


@app.command()
def score(
    match_id: int = typer.Argument(..., help="Match ID"),
    commands_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of scoring commands"),
    save: bool = typer.Option(True, "--save/--no-save", help="Save the scorecard when done"),
):
    """Replay scoring commands against a match."""
    try:
        commands = parse_commands(json.loads(commands_file.read_text(encoding="utf-8")))
    except ValueError as e:
        console.print(f"[red]❌ Invalid command file: {e}[/red]")
        raise typer.Exit(1)

    async def run_score() -> MatchSession:
        store = MatchStore()
        session = MatchSession(await store.load(match_id), roster=DatabaseRosterProvider(match_id))

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Scoring...", total=None)
            for number, command in enumerate(commands, start=1):
                progress.update(task, description=f"Command {number}/{len(commands)}: {command.action}")
                try:
                    result = session.execute(command)
                except (ScoringError, ValueError) as e:
                    raise ScoringError(f"Command {number} ({command.action}): {e}") from e

                if isinstance(result, BallOutcome):
                    display_outcome(result)
                elif isinstance(result, MatchOutcome):
                    console.print(f"[bold green]🏆 {result.result_text}[/bold green]")

        if save:
            await session.save(store)
            console.print(f"[green]✅ Match {match_id} saved[/green]")
        return session

    try:
        session = asyncio.run(run_score())
    except ScoringError as e:
        console.print(f"[red]❌ Scoring failed: {e}[/red]")
        raise typer.Exit(1)

    display_scorecard(session.data)
    display_validation(session.validation)

    next_role = session.next_selection()
    if next_role is not None:
        console.print(f"[yellow]⏭️ Next: select {next_role.value.replace('_', '-')}[/yellow]")


@app.command()
def scorecard(match_id: int = typer.Argument(..., help="Match ID")):
    """Show the stored scorecard for a match."""
    try:
        data = asyncio.run(MatchStore().load(match_id))
    except ScoringError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)
    display_scorecard(data)


@app.command()
def validate(match_id: int = typer.Argument(..., help="Match ID")):
    """Run consistency checks on a stored scorecard."""
    try:
        session = MatchSession(asyncio.run(MatchStore().load(match_id)))
    except ScoringError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)
    display_validation(session.validate(), show_clean=True)


@app.command("apply-stats")
def apply_stats(match_id: int = typer.Argument(..., help="Match ID")):
    """Fold a finalized match into player career statistics."""
    console.print(f"[bold]Applying career stats for match {match_id}...[/bold]")

    async def run_apply() -> int:
        session = MatchSession(await MatchStore().load(match_id))
        return await session.apply_career_stats(CareerStatsService())

    try:
        updated = asyncio.run(run_apply())
    except ScoringError as e:
        console.print(f"[red]❌ Applying stats failed: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✅ Career stats updated for {updated} players[/green]")


@app.command()
def career(player_id: int = typer.Argument(..., help="Player ID")):
    """Show a player's career statistics."""
    stats = asyncio.run(CareerStatsService().get_career_stats(player_id))
    if stats is None:
        console.print(f"[yellow]⚠️ No career stats for player {player_id}[/yellow]")
        raise typer.Exit(1)

    table = Table(title=f"Career Stats - Player {player_id}")
    table.add_column("Stat", style="cyan")
    table.add_column("Value", style="green")
    for key, value in stats.model_dump().items():
        table.add_row(key.replace("_", " ").title(), str(value))
    console.print(table)


@app.command()
def status():
    """Show configuration."""
    console.print("[bold]System Status[/bold]")

    for title, section in (
        ("Database Configuration", settings.database),
        ("Scoring Configuration", settings.scoring),
        ("Logging Configuration", settings.logging),
    ):
        table = Table(title=title)
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")
        for key, value in section.model_dump().items():
            table.add_row(key, str(value))
        console.print(table)


def display_outcome(outcome: BallOutcome):
    """Print the commentary line and notifications for one delivery."""
    event = outcome.event
    style = "red" if event.is_wicket else "white"
    console.print(f"[{style}]{event.over}.{event.ball_number}  {event.bowler} to {event.striker}: {event.description}[/{style}]")

    for milestone in outcome.milestones:
        console.print(f"[bold magenta]🎉 {milestone.title} {milestone.player_name}[/bold magenta]"
                      + (f" {milestone.sub_text}" if milestone.sub_text else ""))

    if outcome.phase == PhaseEvent.OVER_COMPLETE:
        console.print("[blue]End of over[/blue]")
    elif outcome.phase == PhaseEvent.INNINGS_BREAK:
        console.print("[bold yellow]⏸️ Innings break[/bold yellow]")
    elif outcome.phase == PhaseEvent.MATCH_COMPLETE:
        console.print("[bold green]🏁 Match complete[/bold green]")


def display_scorecard(data: ScorecardData):
    """Display both innings as batting and bowling tables."""
    info = data.match_info
    console.print(f"[bold]{info.team_a_name} vs {info.team_b_name}[/bold]")
    if info.toss_result:
        console.print(info.toss_result)

    for index, innings in enumerate(data.innings):
        if not innings.batting and not innings.bowling:
            continue
        team = info.batting_first_name if index == 0 else info.batting_second_name

        batting = Table(title=f"{team} - {innings.total_runs}/{innings.wickets} ({format_overs(innings.overs)} ov)")
        batting.add_column("Batter", style="cyan")
        batting.add_column("How Out", style="blue")
        batting.add_column("R", style="green", justify="right")
        batting.add_column("B", justify="right")
        batting.add_column("4s", justify="right")
        batting.add_column("6s", justify="right")
        batting.add_column("SR", justify="right")
        for b in innings.batting:
            how_out = b.how_out.value
            if b.how_out == DismissalKind.CAUGHT and b.fielder:
                how_out = f"c {b.fielder} b {b.bowler}"
            elif b.is_out and b.bowler and b.how_out.credits_bowler:
                how_out = f"{b.how_out.value} b {b.bowler}"
            batting.add_row(b.name, how_out, str(b.runs), str(b.balls), str(b.fours), str(b.sixes),
                            strike_rate(b.runs, b.balls))
        console.print(batting)
        console.print(f"Extras: {innings.extras} (b {innings.bye_runs})")

        bowling = Table(title="Bowling")
        bowling.add_column("Bowler", style="cyan")
        bowling.add_column("O", justify="right")
        bowling.add_column("M", justify="right")
        bowling.add_column("R", justify="right")
        bowling.add_column("W", style="red", justify="right")
        bowling.add_column("WD", justify="right")
        bowling.add_column("NB", justify="right")
        bowling.add_column("Econ", justify="right")
        for b in innings.bowling:
            bowling.add_row(b.name, format_overs(b.overs), str(b.maidens), str(b.runs), str(b.wickets),
                            str(b.wides), str(b.no_balls), economy(b.runs, b.overs))
        console.print(bowling)

    if info.match_result:
        console.print(f"[bold green]{info.match_result}[/bold green]")


def display_validation(result: ValidationResult, show_clean: bool = False):
    """Display validation issues."""
    if result.is_valid:
        if show_clean:
            console.print("[green]✅ Scorecard is consistent[/green]")
        return

    table = Table(title="Scorecard Validation")
    table.add_column("Innings", style="cyan")
    table.add_column("Check", style="yellow")
    table.add_column("Details", style="red")
    for issue in result.issues:
        table.add_row(str(issue.innings + 1), issue.type, issue.message)
    console.print(table)


if __name__ == '__main__':
    app()
