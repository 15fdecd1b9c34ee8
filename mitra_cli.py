#!/usr/bin/env python3
"""
Mitra - Command Line Interface
Route agent intents, chat in plain text and print daily schedules
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import asyncio
import json
from typing import Dict, List, Optional

import typer
from rich.console import Console

from mitra.agents import Coordinator, Intent, KeywordIntentClassifier
from mitra.core import Config, MitraError, ScheduleItem, get_store
from mitra.core.models import AgentKind
from mitra.schedule import ScheduleFormatter

# Initialize CLI app and console
app = typer.Typer(help="Mitra - Your multi-agent personal assistant")

console = Console()

# Collection shortcuts for the records command
RECORD_SOURCES = {
    "tasks": AgentKind.TASK,
    "workouts": AgentKind.FITNESS,
    "finance": AgentKind.FINANCE,
    "journal": AgentKind.JOURNAL,
    "medications": AgentKind.HEALTHCARE,
    "habits": AgentKind.LIFESTYLE,
}

# Lazy-loaded Coordinator (initialized on first use)
_coordinator: Optional[Coordinator] = None


def get_coordinator() -> Coordinator:
    """
    Get or initialize the Coordinator instance.

    Uses lazy loading so --help works without a database.
    """
    global _coordinator
    if _coordinator is None:
        config = Config()
        _coordinator = Coordinator(get_store(config.get_database_path()), config)
    return _coordinator


def parse_assignments(pairs: List[str]) -> Dict[str, str]:
    """Turn key=value arguments into a dict."""
    args = {}
    for pair in pairs:
        if "=" not in pair:
            raise typer.BadParameter(f"Expected key=value, got {pair!r}")
        key, value = pair.split("=", 1)
        args[key.strip()] = value
    return args


def _print_schedule_for(date: Optional[str]) -> None:
    coordinator = get_coordinator()
    schedule = asyncio.run(coordinator.generate_schedule(date))
    ScheduleFormatter(console).render_schedule(schedule)


@app.command()
def route(
    intent: str = typer.Argument(..., help="Intent name, e.g. log_workout"),
    assignments: Optional[List[str]] = typer.Argument(None, help="Arguments as key=value"),
):
    """
    Send a structured intent straight to its agent

    Examples:
      mitra route log_workout exercise=squat sets=5 reps=5 weight=100
      mitra route add_task "task=Finish report" priority=high
      mitra route add_medication medicine=metformin time=evening
    """
    try:
        args = parse_assignments(assignments or [])
        if intent == Intent.GENERATE_SCHEDULE.value:
            _print_schedule_for(args.get("date"))
            return
        response = get_coordinator().route(intent, args)
        ScheduleFormatter(console).render_response(response.to_dict())
    except (MitraError, FileNotFoundError) as e:
        console.print(f"[red]Error routing intent: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def ask(
    message: str = typer.Argument(..., help="Plain-text request"),
):
    """
    Classify a plain-text request and route it

    Examples:
      mitra ask "Did bench press 3x8 at 80kg"
      mitra ask "Spent $12 on lunch"
      mitra ask "Plan my day"
    """
    classified = KeywordIntentClassifier().classify(message)
    if classified is None:
        console.print("[yellow]Couldn't tell what you'd like to do. Try 'mitra route' instead.[/yellow]")
        raise typer.Exit(1)

    console.print(f"[dim]Intent: {classified.intent_name}[/dim]")
    try:
        if classified.intent_name == Intent.GENERATE_SCHEDULE.value:
            _print_schedule_for(None)
            return
        response = get_coordinator().route(classified.intent_name, classified.arguments)
        ScheduleFormatter(console).render_response(response.to_dict())
    except (MitraError, FileNotFoundError) as e:
        console.print(f"[red]Error processing request: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def schedule(
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Day to plan (YYYY-MM-DD)"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """
    Generate today's schedule from every agent's requirements
    """
    try:
        coordinator = get_coordinator()
        result = asyncio.run(coordinator.generate_schedule(date))
        if as_json:
            console.print_json(json.dumps(result.to_dict()))
        else:
            ScheduleFormatter(console).render_schedule(result)
    except (MitraError, FileNotFoundError) as e:
        console.print(f"[red]Error generating schedule: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def optimize(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with a list of schedule items"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """
    Merge your own schedule with medications, a workout and urgent tasks

    The file holds a JSON list such as:
      [{"time": "08:00", "activity": "Standup", "duration": 30}]
    """
    try:
        raw = json.loads(path.read_text())
        if isinstance(raw, dict):
            raw = raw.get("userSchedule")
        if not isinstance(raw, list):
            console.print("[red]Invalid user schedule provided[/red]")
            raise typer.Exit(1)

        items = [ScheduleItem.from_dict(entry) for entry in raw]
        merged = asyncio.run(get_coordinator().merge_user_schedule(items))
        if as_json:
            console.print_json(json.dumps(merged.to_dict()))
        else:
            ScheduleFormatter(console).render_schedule(merged)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON in {path}: {e}[/red]")
        raise typer.Exit(1)
    except (MitraError, FileNotFoundError) as e:
        console.print(f"[red]Error optimizing schedule: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def records(
    collection: str = typer.Argument(..., help=f"One of: {', '.join(RECORD_SOURCES)}"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum records to show"),
):
    """
    List stored records, newest first
    """
    kind = RECORD_SOURCES.get(collection)
    if kind is None:
        console.print(f"[red]Unknown collection '{collection}'. Choose from: {', '.join(RECORD_SOURCES)}[/red]")
        raise typer.Exit(1)

    try:
        rows = get_coordinator().get_agent(kind).recent(limit)
        ScheduleFormatter(console).render_records(collection, rows)
    except (MitraError, FileNotFoundError) as e:
        console.print(f"[red]Error loading records: {e}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
