"""
Rich formatter for Mitra schedules and agent responses.

Handles all Rich-based CLI formatting for the command line.
"""

from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from ..core.models import MergedSchedule, Schedule


# Colors per item type
TYPE_STYLES = {
    "medication": "red bold",
    "task": "yellow",
    "fitness": "green",
    "wellness": "magenta",
    "break": "cyan",
    "user": "white",
}


class ScheduleFormatter:
    """
    Rich-based formatter for schedules, agent responses and stored records.
    """

    def __init__(self, console: Optional[Console] = None):
        """
        Initialize formatter.

        Args:
            console: Rich Console instance (creates default if not provided)
        """
        self.console = console or Console()

    def _format_duration(self, minutes: int) -> str:
        """Format duration in human-readable format."""
        if minutes < 60:
            return f"{minutes}m"
        hours = minutes // 60
        mins = minutes % 60
        if mins == 0:
            return f"{hours}h"
        return f"{hours}h {mins}m"

    def _score_style(self, score: float) -> str:
        if score > 70:
            return "green bold"
        if score > 40:
            return "yellow"
        return "red"

    def format_timeline(self, schedule: Schedule) -> Table:
        """Create the time-ordered table of schedule items."""
        table = Table(box=box.SIMPLE, expand=True)
        table.add_column("Time", width=6, no_wrap=True)
        table.add_column("Activity", ratio=1)
        table.add_column("Type", width=10)
        table.add_column("Length", width=7, justify="right")
        table.add_column("Agent", width=20)

        for item in schedule.items:
            style = TYPE_STYLES.get(item.type, "white")
            activity = item.activity
            if item.added_by_ai:
                activity += " [dim](AI)[/dim]"
            if item.flexible:
                activity += " [dim]~[/dim]"
            table.add_row(
                f"[cyan]{item.time}[/cyan]",
                activity,
                f"[{style}]{item.type}[/{style}]",
                self._format_duration(item.duration),
                f"[dim]{item.agent}[/dim]",
            )
        return table

    def format_insights(self, schedule: Schedule) -> Panel:
        """Create panel with balance score and recommendations."""
        style = self._score_style(schedule.balance_score)
        lines = [
            f"Balance score   [{style}]{schedule.balance_score:.0f}/100[/{style}]",
            f"Work/life       {schedule.insights.get('workLifeBalance', '---')}",
        ]
        if isinstance(schedule, MergedSchedule):
            lines.append(
                f"Activities      {schedule.user_activities} yours, "
                f"{schedule.ai_suggestions} added"
            )
        recommendations = schedule.insights.get("recommendations") or []
        if recommendations:
            lines.append("[dim]" + "─" * 40 + "[/dim]")
            lines.extend(f"• {text}" for text in recommendations)

        return Panel(
            "\n".join(lines),
            title="[bold]Insights[/bold]",
            border_style="magenta",
            padding=(0, 1),
        )

    def render_schedule(self, schedule: Schedule) -> None:
        """Render a complete schedule to console."""
        self.console.print(Panel(
            self.format_timeline(schedule),
            title=f"[bold]Schedule for {schedule.date}[/bold]",
            border_style="cyan",
            padding=(0, 1),
        ))
        self.console.print(self.format_insights(schedule))

    def render_response(self, response: Dict[str, Any]) -> None:
        """Render a routed agent response."""
        if response.get("action") == "none":
            self.console.print("[yellow]No agent handles that intent.[/yellow]")
            return

        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Field", style="dim")
        table.add_column("Value")
        for key, value in response.items():
            if key == "data":
                continue
            table.add_row(key, str(value))
        for key, value in (response.get("data") or {}).items():
            table.add_row(f"data.{key}", str(value))

        self.console.print(Panel(
            table,
            title=f"[bold]{response.get('agent')}[/bold]",
            border_style="green",
            padding=(0, 1),
        ))

    def render_records(self, collection: str, records: List[Dict[str, Any]]) -> None:
        """Render stored records as a table with one column per field."""
        if not records:
            self.console.print(f"[dim]No records in {collection}[/dim]")
            return

        columns: List[str] = []
        for record in records:
            for key in record:
                if key not in columns:
                    columns.append(key)

        table = Table(title=collection, box=box.SIMPLE)
        for column in columns:
            table.add_column(column)
        for record in records:
            table.add_row(*(str(record.get(column, "")) for column in columns))
        self.console.print(table)
