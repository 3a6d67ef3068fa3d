"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of prescriptions and templates.
"""

from rich.console import Console
from rich.table import Table

from ..core.config import VARIATION_LADDER, VARIATION_MULT
from ..core.models import NextSession, PlanTemplate, ProgressionStatus

console = Console()

_STATUS_STYLES: dict[ProgressionStatus, str] = {
    ProgressionStatus.PROMOTE: "bold green",
    ProgressionStatus.HOLD: "bold yellow",
    ProgressionStatus.REGRESS: "bold red",
}


def _fmt_reps(target_reps: tuple[int, ...] | list[int]) -> str:
    """Compact per-set reps: "12×4" when uniform, else "12, 12, 11"."""
    if not target_reps:
        return "-"
    if len(set(target_reps)) == 1:
        return f"{target_reps[0]}×{len(target_reps)}"
    return ", ".join(str(r) for r in target_reps)


def format_next_session_table(session: NextSession, template: PlanTemplate) -> Table:
    """
    Create a Rich table comparing the template with the prescription.

    Args:
        session: Engine output
        template: Template the prescription was derived from

    Returns:
        Rich Table object
    """
    table = Table(title=f"Next session · {template.day_label or template.template_id}")

    table.add_column("", style="dim")
    table.add_column("Template", justify="right")
    table.add_column("Next", justify="right", style="bold")

    template_reps = [template.target_reps] * template.sets
    table.add_row("Variation", template.variation, session.variation)
    table.add_row("Sets", str(template.sets), str(session.sets))
    table.add_row("Reps", _fmt_reps(template_reps), _fmt_reps(session.target_reps))
    table.add_row("Total reps", str(template.total_reps), str(session.total_reps))
    table.add_row("Rest (s)", str(template.rest_seconds), str(session.rest_seconds))
    table.add_row("Tempo", template.tempo or "-", session.tempo or "-")

    return table


def format_debug_display(session: NextSession) -> str:
    """
    Format the decision evidence as a Rich-markup text block.

    Args:
        session: Engine output

    Returns:
        Formatted string
    """
    d = session.debug
    style = _STATUS_STYLES[d.status]
    avg_rir = f"{d.avg_rir:.2f}" if d.avg_rir is not None else "n/a"
    lines = [
        f"Status: [{style}]{d.status.value}[/{style}]",
        f"- Plateau: {'yes' if d.plateau else 'no'}",
        f"- Avg RIR: {avg_rir}",
        f"- Completion rate: {d.completion_rate:.0%}",
        f"- Fail rate: {d.fail_rate:.0%}",
        f"- Readiness: {d.readiness:.2f}",
    ]
    return "\n".join(lines)


def format_reward_display(session: NextSession) -> str:
    """Format the reward estimate and its multiplier breakdown."""
    r = session.reward
    parts = " × ".join(f"{k} {v:g}" for k, v in r.multipliers.items())
    return (
        f"Estimated reward: [bold]{r.estimated_reward}[/bold]"
        f"  ({session.total_reps} reps × {r.base_reward_per_rep} × {parts})"
    )


def print_next_session(session: NextSession, template: PlanTemplate) -> None:
    """
    Print a full prescription: table, coaching notes, reward, and evidence.

    Args:
        session: Engine output
        template: Template the prescription was derived from
    """
    console.print()
    console.print(format_next_session_table(session, template))

    if session.coaching_notes:
        console.print()
        console.print("[bold]Coaching notes[/bold]")
        for note in session.coaching_notes:
            console.print(f"  • {note}")

    console.print()
    console.print(format_reward_display(session))
    console.print()
    console.print(format_debug_display(session))
    console.print()


def format_templates_table(templates: list[PlanTemplate], division: str | None = None) -> Table:
    """
    Create a Rich table listing templates.

    Args:
        templates: Templates to display
        division: Division name for the title (None = all)

    Returns:
        Rich Table object
    """
    title = f"{division} templates" if division else "Plan templates"
    table = Table(title=title)

    table.add_column("ID", style="cyan")
    table.add_column("Day", style="magenta")
    table.add_column("Intensity")
    table.add_column("Variation", style="green")
    table.add_column("Sets×Reps", justify="right", style="bold")
    table.add_column("Rest(s)", justify="right")
    table.add_column("Tempo", justify="right")
    table.add_column("Swap", justify="center")

    for t in templates:
        table.add_row(
            t.template_id,
            t.day_label,
            t.intensity,
            t.variation,
            f"{t.sets}×{t.target_reps}",
            str(t.rest_seconds),
            t.tempo or "-",
            "yes" if t.allow_variation_swap else "no",
        )

    return table


def format_ladder_table() -> Table:
    """Create a Rich table of the variation ladder with reward multipliers."""
    table = Table(title="Variation ladder (easiest first)")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Variation", style="green")
    table.add_column("Reward ×", justify="right")

    for i, name in enumerate(VARIATION_LADDER, 1):
        table.add_row(str(i), name, f"{VARIATION_MULT.get(name, 1.0):.2f}")

    return table


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
