#!/usr/bin/env python3
"""
proof.py - Habit-State Engine Proof Harness

Runs the engine on a synthetic habit batch and prints what a rendering layer
would consume: the visualization summary, the ranked schedule, per-habit
success estimates, and the entanglement links.

Usage:
    python proof.py demo --ticks 600
    python proof.py demo --scenario STILL --output json
    python proof.py validate-config configs/dense.yaml
    python proof.py export --ticks 60 --out snapshot.json
"""

import json
import random
import sys
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

import config_schema
from habitsim import (
    Frequency,
    HabitInput,
    SimConfig,
    SCENARIOS,
    advance_tick,
    apply_quantum_effect,
    entanglements,
    export_session,
    generate_report,
    initialize,
    optimal_schedule,
    predict_success,
    run_simulation,
    visualization_summary,
)
from habitsim.types_state import SessionHandle

# Rich console for output
console = Console()

DEMO_HABIT_NAMES = [
    "meditate", "run", "read", "journal", "stretch",
    "water", "language", "sleep_early", "no_sugar", "call_family",
]


# =============================================================================
# Demo Data
# =============================================================================

def demo_batch(
    now: datetime,
    seed: int = 7,
    n_habits: int = 8,
    history_days: int = 60
) -> Tuple[List[HabitInput], Dict[str, List[datetime]]]:
    """
    Synthetic habit batch with overlapping completion histories.

    Habits come in pairs sharing most of their completion days so that
    some pairs cross the entanglement threshold.
    """
    rng = random.Random(seed)
    habits = []
    completions: Dict[str, List[datetime]] = {}
    frequencies = [Frequency.DAILY, Frequency.DAILY, Frequency.WEEKLY, Frequency.DAILY]

    shared_days: List[int] = []
    for i in range(n_habits):
        habit_id = DEMO_HABIT_NAMES[i % len(DEMO_HABIT_NAMES)]
        if i >= len(DEMO_HABIT_NAMES):
            habit_id = f"{habit_id}_{i}"

        habits.append(HabitInput(
            id=habit_id,
            streak=rng.randint(0, 20),
            difficulty_ordinal=rng.randint(0, 4),
            frequency=frequencies[i % len(frequencies)],
            created_at=now - timedelta(days=history_days)
        ))

        consistency = rng.uniform(0.2, 0.95)
        if i % 2 == 0:
            shared_days = [d for d in range(1, history_days) if rng.random() < consistency]
            days = shared_days
        else:
            # Partner habit: mostly the same days
            days = [d for d in shared_days if rng.random() < 0.9]

        completions[habit_id] = [now - timedelta(days=d, hours=rng.randint(0, 6)) for d in days]

    return habits, completions


# =============================================================================
# Output Helpers
# =============================================================================

def print_success(message: str) -> None:
    """Print a success message with green checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message with red X."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message with yellow warning sign."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def _make_bar(value: float, width: int = 20) -> str:
    """Create a visual bar for a value in [0, 1]."""
    filled = int(max(0.0, min(value, 1.0)) * width)
    return "█" * filled + "░" * (width - filled)


def _resolve_config(scenario: str, config_path: Optional[str], seed: Optional[int]) -> SimConfig:
    if config_path:
        config = config_schema.load(config_path)
    else:
        config = SCENARIOS[scenario]
    if seed is not None:
        config = config_schema.from_dict({**config_schema.to_dict(config), "random_seed": seed})
    return config


def _render_session(session: SessionHandle, habits: List[HabitInput], completions: Dict[str, List[datetime]]) -> None:
    summary = visualization_summary(session)
    console.print(Panel(
        f"avg amplitude  {summary.avg_amplitude:.4f}\n"
        f"avg phase      {summary.avg_phase:+.4f}\n"
        f"particles      {summary.particle_count}\n"
        f"entanglements  {summary.entanglement_count}\n"
        f"avg energy     {summary.avg_energy_level}",
        title=f"{session.config.scenario_name} after {session.tick} ticks"
    ))

    effects = apply_quantum_effect(session, habits, completions)
    table = Table(title="Optimal Schedule")
    table.add_column("#", justify="right")
    table.add_column("Habit")
    table.add_column("Priority", justify="right")
    table.add_column("Success", justify="right")
    table.add_column("")
    table.add_column("Effect", justify="right")
    for rank, (habit, priority) in enumerate(optimal_schedule(session, habits), start=1):
        success = predict_success(session, habit, completions.get(habit.id, []))
        table.add_row(
            str(rank), habit.id, f"{priority:.3f}", f"{success:.3f}",
            _make_bar(success), f"{effects.get(habit.id, 0.0):.3f}"
        )
    console.print(table)

    links = entanglements(session)
    if links:
        link_table = Table(title="Entanglements")
        link_table.add_column("Habit A")
        link_table.add_column("Habit B")
        link_table.add_column("Correlation", justify="right")
        link_table.add_column("Strength", justify="right")
        link_table.add_column("Color")
        for link in links:
            link_table.add_row(
                link.habit_id_a, link.habit_id_b,
                f"{link.correlation:.3f}", f"{link.strength:.3f}",
                f"[{link.color}]{link.color}[/]"
            )
        console.print(link_table)
    else:
        print_warning("No habit pair crossed the entanglement threshold")


# =============================================================================
# Click CLI Group
# =============================================================================

@click.group()
def cli():
    """Habit-state engine proof subcommands."""
    pass


@cli.command("demo")
@click.option("--ticks", "-t", default=600, show_default=True, help="Ticks to advance")
@click.option("--scenario", "-s", type=click.Choice(sorted(SCENARIOS)), default="DEMO")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Config file")
@click.option("--seed", type=int, default=None, help="Override random seed")
@click.option("--habits", "n_habits", default=8, show_default=True, help="Demo habits to generate")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def demo_cmd(ticks: int, scenario: str, config_path: Optional[str], seed: Optional[int],
             n_habits: int, output: str) -> None:
    """Run the engine on a synthetic habit batch."""
    try:
        config = _resolve_config(scenario, config_path, seed)
        now = datetime.now(timezone.utc)
        habits, completions = demo_batch(now, n_habits=n_habits)

        session = initialize(habits, completions, config, now=now)
        for _ in range(ticks):
            advance_tick(session)

        if output == "json":
            summary = visualization_summary(session)
            click.echo(json.dumps({
                "scenario": config.scenario_name,
                "ticks": session.tick,
                "summary": summary.__dict__,
                "schedule": [[h.id, p] for h, p in optimal_schedule(session, habits)],
                "violations": session.violations,
            }, indent=2))
        else:
            _render_session(session, habits, completions)
            if session.violations:
                print_error(f"{len(session.violations)} normalization violations")
            else:
                print_success("Normalization held on every tick")

    except (ValueError, FileNotFoundError) as e:
        if output == "json":
            click.echo(json.dumps({"error": str(e)}))
        else:
            print_error(f"Demo failed: {e}")
        sys.exit(2)


@cli.command("run")
@click.option("--scenario", "-s", type=click.Choice(sorted(SCENARIOS)), default="DEMO")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Config file")
def run_cmd(scenario: str, config_path: Optional[str]) -> None:
    """Run config.n_ticks ticks and print the text report."""
    try:
        config = _resolve_config(scenario, config_path, None)
        now = datetime.now(timezone.utc)
        habits, completions = demo_batch(now)
        result = run_simulation(config, habits, completions, now=now)
        click.echo(generate_report(result))
        if result.violations:
            sys.exit(1)
    except (ValueError, FileNotFoundError) as e:
        print_error(f"Run failed: {e}")
        sys.exit(2)


@cli.command("validate-config")
@click.argument("config_path", type=click.Path(exists=True))
@click.option("--strict", is_flag=True, help="Fail on warnings too")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def validate_config_cmd(config_path: str, strict: bool, output: str) -> None:
    """Validate a JSON/YAML config file."""
    try:
        config = config_schema.load(config_path, strict=strict)
        if output == "json":
            click.echo(json.dumps({
                "valid": True,
                "config": config_schema.to_dict(config),
                "config_hash": config_schema.config_hash(config),
            }, indent=2))
        else:
            print_success(f"{config_path} is valid (hash {config_schema.config_hash(config)})")
    except ValueError as e:
        if output == "json":
            click.echo(json.dumps({"valid": False, "error": str(e)}))
        else:
            print_error(str(e))
        sys.exit(1)


@cli.command("export")
@click.option("--ticks", "-t", default=60, show_default=True)
@click.option("--scenario", "-s", type=click.Choice(sorted(SCENARIOS)), default="DEMO")
@click.option("--out", "output_path", type=click.Path(), required=True)
def export_cmd(ticks: int, scenario: str, output_path: str) -> None:
    """Write a JSON snapshot of a demo session."""
    try:
        now = datetime.now(timezone.utc)
        habits, completions = demo_batch(now)
        session = initialize(habits, completions, SCENARIOS[scenario], now=now)
        for _ in range(ticks):
            advance_tick(session)
        export_session(session, output_path)
        print_success(f"Wrote {output_path}")
    except OSError as e:
        print_error(f"Export failed: {e}")
        sys.exit(2)


def main() -> int:
    """Entry point for the Click CLI."""
    try:
        cli(standalone_mode=False)
        return 0
    except click.ClickException as e:
        e.show()
        return 2
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0


if __name__ == "__main__":
    sys.exit(main())
