from __future__ import annotations

import logging
from typing import TextIO

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from forest_planner.analysis.types import DEFAULT_BUDGET_MS, DEFAULT_HORIZON_DAYS, PlannerConfig, PlanResult
from forest_planner.bot import run_session
from forest_planner.protocol import ProtocolError, TurnInput

logger = logging.getLogger("forest_planner")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
STATS_ROWS = 8


def configure_logging(level: str, console: Console) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _stats_table(turn: TurnInput, result: PlanResult) -> Table:
    table = Table(title=f"Day {turn.state.day} - {result.rollouts} rollouts")
    table.add_column("First action")
    table.add_column("Rollouts", justify="right")
    table.add_column("Mean score", justify="right")
    for report in result.candidates[:STATS_ROWS]:
        table.add_row(str(report.action), str(report.rollouts), f"{report.mean_score:.2f}")
    return table


@click.command()
@click.argument("referee_input", type=click.File("r"), default="-")
@click.option(
    "--budget-ms",
    default=DEFAULT_BUDGET_MS,
    show_default=True,
    type=click.FloatRange(min=0.0, min_open=True),
    help="Wall-clock budget per decision, in milliseconds.",
)
@click.option(
    "--horizon-days",
    default=DEFAULT_HORIZON_DAYS,
    show_default=True,
    type=click.IntRange(1, None),
    help="How many days past the current one a rollout may run.",
)
@click.option(
    "--max-rollouts",
    default=0,
    show_default=True,
    type=click.IntRange(0, None),
    help="Stop sampling after this many rollouts (0 = limited by time only).",
)
@click.option(
    "--seed",
    default=None,
    type=int,
    help="RNG seed. Default: derived from the board layout.",
)
@click.option(
    "--per-rollout-seed-threshold/--per-call-seed-threshold",
    default=False,
    show_default=True,
    help="Draw the seeding cut-off day once per rollout instead of on every legal-action query.",
)
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Diagnostics level, written to stderr.",
)
@click.option(
    "--show-stats/--no-show-stats",
    default=False,
    show_default=True,
    help="Print a per-turn table of first-action statistics to stderr.",
)
def main(
    referee_input: TextIO,
    budget_ms: float,
    horizon_days: int,
    max_rollouts: int,
    seed: int | None,
    per_rollout_seed_threshold: bool,
    log_level: str,
    show_stats: bool,
):
    """
    Play the forest game, reading REFEREE_INPUT (default: stdin) and writing
    decisions to stdout.

    Reads the board once, then one turn at a time, and answers each turn with
    a single decision line. Exits cleanly when the referee closes input.
    """
    console = Console(stderr=True)
    configure_logging(log_level, console)

    config = PlannerConfig(
        budget_ms=budget_ms,
        horizon_days=horizon_days,
        max_rollouts=max_rollouts,
        seed=seed,
        per_rollout_seed_threshold=per_rollout_seed_threshold,
    )

    def print_stats(turn: TurnInput, result: PlanResult) -> None:
        console.print(_stats_table(turn, result))

    try:
        turns = run_session(
            iter(referee_input),
            click.echo,
            config,
            on_result=print_stats if show_stats else None,
        )
    except ProtocolError as exc:
        logger.error("Bad referee input: %s", exc)
        raise click.ClickException(str(exc)) from exc
    logger.info("Input closed after %d turns.", turns)
