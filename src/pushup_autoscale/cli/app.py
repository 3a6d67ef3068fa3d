"""Shared Typer app object and shared option types."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

TuningOption = Annotated[
    Optional[Path],
    typer.Option("--tuning", "-t", help="YAML file with engine tuning overrides"),
]

app = typer.Typer(
    name="pushup-autoscale",
    help="Adaptive push-up session planner: next-session prescription from recent history.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log engine decisions to stderr"),
    ] = False,
) -> None:
    """
    Adaptive push-up session planner.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )
