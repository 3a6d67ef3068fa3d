"""
CLI entry point using Typer.

Provides commands around the recommendation engine:
- recommend: Compute the next session from a JSON request file
- templates: List the day-template catalog
- ladder: Show the variation difficulty ladder
"""

from .app import app
from .commands import catalog, recommend  # noqa: F401  (registers commands)

if __name__ == "__main__":
    app()
