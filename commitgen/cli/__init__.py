"""CLI entry point for commitgen.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from commitgen.cli.config import config_app
from commitgen.cli.generate import generate_command
from commitgen.cli.main import main_command
from commitgen.cli.plan import plan_command

# Main application
app = typer.Typer(
    name="commitgen",
    help="commitgen: commit messages from token-budgeted diff summaries",
    add_completion=False,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("generate")(generate_command)
app.command("plan")(plan_command)

# Set the main callback for default behavior (includes --version flag)
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "config_app",
    "generate_command",
    "main_command",
    "plan_command",
]
