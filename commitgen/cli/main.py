"""Top-level callback for the commitgen CLI."""

import typer

from commitgen import __version__


def main_command(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show the version and exit",
    ),
) -> None:
    """Generate commit messages from token-budgeted summaries of your changes."""
    if version:
        typer.echo(f"commitgen {__version__}")
        raise typer.Exit(0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
