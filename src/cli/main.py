"""craftmapper CLI entry point."""

import typer

from . import __version__
from .console import console
from .explore_command import explore_command, init_command
from .items import app as items_app

app = typer.Typer(
    name="craftmapper",
    help="craftmapper - explore and record the Infinite Craft combination space",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"craftmapper version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """craftmapper - explore and record the Infinite Craft combination space."""
    pass


# Register the init command
app.command(name="init")(init_command)

# Register the explore command
app.command(name="explore")(explore_command)

# Register the items subcommand group
app.add_typer(items_app, name="items")


if __name__ == "__main__":
    app()
