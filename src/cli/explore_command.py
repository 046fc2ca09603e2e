"""The craftmapper init and explore commands."""

from pathlib import Path

import typer

from craftmapper.combine_client import CombineClient, CombineError
from craftmapper.config import get_api_config, get_exploration_config, get_store_path
from craftmapper.database import StoreError
from craftmapper.explorer import Discovery, ExplorationState, Explorer
from craftmapper.working_set import WorkingSetCache

from .console import console, print_error, print_panel, print_success, print_warning
from .settings import load_settings, open_store


def init_command(
    db: Path | None = typer.Option(None, "--db", help="Path to the SQLite store"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to config YAML"),
) -> None:
    """Create the store and insert the four seed items.

    Safe to run on an existing store; nothing is changed in that case.
    """
    settings = load_settings(config, db)
    store = open_store(get_store_path(settings))

    if store.created:
        print_success(f"Created store: {store.db_path}")
    else:
        console.print(f"[dim]Store already exists: {store.db_path}[/dim]")


def _print_discovery(discovery: Discovery) -> None:
    marker = " [bold yellow](first discovery!)[/bold yellow]" if discovery.is_new else ""
    console.print(
        f"{discovery.first} + {discovery.second} = "
        f"{discovery.emoji} [green]{discovery.result}[/green]{marker}"
    )


def explore_command(
    max_successes: int | None = typer.Option(
        None,
        "--max-successes",
        "-n",
        min=0,
        help="Stop after this many new combinations",
    ),
    max_attempts: int | None = typer.Option(
        None,
        "--max-attempts",
        "-a",
        min=0,
        help="Stop after this many drawn pairs",
    ),
    pacing_ms: int | None = typer.Option(
        None,
        "--pacing-ms",
        min=0,
        help="Pause between attempts in milliseconds",
    ),
    db: Path | None = typer.Option(None, "--db", help="Path to the SQLite store"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to config YAML"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print each discovery"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Explore random item pairs and record what they produce.

    Runs until the success budget or the attempt budget is reached.
    """
    settings = load_settings(config, db, verbose=verbose)
    budgets = get_exploration_config(settings)
    if max_successes is not None:
        budgets["max_successes"] = max_successes
    if max_attempts is not None:
        budgets["max_attempts"] = max_attempts
    if pacing_ms is not None:
        budgets["pacing_interval"] = pacing_ms / 1000.0

    store = open_store(get_store_path(settings))

    cache = WorkingSetCache()
    try:
        cache.hydrate(store)
    except StoreError as e:
        print_error(f"Failed to initialize local cache: {e}")
        raise typer.Exit(1)

    console.print(
        f"[bold]Exploring[/bold] {len(cache)} known items "
        f"(max {budgets['max_successes']} new, {budgets['max_attempts']} attempts)"
    )

    with CombineClient(**get_api_config(settings)) as client:
        explorer = Explorer(
            store,
            cache,
            client,
            pacing_interval=budgets["pacing_interval"],
            on_discovery=None if quiet else _print_discovery,
        )
        try:
            result = explorer.explore(budgets["max_successes"], budgets["max_attempts"])
        except CombineError as e:
            print_error(f"Combine request failed: {e}")
            raise typer.Exit(1)
        except StoreError as e:
            print_error(f"Store write failed: {e}")
            raise typer.Exit(1)
        except KeyboardInterrupt:
            print_warning("Interrupted; everything recorded so far is saved.")
            raise typer.Exit(130)

    summary = (
        f"State: {result.state.value}\n"
        f"Created combinations: {result.successes}\n"
        f"Attempts: {result.attempts}\n"
        f"Known items: {len(cache)}"
    )
    if result.state is ExplorationState.ABORTED:
        summary += f"\nReason: {result.reason}"
        print_panel("Exploration Aborted", summary, style="yellow")
    else:
        print_panel("Exploration Finished", summary, style="green")
