"""Item CLI commands for browsing and exporting the craft store."""

from pathlib import Path

import typer

from craftmapper.config import get_store_path
from craftmapper.database import (
    StoreError,
    count_combinations,
    count_entries,
    get_entry,
    get_recipes_for,
    search_entries,
)
from craftmapper.export import DEFAULT_EXPORT_PATH, export_snapshot

from .console import (
    console,
    create_table,
    print_error,
    print_panel,
    print_success,
    print_table,
)
from .settings import load_settings, open_store

app = typer.Typer(
    name="items",
    help="Browse and export discovered items",
    no_args_is_help=True,
)

DbOption = typer.Option(None, "--db", help="Path to the SQLite store")
ConfigOption = typer.Option(None, "--config", "-c", help="Path to config YAML")


@app.command(name="search")
def search_items(
    query: str = typer.Argument(..., help="Substring to look for in item names"),
    limit: int = typer.Option(
        1000,
        "--limit",
        "-n",
        min=1,
        help="Maximum number of items to show",
    ),
    db: Path | None = DbOption,
    config: Path | None = ConfigOption,
) -> None:
    """Search items by name."""
    store = open_store(get_store_path(load_settings(config, db)), read_only=True)

    try:
        entries, limited = search_entries(store, query, limit=limit)
    except StoreError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not entries:
        console.print(f"[dim]No items matching '{query}'.[/dim]")
        return

    table = create_table(f"Items matching '{query}'")
    table.add_column("Emoji")
    table.add_column("Name", style="green")
    table.add_column("First Discovery", style="yellow")

    for entry in entries:
        table.add_row(entry.emoji, entry.name, "yes" if entry.is_new else "")

    print_table(table)
    if limited:
        console.print(f"[dim]Showing the first {limit} results only.[/dim]")


@app.command(name="show")
def show_item(
    name: str = typer.Argument(..., help="Exact item name"),
    db: Path | None = DbOption,
    config: Path | None = ConfigOption,
) -> None:
    """Show an item and every recorded pair that produces it."""
    store = open_store(get_store_path(load_settings(config, db)), read_only=True)

    try:
        entry = get_entry(store, name)
        recipes = get_recipes_for(store, name) if entry else []
    except StoreError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if entry is None:
        print_error(f"Item not found: {name}")
        raise typer.Exit(1)

    content_lines = [
        f"[bold]Emoji:[/bold] {entry.emoji}",
        f"[bold]First Discovery:[/bold] {'yes' if entry.is_new else 'no'}",
        f"[bold]Recorded:[/bold] {entry.created_at}",
        "",
        f"[bold]Recipes ({len(recipes)}):[/bold]",
    ]
    for recipe in recipes:
        content_lines.append(
            f"  {recipe.first_emoji} {recipe.first_name} + "
            f"{recipe.second_emoji} {recipe.second_name}"
        )
    if not recipes:
        content_lines.append("  [dim](none recorded)[/dim]")

    print_panel(entry.name, "\n".join(content_lines), style="green")


@app.command(name="stats")
def show_stats(
    db: Path | None = DbOption,
    config: Path | None = ConfigOption,
) -> None:
    """Show store statistics."""
    store = open_store(get_store_path(load_settings(config, db)), read_only=True)
    stats = store.get_stats()

    if "error" in stats:
        print_error(f"Cannot read store: {stats['error']}")
        raise typer.Exit(1)

    content = (
        f"Items: {stats.get('items_count', 0)}\n"
        f"  First discoveries: {stats.get('new_items_count', 0)}\n"
        f"Combinations: {stats.get('combinations_count', 0)}\n\n"
        f"Schema: {stats['schema_version']}\n"
        f"Path: {stats['database_path']}\n"
        f"Size: {stats.get('database_size_bytes', 0)} bytes"
    )
    print_panel("Craft Store Statistics", content, style="blue")


@app.command(name="count")
def count_items(
    db: Path | None = DbOption,
    config: Path | None = ConfigOption,
) -> None:
    """Print the number of items and combinations."""
    store = open_store(get_store_path(load_settings(config, db)), read_only=True)
    try:
        console.print(f"{count_entries(store)} items, {count_combinations(store)} combinations")
    except StoreError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command(name="export")
def export_items(
    output: Path = typer.Option(
        DEFAULT_EXPORT_PATH,
        "--output",
        "-o",
        help="Where to write the JSON snapshot",
    ),
    db: Path | None = DbOption,
    config: Path | None = ConfigOption,
) -> None:
    """Export all items as a minified localStorage.json snapshot."""
    store = open_store(get_store_path(load_settings(config, db)), read_only=True)

    try:
        count = export_snapshot(store, output)
    except (StoreError, OSError) as e:
        print_error(f"Export failed: {e}")
        raise typer.Exit(1)

    print_success(f"Minified JSON data saved to {output}. {count} items found")
