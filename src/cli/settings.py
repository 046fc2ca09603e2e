"""Shared option handling for craftmapper commands."""

import logging
from pathlib import Path
from typing import Any

import typer

from craftmapper.config import ConfigurationError, get_log_level, load_config
from craftmapper.database import CraftDatabase, StoreError

from .console import print_error

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: int) -> None:
    """Configure root logging for a CLI run."""
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def load_settings(
    config_path: Path | None,
    db_path: Path | None = None,
    verbose: bool = False,
) -> dict[str, Any]:
    """Load config, apply command-line overrides and configure logging.

    Exits with status 1 on configuration errors.
    """
    try:
        config = load_config(config_path=config_path)
    except ConfigurationError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)

    if db_path is not None:
        config["store"]["path"] = str(db_path)

    setup_logging(logging.DEBUG if verbose else get_log_level(config))
    return config


def open_store(db_path: Path, read_only: bool = False) -> CraftDatabase:
    """Open the store, exiting 1 if that fails.

    The store is created if needed unless read_only is set, in which case
    a missing store is an error.
    """
    try:
        return CraftDatabase(db_path, read_only=read_only)
    except StoreError as e:
        print_error(str(e))
        raise typer.Exit(1)
