"""
Snapshot export of the items table.

Writes the game's localStorage layout so a snapshot can be loaded straight
into a browser session:

    {"elements": [{"text": "Water", "emoji": "💧", "discovered": false}, ...]}
"""

import json
import logging
from pathlib import Path

from .database import CraftDatabase, list_entries

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_PATH = Path("localStorage.json")


def build_snapshot(db: CraftDatabase) -> dict:
    """Collect every item into the snapshot structure."""
    return {
        "elements": [
            {"text": entry.name, "emoji": entry.emoji, "discovered": entry.is_new}
            for entry in list_entries(db)
        ]
    }


def export_snapshot(db: CraftDatabase, output_path: Path | str = DEFAULT_EXPORT_PATH) -> int:
    """Write the minified snapshot to output_path.

    Returns:
        Number of elements written

    Raises:
        StoreError: If the items cannot be read.
        OSError: If the file cannot be written.
    """
    snapshot = build_snapshot(db)
    output_path = Path(output_path)
    output_path.write_text(
        json.dumps(snapshot, ensure_ascii=False, separators=(",", ":")),
        encoding="utf-8",
    )

    count = len(snapshot["elements"])
    logger.info(f"Saved {count} items to {output_path}")
    return count
