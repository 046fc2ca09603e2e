"""Tests for the localStorage snapshot export."""

import json

from craftmapper.database import upsert_entry
from craftmapper.export import build_snapshot, export_snapshot


class TestExportSnapshot:
    """Tests for export_snapshot."""

    def test_writes_every_item(self, store, tmp_path):
        upsert_entry(store, "Steam", "💨", True)
        output = tmp_path / "localStorage.json"

        count = export_snapshot(store, output)

        data = json.loads(output.read_text(encoding="utf-8"))
        assert count == 5
        assert len(data["elements"]) == 5
        assert data["elements"][0] == {"text": "Water", "emoji": "💧", "discovered": False}
        assert data["elements"][-1] == {"text": "Steam", "emoji": "💨", "discovered": True}

    def test_output_is_minified(self, store, tmp_path):
        output = tmp_path / "snapshot.json"

        export_snapshot(store, output)

        text = output.read_text(encoding="utf-8")
        assert "\n" not in text
        assert ", " not in text
        assert "💧" in text  # not escaped

    def test_build_snapshot_shape(self, store):
        snapshot = build_snapshot(store)
        assert list(snapshot) == ["elements"]
        assert {e["text"] for e in snapshot["elements"]} == {"Water", "Fire", "Wind", "Earth"}
