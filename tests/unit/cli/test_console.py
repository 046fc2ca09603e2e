"""Unit tests for CLI console helpers."""

from rich.console import Console
from rich.table import Table

from cli import console as console_module


class TestConsoleObjects:
    """Tests for the shared console instances."""

    def test_console_is_rich_console(self):
        assert isinstance(console_module.console, Console)

    def test_errors_go_to_stderr(self):
        assert console_module.err_console.stderr is True

    def test_create_table_returns_rich_table(self):
        table = console_module.create_table("Items")
        assert isinstance(table, Table)
        assert table.title == "Items"

    def test_create_table_without_title(self):
        assert console_module.create_table().title is None


class TestPrintHelpers:
    """Tests for the print_* helpers."""

    def test_print_success(self, capsys):
        console_module.print_success("Store created")
        assert "✓ Store created" in capsys.readouterr().out

    def test_print_error_writes_stderr(self, capsys):
        console_module.print_error("Item not found")
        captured = capsys.readouterr()
        assert "✗ Item not found" in captured.err
        assert "Item not found" not in captured.out

    def test_print_warning(self, capsys):
        console_module.print_warning("Interrupted")
        assert "⚠ Interrupted" in capsys.readouterr().out

    def test_print_info(self, capsys):
        console_module.print_info("Hydrated")
        assert "ℹ Hydrated" in capsys.readouterr().out

    def test_print_panel(self, capsys):
        console_module.print_panel("Stats", "Items: 4")
        out = capsys.readouterr().out
        assert "Stats" in out
        assert "Items: 4" in out
