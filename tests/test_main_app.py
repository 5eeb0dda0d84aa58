"""Test della TUI Textual tramite App.run_test()."""
from __future__ import annotations

import asyncio
from pathlib import Path

from textual.widgets import DataTable, Input, Select

from tabstat_ui.main_app import TabStatApp


def test_app_loads_initial_path(sample_csv: Path) -> None:
    async def scenario() -> None:
        app = TabStatApp(str(sample_csv))
        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.dataset is not None
            assert app.dataset.row_count == 4
            assert app.query_one("#table", DataTable).row_count == 4

            app.query_one("#sel_col", Select).value = "region"
            app.query_one("#filter_value", Input).value = "north"
            app._do_filter()
            assert app.dataset.row_count == 2
            assert app.source.row_count == 4

            app._do_reset()
            assert app.dataset is app.source

    asyncio.run(scenario())


def test_app_reports_missing_file(tmp_path: Path) -> None:
    async def scenario() -> None:
        app = TabStatApp(str(tmp_path / "missing.csv"))
        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.dataset is None

    asyncio.run(scenario())


def test_sort_then_reset_restores_file_order(sample_csv: Path) -> None:
    async def scenario() -> None:
        app = TabStatApp(str(sample_csv))
        async with app.run_test() as pilot:
            await pilot.pause()
            app.query_one("#sel_col", Select).value = "amount"
            app._do_sort(False)
            assert app.dataset is not app.source
            assert app.dataset.get_column("amount")[:3] == ["10", "7", "4.5"]
            assert app.source.get_column("region") == ["north", "south", "north", "east"]

            app._do_reset()
            assert app.dataset is app.source
            assert app.dataset.get_column("amount") == ["10", "4.5", "7", "x"]

    asyncio.run(scenario())


def test_stats_panel_uses_configured_decimals(sample_csv: Path) -> None:
    async def scenario() -> None:
        config = {"delimiter": ",", "encoding": None, "report_decimals": 3}
        app = TabStatApp(str(sample_csv), config=config)
        async with app.run_test() as pilot:
            await pilot.pause()
            # (10 + 4.5 + 7) / 3
            assert "7.167" in app._stats_text("amount")

    asyncio.run(scenario())
