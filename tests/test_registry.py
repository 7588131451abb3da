"""
Tests for the table registry and header resolution.
"""

import logging
from unittest.mock import MagicMock

import pytest

from autoestimate.application.tables.headers import read_table_rows, resolve_headers
from autoestimate.application.tables.registry import TableRegistry
from autoestimate.domain.errors import EmptyTable, HeaderNotFound, TableNotFound
from autoestimate.domain.geometry import Rectangle
from autoestimate.domain.tables import HeaderIndex
from autoestimate.infrastructure.sheets.backend import SheetTables, TableEntry
from autoestimate.infrastructure.sheets.workbook import WorkbookBackend


class TestTableRegistry:
    def test_lists_tables_across_sheets(self, source_workbook):
        registry = TableRegistry(WorkbookBackend(source_workbook))
        tables = registry.list_tables()

        assert set(tables) == {
            "見積もり必要_テンプレート",
            "見積もり必要_締切",
            "POグループメンバー",
            "見積もり必要_メンバー",
            "見積もり必要_課題リスト",
            "見積もり履歴",
        }
        deadline = tables["見積もり必要_締切"]
        assert deadline.sheet_title == "設定"
        assert deadline.sheet_id == 0
        assert deadline.rectangle == Rectangle(0, 2, 3, 4)
        assert deadline.address == "設定!D1:D2"

    def test_get_table(self, source_workbook):
        registry = TableRegistry(WorkbookBackend(source_workbook))
        table = registry.get_table("見積もり必要_メンバー")
        assert table.sheet_title == "メンバー管理"
        assert table.data_row_count == 3

    def test_missing_table(self, source_workbook):
        registry = TableRegistry(WorkbookBackend(source_workbook))
        with pytest.raises(TableNotFound) as exc:
            registry.get_table("DoesNotExist")
        assert exc.value.name == "DoesNotExist"

    def test_scan_is_memoized_until_refresh(self):
        backend = MagicMock()
        backend.spreadsheet_label = "mock"
        backend.list_sheets.return_value = [
            SheetTables(0, "S", [TableEntry("T", "t1", Rectangle(0, 3, 0, 2))])
        ]
        registry = TableRegistry(backend)

        registry.list_tables()
        registry.get_table("T")
        assert backend.list_sheets.call_count == 1

        registry.refresh()
        assert backend.list_sheets.call_count == 2

    def test_duplicate_name_last_wins(self, caplog):
        backend = MagicMock()
        backend.spreadsheet_label = "mock"
        backend.list_sheets.return_value = [
            SheetTables(0, "First", [TableEntry("Dup", "t1", Rectangle(0, 2, 0, 1))]),
            SheetTables(7, "Second", [TableEntry("Dup", "t2", Rectangle(4, 6, 0, 1))]),
        ]
        registry = TableRegistry(backend)

        with caplog.at_level(logging.WARNING):
            table = registry.get_table("Dup")

        assert table.id == "t2"
        assert table.sheet_id == 7
        assert "Duplicate table name Dup" in caplog.text

    def test_returned_mapping_is_a_copy(self, source_workbook):
        registry = TableRegistry(WorkbookBackend(source_workbook))
        registry.list_tables().clear()
        assert registry.list_tables()


class TestHeaderIndex:
    def test_offsets_are_trimmed_and_relative(self):
        index = HeaderIndex.from_header_row("T", [" 表示名 ", "メールアドレス", None, "回答要否"])
        assert index.offset("表示名") == 0
        assert index.offset("回答要否") == 3
        assert index.width == 4
        assert "メールアドレス" in index

    def test_lookup_is_case_sensitive(self):
        index = HeaderIndex.from_header_row("T", ["URL"])
        with pytest.raises(HeaderNotFound) as exc:
            index.offset("url")
        assert exc.value.table_name == "T"
        assert exc.value.column_name == "url"

    def test_first_duplicate_header_wins(self):
        index = HeaderIndex.from_header_row("T", ["A", "B", "A"])
        assert index.offset("A") == 0

    def test_offsets_for_whole_mapping(self):
        index = HeaderIndex.from_header_row("T", ["x", "名前", "リンク"])
        assert index.offsets_for({"name": "名前", "link": "リンク"}) == {"name": 1, "link": 2}


class TestResolveHeaders:
    def test_reads_header_row(self, source_session):
        table = source_session.get_table("見積もり必要_メンバー")
        index = resolve_headers(source_session.backend, table)
        assert index.column_names == ("表示名", "メールアドレス", "回答要否")
        # offsets are relative to the table, which starts in column D
        assert index.offset("表示名") == 0

    def test_prefetched_rows_skip_the_read(self):
        backend = MagicMock()
        table = MagicMock()
        table.name = "T"
        index = resolve_headers(backend, table, [["a", "b"], ["1", "2"]])
        assert index.offset("b") == 1
        backend.read_values.assert_not_called()

    def test_empty_header_row(self, source_workbook):
        ws = source_workbook["課題"]
        ws["A1"] = None
        ws["B1"] = None
        backend = WorkbookBackend(source_workbook)
        table = TableRegistry(backend).get_table("見積もり必要_課題リスト")
        ws.delete_rows(2, 2)

        with pytest.raises(EmptyTable):
            resolve_headers(backend, table)
        with pytest.raises(EmptyTable):
            read_table_rows(backend, table)
