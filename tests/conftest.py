"""
Shared test fixtures.

Workbooks are built in memory with openpyxl and declare their structured
tables as Excel tables, so the whole engine runs through WorkbookBackend.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

import pytest
from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table

sys.path.insert(0, str(Path(__file__).parents[1] / "src"))

from autoestimate.application.tables.session import TableSession  # noqa: E402
from autoestimate.infrastructure.sheets.workbook import WorkbookBackend  # noqa: E402


def add_table(
    ws,
    name: str,
    header: Sequence[str],
    rows: Sequence[Sequence[object]] = (),
    start_row: int = 1,
    start_col: int = 1,
) -> Table:
    """Write header and rows at (start_row, start_col), 1-based, and declare a table over them."""
    for c, value in enumerate(header):
        ws.cell(row=start_row, column=start_col + c, value=value)
    for r, row in enumerate(rows, start=1):
        for c, value in enumerate(row):
            ws.cell(row=start_row + r, column=start_col + c, value=value)

    first = f"{get_column_letter(start_col)}{start_row}"
    last = f"{get_column_letter(start_col + len(header) - 1)}{start_row + len(rows)}"
    table = Table(displayName=name, ref=f"{first}:{last}")
    ws.add_table(table)
    return table


def table_values(ws, table_name: str) -> list[list[object]]:
    """Cell values inside a table's current ref, header included."""
    table = ws.tables[table_name]
    return [[cell.value for cell in row] for row in ws[table.ref]]


def build_source_workbook() -> Workbook:
    """Source spreadsheet with every table the loaders read."""
    wb = Workbook()
    settings = wb.active
    settings.title = "設定"
    add_table(
        settings,
        "見積もり必要_テンプレート",
        ["名前", "リンク"],
        [
            ["Google Form", "https://docs.google.com/forms/d/form-template/edit"],
            ["中間スプシ", "https://docs.google.com/spreadsheets/d/mid-template/edit"],
            ["結果スプシ", "https://docs.google.com/spreadsheets/d/result-template/edit"],
        ],
    )
    add_table(
        settings,
        "見積もり必要_締切",
        ["締切日"],
        [["2025-09-05"]],
        start_col=4,
    )

    members = wb.create_sheet("メンバー管理")
    add_table(
        members,
        "POグループメンバー",
        ["表示名", "メールアドレス"],
        [
            ["Aoki", "aoki@example.com"],
            ["Baba", "baba@example.com"],
        ],
    )
    add_table(
        members,
        "見積もり必要_メンバー",
        ["表示名", "メールアドレス", "回答要否"],
        [
            ["Aoki", "aoki@example.com", "必要"],
            ["Baba", "baba@example.com", "不要"],
            ["Chiba", "chiba@example.com", "必要"],
        ],
        start_col=4,
    )

    issues = wb.create_sheet("課題")
    add_table(
        issues,
        "見積もり必要_課題リスト",
        ["タイトル", "URL"],
        [
            ["Login page", "https://example.com/issues/1"],
            ["Export CSV", "https://example.com/issues/2"],
        ],
    )

    history = wb.create_sheet("履歴")
    add_table(
        history,
        "見積もり履歴",
        ["見積もり日", "中間スプシ", "Google Form", "結果スプシ"],
        [["2025-08-01", "old mid", "old form", "old result"]],
    )
    history["F1"] = "note beside the table"
    history["F2"] = "stays put"
    return wb


def build_target_workbook(member_rows: int = 3) -> Workbook:
    """Generated mid spreadsheet with stale メンバー rows and an empty Form_Responses."""
    wb = Workbook()
    ws = wb.active
    ws.title = "メンバー"
    add_table(
        ws,
        "メンバー",
        ["表示名", "メールアドレス", "回答要否", "回答状況"],
        [[f"old{i}", f"old{i}@example.com", "必要", ""] for i in range(member_rows)],
    )

    responses = wb.create_sheet("回答")
    add_table(
        responses,
        "Form_Responses",
        ["タイムスタンプ", "メールアドレス", "E1. 見積もりの前提、質問", "E1. 見積り値"],
    )
    return wb


@pytest.fixture
def source_workbook() -> Workbook:
    return build_source_workbook()


@pytest.fixture
def source_session(source_workbook) -> TableSession:
    return TableSession(WorkbookBackend(source_workbook))


@pytest.fixture
def target_workbook() -> Workbook:
    return build_target_workbook()


@pytest.fixture
def target_session(target_workbook) -> TableSession:
    return TableSession(WorkbookBackend(target_workbook))
