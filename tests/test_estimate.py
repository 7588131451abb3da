"""
Tests for the estimation workflow: source loaders, member sync,
Form_Responses seeding and the estimate history.
"""

import logging

import pytest
from openpyxl import Workbook

from autoestimate.application.estimate import (
    DUMMY_EMAIL,
    EstimateSources,
    add_history_entry,
    load_deadline,
    load_deadlines,
    load_issues,
    load_po_members,
    load_required_members,
    load_template_links,
    response_status_formula,
    seed_form_responses,
    sync_members_table,
)
from autoestimate.application.tables.session import TableSession
from autoestimate.domain.errors import MissingDeadline, MissingTemplateLink
from autoestimate.domain.records import HistoryEntry, LinkedText, RequiredMember
from autoestimate.infrastructure.sheets.workbook import WorkbookBackend

from conftest import add_table, table_values


class TestTemplateLinks:
    def test_required_keys(self, source_session):
        links = load_template_links(source_session)
        assert links.google_form.endswith("form-template/edit")
        assert "mid-template" in links.mid_spreadsheet
        assert "result-template" in links.result_spreadsheet

    def test_missing_key(self, source_workbook):
        source_workbook["設定"]["B4"] = None
        session = TableSession(WorkbookBackend(source_workbook))

        with pytest.raises(MissingTemplateLink) as exc:
            load_template_links(session)
        assert exc.value.key == "結果スプシ"

    def test_empty_link_and_duplicates_warn(self, source_workbook, caplog):
        ws = source_workbook["設定"]
        ws.tables["見積もり必要_テンプレート"].ref = "A1:B7"
        ws["A5"], ws["B5"] = "Slack", None
        ws["A6"], ws["B6"] = "Google Form", "https://docs.google.com/forms/d/newer/edit"
        ws["A7"], ws["B7"] = None, "https://orphan.example.com"
        session = TableSession(WorkbookBackend(source_workbook))

        with caplog.at_level(logging.WARNING):
            links = load_template_links(session)

        assert links.google_form.endswith("newer/edit")
        assert "Slack" not in links.links
        assert "Empty link for template Slack" in caplog.text
        assert "Duplicate template Google Form" in caplog.text


class TestMemberLoaders:
    def test_po_members(self, source_session):
        members = load_po_members(source_session)
        assert members.display_names == ["Aoki", "Baba"]
        assert members.emails == ["aoki@example.com", "baba@example.com"]

    def test_po_members_blank_columns_dropped_independently(self, source_workbook):
        source_workbook["メンバー管理"]["A3"] = None
        members = load_po_members(TableSession(WorkbookBackend(source_workbook)))
        assert members.display_names == ["Aoki"]
        assert members.emails == ["aoki@example.com", "baba@example.com"]

    def test_required_members(self, source_session):
        members = load_required_members(source_session)
        assert [m.display_name for m in members] == ["Aoki", "Baba", "Chiba"]
        assert [m.needs_response for m in members] == [True, False, True]

    def test_invalid_response_required_is_skipped(self, source_workbook, caplog):
        source_workbook["メンバー管理"]["F3"] = "maybe"
        session = TableSession(WorkbookBackend(source_workbook))

        with caplog.at_level(logging.WARNING):
            members = load_required_members(session)

        assert [m.display_name for m in members] == ["Aoki", "Chiba"]
        assert "maybe" in caplog.text


class TestOtherLoaders:
    def test_issues(self, source_session):
        issues = load_issues(source_session)
        assert [i.title for i in issues] == ["Login page", "Export CSV"]

    def test_deadline(self, source_session):
        assert load_deadline(source_session).due_date == "2025-09-05"

    def test_deadline_missing(self, source_workbook):
        source_workbook["設定"]["D2"] = None
        session = TableSession(WorkbookBackend(source_workbook))

        assert load_deadlines(session) == []
        with pytest.raises(MissingDeadline):
            load_deadline(session)

    def test_deadlines_keep_blank_rows(self, source_workbook):
        ws = source_workbook["設定"]
        ws.tables["見積もり必要_締切"].ref = "D1:D3"
        ws["D2"], ws["D3"] = None, "2025-09-12"
        deadlines = load_deadlines(TableSession(WorkbookBackend(source_workbook)))
        assert [d.due_date for d in deadlines] == ["", "2025-09-12"]


class TestEstimateSources:
    def test_each_table_is_read_once(self, source_session, monkeypatch):
        calls = []
        original = source_session.backend.read_values

        def counting(address):
            calls.append(address)
            return original(address)

        monkeypatch.setattr(source_session.backend, "read_values", counting)
        sources = EstimateSources(source_session)

        sources.required_members
        sources.required_members
        sources.deadline
        sources.deadline

        assert len(calls) == 2

        sources.clear()
        sources.required_members
        assert len(calls) == 3


class TestSyncMembers:
    def _members(self):
        return [
            RequiredMember("Aoki", "aoki@example.com", "必要"),
            RequiredMember("Baba", "baba@example.com", "不要"),
        ]

    def test_replaces_rows_and_places_formula_once(self, target_workbook, target_session):
        updated = sync_members_table(target_session, self._members())

        ws = target_workbook["メンバー"]
        assert updated.address == "メンバー!A1:D3"
        assert ws.tables["メンバー"].ref == "A1:D3"
        values = table_values(ws, "メンバー")
        assert values[1][:3] == ["Aoki", "aoki@example.com", "必要"]
        assert values[2] == ["Baba", "baba@example.com", "不要", None]
        assert values[1][3] == response_status_formula()

    def test_empty_members_leave_table_untouched(self, target_workbook, target_session, caplog):
        with caplog.at_level(logging.WARNING):
            result = sync_members_table(target_session, [])

        assert result is None
        assert target_workbook["メンバー"].tables["メンバー"].ref == "A1:D4"
        assert "No required members" in caplog.text

    def test_formula_references_both_tables(self):
        formula = response_status_formula()
        assert formula.startswith("=LET(")
        assert "メンバー[回答要否]" in formula
        assert "Form_Responses[メールアドレス]" in formula
        assert 'membersResponseNecessities<>"不要"' in formula

    def test_formula_uses_renamed_tables(self):
        formula = response_status_formula("Members", "Responses")
        assert "Members[表示名]" in formula
        assert "Responses[メールアドレス]" in formula


class TestSeedFormResponses:
    def test_single_dummy_row(self, target_workbook, target_session):
        updated = seed_form_responses(target_session)

        ws = target_workbook["回答"]
        assert updated.data_row_count == 1
        assert ws.tables["Form_Responses"].ref == "A1:D2"
        assert table_values(ws, "Form_Responses")[1] == [None, DUMMY_EMAIL, None, None]

    def test_reseeding_keeps_one_row(self, target_workbook, target_session):
        seed_form_responses(target_session)
        seed_form_responses(target_session)

        assert target_workbook["回答"].tables["Form_Responses"].ref == "A1:D2"

    def test_seed_after_sync_on_the_same_sheet(self):
        wb = Workbook()
        ws = wb.active
        ws.title = "Mid"
        add_table(
            ws,
            "メンバー",
            ["表示名", "メールアドレス", "回答要否", "回答状況"],
            [["old", "old@example.com", "必要", ""]],
        )
        add_table(
            ws,
            "Form_Responses",
            ["タイムスタンプ", "メールアドレス", "E1. 見積もりの前提、質問", "E1. 見積り値"],
            start_row=5,
        )
        session = TableSession(WorkbookBackend(wb))
        members = [
            RequiredMember("Aoki", "aoki@example.com", "必要"),
            RequiredMember("Baba", "baba@example.com", "不要"),
            RequiredMember("Chiba", "chiba@example.com", "必要"),
        ]

        sync_members_table(session, members)
        updated = seed_form_responses(session)

        assert ws.tables["メンバー"].ref == "A1:D4"
        assert updated.address == "Mid!A7:D8"
        assert ws.tables["Form_Responses"].ref == "A7:D8"
        assert ws["B7"].value == "メールアドレス"
        assert ws["B8"].value == DUMMY_EMAIL


class TestHistory:
    def test_prepends_row_with_links(self, source_workbook, source_session):
        entry = HistoryEntry(
            date="2025-09-05",
            mid=LinkedText("2025-09-05 mid", "https://docs.google.com/spreadsheets/d/mid1"),
            form=LinkedText("2025-09-05 form", "https://docs.google.com/forms/d/form1"),
            result=LinkedText("2025-09-05 result", "https://docs.google.com/spreadsheets/d/res1"),
        )

        updated = add_history_entry(source_session, entry)

        ws = source_workbook["履歴"]
        assert updated.address == "履歴!A1:D3"
        assert ws.tables["見積もり履歴"].ref == "A1:D3"
        assert source_session.get_table("見積もり履歴").address == "履歴!A1:D3"
        assert [c.value for c in ws[2][:4]] == [
            "2025-09-05",
            "2025-09-05 mid",
            "2025-09-05 form",
            "2025-09-05 result",
        ]
        assert ws["B2"].hyperlink.target == "https://docs.google.com/spreadsheets/d/mid1"
        assert ws["D2"].hyperlink.target == "https://docs.google.com/spreadsheets/d/res1"
        assert ws["A3"].value == "2025-08-01"
        # only the table's columns shift
        assert ws["F1"].value == "note beside the table"
        assert ws["F2"].value == "stays put"
