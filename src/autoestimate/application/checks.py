"""
Health checks for the source spreadsheet.

Each check is a named predicate over the source tables. A check that
returns False fails with its fail message; a check that raises fails with
the fail message and the exception text. One EstimateSources memo is
shared by a run, so each table is read at most once.

Opt-in checks write to the spreadsheet; they run only when named.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from autoestimate.application.estimate.history import add_history_entry
from autoestimate.application.estimate.loaders import EstimateSources
from autoestimate.domain.errors import UnknownCheck
from autoestimate.domain.records import HistoryEntry, LinkedText

if TYPE_CHECKING:
    from autoestimate.application.tables.session import TableSession

logger = logging.getLogger(__name__)

CheckFn = Callable[[EstimateSources], bool]

SAMPLE_HISTORY_DATE = "2025-08-30"
SAMPLE_HISTORY_URL = "https://www.google.com/"


@dataclass(frozen=True, slots=True)
class HealthCheck:
    name: str
    fail_message: str
    check: CheckFn
    opt_in: bool = False


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of one check, with wall time in milliseconds."""

    name: str
    ok: bool
    message: str
    ms: int


@dataclass
class CheckReport:
    results: list[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return len(self.results) - self.passed

    @property
    def ok(self) -> bool:
        return self.failed == 0


# ═══════════════════════════════════════════════════════════════════════════
# CHECK REGISTRY
# ═══════════════════════════════════════════════════════════════════════════

CHECKS: dict[str, HealthCheck] = {}


def _check(name: str, fail_message: str, opt_in: bool = False) -> Callable[[CheckFn], CheckFn]:
    """Register the decorated predicate under name."""

    def register(fn: CheckFn) -> CheckFn:
        CHECKS[name] = HealthCheck(name, fail_message, fn, opt_in)
        return fn

    return register


@_check("template:required_keys", "Google Form, 中間スプシ or 結果スプシ is missing or empty")
def _template_required_keys(sources: EstimateSources) -> bool:
    links = sources.template_links
    return bool(links.google_form and links.mid_spreadsheet and links.result_spreadsheet)


@_check("template:google_form_link", "Google Form link is not available")
def _template_google_form(sources: EstimateSources) -> bool:
    return len(sources.template_links.google_form) > 0


@_check("template:mid_spreadsheet_link", "中間スプシ link is not available")
def _template_mid_spreadsheet(sources: EstimateSources) -> bool:
    return len(sources.template_links.mid_spreadsheet) > 0


@_check("template:result_spreadsheet_link", "結果スプシ link is not available")
def _template_result_spreadsheet(sources: EstimateSources) -> bool:
    return len(sources.template_links.result_spreadsheet) > 0


@_check("po_members:columns", "Headers 表示名 and メールアドレス are not present")
def _po_members_columns(sources: EstimateSources) -> bool:
    sources.po_members
    return True


@_check("po_members:names_non_empty", "Fewer than 1 display name")
def _po_members_names(sources: EstimateSources) -> bool:
    return len(sources.po_members.display_names) >= 1


@_check("po_members:emails_non_empty", "Fewer than 1 email")
def _po_members_emails(sources: EstimateSources) -> bool:
    return len(sources.po_members.emails) >= 1


@_check("required_members:columns", "Headers 表示名, メールアドレス and 回答要否 are not present")
def _required_members_columns(sources: EstimateSources) -> bool:
    sources.required_members
    return True


@_check("issue_list:columns", "Headers タイトル and URL are not present")
def _issue_list_columns(sources: EstimateSources) -> bool:
    sources.issues
    return True


@_check("deadline:columns", "Header 締切日 is not present")
def _deadline_columns(sources: EstimateSources) -> bool:
    sources.deadlines
    return True


@_check("deadline:length1", "Deadline table does not hold exactly 1 row")
def _deadline_length1(sources: EstimateSources) -> bool:
    return len(sources.deadlines) == 1


@_check("estimate_history:add_row", "Adding a row to 見積もり履歴 failed", opt_in=True)
def _estimate_history_add_row(sources: EstimateSources) -> bool:
    session = sources.session
    before = session.table_for("estimate_history").data_row_count
    entry = HistoryEntry(
        date=SAMPLE_HISTORY_DATE,
        mid=LinkedText("test 中間スプシ", SAMPLE_HISTORY_URL),
        form=LinkedText("test Google Form", SAMPLE_HISTORY_URL),
        result=LinkedText("test 結果スプシ", SAMPLE_HISTORY_URL),
    )
    updated = add_history_entry(session, entry)
    return updated.data_row_count == before + 1


# ═══════════════════════════════════════════════════════════════════════════
# RUNNER
# ═══════════════════════════════════════════════════════════════════════════


def check_names() -> list[str]:
    return list(CHECKS)


def _run_one(check: HealthCheck, sources: EstimateSources) -> CheckResult:
    start = time.time()
    try:
        ok = check.check(sources) is True
    except Exception as e:
        ms = int((time.time() - start) * 1000)
        logger.error("[CHECK] EXCEPTION - %s (%d ms): %s", check.name, ms, e)
        return CheckResult(check.name, False, f"{check.fail_message} :: {e}", ms)

    ms = int((time.time() - start) * 1000)
    if ok:
        logger.info("[CHECK] PASS - %s (%d ms)", check.name, ms)
    else:
        logger.warning("[CHECK] FAIL - %s (%d ms): %s", check.name, ms, check.fail_message)
    return CheckResult(check.name, ok, "" if ok else check.fail_message, ms)


def run_checks(session: "TableSession", names: Iterable[str] | None = None) -> CheckReport:
    """
    Run every check that is not opt-in, or only the named ones in registry order.

    Raises:
        UnknownCheck: If a requested name is not registered
    """
    requested = list(names or [])
    if requested:
        unknown = set(requested) - set(CHECKS)
        if unknown:
            raise UnknownCheck(unknown)
        selected = [c for name, c in CHECKS.items() if name in requested]
    else:
        selected = [c for c in CHECKS.values() if not c.opt_in]

    sources = EstimateSources(session)
    report = CheckReport([_run_one(c, sources) for c in selected])
    logger.info(
        "[CHECK] summary: %d total, %d passed, %d failed",
        len(report.results),
        report.passed,
        report.failed,
    )
    return report
