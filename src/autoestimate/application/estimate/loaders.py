"""
Source table loaders for the estimation workflow.

Each loader reads one table of the source spreadsheet through a
TableSession and applies that table's row rules (skips, warnings,
required values). EstimateSources memoizes the results for one session.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from autoestimate.domain.errors import MissingDeadline, MissingTemplateLink
from autoestimate.domain.records import (
    Deadline,
    Issue,
    RequiredMember,
    ResponseRequired,
)
from autoestimate.domain.table_specs import (
    DEADLINE,
    ISSUE_LIST,
    PO_GROUP_MEMBERS,
    REQUIRED_MEMBERS,
    TEMPLATES,
)

if TYPE_CHECKING:
    from autoestimate.application.tables.session import TableSession

logger = logging.getLogger(__name__)

GOOGLE_FORM_KEY = "Google Form"
MID_SPREADSHEET_KEY = "中間スプシ"
RESULT_SPREADSHEET_KEY = "結果スプシ"
REQUIRED_TEMPLATE_KEYS = (GOOGLE_FORM_KEY, MID_SPREADSHEET_KEY, RESULT_SPREADSHEET_KEY)


@dataclass(frozen=True, slots=True)
class TemplateLinks:
    """Template document links by name. Every required key is present."""

    links: Mapping[str, str] = field(default_factory=dict)

    @property
    def google_form(self) -> str:
        return self.links[GOOGLE_FORM_KEY]

    @property
    def mid_spreadsheet(self) -> str:
        return self.links[MID_SPREADSHEET_KEY]

    @property
    def result_spreadsheet(self) -> str:
        return self.links[RESULT_SPREADSHEET_KEY]


@dataclass(frozen=True, slots=True)
class PoMembers:
    """PO group members as two independent lists; blanks are dropped per column."""

    display_names: list[str] = field(default_factory=list)
    emails: list[str] = field(default_factory=list)


def load_template_links(session: "TableSession") -> TemplateLinks:
    """
    Read the templates table into a name -> link map.

    Rows without a name are skipped. Rows without a link are skipped with a
    warning. A repeated name with a different link logs a warning and the
    later row wins.

    Raises:
        MissingTemplateLink: If a required key has no link
    """
    links: dict[str, str] = {}
    for row in session.iter_rows(TEMPLATES):
        name, link = row.values["name"], row.values["link"]
        if not name:
            continue
        if not link:
            logger.warning("Empty link for template %s (row %d)", name, row.row_number)
            continue
        if name in links and links[name] != link:
            logger.warning(
                "Duplicate template %s (row %d): %s replaces %s",
                name,
                row.row_number,
                link,
                links[name],
            )
        links[name] = link

    for key in REQUIRED_TEMPLATE_KEYS:
        if not links.get(key):
            raise MissingTemplateLink(key)

    logger.info("Loaded %d template links", len(links))
    return TemplateLinks(links)


def load_po_members(session: "TableSession") -> PoMembers:
    display_names: list[str] = []
    emails: list[str] = []
    for row in session.iter_rows(PO_GROUP_MEMBERS):
        if row.values["display_name"]:
            display_names.append(row.values["display_name"])
        if row.values["email"]:
            emails.append(row.values["email"])

    logger.info("Loaded PO members: %d names, %d emails", len(display_names), len(emails))
    return PoMembers(display_names, emails)


def load_required_members(session: "TableSession") -> list[RequiredMember]:
    """
    Read the members expected in this estimate.

    Rows with neither a name nor an email are skipped. Rows whose
    回答要否 is not 必要/不要 are skipped with a warning.
    """
    members = []
    for row in session.iter_rows(REQUIRED_MEMBERS):
        display_name, email = row.values["display_name"], row.values["email"]
        if not display_name and not email:
            continue
        response_required = ResponseRequired.from_string(row.values["response_required"])
        if response_required is None:
            logger.warning(
                "Invalid 回答要否 %r for %s <%s> (row %d), skipped",
                row.values["response_required"],
                display_name,
                email,
                row.row_number,
            )
            continue
        members.append(RequiredMember(display_name, email, response_required.value))

    logger.info("Loaded %d required members", len(members))
    return members


def load_issues(session: "TableSession") -> list[Issue]:
    return session.load_records(ISSUE_LIST, Issue)


def load_deadlines(session: "TableSession") -> list[Deadline]:
    """Every data row of the deadline table, blank ones included."""
    deadlines = [
        Deadline(due_date=row.values["due_date"])
        for row in session.iter_rows(DEADLINE, skip_empty=False)
    ]
    logger.info("Loaded %d deadline rows", len(deadlines))
    return deadlines


def load_deadline(session: "TableSession") -> Deadline:
    """
    The estimate deadline: the first row of the deadline table.

    Raises:
        MissingDeadline: If the table has no data row
    """
    deadlines = load_deadlines(session)
    if not deadlines:
        raise MissingDeadline()
    return deadlines[0]


class EstimateSources:
    """
    Per-session memo of the source loaders.

    Each table is read at most once for the lifetime of this object.
    Create a new instance (or call clear()) after the source changes.
    """

    def __init__(self, session: "TableSession") -> None:
        self.session = session
        self._template_links: TemplateLinks | None = None
        self._po_members: PoMembers | None = None
        self._required_members: list[RequiredMember] | None = None
        self._issues: list[Issue] | None = None
        self._deadlines: list[Deadline] | None = None

    @property
    def template_links(self) -> TemplateLinks:
        if self._template_links is None:
            self._template_links = load_template_links(self.session)
        return self._template_links

    @property
    def po_members(self) -> PoMembers:
        if self._po_members is None:
            self._po_members = load_po_members(self.session)
        return self._po_members

    @property
    def required_members(self) -> list[RequiredMember]:
        if self._required_members is None:
            self._required_members = load_required_members(self.session)
        return self._required_members

    @property
    def issues(self) -> list[Issue]:
        if self._issues is None:
            self._issues = load_issues(self.session)
        return self._issues

    @property
    def deadlines(self) -> list[Deadline]:
        if self._deadlines is None:
            self._deadlines = load_deadlines(self.session)
        return self._deadlines

    @property
    def deadline(self) -> Deadline:
        if not self.deadlines:
            raise MissingDeadline()
        return self.deadlines[0]

    def clear(self) -> None:
        self._template_links = None
        self._po_members = None
        self._required_members = None
        self._issues = None
        self._deadlines = None
