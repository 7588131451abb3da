"""
Writers for the generated mid spreadsheet.

sync_members_table() replaces the メンバー table with the required members
of the source spreadsheet; seed_form_responses() leaves one placeholder
row in Form_Responses so formulas referencing it have a row to look at.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from autoestimate.domain.records import FormResponseRow, MemberRow, RequiredMember, ResponseRequired
from autoestimate.domain.table_specs import FORM_RESPONSES, MEMBERS

if TYPE_CHECKING:
    from autoestimate.application.tables.session import TableSession
    from autoestimate.domain.tables import TableDescriptor

logger = logging.getLogger(__name__)

DUMMY_EMAIL = "dummy"


def response_status_formula(
    members_table: str = MEMBERS.name,
    responses_table: str = FORM_RESPONSES.name,
) -> str:
    """
    Spilling formula for the 回答状況 column.

    For every member email it yields 回答不要 when no answer is expected,
    otherwise 回答済み or 未回答 depending on whether the email appears in
    the form responses table.
    """
    name = MEMBERS.header("display_name")
    required = MEMBERS.header("response_required")
    email = MEMBERS.header("email")
    response_email = FORM_RESPONSES.header("email")
    not_required = ResponseRequired.NOT_REQUIRED.value
    return f"""\
=LET(
  membersNames,  {members_table}[{name}],
  membersResponseNecessities, {members_table}[{required}],
  membersEmails, {members_table}[{email}],
  estimatesEmails, {responses_table}[{response_email}],
  assigneeEmails, FILTER(membersEmails, membersResponseNecessities<>"{not_required}"),
  MAP(
    membersEmails,
    LAMBDA(
      email,
      IF(
        ISERROR(MATCH(email, assigneeEmails, 0)),
        "回答不要",
        IF(
          ISERROR(MATCH(email, estimatesEmails, 0)),
          "未回答",
          "回答済み"
        )
      )
    )
  )
)
"""


def sync_members_table(
    target: "TableSession",
    members: Sequence[RequiredMember],
) -> "TableDescriptor | None":
    """
    Replace the メンバー table of the target spreadsheet with members.

    The response-status formula goes into the first data row only; it
    spills over the rest of the column.

    Returns:
        The corrected descriptor, or None if members was empty and the
        table was left untouched
    """
    if not members:
        logger.warning("No required members, skipping update of %s", target.spec(MEMBERS).name)
        return None

    spec = target.spec(MEMBERS)
    rows = [MemberRow.from_required_member(m) for m in members]
    formula = response_status_formula(spec.name, target.spec(FORM_RESPONSES).name)
    updated = target.write_records(
        spec,
        rows,
        formulas={(0, spec.header("response_status")): formula},
    )
    logger.info("Synced %d members into %s on %s", len(rows), spec.name, target.label)
    return updated


def seed_form_responses(target: "TableSession") -> "TableDescriptor":
    """Reconcile Form_Responses to a single row whose email is a placeholder."""
    updated = target.write_records(FORM_RESPONSES, [FormResponseRow(email=DUMMY_EMAIL)])
    logger.info("Seeded %s on %s", updated.name, target.label)
    return updated
