"""
Typed row records for the estimation tables.

Each record is a frozen dataclass whose field names match the field keys of
a TableSpec. The record layer maps fields to columns through a HeaderIndex,
so a record never knows its column positions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ResponseRequired(str, Enum):
    """Values of the 回答要否 column."""

    REQUIRED = "必要"
    NOT_REQUIRED = "不要"

    @classmethod
    def from_string(cls, value: str | None) -> ResponseRequired | None:
        """Parse a cell value. Returns None for anything unrecognized."""
        if value is None:
            return None
        try:
            return cls(str(value).strip())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class PoMember:
    display_name: str
    email: str


@dataclass(frozen=True, slots=True)
class RequiredMember:
    """A member of the estimate, with whether an answer is expected."""

    display_name: str
    email: str
    response_required: str

    @property
    def needs_response(self) -> bool:
        return self.response_required == ResponseRequired.REQUIRED.value


@dataclass(frozen=True, slots=True)
class Issue:
    title: str
    url: str


@dataclass(frozen=True, slots=True)
class Deadline:
    due_date: str


@dataclass(frozen=True, slots=True)
class MemberRow:
    """Row of the generated メンバー table."""

    display_name: str
    email: str
    response_required: str
    response_status: str = ""

    @classmethod
    def from_required_member(cls, member: RequiredMember) -> MemberRow:
        return cls(
            display_name=member.display_name,
            email=member.email,
            response_required=member.response_required,
        )


@dataclass(frozen=True, slots=True)
class FormResponseRow:
    timestamp: str = ""
    email: str = ""
    premise: str = ""
    estimate: str = ""


@dataclass(frozen=True, slots=True)
class LinkedText:
    """Cell text that also carries a hyperlink."""

    text: str
    url: str


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One row of the 見積もり履歴 table: a date and three document links."""

    date: str
    mid: LinkedText
    form: LinkedText
    result: LinkedText
