"""
Centralized Table Spec Registry.

Single place where every structured table the estimation workflow touches
is declared: its table name and the headers each record field maps to.
Readers, writers and health checks all import from here.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace


@dataclass(frozen=True, slots=True)
class TableSpec:
    """
    Declaration of one structured table.

    Attributes:
        key: Stable identifier used in config overrides (e.g., "members")
        name: Table name as declared in the spreadsheet
        columns: Map of record field -> header text, in column order
    """

    key: str
    name: str
    columns: dict[str, str] = field(default_factory=dict)

    def header(self, field_name: str) -> str:
        return self.columns[field_name]

    def renamed(self, name: str) -> TableSpec:
        return replace(self, name=name)


# ═══════════════════════════════════════════════════════════════════════════
# TABLE REGISTRY - THE SINGLE SOURCE OF TRUTH
# ═══════════════════════════════════════════════════════════════════════════

TABLE_SPECS: dict[str, TableSpec] = {}


def _register(spec: TableSpec) -> TableSpec:
    """Register a table spec and return it."""
    TABLE_SPECS[spec.key] = spec
    return spec


# ─────────────────────────────────────────────────────────────────────────────
# Source spreadsheet
# ─────────────────────────────────────────────────────────────────────────────

TEMPLATES = _register(
    TableSpec(
        key="templates",
        name="見積もり必要_テンプレート",
        columns={"name": "名前", "link": "リンク"},
    )
)

PO_GROUP_MEMBERS = _register(
    TableSpec(
        key="po_group_members",
        name="POグループメンバー",
        columns={"display_name": "表示名", "email": "メールアドレス"},
    )
)

REQUIRED_MEMBERS = _register(
    TableSpec(
        key="required_members",
        name="見積もり必要_メンバー",
        columns={
            "display_name": "表示名",
            "email": "メールアドレス",
            "response_required": "回答要否",
        },
    )
)

ISSUE_LIST = _register(
    TableSpec(
        key="issue_list",
        name="見積もり必要_課題リスト",
        columns={"title": "タイトル", "url": "URL"},
    )
)

DEADLINE = _register(
    TableSpec(
        key="deadline",
        name="見積もり必要_締切",
        columns={"due_date": "締切日"},
    )
)

ESTIMATE_HISTORY = _register(
    TableSpec(
        key="estimate_history",
        name="見積もり履歴",
        columns={
            "date": "見積もり日",
            "mid": "中間スプシ",
            "form": "Google Form",
            "result": "結果スプシ",
        },
    )
)

# ─────────────────────────────────────────────────────────────────────────────
# Generated (mid) spreadsheet
# ─────────────────────────────────────────────────────────────────────────────

MEMBERS = _register(
    TableSpec(
        key="members",
        name="メンバー",
        columns={
            "display_name": "表示名",
            "email": "メールアドレス",
            "response_required": "回答要否",
            "response_status": "回答状況",
        },
    )
)

FORM_RESPONSES = _register(
    TableSpec(
        key="form_responses",
        name="Form_Responses",
        columns={
            "timestamp": "タイムスタンプ",
            "email": "メールアドレス",
            "premise": "E1. 見積もりの前提、質問",
            "estimate": "E1. 見積り値",
        },
    )
)


def resolve_specs(overrides: Mapping[str, str] | None = None) -> dict[str, TableSpec]:
    """
    Apply table-name overrides from configuration.

    Args:
        overrides: Map of spec key -> table name

    Raises:
        KeyError: If an override names an unknown spec key
    """
    specs = dict(TABLE_SPECS)
    for key, name in (overrides or {}).items():
        if key not in specs:
            raise KeyError(f"Unknown table key in overrides: {key}")
        specs[key] = specs[key].renamed(name)
    return specs
