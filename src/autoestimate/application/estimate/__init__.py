"""
Estimation workflow over the table engine.

Loaders read the source spreadsheet, writers update the generated mid
spreadsheet and the estimate history.
"""

from autoestimate.application.estimate.history import add_history_entry
from autoestimate.application.estimate.loaders import (
    REQUIRED_TEMPLATE_KEYS,
    EstimateSources,
    PoMembers,
    TemplateLinks,
    load_deadline,
    load_deadlines,
    load_issues,
    load_po_members,
    load_required_members,
    load_template_links,
)
from autoestimate.application.estimate.members import (
    DUMMY_EMAIL,
    response_status_formula,
    seed_form_responses,
    sync_members_table,
)

__all__ = [
    "add_history_entry",
    "REQUIRED_TEMPLATE_KEYS",
    "EstimateSources",
    "PoMembers",
    "TemplateLinks",
    "load_deadline",
    "load_deadlines",
    "load_issues",
    "load_po_members",
    "load_required_members",
    "load_template_links",
    "DUMMY_EMAIL",
    "response_status_formula",
    "seed_form_responses",
    "sync_members_table",
]
