"""
Domain layer package.

Contains pure value types with no I/O dependencies: table geometry,
address conversion, table descriptors, record types and the error
taxonomy.
"""

from autoestimate.domain.address import (
    column_letter,
    column_number,
    parse_address,
    to_address,
    to_rectangle,
)
from autoestimate.domain.errors import (
    AutoEstimateError,
    EmptyTable,
    HeaderNotFound,
    MalformedRectangle,
    MissingDeadline,
    MissingTemplateLink,
    StructuralMutationFailed,
    TableNotFound,
    UnknownCheck,
)
from autoestimate.domain.geometry import Rectangle
from autoestimate.domain.tables import (
    HeaderIndex,
    ReconciliationPlan,
    TableDescriptor,
    plan_reconciliation,
)
from autoestimate.domain.table_specs import TABLE_SPECS, TableSpec

__all__ = [
    # Address conversion
    "column_letter",
    "column_number",
    "parse_address",
    "to_address",
    "to_rectangle",
    # Errors
    "AutoEstimateError",
    "EmptyTable",
    "HeaderNotFound",
    "MalformedRectangle",
    "MissingDeadline",
    "MissingTemplateLink",
    "StructuralMutationFailed",
    "TableNotFound",
    "UnknownCheck",
    # Types
    "Rectangle",
    "HeaderIndex",
    "ReconciliationPlan",
    "TableDescriptor",
    "plan_reconciliation",
    "TABLE_SPECS",
    "TableSpec",
]
