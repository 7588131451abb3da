"""
Configuration domain models.

EstimateConfig is the validated content of config/autoestimate.json. It
names the source spreadsheet, optional Google credentials, logging
settings and table-name overrides.
"""

from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from autoestimate.domain.table_specs import TABLE_SPECS


class SourceKind(str, Enum):
    """Where a spreadsheet lives."""

    WORKBOOK = "workbook"
    GOOGLE = "google"


class SpreadsheetSource(BaseModel):
    """
    One spreadsheet: a local .xlsx workbook or a Google spreadsheet.

    A workbook needs a path; a Google spreadsheet needs an id or its URL.
    """

    kind: SourceKind = Field(..., description="workbook or google")
    path: Optional[str] = Field(None, description="Path to the .xlsx file (workbook)")
    spreadsheet_id: Optional[str] = Field(None, description="Spreadsheet id (google)")
    url: Optional[str] = Field(None, description="Spreadsheet URL, id is extracted (google)")

    @model_validator(mode="after")
    def validate_location(self) -> "SpreadsheetSource":
        """Require the location field matching the kind."""
        if self.kind == SourceKind.WORKBOOK and not self.path:
            raise ValueError("workbook source requires 'path'")
        if self.kind == SourceKind.GOOGLE and not (self.spreadsheet_id or self.url):
            raise ValueError("google source requires 'spreadsheet_id' or 'url'")
        return self

    @classmethod
    def from_target(cls, target: str) -> "SpreadsheetSource":
        """Build a source from a CLI argument: a Google URL or a workbook path."""
        if target.startswith(("http://", "https://")):
            return cls(kind=SourceKind.GOOGLE, url=target)
        return cls(kind=SourceKind.WORKBOOK, path=str(Path(target).resolve()))


class LoggingSettings(BaseModel):
    level: str = Field("INFO", description="Console log level")
    file: Optional[str] = Field(None, description="Optional log file path")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Accept standard level names only."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class EstimateConfig(BaseModel):
    """Validated application configuration."""

    model_config = ConfigDict(extra="forbid")

    source: SpreadsheetSource = Field(..., description="Source spreadsheet")
    credentials_file: Optional[str] = Field(
        None,
        description="Service account JSON for Google spreadsheets",
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    tables: Dict[str, str] = Field(
        default_factory=dict,
        description="Table name overrides by table key",
    )

    @field_validator("tables")
    @classmethod
    def validate_table_keys(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Reject overrides for tables the application does not know."""
        unknown = sorted(set(v) - set(TABLE_SPECS))
        if unknown:
            raise ValueError(f"Unknown table keys: {', '.join(unknown)}")
        return v
