"""
Dependency injection container for the application.

Builds the configuration, backends and table sessions lazily, so a CLI
command only touches what it uses.
"""

import logging
from pathlib import Path
from typing import Optional

from autoestimate.application.estimate.loaders import EstimateSources
from autoestimate.application.tables.session import TableSession
from autoestimate.domain.config import EstimateConfig, LoggingSettings, SourceKind, SpreadsheetSource
from autoestimate.infrastructure.config.repository import ConfigRepository
from autoestimate.infrastructure.sheets.backend import SpreadsheetBackend
from autoestimate.infrastructure.sheets.google import GoogleSheetsBackend, spreadsheet_id_from_url
from autoestimate.infrastructure.sheets.workbook import WorkbookBackend

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency injection container.

    One container is one execution: the source session, and with it the
    table registry memo, is created once and reused.
    """

    def __init__(self, config_dir: Optional[Path] = None, config: Optional[EstimateConfig] = None):
        """
        Initialize the container.

        Args:
            config_dir: Directory holding autoestimate.json(c)
            config: Already loaded configuration (skips the file)
        """
        self.config_dir = Path(config_dir) if config_dir else Path.cwd() / "config"
        self._config = config

        self._config_repository: Optional[ConfigRepository] = None
        self._source_backend: Optional[SpreadsheetBackend] = None
        self._source_session: Optional[TableSession] = None
        self._sources: Optional[EstimateSources] = None

    @property
    def config_repository(self) -> ConfigRepository:
        """Get the configuration repository."""
        if self._config_repository is None:
            self._config_repository = ConfigRepository(self.config_dir)
        return self._config_repository

    @property
    def config(self) -> EstimateConfig:
        """Get the validated configuration."""
        if self._config is None:
            self._config = self.config_repository.load_config()
        return self._config

    @property
    def source_backend(self) -> SpreadsheetBackend:
        """Get the backend of the configured source spreadsheet."""
        if self._source_backend is None:
            self._source_backend = self.build_backend(self.config.source)
        return self._source_backend

    @property
    def source_session(self) -> TableSession:
        """Get the session over the source spreadsheet."""
        if self._source_session is None:
            self._source_session = self.build_session(self.source_backend)
        return self._source_session

    @property
    def sources(self) -> EstimateSources:
        """Get the memoized source loaders."""
        if self._sources is None:
            self._sources = EstimateSources(self.source_session)
        return self._sources

    def logging_settings(self) -> LoggingSettings:
        """Configured logging settings, defaults when the config cannot be loaded yet."""
        try:
            return self.config.logging
        except (FileNotFoundError, ValueError):
            # the command that needs the config reports the error
            return LoggingSettings()

    def build_session(self, backend: SpreadsheetBackend) -> TableSession:
        """New session over backend, applying configured table names."""
        return TableSession(backend, self.config.tables)

    def build_backend(self, source: SpreadsheetSource) -> SpreadsheetBackend:
        """
        Open the spreadsheet a source points at.

        Raises:
            FileNotFoundError: If a workbook or credentials file is missing
            ValueError: If a Google source lacks credentials or has a bad URL
        """
        if source.kind == SourceKind.WORKBOOK:
            return WorkbookBackend.open(self.config_repository.resolve_path(source.path))

        spreadsheet_id = source.spreadsheet_id or spreadsheet_id_from_url(source.url)
        if not self.config.credentials_file:
            raise ValueError("Google spreadsheets require 'credentials_file' in the configuration")
        credentials = self.config_repository.resolve_path(self.config.credentials_file)
        logger.debug("Opening Google spreadsheet %s", spreadsheet_id)
        return GoogleSheetsBackend.from_service_account(credentials, spreadsheet_id)

    def save(self, backend: SpreadsheetBackend) -> None:
        """Persist a backend whose changes live in memory."""
        if isinstance(backend, WorkbookBackend):
            backend.save()
