"""Infrastructure layer: spreadsheet backends, configuration, logging."""
