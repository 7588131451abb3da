"""
Configuration repository for loading config files.

Reads config/autoestimate.json, or autoestimate.jsonc with // and /* */
comments, and validates it into an EstimateConfig.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from autoestimate.domain.config import EstimateConfig

logger = logging.getLogger(__name__)

CONFIG_NAME = "autoestimate"


def _strip_comments(jsonc_content: str) -> str:
    """Strip // and /* */ comments that are outside string literals."""
    out = []
    i, n = 0, len(jsonc_content)
    in_string = False
    while i < n:
        ch = jsonc_content[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(jsonc_content[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
        elif ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif jsonc_content.startswith("//", i):
            end = jsonc_content.find("\n", i)
            i = n if end == -1 else end
        elif jsonc_content.startswith("/*", i):
            end = jsonc_content.find("*/", i + 2)
            i = n if end == -1 else end + 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


class ConfigRepository:
    """Loads configuration files from one directory."""

    def __init__(self, config_dir: Path):
        self.config_dir = Path(config_dir)

    def load_json_file(self, filename: str, allow_jsonc: bool = True) -> Dict[str, Any]:
        """
        Load a JSON or JSONC file.

        Args:
            filename: Name of the file to load (without extension)
            allow_jsonc: Whether to look for a .jsonc file too

        Raises:
            FileNotFoundError: If neither file exists
            ValueError: If the file cannot be parsed
        """
        json_path = self.config_dir / f"{filename}.json"
        jsonc_path = self.config_dir / f"{filename}.jsonc"

        if json_path.exists():
            try:
                with open(json_path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                logger.error("Failed to parse JSON file %s: %s", json_path, e)
                raise ValueError(f"Invalid JSON in {json_path}") from e

        if allow_jsonc and jsonc_path.exists():
            try:
                with open(jsonc_path, "r", encoding="utf-8") as f:
                    return json.loads(_strip_comments(f.read()))
            except json.JSONDecodeError as e:
                logger.error("Failed to parse JSONC file %s: %s", jsonc_path, e)
                raise ValueError(f"Invalid JSONC in {jsonc_path}") from e

        raise FileNotFoundError(
            f"Config file '{filename}.json' or '{filename}.jsonc' not found in {self.config_dir}"
        )

    def load_config(self) -> EstimateConfig:
        """
        Load and validate the application configuration.

        Raises:
            FileNotFoundError: If there is no config file
            ValueError: If the config cannot be parsed or validated
        """
        data = self.load_json_file(CONFIG_NAME)
        try:
            config = EstimateConfig(**data)
        except Exception as e:
            logger.error("Failed to validate config: %s", e)
            raise ValueError(f"Invalid configuration: {e}") from e
        logger.debug("Loaded config from %s (source: %s)", self.config_dir, config.source.kind.value)
        return config

    def resolve_path(self, path: str) -> Path:
        """Resolve a config-relative path; absolute paths are kept."""
        p = Path(path)
        return p if p.is_absolute() else self.config_dir / p
