"""Configuration loading."""

from autoestimate.infrastructure.config.repository import ConfigRepository

__all__ = ["ConfigRepository"]
