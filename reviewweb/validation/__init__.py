"""
ReviewWeb validation module.

This module provides configuration loading and schema enforcement.
"""

from reviewweb.validation.config import Config, ConfigError, ReviewWebConfig

__all__ = ["Config", "ConfigError", "ReviewWebConfig"]
