"""
Utilities Module
================

Common utilities shared across LabTrack:
- logger: Context-prefixed logging with levels
- config: Centralized configuration management
"""

from labtrack.utils.logger import Logger, logger
from labtrack.utils.config import Config, ConfigError, get_config

__all__ = ["Logger", "logger", "Config", "ConfigError", "get_config"]
