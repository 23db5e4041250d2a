"""
Configuration module.

This module provides configuration loading and schema enforcement.
"""

from bugreport_mcp.validation.config import ConfigError, ServerConfig, load_config

__all__ = ["ConfigError", "ServerConfig", "load_config"]
