"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
Each concern maps its own environment variable prefix.
"""

from docchat.configs.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
