"""Configuration for cwvariables."""

from cwvariables.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
