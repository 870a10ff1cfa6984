"""Configuration module for the user sync bridge."""
from .settings import AppConfig, load_settings, DEFAULT_SYNC_PATH

__all__ = ["AppConfig", "load_settings", "DEFAULT_SYNC_PATH"]
