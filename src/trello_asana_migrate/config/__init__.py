"""Configuration management."""

from .config import AsanaConfig, Config, LoggingConfig, TrelloConfig

__all__ = ['AsanaConfig', 'Config', 'LoggingConfig', 'TrelloConfig']
