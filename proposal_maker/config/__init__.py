"""Application configuration."""

from proposal_maker.config.settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]
