"""Configuration module.

Exports Settings, load_config, and the process-wide ``settings`` instance
that ``blogfeed.main`` builds the application from.
"""

from blogfeed.config.loader import load_config
from blogfeed.config.settings import Settings

settings = Settings()

__all__ = ["Settings", "load_config", "settings"]
