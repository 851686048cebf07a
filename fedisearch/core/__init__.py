"""Core: config, composition root, and process lifespan.

Single place for settings and the search policy derived from them.
"""

from fedisearch.core.config import SearchScopeConfig, Settings, get_settings

__all__ = ["SearchScopeConfig", "Settings", "get_settings"]
