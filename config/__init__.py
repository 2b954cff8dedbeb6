"""
Convenience imports for configuration.

Allows callers to do ``from config import settings`` and read
``settings.DATABASE_URL`` or ``settings.TSTZRANGE_DEFAULT_FIELD``.
"""

from . import settings

__all__ = ["settings"]
