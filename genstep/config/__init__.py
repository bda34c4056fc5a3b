"""
genstep Configuration

Environment-driven compiler settings.
"""

from .schemas import CompilerSettings, get_settings

__all__ = [
    "CompilerSettings",
    "get_settings",
]
