"""
Configuration Management Package

Environment-based settings, database engine options and the Supabase client.
"""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
