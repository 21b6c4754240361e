"""
Configuration management for the Product API.

Contains the Pydantic settings object and the helpers that turn it into the
explicit configuration handed to the storage and database adapters.
"""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
