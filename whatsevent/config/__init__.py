"""Configuration package."""

from .environment import IS_PRODUCTION_ENVIRONMENT
from .application import AppConfig

__all__ = ['IS_PRODUCTION_ENVIRONMENT', 'AppConfig']
