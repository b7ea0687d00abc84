"""Routes package initialization."""

from . import (
    chat,
    events,
    health,
    whatsapp
)

__all__ = [
    'chat',
    'events',
    'health',
    'whatsapp'
]
