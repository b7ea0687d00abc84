"""Models package initialization."""

from .base import Base
from .event import Event, generate_event_id, generate_join_code

__all__ = ['Base', 'Event', 'generate_event_id', 'generate_join_code']
