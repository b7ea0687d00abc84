"""Event storage.

`EventRepository` is the storage capability the API depends on.
`SqlAlchemyEventRepository` is its only implementation, backed by `Database`.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sqlalchemy import select

from ..chat.context_builder import build_event_context
from ..models.event import Event
from ..utils.timezone import now_utc
from .db_core import Database
from .operations import with_retry

logger = logging.getLogger(__name__)

# Fields callers may change after creation. Identity, links and the derived
# context are owned by the repository.
UPDATABLE_FIELDS = frozenset({
    'name',
    'organizer',
    'details',
    'time',
    'start_time',
    'end_time',
    'date',
    'contact_number',
    'whatsapp_number',
    'faqs',
    'pdf_path',
    'document_text',
})


class EventRepository(ABC):
    """
    Storage interface for events.

    Implementations must regenerate `Event.context` whenever an event is
    created or updated, so the context always reflects the stored fields.
    """

    @abstractmethod
    def create(self, event: Event) -> Event:
        """Persist a new event and return it."""
        pass

    @abstractmethod
    def get(self, event_id: str) -> Optional[Event]:
        """Return the event with this id, or None."""
        pass

    @abstractmethod
    def list_all(self) -> List[Event]:
        """Return all events, oldest first."""
        pass

    @abstractmethod
    def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[Event]:
        """Apply field changes and return the updated event, or None if absent."""
        pass

    @abstractmethod
    def delete(self, event_id: str) -> bool:
        """Delete an event. Returns False if it did not exist."""
        pass

    @abstractmethod
    def find_by_join_code(self, join_code: str) -> Optional[Event]:
        """Return the event with this WhatsApp join code, or None."""
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[Event]:
        """Return the first event whose name contains `name` (case-insensitive)."""
        pass

    @abstractmethod
    def find_by_whatsapp_number(self, number: str) -> Optional[Event]:
        """Return the first event registered with this WhatsApp number."""
        pass


class SqlAlchemyEventRepository(EventRepository):
    """EventRepository backed by a SQLAlchemy `Database`."""

    def __init__(self, database: Database):
        self.database = database

    def initialize(self) -> None:
        """Make sure the schema exists."""
        self.database.ensure_tables_exist()

    @with_retry()
    def create(self, event: Event) -> Event:
        with self.database.session() as session:
            event.context = build_event_context(event)
            session.add(event)
            session.flush()
            logger.info(f"Stored event {event.id}: {event.name}")
            return event

    def get(self, event_id: str) -> Optional[Event]:
        with self.database.session() as session:
            return session.get(Event, event_id)

    def list_all(self) -> List[Event]:
        with self.database.session() as session:
            stmt = select(Event).order_by(Event.created_at, Event.id)
            return list(session.scalars(stmt).all())

    @with_retry()
    def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[Event]:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        with self.database.session() as session:
            event = session.get(Event, event_id)
            if event is None:
                return None

            for key, value in changes.items():
                setattr(event, key, value)
            event.context = build_event_context(event)
            event.updated_at = now_utc()
            logger.info(f"Updated event {event.id}: {', '.join(sorted(changes)) or 'no fields'}")
            return event

    @with_retry()
    def delete(self, event_id: str) -> bool:
        with self.database.session() as session:
            event = session.get(Event, event_id)
            if event is None:
                return False
            session.delete(event)
            logger.info(f"Deleted event {event_id}")
            return True

    def find_by_join_code(self, join_code: str) -> Optional[Event]:
        with self.database.session() as session:
            stmt = select(Event).where(Event.join_code == join_code.strip().lower())
            return session.scalars(stmt).first()

    def find_by_name(self, name: str) -> Optional[Event]:
        if not name or not name.strip():
            return None
        with self.database.session() as session:
            stmt = (
                select(Event)
                .where(Event.name.ilike(f"%{name.strip()}%"))
                .order_by(Event.created_at, Event.id)
            )
            return session.scalars(stmt).first()

    def find_by_whatsapp_number(self, number: str) -> Optional[Event]:
        if not number:
            return None
        with self.database.session() as session:
            stmt = (
                select(Event)
                .where(Event.whatsapp_number == number)
                .order_by(Event.created_at, Event.id)
            )
            return session.scalars(stmt).first()
