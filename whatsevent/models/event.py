"""Event model definition."""

import secrets
import uuid
from typing import Dict, Any
from sqlalchemy import Column, String, Text, DateTime, JSON

from .base import Base
from ..utils.timezone import ensure_utc, now_utc

EVENT_ID_PREFIX = 'event-'
JOIN_CODE_PREFIX = 'join '


def generate_event_id() -> str:
    """Generate a new unique event identifier."""
    return f"{EVENT_ID_PREFIX}{uuid.uuid4().hex[:12]}"


def generate_join_code() -> str:
    """Generate the WhatsApp join code attendees send to reach an event."""
    return f"{JOIN_CODE_PREFIX}{secrets.token_hex(3)}"


class Event(Base):
    """
    Event published by an organizer.

    Fields:
        id: Unique identifier, generated at creation and never changed
        name: Event name
        organizer: Name of the organizing person or group
        details: Raw organizer-submitted details, may contain section headers
        time: Human-readable schedule string
        start_time: Start time as submitted (optional)
        end_time: End time as submitted (optional)
        date: Date as submitted (optional)
        contact_number: Organizer contact number (optional)
        whatsapp_number: Organizer WhatsApp number, digits only (optional)
        faqs: List of {'question', 'answer'} pairs (optional)
        context: Prompt-ready text derived from the fields above
        chat_link: Link to the event's web chat
        join_code: Code attendees send to the WhatsApp bot
        pdf_path: Path of the uploaded source PDF (optional)
        document_text: Text extracted from the uploaded PDF (optional)
        created_at: When the event was created
        updated_at: When the event was last changed
    """
    __tablename__ = 'events'

    # Required fields
    id = Column(String(64), primary_key=True, default=generate_event_id)
    name = Column(String, nullable=False)
    organizer = Column(String, nullable=False)
    details = Column(Text, nullable=False)
    time = Column(String, nullable=False)

    # Optional schedule and contact fields
    start_time = Column(String)
    end_time = Column(String)
    date = Column(String)
    contact_number = Column(String)
    whatsapp_number = Column(String, index=True)
    faqs = Column(JSON)

    # Derived and linking fields
    context = Column(Text)
    chat_link = Column(String)
    join_code = Column(String(32), unique=True, default=generate_join_code)

    # Uploaded source document
    pdf_path = Column(String)
    document_text = Column(Text)

    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the public JSON representation."""
        created_at = ensure_utc(self.created_at)
        updated_at = ensure_utc(self.updated_at)
        return {
            'id': self.id,
            'name': self.name,
            'organizer': self.organizer,
            'details': self.details,
            'time': self.time,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'date': self.date,
            'contactNumber': self.contact_number,
            'whatsappNumber': self.whatsapp_number,
            'faqs': self.faqs or [],
            'context': self.context,
            'chatLink': self.chat_link,
            'joinCode': self.join_code,
            'pdfPath': self.pdf_path,
            'createdAt': created_at.isoformat() if created_at else None,
            'updatedAt': updated_at.isoformat() if updated_at else None,
        }

    def __str__(self) -> str:
        """String representation."""
        return f"Event(id={self.id}, name={self.name}, organizer={self.organizer})"
