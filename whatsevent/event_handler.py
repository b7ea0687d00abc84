"""Handler for creating and updating events from organizer submissions.

Validation returns result values instead of raising: the routes turn an
error message into a 400 response. Persistence goes through an
`EventRepository`, which regenerates the event context on every write.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .chat.context_builder import normalize_faqs
from .config.application import AppConfig
from .db.repository import EventRepository
from .models.event import Event, generate_event_id, generate_join_code

logger = logging.getLogger(__name__)

DEFAULT_TIME = "Date to be announced"
REQUIRED_FIELDS = ('name', 'organizer', 'details')

# Public (camelCase) keys accepted on create/update, mapped to model fields
FIELD_MAP = {
    'name': 'name',
    'organizer': 'organizer',
    'details': 'details',
    'time': 'time',
    'startTime': 'start_time',
    'endTime': 'end_time',
    'date': 'date',
    'contactNumber': 'contact_number',
    'whatsappNumber': 'whatsapp_number',
    'faqs': 'faqs',
}

SCHEDULE_FIELDS = ('start_time', 'end_time', 'date')
MAX_JOIN_CODE_ATTEMPTS = 5


@dataclass
class EventPayload:
    """A validated event submission."""
    name: str
    organizer: str
    details: str
    time: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    date: Optional[str] = None
    contact_number: Optional[str] = None
    whatsapp_number: Optional[str] = None
    faqs: List[Dict[str, str]] = field(default_factory=list)


def _clean(value: Any) -> Optional[str]:
    """Strip strings; anything blank or non-string becomes None."""
    if value is None:
        return None
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def digits_only(number: Optional[str]) -> Optional[str]:
    """Keep only the digits of a phone number."""
    if not number:
        return None
    digits = re.sub(r'\D', '', number)
    return digits or None


def compose_time(
    time: Optional[str] = None,
    date: Optional[str] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None
) -> str:
    """
    Build the display time for an event.

    An explicit time string wins. Otherwise it is composed from the date and
    start/end times, e.g. "June 15, 2023 at 10:00 AM - 10:00 PM".
    """
    if time:
        return time

    hours = start_time or ''
    if start_time and end_time:
        hours = f"{start_time} - {end_time}"

    if date and hours:
        return f"{date} at {hours}"
    if date or hours:
        return date or hours
    return DEFAULT_TIME


def _parse_faqs(raw: Any) -> Tuple[Optional[List[Dict[str, str]]], Optional[str]]:
    """FAQs as a list of dicts, accepting a list or a JSON string of one."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return [], None
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            return None, "Invalid FAQs format"
    else:
        decoded = raw
    if not isinstance(decoded, list):
        return None, "Invalid FAQs format"
    return [{'question': q, 'answer': a} for q, a in normalize_faqs(decoded)], None


def _resolve_contacts(contact: Optional[str], whatsapp: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Each contact field falls back to the other; WhatsApp numbers are stored as digits."""
    return contact or whatsapp, digits_only(whatsapp or contact)


def parse_event_payload(
    data: Any,
    max_details_length: int = 20000
) -> Tuple[Optional[EventPayload], Optional[str]]:
    """
    Validate a create-event submission.

    Args:
        data: Submitted fields, keyed by the public camelCase names
        max_details_length: Upper bound on the details text

    Returns:
        Tuple of (payload, None) on success or (None, error message)
    """
    if not isinstance(data, Mapping):
        return None, "Invalid request format"

    values = {key: _clean(data.get(key)) for key in FIELD_MAP if key != 'faqs'}

    missing = [key for key in REQUIRED_FIELDS if not values[key]]
    if missing:
        return None, f"Missing required fields: {', '.join(missing)}"

    if len(values['details']) > max_details_length:
        return None, f"Event details must be at most {max_details_length} characters"

    faqs, error = _parse_faqs(data.get('faqs'))
    if error:
        return None, error

    contact, whatsapp = _resolve_contacts(values['contactNumber'], values['whatsappNumber'])

    payload = EventPayload(
        name=values['name'],
        organizer=values['organizer'],
        details=values['details'],
        time=compose_time(values['time'], values['date'], values['startTime'], values['endTime']),
        start_time=values['startTime'],
        end_time=values['endTime'],
        date=values['date'],
        contact_number=contact,
        whatsapp_number=whatsapp,
        faqs=faqs,
    )
    return payload, None


def parse_event_changes(
    data: Any,
    max_details_length: int = 20000
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Validate a partial update.

    Only keys present in the submission are changed. Required fields may be
    changed but not blanked.

    Returns:
        Tuple of ({model field: value}, None) on success or (None, error message)
    """
    if not isinstance(data, Mapping):
        return None, "Invalid request format"

    unknown = [key for key in data if key not in FIELD_MAP]
    if unknown:
        return None, f"Unknown fields: {', '.join(sorted(unknown))}"

    changes: Dict[str, Any] = {}
    for key, attr in FIELD_MAP.items():
        if key not in data:
            continue
        if key == 'faqs':
            faqs, error = _parse_faqs(data[key])
            if error:
                return None, error
            changes[attr] = faqs
            continue

        value = _clean(data[key])
        if key in REQUIRED_FIELDS and not value:
            return None, f"Field cannot be empty: {key}"
        changes[attr] = value

    details = changes.get('details')
    if details and len(details) > max_details_length:
        return None, f"Event details must be at most {max_details_length} characters"

    if 'whatsapp_number' in changes:
        changes['whatsapp_number'] = digits_only(changes['whatsapp_number'])

    return changes, None


def _unused_join_code(repository: EventRepository) -> str:
    for _ in range(MAX_JOIN_CODE_ATTEMPTS):
        code = generate_join_code()
        if repository.find_by_join_code(code) is None:
            return code
    raise RuntimeError("Could not allocate a unique join code")


def create_event(
    repository: EventRepository,
    payload: EventPayload,
    app_config: AppConfig,
    pdf_path: Optional[str] = None,
    document_text: Optional[str] = None
) -> Event:
    """
    Create and store an event.

    The id is generated up front so the chat link can be stored in the same
    write. The repository derives the context.

    Raises:
        DatabaseError: If the event cannot be stored
    """
    event_id = generate_event_id()
    event = Event(
        id=event_id,
        name=payload.name,
        organizer=payload.organizer,
        details=payload.details,
        time=payload.time,
        start_time=payload.start_time,
        end_time=payload.end_time,
        date=payload.date,
        contact_number=payload.contact_number,
        whatsapp_number=payload.whatsapp_number,
        faqs=payload.faqs,
        chat_link=app_config.chat_link(event_id),
        join_code=_unused_join_code(repository),
        pdf_path=pdf_path,
        document_text=document_text or None,
    )
    created = repository.create(event)
    logger.info(f"Created event {created.id} ({created.name}) with join code '{created.join_code}'")
    return created


def update_event(
    repository: EventRepository,
    event_id: str,
    changes: Dict[str, Any]
) -> Optional[Event]:
    """
    Apply validated changes to an event.

    When schedule fields change without an explicit time, or the time is
    cleared, the display time is recomposed from the merged schedule fields.
    A contact number with no WhatsApp number on record also fills the
    WhatsApp number.

    Returns:
        The updated event, or None if it does not exist
    """
    existing = repository.get(event_id)
    if existing is None:
        return None

    changes = dict(changes)
    if any(attr in changes for attr in SCHEDULE_FIELDS) and not changes.get('time'):
        merged = {attr: changes.get(attr, getattr(existing, attr)) for attr in SCHEDULE_FIELDS}
        changes['time'] = compose_time(None, merged['date'], merged['start_time'], merged['end_time'])
    elif 'time' in changes and not changes['time']:
        changes['time'] = compose_time(None, existing.date, existing.start_time, existing.end_time)

    if changes.get('contact_number') and not (changes.get('whatsapp_number') or existing.whatsapp_number):
        changes['whatsapp_number'] = digits_only(changes['contact_number'])

    return repository.update(event_id, changes)
