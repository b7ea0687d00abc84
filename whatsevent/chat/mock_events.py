"""Demo event served for ids starting with `mock-`.

Mock events never touch the database. They let the chat UI and the
assistant be tried out before any real event is published.
"""

import logging

from ..models.event import Event
from ..utils.timezone import now_utc
from .context_builder import build_event_context

logger = logging.getLogger(__name__)

MOCK_EVENT_PREFIX = 'mock-'

MOCK_DETAILS = """Hack4Bengal is a 36-hour hackathon where developers, designers, and innovators come together to build amazing projects. Teams of 2-4 members can participate. There will be prizes worth ₹50,000 for the winners.

Venue Address:
TechHub Building, 123 Innovation Street, Kolkata, West Bengal 700001

Parking Information:
Free parking is available at the venue's north lot. Additional paid parking is available at the nearby City Center Mall for ₹50 per hour.

Accommodation Information:
Accommodation will be provided for all participants at the venue itself. Participants should bring their own toiletries. There are also several hotels within walking distance for those who prefer private accommodation.

Food & Refreshments:
Meals will be provided throughout the event including breakfast, lunch, and dinner. Snacks and beverages will be available 24/7. Vegetarian and non-vegetarian options will be available. Please inform us about any dietary restrictions during registration.

Certificates & Rewards:
All participants who complete the hackathon will receive certificates. The winning teams will receive prizes worth ₹50,000. There will also be special category prizes for innovation, design, and technical implementation.

Registration Information:
Registration is free but mandatory. Teams of 2-4 members can participate. The registration deadline is June 10, 2023. Each team should have at least one member with coding experience."""

MOCK_FAQS = [
    {
        'question': 'Can I participate alone?',
        'answer': 'No, you need to form a team of 2-4 members.'
    },
    {
        'question': 'Do I need to bring my own laptop?',
        'answer': 'Yes, all participants must bring their own laptops and chargers.'
    },
    {
        'question': 'Will there be internet connectivity?',
        'answer': 'Yes, high-speed Wi-Fi will be provided to all participants.'
    },
]


def is_mock_event_id(event_id: str) -> bool:
    """Check if an event ID refers to the demo event."""
    return bool(event_id) and event_id.startswith(MOCK_EVENT_PREFIX)


def create_mock_event(event_id: str) -> Event:
    """Build the demo event under the given id. The result is never persisted."""
    logger.info(f"Serving mock event {event_id}")
    created = now_utc()
    event = Event(
        id=event_id,
        name='Hack4Bengal 2023',
        organizer='Bengal Developer Community',
        details=MOCK_DETAILS,
        start_time='10:00 AM',
        end_time='10:00 PM',
        date='June 15, 2023',
        time='June 15, 2023 at 10:00',
        contact_number='1234567890',
        whatsapp_number='1234567890',
        faqs=[dict(faq) for faq in MOCK_FAQS],
        chat_link=f"/event/{event_id}",
        created_at=created,
        updated_at=created,
    )
    event.context = build_event_context(event)
    return event
