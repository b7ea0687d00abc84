"""Helpers for the WhatsApp (Twilio) webhook: message parsing and TwiML replies."""

import re
from typing import Optional
from xml.sax.saxutils import escape

from ..models.event import JOIN_CODE_PREFIX

JOIN_COMMAND_PATTERN = re.compile(r'^join\s+([\w-]+)$', re.IGNORECASE)
JOIN_CODE_MENTION_PATTERN = re.compile(r'\bjoin\s+([0-9a-f]{6})\b', re.IGNORECASE)
INTERESTED_PATTERN = re.compile(r'interested in the event:\s*([^.!?]+)', re.IGNORECASE)
ABOUT_PATTERN = re.compile(r'about\s+([^.!?]+)', re.IGNORECASE)

WELCOME_MESSAGE = "Welcome to the {name} event assistant! You can now ask me any questions about the event."
UNKNOWN_JOIN_CODE_MESSAGE = "I couldn't find an event with that code. Please check and try again."
UNKNOWN_EVENT_MESSAGE = (
    "Sorry, I couldn't find information about this event. "
    "Please make sure you're using the correct join code."
)
ERROR_MESSAGE = "Sorry, I encountered an error while processing your message. Please try again later."


def _join_code(code: str) -> str:
    return f"{JOIN_CODE_PREFIX}{code.lower()}"


def parse_join_command(body: str) -> Optional[str]:
    """Return the join code if the whole message is a `join <code>` command."""
    match = JOIN_COMMAND_PATTERN.match(body.strip())
    return _join_code(match.group(1)) if match else None


def find_join_code(body: str) -> Optional[str]:
    """Return a join code mentioned anywhere in the message."""
    match = JOIN_CODE_MENTION_PATTERN.search(body)
    return _join_code(match.group(1)) if match else None


def extract_event_name(body: str) -> str:
    """
    Guess which event a free-form message refers to.

    Tries "interested in the event: <name>", then "about <name>", then the
    first five words. Returns an empty string when nothing usable is found.
    """
    for pattern in (INTERESTED_PATTERN, ABOUT_PATTERN):
        match = pattern.search(body)
        if match and match.group(1).strip():
            return match.group(1).strip()

    words = ' '.join(body.split()[:5])
    return words if len(words) > 3 else ''


def normalize_sender(sender: str) -> str:
    """Strip the `whatsapp:` prefix and keep digits only."""
    number = sender.replace('whatsapp:', '', 1)
    return re.sub(r'\D', '', number)


def render_twiml(message: str) -> str:
    """Wrap a reply in a TwiML messaging response."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<Response><Message>{escape(message)}</Message></Response>'
    )
