"""Turns stored event fields into the text block the answerers work from.

Organizers write free-form details that may contain a fixed set of section
headers ("Venue Address:", "Parking Information:", ...). The builder sorts
those lines into sections and renders them in a fixed order, followed by the
structured FAQ list, so the same event always produces the same context.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

SECTION_HEADERS: Tuple[str, ...] = (
    'Venue Address',
    'Parking Information',
    'Accommodation Information',
    'Food & Refreshments',
    'Certificates & Rewards',
    'Registration Information',
    'FAQs',
)

FAQ_BLOCK_TITLE = 'Frequently Asked Questions:'


def _match_header(line: str) -> Optional[str]:
    """Return the section header a line opens, if any."""
    stripped = line.lstrip()
    for header in SECTION_HEADERS:
        if stripped.startswith(f"{header}:"):
            return header
    return None


def split_sections(details: Optional[str]) -> Tuple[str, Dict[str, str]]:
    """
    Split raw details into the main text and the known sections.

    Args:
        details: Organizer-submitted text, possibly containing section headers

    Returns:
        Tuple of (main details, {header: section text}). Both are trimmed and
        sections with no content are left out.
    """
    main_lines: List[str] = []
    buffers: Dict[str, List[str]] = {header: [] for header in SECTION_HEADERS}
    current: Optional[str] = None

    for line in (details or '').splitlines():
        header = _match_header(line)
        if header:
            current = header
            continue
        if current is None:
            main_lines.append(line)
        else:
            buffers[current].append(line)

    sections = {}
    for header in SECTION_HEADERS:
        text = '\n'.join(buffers[header]).strip()
        if text:
            sections[header] = text

    return '\n'.join(main_lines).strip(), sections


def normalize_faqs(raw: Any) -> List[Tuple[str, str]]:
    """
    Normalize FAQs into (question, answer) pairs.

    Accepts a list of {'question', 'answer'} mappings or a JSON string holding
    one. Entries where either side is missing or blank are dropped, and any
    malformed input yields an empty list.
    """
    if raw is None:
        return []

    if isinstance(raw, str):
        if not raw.strip():
            return []
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring FAQs that are not valid JSON")
            return []

    if not isinstance(raw, list):
        return []

    pairs = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        question = item.get('question')
        answer = item.get('answer')
        if isinstance(question, str) and isinstance(answer, str) and question.strip() and answer.strip():
            pairs.append((question.strip(), answer.strip()))
    return pairs


def build_context(
    name: Optional[str],
    organizer: Optional[str],
    time: Optional[str],
    contact: Optional[str],
    details: Optional[str],
    faqs: Any = None
) -> str:
    """
    Build the prompt-ready context for an event.

    Blocks are separated by one blank line and always appear in this order:
    event information, event details, each known section in header order,
    then the frequently asked questions. Empty blocks are omitted.
    """
    info_lines = ['Event Information:']
    for label, value in (('Name', name), ('Organizer', organizer), ('Time', time), ('Contact', contact)):
        if value and str(value).strip():
            info_lines.append(f"{label}: {str(value).strip()}")
    blocks = ['\n'.join(info_lines)]

    main, sections = split_sections(details)
    if main:
        blocks.append(f"Event Details:\n{main}")

    for header in SECTION_HEADERS:
        if header in sections:
            blocks.append(f"{header}:\n{sections[header]}")

    pairs = normalize_faqs(faqs)
    if pairs:
        entries = '\n\n'.join(f"Q: {question}\nA: {answer}" for question, answer in pairs)
        blocks.append(f"{FAQ_BLOCK_TITLE}\n{entries}")

    return '\n\n'.join(blocks)


def build_event_context(event) -> str:
    """Build the context for a stored event, including any extracted PDF text."""
    details = event.details or ''
    if event.document_text and event.document_text.strip():
        details = f"{details}\n\n{event.document_text.strip()}" if details else event.document_text.strip()

    return build_context(
        name=event.name,
        organizer=event.organizer,
        time=event.time,
        contact=event.contact_number or event.whatsapp_number,
        details=details,
        faqs=event.faqs,
    )


def resolve_event_context(event) -> str:
    """Stored context when present, otherwise derived from the event fields."""
    if event.context and event.context.strip():
        return event.context
    return build_event_context(event)
