"""Keyword-based answering used when no language model is configured.

`heuristic_answer` is a pure function: the same (context, question) pair
always yields the same answer, and no exception escapes it. Every caller
that needs an offline answer goes through it.
"""

import logging
import re
from typing import Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

MONTHS = (
    'January', 'February', 'March', 'April', 'May', 'June', 'July',
    'August', 'September', 'October', 'November', 'December',
)

# Clock times with valid hours and minutes; the dotted form needs AM/PM so
# dates like 15.06.2023 and amounts like 50.00 are not read as times
TIME_PATTERN = re.compile(
    r'(?<![\d.:])(?:[01]?\d|2[0-3])'
    r'(?::[0-5]\d(?![\d:])(?:\s*[AaPp][Mm]\b)?|\.[0-5]\d\s*[AaPp][Mm]\b)'
)
DATE_PATTERN = re.compile(r'\b(?:' + '|'.join(MONTHS) + r')\s+\d{1,2}(?:,\s*\d{4})?\b')
SCHEDULE_LINE_PATTERN = re.compile(r'\b(?:date|time|when)\b', re.IGNORECASE)
LOCATION_PATTERN = re.compile(r'\b(?:at|in)\s+([^.,\n]+)')
ORGANIZED_BY_PATTERN = re.compile(r'\borgani[sz]ed by\s+([^.,\n]+)', re.IGNORECASE)
FAQ_MARKERS = ('FAQs:', 'Frequently Asked Questions:')

DEFAULT_PREFIX = "Based on the event information, I found this relevant detail: "

STOPWORDS = frozenset({
    'about', 'after', 'also', 'anything', 'before', 'been', 'being', 'could',
    'does', 'doing', 'event', 'from', 'have', 'here', 'into', 'just', 'know',
    'like', 'more', 'much', 'need', 'please', 'should', 'some', 'tell', 'than',
    'that', 'their', 'them', 'then', 'there', 'these', 'they', 'this', 'those',
    'want', 'were', 'what', 'when', 'where', 'which', 'while', 'will', 'with',
    'would', 'your',
})

# (question keywords, context keywords, topic label)
TOPICS: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...], str], ...] = (
    (('travel', 'transport', 'transportation', 'how to get'),
     ('travel', 'transport', 'transportation', 'bus', 'metro', 'train', 'station', 'directions'),
     'travel and transport'),
    (('parking', 'park'),
     ('parking', 'park'),
     'parking'),
    (('accommodation', 'hotel', 'stay', 'hostel', 'lodging'),
     ('accommodation', 'hotel', 'stay', 'hostel', 'lodging'),
     'accommodation'),
    (('food', 'meal', 'lunch', 'dinner', 'breakfast', 'snack', 'refreshment', 'eat'),
     ('food', 'meal', 'lunch', 'dinner', 'breakfast', 'snack', 'refreshment'),
     'food and refreshments'),
    (('certificate',),
     ('certificate',),
     'certificates'),
    (('goodies', 'swag', 'gift', 'merchandise'),
     ('goodies', 'swag', 'gift', 'merchandise'),
     'goodies and swag'),
)


def generic_apology(question: Optional[str]) -> str:
    """Fallback answer that echoes the user's question."""
    return (
        f'I\'m sorry, I don\'t have details on this. You asked: "{question or ""}". '
        f'Please contact the event organizer for more information.'
    )


def _keyword_pattern(keywords: Iterable[str]) -> re.Pattern:
    """Whole-word match for any keyword, allowing a plural 's'."""
    alternatives = '|'.join(re.escape(keyword) for keyword in keywords)
    return re.compile(rf'\b(?:{alternatives})s?\b', re.IGNORECASE)


def _mentions(text: str, keywords: Iterable[str]) -> bool:
    return bool(_keyword_pattern(keywords).search(text))


def _is_header(line: str) -> bool:
    return line.strip().endswith(':')


def _content_lines(context: str) -> List[str]:
    """Non-empty, non-header lines of the context, trimmed."""
    return [line.strip() for line in context.splitlines() if line.strip() and not _is_header(line)]


def _first_line_mentioning(context: str, keywords: Iterable[str]) -> Optional[str]:
    pattern = _keyword_pattern(keywords)
    for line in _content_lines(context):
        if pattern.search(line):
            return line
    return None


def _labelled_value(context: str, labels: Sequence[str]) -> Optional[str]:
    """Value of the first 'Label: value' line for any of the labels."""
    for line in context.splitlines():
        stripped = line.strip()
        for label in labels:
            prefix = f"{label}:"
            if stripped.startswith(prefix) and stripped[len(prefix):].strip():
                return stripped[len(prefix):].strip()
    return None


def _section_first_line(context: str, header: str) -> Optional[str]:
    """First non-empty line following a section header."""
    lines = context.splitlines()
    for index, line in enumerate(lines):
        if line.strip() == f"{header}:":
            for following in lines[index + 1:]:
                if following.strip():
                    return None if _is_header(following) else following.strip()
            return None
    return None


def _words(text: str) -> List[str]:
    return re.findall(r"[a-z0-9']+", text.lower())


def _answer_schedule(context: str) -> str:
    time_match = TIME_PATTERN.search(context)
    date_match = DATE_PATTERN.search(context)
    tokens = [match.group(0) for match in (time_match, date_match) if match]

    schedule_line = None
    for line in _content_lines(context):
        if SCHEDULE_LINE_PATTERN.search(line):
            schedule_line = line
            break

    if schedule_line and tokens and all(token in schedule_line for token in tokens):
        return schedule_line
    if time_match and date_match:
        return f"The event starts at {time_match.group(0)} on {date_match.group(0)}."
    if time_match:
        return f"The event starts at {time_match.group(0)}."
    if date_match:
        return f"The event is scheduled for {date_match.group(0)}."
    if schedule_line:
        return schedule_line
    return "I don't have specific information about the event schedule in my records."


def _answer_location(context: str) -> str:
    venue = _section_first_line(context, 'Venue Address') or _labelled_value(context, ('Location', 'Venue'))
    if venue:
        return f"The event will be held at {venue}."

    # The schedule line reads "Time: <date> at <time>", which is not a place
    searchable = '\n'.join(line for line in context.splitlines() if not line.strip().startswith('Time:'))
    match = LOCATION_PATTERN.search(searchable)
    if match:
        return f"The event will be held at {match.group(1)}."
    return "I don't have specific information about the location in my records."


def _answer_organizer(context: str) -> str:
    organizer = _labelled_value(context, ('Organizer', 'Organiser'))
    if not organizer:
        match = ORGANIZED_BY_PATTERN.search(context)
        organizer = match.group(1).strip() if match else None
    if organizer:
        return f"This event is organized by {organizer}."
    return "I don't have specific information about the organizer in my records."


def _answer_cost(context: str) -> str:
    if 'free' in context.lower():
        return "Good news! This event is free to attend."
    line = _first_line_mentioning(context, ('cost', 'price', 'fee'))
    if line:
        return f"Here is what I found about the cost: {line}"
    return "I don't have specific information about the cost in my records. Please contact the organizer for details."


def _answer_topic(context: str, keywords: Sequence[str], label: str) -> str:
    if _mentions(context, keywords):
        line = _first_line_mentioning(context, keywords)
        if line:
            return f"Here is what I found about {label}: {line}"
    return f"I'm sorry, information about {label} is not provided for this event. Please contact the event organizer."


def parse_faq_pairs(context: str) -> List[Tuple[str, str]]:
    """Q:/A: pairs found after the first FAQ marker in the context."""
    positions = [context.find(marker) for marker in FAQ_MARKERS if marker in context]
    if not positions:
        return []

    pairs = []
    question = None
    for line in context[min(positions):].splitlines():
        stripped = line.strip()
        if stripped.startswith('Q:'):
            question = stripped[2:].strip()
        elif stripped.startswith('A:') and question:
            answer = stripped[2:].strip()
            if answer:
                pairs.append((question, answer))
            question = None
    return pairs


def _score_faq(question_words: List[str], faq_question: str) -> int:
    faq_words = [word for word in _words(faq_question) if len(word) > 1]
    return sum(
        1 for word in question_words
        if any(faq_word in word or word in faq_word for faq_word in faq_words)
    )


def _answer_from_faqs(context: str, question: str) -> Optional[str]:
    pairs = parse_faq_pairs(context)
    if not pairs:
        return None

    question_words = [word for word in _words(question) if len(word) > 1]
    best_answer, best_score = None, 0
    for faq_question, faq_answer in pairs:
        score = _score_faq(question_words, faq_question)
        if score > best_score:
            best_answer, best_score = faq_answer, score
    return best_answer if best_score >= 2 else None


def _answer_from_keywords(context: str, question: str) -> str:
    keywords = [word for word in _words(question) if len(word) > 3 and word not in STOPWORDS]
    lines = _content_lines(context)
    for keyword in keywords:
        for line in lines:
            if keyword in line.lower():
                return f"{DEFAULT_PREFIX}{line}"
    return generic_apology(question)


def _answer(context: str, question: str) -> str:
    lowered = question.lower()

    if _mentions(lowered, ('when', 'time', 'date')):
        return _answer_schedule(context)
    if _mentions(lowered, ('where', 'location', 'venue')):
        return _answer_location(context)
    if _mentions(lowered, ('organizer', 'organiser', 'who', 'host')):
        return _answer_organizer(context)
    if _mentions(lowered, ('cost', 'price', 'fee', 'free', 'ticket')):
        return _answer_cost(context)

    for question_keywords, context_keywords, label in TOPICS:
        if _mentions(lowered, question_keywords):
            return _answer_topic(context, context_keywords, label)

    faq_answer = _answer_from_faqs(context, question)
    if faq_answer:
        return faq_answer

    return _answer_from_keywords(context, question)


def heuristic_answer(context: Optional[str], question: Optional[str]) -> str:
    """
    Answer a question from the event context without a language model.

    The question is matched against an ordered list of topics (schedule,
    location, organizer, cost, travel, parking, accommodation, food,
    certificates, goodies); the first topic mentioned decides the answer.
    Otherwise a matching FAQ answer is returned, then the first context line
    containing a keyword from the question, then a generic apology.

    Args:
        context: Event context as produced by the context builder
        question: The attendee's question

    Returns:
        The answer text. Never raises.
    """
    if not question or not question.strip() or not context or not context.strip():
        return generic_apology(question)

    try:
        return _answer(context, question.strip())
    except Exception as e:
        logger.error(f"Heuristic answer failed: {e}")
        return generic_apology(question)
