"""Event chat: context building and answer strategies."""

from .context_builder import (
    SECTION_HEADERS,
    build_context,
    build_event_context,
    normalize_faqs,
    resolve_event_context,
)
from .heuristics import heuristic_answer, generic_apology
from .answerers import Answerer, HeuristicAnswerer, RemoteAnswerer, create_answerer
from .mock_events import MOCK_EVENT_PREFIX, create_mock_event, is_mock_event_id

__all__ = [
    'SECTION_HEADERS',
    'build_context',
    'build_event_context',
    'normalize_faqs',
    'resolve_event_context',
    'heuristic_answer',
    'generic_apology',
    'Answerer',
    'HeuristicAnswerer',
    'RemoteAnswerer',
    'create_answerer',
    'MOCK_EVENT_PREFIX',
    'create_mock_event',
    'is_mock_event_id',
]
