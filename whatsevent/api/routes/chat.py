"""Web chat router: answers attendee questions about an event."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from ...chat.answerers import Answerer
from ...chat.context_builder import resolve_event_context
from ...chat.mock_events import create_mock_event, is_mock_event_id
from ...db import EventRepository
from ..dependencies import get_answerer, get_repository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ''


@router.post("")
async def chat(
    data: Dict[str, Any] = Body(...),
    repository: EventRepository = Depends(get_repository),
    answerer: Answerer = Depends(get_answerer)
):
    """Answer a question about an event.

    Request body: {"eventId": str, "message": str}
    Response: {"response": str}
    """
    event_id = _text(data.get("eventId"))
    message = _text(data.get("message"))
    if not event_id or not message:
        raise HTTPException(status_code=400, detail="Missing required parameters")

    try:
        if is_mock_event_id(event_id):
            event = create_mock_event(event_id)
        else:
            event = repository.get(event_id)

        if not event:
            logger.info(f"Chat for unknown event {event_id}")
            raise HTTPException(status_code=404, detail="Event not found")

        context = resolve_event_context(event)
        response = await run_in_threadpool(answerer.answer, context, message)
        logger.info(f"Answered question for event {event_id} with {answerer.name}")
        return {"response": response}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error handling chat message for event {event_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to process message")
