"""WhatsApp webhook router.

Twilio posts each incoming WhatsApp message as a form. The reply is returned
synchronously as TwiML. Conversations are stateless: every message is
matched to an event on its own.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from starlette.concurrency import run_in_threadpool

from ...chat.answerers import Answerer
from ...chat.context_builder import resolve_event_context
from ...config.application import AppConfig
from ...config.external_services.twilio import TwilioConfig, verify_twilio_signature
from ...db import EventRepository
from ...models.event import Event
from ...utils.whatsapp import (
    ERROR_MESSAGE,
    UNKNOWN_EVENT_MESSAGE,
    UNKNOWN_JOIN_CODE_MESSAGE,
    WELCOME_MESSAGE,
    extract_event_name,
    find_join_code,
    normalize_sender,
    parse_join_command,
    render_twiml,
)
from ..dependencies import get_answerer, get_app_config, get_repository, get_twilio_config

logger = logging.getLogger(__name__)

router = APIRouter(tags=["whatsapp"])


def _signed_url(request: Request, app_config: AppConfig) -> str:
    """The URL Twilio signed. Behind a proxy this is the public URL."""
    if not app_config.public_base_url:
        return str(request.url)
    query = f"?{request.url.query}" if request.url.query else ""
    return f"{app_config.public_base_url}{request.url.path}{query}"


def find_event_for_message(repository: EventRepository, body: str, sender: str) -> Optional[Event]:
    """
    Match a free-form message to an event.

    Tries a join code mentioned in the message, then an event name extracted
    from it, then the sender's number against the events' WhatsApp numbers.
    """
    join_code = find_join_code(body)
    if join_code:
        event = repository.find_by_join_code(join_code)
        if event:
            return event

    event_name = extract_event_name(body)
    if event_name:
        event = repository.find_by_name(event_name)
        if event:
            return event

    number = normalize_sender(sender)
    return repository.find_by_whatsapp_number(number) if number else None


def reply_to_message(repository: EventRepository, answerer: Answerer, sender: str, body: str) -> str:
    """Build the reply text for one incoming message."""
    join_code = parse_join_command(body)
    if join_code:
        event = repository.find_by_join_code(join_code)
        if event:
            logger.info(f"{sender} joined event {event.id}")
            return WELCOME_MESSAGE.format(name=event.name)
        return UNKNOWN_JOIN_CODE_MESSAGE

    event = find_event_for_message(repository, body, sender)
    if not event:
        return UNKNOWN_EVENT_MESSAGE

    return answerer.answer(resolve_event_context(event), body)


@router.post("/webhook")
async def whatsapp_webhook(
    request: Request,
    repository: EventRepository = Depends(get_repository),
    answerer: Answerer = Depends(get_answerer),
    app_config: AppConfig = Depends(get_app_config),
    twilio_config: TwilioConfig = Depends(get_twilio_config)
):
    """Handle an incoming WhatsApp message from Twilio."""
    form = await request.form()
    params = {key: str(value) for key, value in form.items()}

    sender = params.get("From", "").strip()
    body = params.get("Body", "").strip()
    if not sender or not body:
        raise HTTPException(status_code=400, detail="Missing required parameters")

    signature = request.headers.get("X-Twilio-Signature", "")
    if not verify_twilio_signature(twilio_config, signature, _signed_url(request, app_config), params):
        logger.warning(f"Rejected WhatsApp webhook with invalid signature from {sender}")
        raise HTTPException(status_code=403, detail="Invalid signature")

    try:
        reply = await run_in_threadpool(reply_to_message, repository, answerer, sender, body)
    except Exception as e:
        logger.error(f"Error handling WhatsApp message from {sender}: {e}")
        reply = ERROR_MESSAGE

    return Response(content=render_twiml(reply), media_type="text/xml")
