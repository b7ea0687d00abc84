"""Events router module: publishing, lookup, update and removal of events."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool

from ...chat.mock_events import create_mock_event, is_mock_event_id
from ...config.application import AppConfig
from ...db import DatabaseError, EventRepository
from ...event_handler import create_event, parse_event_changes, parse_event_payload, update_event
from ...utils.pdf_extractor import PDFExtractionError, extract_pdf_text, is_pdf_upload, store_pdf
from ..dependencies import get_app_config, get_repository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


def _created_response(event) -> Dict[str, Any]:
    return {
        "success": True,
        "link": event.chat_link,
        "event": event.to_dict()
    }


@router.post("/create", status_code=201)
async def create_event_endpoint(
    data: Dict[str, Any] = Body(...),
    repository: EventRepository = Depends(get_repository),
    app_config: AppConfig = Depends(get_app_config)
):
    """Publish an event from a JSON submission."""
    payload, error = parse_event_payload(data, app_config.max_details_length)
    if error:
        raise HTTPException(status_code=400, detail=error)

    try:
        event = create_event(repository, payload, app_config)
        return _created_response(event)
    except Exception as e:
        logger.error(f"Event creation failed: {e}")
        raise HTTPException(status_code=500, detail="Event creation failed")


@router.post("/create-with-pdf", status_code=201)
async def create_event_with_pdf(
    name: Optional[str] = Form(None),
    organizer: Optional[str] = Form(None),
    details: Optional[str] = Form(None),
    time: Optional[str] = Form(None),
    startTime: Optional[str] = Form(None),
    endTime: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    contactNumber: Optional[str] = Form(None),
    whatsappNumber: Optional[str] = Form(None),
    faqs: Optional[str] = Form(None),
    pdf: Optional[UploadFile] = File(None),
    repository: EventRepository = Depends(get_repository),
    app_config: AppConfig = Depends(get_app_config)
):
    """Publish an event from a multipart form with an attached PDF.

    The PDF text is stored with the event and added to its chat context.
    """
    if pdf is None:
        raise HTTPException(status_code=400, detail="A PDF file is required")

    data = await pdf.read(app_config.max_pdf_bytes + 1)
    if len(data) > app_config.max_pdf_bytes:
        raise HTTPException(status_code=400, detail="PDF file is too large")
    if not is_pdf_upload(pdf.filename, pdf.content_type, data):
        raise HTTPException(status_code=400, detail="Only PDF files are allowed")

    form = {
        "name": name,
        "organizer": organizer,
        "details": details,
        "time": time,
        "startTime": startTime,
        "endTime": endTime,
        "date": date,
        "contactNumber": contactNumber,
        "whatsappNumber": whatsappNumber,
        "faqs": faqs,
    }
    payload, error = parse_event_payload(form, app_config.max_details_length)
    if error:
        raise HTTPException(status_code=400, detail=error)

    # Parsing and disk writes run in the threadpool to keep the event loop free
    try:
        document_text = await run_in_threadpool(extract_pdf_text, data)
    except PDFExtractionError as e:
        logger.warning(f"Rejected unreadable PDF '{pdf.filename}': {e}")
        raise HTTPException(status_code=400, detail="Could not read the PDF file")

    pdf_path = None
    try:
        pdf_path = await run_in_threadpool(store_pdf, data, app_config.upload_dir, pdf.filename)
        event = await run_in_threadpool(
            create_event,
            repository,
            payload,
            app_config,
            pdf_path=str(pdf_path),
            document_text=document_text
        )
        return _created_response(event)
    except Exception as e:
        logger.error(f"Event creation with PDF failed: {e}")
        if pdf_path is not None:
            pdf_path.unlink(missing_ok=True)
        raise HTTPException(status_code=500, detail="Event creation failed")


@router.get("", response_model=List[Dict])
async def list_events(repository: EventRepository = Depends(get_repository)):
    """Get all events."""
    try:
        return [event.to_dict() for event in repository.list_all()]
    except DatabaseError as e:
        logger.error(f"Error fetching events: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch events")


@router.get("/{event_id}", response_model=Dict)
async def get_event(event_id: str, repository: EventRepository = Depends(get_repository)):
    """Get a single event by ID."""
    if is_mock_event_id(event_id):
        return create_mock_event(event_id).to_dict()

    try:
        event = repository.get(event_id)
    except DatabaseError as e:
        logger.error(f"Error fetching event {event_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch event")

    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event.to_dict()


@router.put("/{event_id}")
async def update_event_endpoint(
    event_id: str,
    data: Dict[str, Any] = Body(...),
    repository: EventRepository = Depends(get_repository),
    app_config: AppConfig = Depends(get_app_config)
):
    """Update some fields of an event. The chat context is rebuilt."""
    changes, error = parse_event_changes(data, app_config.max_details_length)
    if error:
        raise HTTPException(status_code=400, detail=error)

    try:
        event = update_event(repository, event_id, changes)
    except DatabaseError as e:
        logger.error(f"Error updating event {event_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update event")

    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return {"success": True, "event": event.to_dict()}


@router.delete("/{event_id}")
async def delete_event(event_id: str, repository: EventRepository = Depends(get_repository)):
    """Delete an event."""
    try:
        deleted = repository.delete(event_id)
    except DatabaseError as e:
        logger.error(f"Error deleting event {event_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete event")

    if not deleted:
        raise HTTPException(status_code=404, detail="Event not found")
    return {"success": True}
