"""
Test suite for creating events from PDF uploads.
"""

import asyncio
import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfWriter

from whatsevent.config.application import AppConfig
from whatsevent.db import DatabaseError, EventRepository
from whatsevent.utils.pdf_extractor import PDFExtractionError, extract_pdf_text, is_pdf_upload, store_pdf

ENDPOINT = "/api/event/create-with-pdf"


@pytest.fixture
def pdf_bytes():
    """A one-page PDF without text."""
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def form():
    return {
        "name": "Hack Day",
        "organizer": "Dev Club",
        "details": "A day of building things together.",
        "date": "June 15, 2023",
        "startTime": "10:00",
        "faqs": '[{"question": "Can I participate alone?", "answer": "No, you need a team."}]',
    }


class TestPdfHelpers:
    """Test PDF detection and extraction."""

    def test_is_pdf_upload(self, pdf_bytes):
        assert is_pdf_upload("event.pdf", "application/pdf", pdf_bytes)
        assert is_pdf_upload("event.bin", "application/pdf", pdf_bytes)
        assert not is_pdf_upload("event.pdf", "application/pdf", b"plain text")
        assert not is_pdf_upload("event.txt", "text/plain", pdf_bytes)

    def test_blank_pdf_has_no_text(self, pdf_bytes):
        assert extract_pdf_text(pdf_bytes) == ""


class TestCreateWithPdf:
    """Test POST /api/event/create-with-pdf."""

    def test_create_event(self, client, form, pdf_bytes, app_config):
        response = client.post(ENDPOINT, data=form, files={"pdf": ("flyer.pdf", pdf_bytes, "application/pdf")})

        assert response.status_code == 201
        event = response.json()["event"]
        assert event["time"] == "June 15, 2023 at 10:00"
        assert event["faqs"] == [{"question": "Can I participate alone?", "answer": "No, you need a team."}]
        assert Path(event["pdfPath"]).parent == app_config.upload_dir
        assert Path(event["pdfPath"]).read_bytes() == pdf_bytes

    def test_document_text_reaches_context(self, client, form, pdf_bytes):
        extracted = "Parking Information:\nParking is in lot P behind the main hall"

        with patch("whatsevent.api.routes.events.extract_pdf_text", return_value=extracted):
            response = client.post(ENDPOINT, data=form, files={"pdf": ("flyer.pdf", pdf_bytes, "application/pdf")})

        event = response.json()["event"]
        assert "Parking Information:\nParking is in lot P behind the main hall" in event["context"]

        chat = client.post("/api/chat", json={"eventId": event["id"], "message": "Is there parking?"})
        assert "lot P behind the main hall" in chat.json()["response"]

    def test_rejects_non_pdf(self, client, form):
        response = client.post(ENDPOINT, data=form, files={"pdf": ("notes.txt", b"hello", "text/plain")})

        assert response.status_code == 400
        assert response.json() == {"error": "Only PDF files are allowed"}

    def test_requires_file(self, client, form):
        response = client.post(ENDPOINT, data=form)

        assert response.status_code == 400
        assert response.json() == {"error": "A PDF file is required"}

    def test_missing_fields(self, client, form, pdf_bytes):
        del form["organizer"]

        response = client.post(ENDPOINT, data=form, files={"pdf": ("flyer.pdf", pdf_bytes, "application/pdf")})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: organizer"}

    def test_unreadable_pdf(self, client, form, pdf_bytes):
        with patch("whatsevent.api.routes.events.extract_pdf_text", side_effect=PDFExtractionError("bad xref")):
            response = client.post(ENDPOINT, data=form, files={"pdf": ("flyer.pdf", pdf_bytes, "application/pdf")})

        assert response.status_code == 400
        assert response.json() == {"error": "Could not read the PDF file"}

    def test_too_large(self, make_app, form, pdf_bytes, tmp_path):
        app = make_app(app_config=AppConfig(upload_dir=tmp_path, max_pdf_bytes=10))

        with TestClient(app) as client:
            response = client.post(ENDPOINT, data=form, files={"pdf": ("flyer.pdf", pdf_bytes, "application/pdf")})

        assert response.status_code == 400
        assert response.json() == {"error": "PDF file is too large"}


def _loop_state():
    """'loop' when called on the event loop thread, 'worker' otherwise."""
    try:
        asyncio.get_running_loop()
        return "loop"
    except RuntimeError:
        return "worker"


class TestUploadConcurrency:
    """Test that slow PDF work stays off the event loop."""

    def test_parse_and_store_run_in_threadpool(self, client, form, pdf_bytes):
        calls = []

        def fake_extract(data):
            calls.append(("extract", _loop_state()))
            return ""

        def recording_store(*args, **kwargs):
            calls.append(("store", _loop_state()))
            return store_pdf(*args, **kwargs)

        with patch("whatsevent.api.routes.events.extract_pdf_text", side_effect=fake_extract), \
                patch("whatsevent.api.routes.events.store_pdf", side_effect=recording_store):
            response = client.post(ENDPOINT, data=form, files={"pdf": ("flyer.pdf", pdf_bytes, "application/pdf")})

        assert response.status_code == 201
        assert calls == [("extract", "worker"), ("store", "worker")]


class TestUploadCleanup:
    """Test that failed creations leave no files behind."""

    def test_storage_failure_removes_pdf(self, make_app, app_config, form, pdf_bytes):
        repository = MagicMock(spec=EventRepository)
        repository.find_by_join_code.return_value = None
        repository.create.side_effect = DatabaseError("disk full")

        with TestClient(make_app(repository=repository)) as client:
            response = client.post(ENDPOINT, data=form, files={"pdf": ("flyer.pdf", pdf_bytes, "application/pdf")})

        assert response.status_code == 500
        assert response.json() == {"error": "Event creation failed"}
        assert list(app_config.upload_dir.iterdir()) == []
