"""Shared fixtures: an in-memory database and an app wired with the heuristic answerer."""

import os

# Must run before the application modules read the environment
os.environ['ENVIRONMENT'] = 'development'
for _name in ('OPENAI_API_KEY', 'TWILIO_AUTH_TOKEN', 'PUBLIC_BASE_URL', 'MAX_PDF_BYTES', 'MAX_DETAILS_LENGTH'):
    os.environ.pop(_name, None)

import pytest
from fastapi.testclient import TestClient

from whatsevent.api.app import create_application
from whatsevent.chat.answerers import HeuristicAnswerer
from whatsevent.config.application import AppConfig
from whatsevent.config.external_services.twilio import TwilioConfig
from whatsevent.db import Database, DatabaseConfig, SqlAlchemyEventRepository
from whatsevent.models.event import Event, generate_event_id, generate_join_code


@pytest.fixture
def database():
    """Fresh in-memory SQLite database."""
    db = Database(DatabaseConfig(url="sqlite://"))
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def repository(database):
    return SqlAlchemyEventRepository(database)


@pytest.fixture
def app_config(tmp_path):
    return AppConfig(public_base_url="http://testserver", upload_dir=tmp_path / "uploads")


@pytest.fixture
def make_app(repository, app_config):
    """Build an application; keyword arguments override the test defaults."""
    def _make_app(**overrides):
        options = {
            "repository": repository,
            "answerer": HeuristicAnswerer(),
            "app_config": app_config,
            "twilio_config": TwilioConfig(),
        }
        options.update(overrides)
        return create_application(**options)
    return _make_app


@pytest.fixture
def client(make_app):
    with TestClient(make_app()) as test_client:
        yield test_client


@pytest.fixture
def event_payload():
    """A valid create-event submission."""
    return {
        "name": "Hack Day",
        "organizer": "Dev Club",
        "details": "A day of building things together.\nVenue Address:\nMain Hall, 1 Campus Road",
        "time": "June 15, 2023 at 10:00",
        "contactNumber": "+1 555 000 1111",
        "faqs": [
            {"question": "Can I participate alone?", "answer": "No, you need a team."}
        ],
    }


@pytest.fixture
def stored_event(repository):
    """An event saved directly through the repository."""
    event = Event(
        id=generate_event_id(),
        name="Hack Day",
        organizer="Dev Club",
        details="A day of building things together.\nParking Information:\nFree parking in lot B.",
        time="June 15, 2023 at 10:00",
        contact_number="+1 555 000 1111",
        whatsapp_number="15550001111",
        faqs=[{"question": "Can I participate alone?", "answer": "No, you need a team."}],
        chat_link="/event/placeholder",
        join_code=generate_join_code(),
    )
    return repository.create(event)
