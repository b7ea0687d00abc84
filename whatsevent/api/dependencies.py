"""Request dependencies resolved from the application state."""

from fastapi import Request

from ..chat.answerers import Answerer
from ..config.application import AppConfig
from ..config.external_services.twilio import TwilioConfig
from ..db.repository import EventRepository


def get_repository(request: Request) -> EventRepository:
    return request.app.state.repository


def get_answerer(request: Request) -> Answerer:
    return request.app.state.answerer


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.app_config


def get_twilio_config(request: Request) -> TwilioConfig:
    return request.app.state.twilio_config
