"""Answer strategies.

One `Answerer` is chosen when the application starts: the remote model when
an OpenAI key is configured, the keyword heuristic otherwise. Routes receive
the chosen instance from the application state.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from openai import OpenAI

from ..config.external_services.openai import OpenAIConfig, create_openai_client
from ..utils.llm import generate_event_answer
from .heuristics import heuristic_answer

logger = logging.getLogger(__name__)


class Answerer(ABC):
    """Answers a question about an event from its context text."""

    @abstractmethod
    def answer(self, context: str, question: str) -> str:
        """
        Produce an answer grounded in the context.

        Args:
            context: Event context text
            question: The attendee's question

        Returns:
            The answer text. Implementations never raise.
        """
        pass

    @property
    def name(self) -> str:
        """Short name used in logs."""
        return self.__class__.__name__


class HeuristicAnswerer(Answerer):
    """Deterministic keyword matching over the context."""

    def answer(self, context: str, question: str) -> str:
        return heuristic_answer(context, question)


class RemoteAnswerer(Answerer):
    """Answers with one OpenAI chat-completions call per question."""

    def __init__(self, client: OpenAI, config: OpenAIConfig):
        self.client = client
        self.config = config

    def answer(self, context: str, question: str) -> str:
        return generate_event_answer(self.client, context, question, self.config)


def create_answerer(config: Optional[OpenAIConfig] = None) -> Answerer:
    """Pick the answer strategy for this process."""
    config = config or OpenAIConfig()

    if config.has_credentials:
        logger.info(f"Using remote answerer with model {config.model}")
        return RemoteAnswerer(create_openai_client(config), config)

    logger.warning("OPENAI_API_KEY not set, using heuristic answerer")
    return HeuristicAnswerer()
