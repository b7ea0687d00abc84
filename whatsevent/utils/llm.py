"""Utility functions for interacting with LLMs (OpenAI).

This module builds the event-assistant prompt and performs the single
chat-completions call used to answer attendee questions.
"""

import logging
from typing import Optional

from openai import OpenAI

from ..config.external_services.openai import OpenAIConfig

logger = logging.getLogger(__name__)

ERROR_RESPONSE = "Sorry, I encountered an error while processing your question. Please try again later."
EMPTY_RESPONSE = "Sorry, I could not generate a response."

SYSTEM_MESSAGE = (
    "You are a helpful event assistant that provides accurate information "
    "about events based only on the provided context."
)


def build_event_prompt(context: str, question: str) -> str:
    """Build the user prompt with the event context and question embedded verbatim."""
    return f"""You are an AI event assistant for an event organizer. Your job is to answer questions about a specific event based ONLY on the information provided in the context below.

Event Information:
{context}

User Question:
"{question}"

Guidelines:
1. Answer in a helpful, friendly, and conversational tone
2. Be concise and direct - keep responses under 3 sentences when possible
3. If the exact information is not available in the context, politely say you don't have that specific information
4. Do not make up or assume any information that is not explicitly stated in the context
5. If asked about dates, times, locations, or prices, be very specific based on the context
6. If the user asks something completely unrelated to the event, politely redirect them to ask about the event

Your response:
"""


def generate_event_answer(
    client: OpenAI,
    context: str,
    question: str,
    config: Optional[OpenAIConfig] = None
) -> str:
    """
    Ask the model to answer a question about an event.

    Args:
        client: OpenAI client, configured with the request timeout
        context: Event context text
        question: The attendee's question
        config: Model settings. If not provided, uses default config

    Returns:
        The model's answer, or a fixed apology if the call fails or the
        model returns nothing. Never raises.
    """
    try:
        config = config or OpenAIConfig()

        response = client.chat.completions.create(
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            messages=[
                {"role": "system", "content": SYSTEM_MESSAGE},
                {"role": "user", "content": build_event_prompt(context, question)}
            ]
        )

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            logger.warning("Model returned an empty response")
            return EMPTY_RESPONSE
        return content.strip()

    except Exception as e:
        logger.error(f"Error in generate_event_answer: {e}")
        return ERROR_RESPONSE
