"""External service configurations."""

from .openai import (
    OpenAIConfig,
    create_openai_client
)

from .twilio import (
    TwilioConfig,
    compute_twilio_signature,
    verify_twilio_signature
)

__all__ = [
    'OpenAIConfig',
    'create_openai_client',
    'TwilioConfig',
    'compute_twilio_signature',
    'verify_twilio_signature'
]
