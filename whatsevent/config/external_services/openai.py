"""OpenAI service configuration."""

import os
import httpx
from openai import OpenAI
from dataclasses import dataclass

@dataclass
class OpenAIConfig:
    """OpenAI configuration settings."""

    # API configuration
    api_key: str = ""
    model: str = ""
    temperature: float = 0.5
    max_tokens: int = 500
    timeout: float = 30.0

    def __post_init__(self):
        """Load settings from environment if not provided."""
        if not self.api_key:
            self.api_key = os.environ.get('OPENAI_API_KEY', '')
        if not self.model:
            self.model = os.environ.get('OPENAI_MODEL', 'gpt-4o-mini')
        self.temperature = float(os.environ.get('OPENAI_TEMPERATURE', self.temperature))
        self.max_tokens = int(os.environ.get('OPENAI_MAX_TOKENS', self.max_tokens))
        self.timeout = float(os.environ.get('OPENAI_TIMEOUT', self.timeout))

    @property
    def has_credentials(self) -> bool:
        """Whether an API key is available for remote answering."""
        return bool(self.api_key)

    def validate(self) -> bool:
        """Validate the configuration."""
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY environment variable is required")
        return True

def create_openai_client(config: OpenAIConfig) -> OpenAI:
    """Create an OpenAI client from the given configuration.

    The client makes exactly one attempt per request: SDK retries are
    disabled and the request timeout comes from the configuration.

    Returns:
        OpenAI: Configured OpenAI client instance

    Raises:
        ValueError: If no API key is configured
    """
    config.validate()

    http_client = httpx.Client(timeout=config.timeout)
    return OpenAI(
        api_key=config.api_key,
        http_client=http_client,
        timeout=config.timeout,
        max_retries=0
    )
