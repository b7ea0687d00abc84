"""Twilio (WhatsApp) service configuration."""

import os
import hmac
import base64
import hashlib
from typing import Mapping
from dataclasses import dataclass

@dataclass
class TwilioConfig:
    """Twilio configuration settings."""

    # Authentication
    auth_token: str = ""

    def __post_init__(self):
        """Load settings from environment if not provided."""
        if not self.auth_token:
            self.auth_token = os.environ.get('TWILIO_AUTH_TOKEN', '')

    @property
    def verifies_signatures(self) -> bool:
        """Signature checks only run when an auth token is configured."""
        return bool(self.auth_token)

def compute_twilio_signature(auth_token: str, url: str, params: Mapping[str, str]) -> str:
    """Compute the X-Twilio-Signature value for a form POST.

    Twilio signs the full request URL followed by every POST parameter
    name and value, with parameters sorted by name.
    """
    payload = url + ''.join(f"{key}{params[key]}" for key in sorted(params))
    digest = hmac.new(auth_token.encode(), payload.encode(), hashlib.sha1).digest()
    return base64.b64encode(digest).decode()

def verify_twilio_signature(
    config: TwilioConfig,
    signature: str,
    url: str,
    params: Mapping[str, str]
) -> bool:
    """Verify a Twilio webhook signature header."""
    if not config.verifies_signatures:
        return True
    if not signature:
        return False

    expected = compute_twilio_signature(config.auth_token, url, params)
    return hmac.compare_digest(signature, expected)
