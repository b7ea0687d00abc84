"""Application-level settings for event publishing and uploads."""

import os
from pathlib import Path
from dataclasses import dataclass, field

@dataclass
class AppConfig:
    """Application configuration settings."""

    # Prefix for self-referential chat links (empty means relative links)
    public_base_url: str = ""

    # Where uploaded event PDFs are stored
    upload_dir: Path = field(default_factory=lambda: Path(os.environ.get('UPLOAD_DIR', 'uploads')))

    max_pdf_bytes: int = 10 * 1024 * 1024
    max_details_length: int = 20000

    def __post_init__(self):
        """Load settings from environment if not provided."""
        if not self.public_base_url:
            self.public_base_url = os.environ.get('PUBLIC_BASE_URL', '')
        self.public_base_url = self.public_base_url.rstrip('/')
        self.upload_dir = Path(self.upload_dir)
        self.max_pdf_bytes = int(os.environ.get('MAX_PDF_BYTES', self.max_pdf_bytes))
        self.max_details_length = int(os.environ.get('MAX_DETAILS_LENGTH', self.max_details_length))

    def chat_link(self, event_id: str) -> str:
        """Build the web chat link for an event."""
        return f"{self.public_base_url}/event/{event_id}"
