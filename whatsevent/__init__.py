"""WhatsEvent: publish events and answer attendee questions about them."""

__version__ = "1.0.0"
