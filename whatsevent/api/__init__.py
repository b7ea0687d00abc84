"""HTTP API for publishing events and chatting about them."""
