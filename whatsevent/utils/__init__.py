"""Utility modules: logging, LLM calls, PDF handling, WhatsApp helpers and time."""
