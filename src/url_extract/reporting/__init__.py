"""Structured event logging."""

from __future__ import annotations

__all__ = ["EventLogger", "event_logger", "log_event"]

from url_extract.reporting.logging import EventLogger, event_logger, log_event
