"""Partner ID logging context for tracing edits and booking actions.

Provides a partner-aware logger that attaches the partner currently being
edited to every log record, so a single partner's schedule edits, saves
and booking transitions can be followed across modules.

Usage:
    from partner_schedule.logging_context import get_partner_logger, set_partner_id

    set_partner_id("partner-42")
    logger = get_partner_logger(__name__)
    logger.info("Saving schedule")  # record.partner_id == "partner-42"
"""

import logging
from contextvars import ContextVar

_partner_id: ContextVar[str] = ContextVar("partner_id", default="NO_PARTNER")


def set_partner_id(partner_id: str) -> None:
    """Set the partner ID for the current async context."""
    _partner_id.set(partner_id)


def get_partner_id() -> str:
    """Retrieve the current partner ID."""
    return _partner_id.get()


class PartnerIdFilter(logging.Filter):
    """Injects partner_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.partner_id = _partner_id.get()  # type: ignore[attr-defined]
        return True


def get_partner_logger(name: str) -> logging.Logger:
    """Return a logger with the PartnerIdFilter attached.

    The filter adds ``partner_id`` to each record so formatters can
    include ``%(partner_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, PartnerIdFilter) for f in logger.filters):
        logger.addFilter(PartnerIdFilter())
    return logger


def attach_partner_filter(handler: logging.Handler) -> None:
    """Attach the filter to a handler so every record it formats has ``partner_id``."""
    if not any(isinstance(f, PartnerIdFilter) for f in handler.filters):
        handler.addFilter(PartnerIdFilter())
