"""
Mock weekly availability service.

In production, this would call the partner availability endpoint
(GET/PUT /partner/availability/weekly) over HTTP. Documents are stored as
plain dicts so callers never share an object with the store.
"""

import logging
from typing import Optional

from partner_schedule.errors import ExternalServiceError
from partner_schedule.schemas.availability_schema import WeeklyAvailability

logger = logging.getLogger(__name__)

_documents: dict[str, dict] = {}


async def get_weekly_availability(partner_id: str) -> Optional[WeeklyAvailability]:
    """Fetch a partner's schedule. Returns None if none was saved."""
    stored = _documents.get(partner_id)
    if stored is None:
        return None
    return WeeklyAvailability.model_validate(stored)


async def save_weekly_availability(partner_id: str, availability: WeeklyAvailability) -> None:
    """Replace the partner's whole schedule document (last write wins)."""
    if availability.partner_id != partner_id:
        raise ExternalServiceError(
            f"Availability belongs to {availability.partner_id}, not {partner_id}",
            operation="save_weekly_availability",
        )
    _documents[partner_id] = availability.model_dump()
    logger.info("Weekly availability saved for %s", partner_id)


def reset() -> None:
    """Clear all documents. Used by test fixtures for isolation."""
    _documents.clear()
