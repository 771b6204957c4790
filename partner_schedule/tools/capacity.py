"""
Mock partner capacity service.

In production, this would call GET/PUT /partner/capacity over HTTP.
"""

import logging
from typing import Optional

from partner_schedule.errors import ExternalServiceError
from partner_schedule.schemas.capacity_schema import PartnerCapacity

logger = logging.getLogger(__name__)

_documents: dict[str, dict] = {}


async def get_partner_capacity(partner_id: str) -> Optional[PartnerCapacity]:
    """Fetch a partner's capacity. Returns None if none was saved."""
    stored = _documents.get(partner_id)
    if stored is None:
        return None
    return PartnerCapacity.model_validate(stored)


async def save_partner_capacity(partner_id: str, capacity: PartnerCapacity) -> None:
    """Replace the partner's whole capacity document (last write wins)."""
    if capacity.partner_id != partner_id:
        raise ExternalServiceError(
            f"Capacity belongs to {capacity.partner_id}, not {partner_id}",
            operation="save_partner_capacity",
        )
    _documents[partner_id] = capacity.model_dump()
    logger.info(
        "Capacity saved for %s: %s",
        partner_id,
        {c.value: n for c, n in capacity.capacity_by_category.items()},
    )


def reset() -> None:
    """Clear all documents. Used by test fixtures for isolation."""
    _documents.clear()
