"""Capacity model: bay counts per service category plus the shared buffer."""

import logging

from partner_schedule.config import settings
from partner_schedule.errors import InvariantViolationError
from partner_schedule.schemas.capacity_schema import Bay, PartnerCapacity, ServiceCategory

logger = logging.getLogger(__name__)

BAY_LABELS: dict[ServiceCategory, str] = {
    ServiceCategory.WASH: "Wash Bay",
    ServiceCategory.DETAILING: "Detail Bay",
    ServiceCategory.OTHER: "Bay",
}

BAY_ID_PREFIXES: dict[ServiceCategory, str] = {
    ServiceCategory.WASH: "bay-w",
    ServiceCategory.DETAILING: "bay-d",
    ServiceCategory.OTHER: "bay-o",
}


def build_bays(capacity_by_category: dict[ServiceCategory, int]) -> tuple[Bay, ...]:
    """Derive bay records from per-category counts with stable ids."""
    bays: list[Bay] = []
    for category in ServiceCategory:
        for number in range(1, capacity_by_category.get(category, 0) + 1):
            bays.append(
                Bay(
                    id=f"{BAY_ID_PREFIXES[category]}{number}",
                    name=f"{BAY_LABELS[category]} {number}",
                    service_category=category,
                )
            )
    return tuple(bays)


def default_partner_capacity(partner_id: str) -> PartnerCapacity:
    counts = {
        ServiceCategory.WASH: settings.capacity.default_wash_bays,
        ServiceCategory.DETAILING: settings.capacity.default_detailing_bays,
        ServiceCategory.OTHER: settings.capacity.default_other_bays,
    }
    return PartnerCapacity(
        partner_id=partner_id,
        bays=build_bays(counts),
        capacity_by_category=counts,
        buffer_time_minutes=settings.schedule.default_buffer_minutes,
    )


def set_capacity(capacity: PartnerCapacity, category: ServiceCategory, bays: int) -> PartnerCapacity:
    """
    Set the bay count for one category and regenerate bay records.

    No upper bound is enforced here.

    Raises:
        InvariantViolationError: If ``bays`` is negative.
    """
    if bays < 0:
        raise InvariantViolationError(f"Bay count for {category.value} must be >= 0, got {bays}")
    counts = {**capacity.capacity_by_category, category: bays}
    logger.debug("Capacity for %s set to %d", category.value, bays)
    return capacity.model_copy(
        update={"capacity_by_category": counts, "bays": build_bays(counts)}
    )


def set_buffer_time(capacity: PartnerCapacity, minutes: int) -> PartnerCapacity:
    """
    Raises:
        InvariantViolationError: If ``minutes`` is negative.
    """
    if minutes < 0:
        raise InvariantViolationError(f"Buffer time must be >= 0, got {minutes}")
    return capacity.model_copy(update={"buffer_time_minutes": minutes})


def total_bays(capacity: PartnerCapacity) -> int:
    return sum(capacity.capacity_by_category.values())


def bays_for(capacity: PartnerCapacity, category: ServiceCategory) -> list[Bay]:
    """Active bays serving ``category``."""
    return [b for b in capacity.bays if b.service_category == category and b.is_active]


def validate(capacity: PartnerCapacity) -> list[str]:
    violations = [
        f"bay count for {category.value} must be >= 0, got {count}"
        for category, count in capacity.capacity_by_category.items()
        if count < 0
    ]
    if capacity.buffer_time_minutes < 0:
        violations.append(f"buffer_time_minutes must be >= 0, got {capacity.buffer_time_minutes}")
    return violations
