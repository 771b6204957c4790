"""Bay capacity documents."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ServiceCategory(str, Enum):
    WASH = "wash"
    DETAILING = "detailing"
    OTHER = "other"


class Bay(BaseModel):
    """A unit of concurrent service capacity for one category."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    service_category: ServiceCategory
    is_active: bool = True


class PartnerCapacity(BaseModel):
    """How many jobs of each category a partner can run at once."""

    model_config = ConfigDict(frozen=True)

    partner_id: str
    bays: tuple[Bay, ...] = ()
    capacity_by_category: dict[ServiceCategory, int] = Field(default_factory=dict)
    buffer_time_minutes: int = 15
