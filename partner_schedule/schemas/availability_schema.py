"""Weekly availability documents."""

from pydantic import BaseModel, ConfigDict, Field

TIME_PATTERN = r"^\d{2}:\d{2}$"

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


class TimeBlock(BaseModel):
    """One contiguous span of open hours within a day."""

    model_config = ConfigDict(frozen=True)

    start: str = Field(pattern=TIME_PATTERN)
    end: str = Field(pattern=TIME_PATTERN)

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


class DayAvailability(BaseModel):
    """Open hours for one weekday (0 = Sunday)."""

    model_config = ConfigDict(frozen=True)

    day_of_week: int = Field(ge=0, le=6)
    day_name: str
    is_enabled: bool = True
    blocks: tuple[TimeBlock, ...] = ()


class WeeklyAvailability(BaseModel):
    """The supply-side schedule a partner publishes, saved as one document."""

    model_config = ConfigDict(frozen=True)

    partner_id: str
    days: tuple[DayAvailability, ...]
    buffer_time_minutes: int = 15
    max_advance_booking_days: int = 14
