"""
Data records shared by the ledger, the services and the API layers.
Serialized field names follow the stored camelCase layout (startDate, createdAt, ...).
"""
import enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

import config
from utils import parse_date


class LeaveType(str, enum.Enum):
    VACATION = "VACATION"
    SICK = "SICK"


ANNUAL_QUOTA = {
    LeaveType.VACATION: config.VACATION_QUOTA,
    LeaveType.SICK: config.SICK_QUOTA,
}


class Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class LeaveEntry(Record):
    id: str
    type: LeaveType
    start_date: str
    end_date: str
    days: int = Field(ge=0)
    description: str = ""
    # epoch milliseconds
    created_at: int

    @field_validator("start_date", "end_date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        parse_date(value)
        return value


class PublicHoliday(Record):
    id: str
    date: str
    name: str

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        parse_date(value)
        return value


class QuotaUsage(Record):
    used: int
    total: int
    remaining: int


class LeavePreview(Record):
    type: LeaveType
    start_date: str
    end_date: str
    business_days: int
    remaining: int
    over_quota: bool
    holidays_in_range: List[str] = []
    date_range: str = ""


class AISuggestion(Record):
    title: str
    description: str
    dates: str
    benefit: str


class PlanningAdvice(Record):
    summary: str
    suggestions: List[AISuggestion]


class CalendarDay(Record):
    date: str
    day: int
    in_month: bool
    is_weekend: bool
    is_holiday: bool
    holiday_name: Optional[str] = None
    is_selected: bool = False
    in_range: bool = False
    is_today: bool = False


class CalendarMonth(Record):
    month: str
    title: str
    previous_month: str
    next_month: str
    selection_start: Optional[str] = None
    selection_end: Optional[str] = None
    days: List[CalendarDay]
