"""
Pydantic schemas for reservation-related request/response validation.
"""

import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from deskbook.models.reservation import ReservationStatus
from deskbook.schemas.seat import SeatSummary
from deskbook.schemas.user import UserSummary

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def _check_time_window(start: Optional[str], end: Optional[str]) -> None:
    # "HH:MM" strings compare correctly as text
    if start and end and end <= start:
        raise ValueError("end_time must be after start_time")


class ReservationCreate(BaseModel):
    seat_id: int
    date: dt.date
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    notes: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def check_time_window(self):
        _check_time_window(self.start_time, self.end_time)
        return self


class ReservationUpdate(BaseModel):
    date: Optional[dt.date] = None
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("date")
    @classmethod
    def date_not_null(cls, value):
        if value is None:
            raise ValueError("date cannot be null")
        return value

    @model_validator(mode="after")
    def check_time_window(self):
        _check_time_window(self.start_time, self.end_time)
        return self


class ReservationResponse(BaseModel):
    id: int
    user_id: int
    seat_id: int
    date: dt.date
    start_time: Optional[str]
    end_time: Optional[str]
    notes: Optional[str]
    status: ReservationStatus
    created_at: dt.datetime
    seat: SeatSummary
    user: UserSummary

    model_config = {"from_attributes": True}


class ReservationFilters(BaseModel):
    user_id: Optional[int] = None
    seat_id: Optional[int] = None
    status: Optional[ReservationStatus] = None
    date: Optional[dt.date] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
