"""
Pydantic schemas for seat-related request/response validation.
"""

import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field

from deskbook.schemas.user import UserSummary


class SeatCreate(BaseModel):
    seat_number: str = Field(..., min_length=1, max_length=20)
    location: str = Field(..., min_length=1, max_length=255)
    has_monitor: bool = False
    description: Optional[str] = Field(None, max_length=1000)


class SeatUpdate(BaseModel):
    seat_number: Optional[str] = Field(None, min_length=1, max_length=20)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    has_monitor: Optional[bool] = None
    description: Optional[str] = Field(None, max_length=1000)


class SeatResponse(BaseModel):
    id: int
    seat_number: str
    location: str
    has_monitor: bool
    description: Optional[str]
    is_active: bool
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class SeatSummary(BaseModel):
    id: int
    seat_number: str
    location: str
    has_monitor: bool

    model_config = {"from_attributes": True}


class SeatAvailability(BaseModel):
    id: int
    seat_number: str
    location: str
    has_monitor: bool
    description: Optional[str]
    is_available: bool
    reserved_by: Optional[UserSummary] = None
    reserved_date: Optional[dt.date] = None


class SeatReservationEntry(BaseModel):
    id: int
    date: dt.date
    start_time: Optional[str]
    end_time: Optional[str]
    user: UserSummary

    model_config = {"from_attributes": True}


class SeatDetail(SeatResponse):
    reservations: list[SeatReservationEntry]


class AdminSeatView(SeatResponse):
    current_reservation: Optional[SeatReservationEntry] = None
    total_reservations: int
