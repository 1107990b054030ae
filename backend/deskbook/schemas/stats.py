"""
Pydantic schemas for the admin statistics dashboard.
"""

import datetime as dt
from pydantic import BaseModel


class DailyCount(BaseModel):
    date: dt.date
    reservations: int


class PopularSeat(BaseModel):
    seat_id: int
    seat_number: str
    location: str
    reservations: int


class StatsResponse(BaseModel):
    total_seats: int
    total_users: int
    total_reservations: int
    today_reservations: int
    occupancy_rate: int
    weekly_trend: list[DailyCount]
    popular_locations: list[PopularSeat]


class SweepResult(BaseModel):
    updated_count: int
