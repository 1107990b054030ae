from deskbook.schemas.common import ApiResponse, ApiError, FieldError
from deskbook.schemas.user import UserCreate, UserResponse, UserLogin, Token, AdminUserResponse
from deskbook.schemas.seat import SeatCreate, SeatUpdate, SeatResponse, SeatAvailability, SeatDetail
from deskbook.schemas.reservation import ReservationCreate, ReservationUpdate, ReservationResponse
from deskbook.schemas.stats import StatsResponse, SweepResult

__all__ = [
    "ApiResponse", "ApiError", "FieldError",
    "UserCreate", "UserResponse", "UserLogin", "Token", "AdminUserResponse",
    "SeatCreate", "SeatUpdate", "SeatResponse", "SeatAvailability", "SeatDetail",
    "ReservationCreate", "ReservationUpdate", "ReservationResponse",
    "StatsResponse", "SweepResult",
]
