from deskbook.models.user import User, UserRole
from deskbook.models.seat import Seat
from deskbook.models.reservation import Reservation, ReservationStatus

__all__ = ["User", "UserRole", "Seat", "Reservation", "ReservationStatus"]
