"""
Response envelope shared by every API operation.

Success: {"data": ..., "message": ..., "success": true}
Failure: {"error": ..., "details": ..., "success": false}
"""

from typing import Any, Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    data: Optional[T] = None
    message: Optional[str] = None
    success: bool = True


class FieldError(BaseModel):
    field: str
    message: str


class ApiError(BaseModel):
    error: str
    details: Optional[Any] = None
    success: bool = False


def ok(data: Any = None, message: Optional[str] = None) -> dict:
    return {"data": data, "message": message, "success": True}
