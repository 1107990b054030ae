"""
Profile endpoint for the authenticated user.
"""

from fastapi import APIRouter, Depends

from deskbook.api.deps import get_current_user
from deskbook.models.user import User
from deskbook.schemas.common import ApiResponse, ok
from deskbook.schemas.user import UserResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=ApiResponse[UserResponse])
async def read_profile(current_user: User = Depends(get_current_user)):
    return ok(UserResponse.model_validate(current_user))
