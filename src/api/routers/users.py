"""User profile endpoints."""
from fastapi import APIRouter, Depends

from api.dependencies import get_current_user
from models.user import User
from schemas.link import CamelModel


router = APIRouter(prefix="/users", tags=["users"])


class UserResponse(CamelModel):
    """Response model for user info."""

    id: int
    email: str | None
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)) -> User:
    """Get the current authenticated user's profile."""
    return current_user
