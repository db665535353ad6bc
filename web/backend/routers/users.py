"""Profile endpoints for the logged-in user."""

from fastapi import APIRouter, Depends

from musicstream.core.exceptions import MusicStreamError
from musicstream.domain.accounts import update_user

from ..deps import get_current_user_id, http_error
from ..schemas import UpdateProfileRequest, UserResponse

router = APIRouter()


@router.patch("/user/profile", response_model=UserResponse)
def update_profile(
    request: UpdateProfileRequest,
    user_id: str = Depends(get_current_user_id),
):
    """Change username, email or password. Omitted fields are left alone."""
    try:
        return update_user(
            user_id,
            username=request.username,
            email=request.email,
            current_password=request.current_password,
            new_password=request.new_password,
        )
    except MusicStreamError as e:
        raise http_error(e) from e
