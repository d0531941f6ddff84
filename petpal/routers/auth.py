"""Authentication routes using fastapi-users."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi_users import exceptions
from fastapi_users.router.common import ErrorCode

from petpal.dependencies import auth_backend, current_active_user, fastapi_users, get_user_manager
from petpal.models.user import User
from petpal.schemas.user import (
    PasswordChange,
    PasswordChangeResponse,
    TempPasswordConfirm,
    TempPasswordIssued,
    TempPasswordRequest,
    TempPasswordResponse,
    UserCreate,
    UserRead,
    UserUpdate,
)
from petpal.services.user_manager import UserManager


logger = logging.getLogger(__name__)


# Create router for authentication endpoints
router = APIRouter()

# Include auth router for JWT login/logout
router.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix="/jwt",
    tags=["auth"],
)

# Include register router
router.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    tags=["auth"],
)

# Include users router (for /users/me endpoint)
router.include_router(
    fastapi_users.get_users_router(UserRead, UserUpdate),
    prefix="/users",
    tags=["users"],
)


@router.post("/temp-password", response_model=TempPasswordResponse, tags=["auth"])
async def request_temp_password(
    request_data: TempPasswordRequest,
    request: Request,
    user_manager: UserManager = Depends(get_user_manager),
) -> TempPasswordResponse:
    """
    Mail a one-time code for a temporary password.

    The response is identical whether or not the email is registered, so it
    cannot be used to discover accounts. The current password keeps working
    until the code is redeemed at ``/temp-password/confirm``.
    """
    await user_manager.request_temp_password(request_data.email, request)
    return TempPasswordResponse()


@router.post("/temp-password/confirm", response_model=TempPasswordIssued, tags=["auth"])
async def confirm_temp_password(
    confirm_data: TempPasswordConfirm,
    user_manager: UserManager = Depends(get_user_manager),
) -> TempPasswordIssued:
    """
    Redeem a mailed code and receive a temporary password.

    The temporary password replaces the old one and is returned only here.
    Each code works once.
    """
    try:
        temp_password = await user_manager.redeem_temp_password(confirm_data.token)
    except (exceptions.InvalidResetPasswordToken, exceptions.UserInactive):
        logger.info("Rejected temporary password code")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ErrorCode.RESET_PASSWORD_BAD_TOKEN,
        )

    return TempPasswordIssued(temp_password=temp_password)


@router.post("/change-password", response_model=PasswordChangeResponse, tags=["auth"])
async def change_password(
    password_data: PasswordChange,
    user: User = Depends(current_active_user),
    user_manager: UserManager = Depends(get_user_manager),
) -> PasswordChangeResponse:
    """
    Change the password of the logged-in user.

    **Validation:**
    - password and confirm_password must match
    - password must be at least 7 characters with a lowercase letter, an
      uppercase letter, a digit and a special character
    """
    try:
        await user_manager.update_password(user.id, password_data.password)
    except exceptions.InvalidPasswordException as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.reason
        )

    return PasswordChangeResponse()
