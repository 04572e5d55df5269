"""User API routes."""

import logging

from fastapi import APIRouter

from ..core.errors import ApiError
from ..dependencies import AuthenticatedUserDep, CreditServiceDep
from ..infrastructure import CreditServiceError
from ..schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/user", response_model=UserResponse)
async def get_user(
    current_user: AuthenticatedUserDep,
    credit_service: CreditServiceDep,
) -> UserResponse:
    """Get current user information and remaining credits.

    Returns:
        UserResponse with user details and credit balance
    """
    try:
        credits = await credit_service.get_credits(current_user.user_id)
    except CreditServiceError as e:
        logger.error(f"Credit lookup failed for user {current_user.user_id}: {e}")
        status_code = 404 if e.code == "NOT_FOUND" else 500
        raise ApiError(status_code, e.message)

    return UserResponse(**current_user.model_dump(), credits=credits)
