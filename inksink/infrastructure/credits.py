"""Credit balance checks and deduction for gated chat requests."""

import logging
from typing import Optional

from .postgresql import AsyncPostgreSQLBackend

logger = logging.getLogger(__name__)


class CreditServiceError(Exception):
    """Reading or updating a credit balance failed."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class CreditService:
    """Credit balances stored in the ``profiles`` table."""

    def __init__(self, backend: AsyncPostgreSQLBackend, cost: int = 1):
        self._backend = backend
        self.cost = cost

    async def get_credits(self, user_id: str) -> int:
        """Number of credits left for a user.

        Raises:
            CreditServiceError: If the profile is missing or the query fails
        """
        try:
            credits = await self._backend.get_credit_count(user_id)
        except Exception as e:
            raise CreditServiceError(f"Failed to retrieve profile: {e}") from e

        if credits is None:
            raise CreditServiceError("Profile not found", "NOT_FOUND")
        return credits

    async def deduct_credit(self, user_id: str, current: int) -> bool:
        """Charge one chat turn against the balance read before the run.

        Raises:
            CreditServiceError: If the update fails
        """
        try:
            updated = await self._backend.set_credit_count(user_id, max(current - self.cost, 0))
        except Exception as e:
            raise CreditServiceError(f"Failed to update profile: {e}") from e

        if not updated:
            raise CreditServiceError("Profile not found", "NOT_FOUND")
        logger.info(f"Deducted {self.cost} credit(s) from user {user_id}")
        return True
