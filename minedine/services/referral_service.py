"""Moderator referral codes."""

import logging
import secrets

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from minedine.core.exceptions import InvalidReferralCode
from minedine.models.user import User

logger = logging.getLogger(__name__)

REFERRAL_CODE_PREFIX = "MOD-"
REFERRAL_CODE_LENGTH = 4
# No 0/O or 1/I/L
REFERRAL_CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
MAX_GENERATION_ATTEMPTS = 10


def generate_referral_code() -> str:
    """Random code in the form MOD-XXXX."""
    suffix = "".join(
        secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(REFERRAL_CODE_LENGTH)
    )
    return f"{REFERRAL_CODE_PREFIX}{suffix}"


class ReferralService:
    """Lookup and assignment of moderator referral codes."""

    async def validate_referral_code(self, db: AsyncSession, code: str) -> User:
        """Resolve a referral code to its moderator.

        The match is exact and case-sensitive. Only active moderators own
        usable codes.

        Raises:
            InvalidReferralCode: No active moderator has this code
        """
        result = await db.execute(
            select(User).where(
                User.referral_code == code,
                User.role == "MODERATOR",
                User.is_active.is_(True),
            )
        )
        moderator = result.scalar_one_or_none()
        if not moderator:
            raise InvalidReferralCode()
        return moderator

    async def ensure_referral_code(self, db: AsyncSession, moderator: User) -> str:
        """Give a moderator a unique referral code if they don't have one yet."""
        if moderator.referral_code:
            return moderator.referral_code

        for _ in range(MAX_GENERATION_ATTEMPTS):
            code = generate_referral_code()
            taken = await db.execute(select(User.id).where(User.referral_code == code))
            if taken.scalar_one_or_none() is None:
                moderator.referral_code = code
                await db.flush()
                logger.info(f"Assigned referral code {code} to moderator {moderator.id}")
                return code

        raise RuntimeError("Could not generate a unique referral code")


# Singleton instance
referral_service = ReferralService()
