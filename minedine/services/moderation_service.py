"""Staff moderation of host applications and dinners."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from minedine.core.exceptions import NotFoundError, ValidationError
from minedine.domain.availability import DinnerStatus, ModerationStatus
from minedine.models.dinner import Dinner
from minedine.models.user import HostApplication, User
from minedine.services.referral_service import referral_service

logger = logging.getLogger(__name__)

DECISIONS = ("APPROVE", "REJECT")


class ModerationService:
    """Service for moderator decisions."""

    async def decide_host_application(
        self,
        db: AsyncSession,
        moderator: User,
        application_id: UUID,
        decision: str,
        note: str | None = None,
    ) -> HostApplication:
        """Approve or reject a PENDING host application.

        Approval promotes the applicant to HOST. When a moderator approves,
        they are recorded as the onboarding moderator and get a referral code.
        """
        if decision not in DECISIONS:
            raise ValidationError("Decision must be APPROVE or REJECT")

        application = await db.get(HostApplication, application_id)
        if not application:
            raise NotFoundError("Host application", str(application_id))
        if application.status != "PENDING":
            raise ValidationError("Application has already been reviewed")

        approved = decision == "APPROVE"
        application.status = "APPROVED" if approved else "REJECTED"
        application.rejection_reason = None if approved else note
        application.reviewed_by_id = moderator.id
        application.reviewed_at = datetime.now(UTC)

        if approved:
            applicant = await db.get(User, application.user_id)
            applicant.role = "HOST"
            if moderator.role == "MODERATOR":
                application.onboarded_by_id = moderator.id
                await referral_service.ensure_referral_code(db, moderator)

        await db.flush()
        await db.refresh(application)
        logger.info(
            f"Host application {application.id} {application.status} by {moderator.id}"
        )
        return application

    async def moderate_dinner(
        self,
        db: AsyncSession,
        moderator: User,
        dinner_id: UUID,
        decision: str,
    ) -> Dinner:
        """Approve a dinner, or reject it and cancel it."""
        if decision not in DECISIONS:
            raise ValidationError("Decision must be APPROVE or REJECT")

        dinner = await db.get(Dinner, dinner_id)
        if not dinner:
            raise NotFoundError("Dinner", str(dinner_id))

        if decision == "APPROVE":
            dinner.moderation_status = ModerationStatus.APPROVED.value
        else:
            dinner.moderation_status = ModerationStatus.REJECTED.value
            dinner.status = DinnerStatus.CANCELLED.value

        await db.flush()
        await db.refresh(dinner)
        logger.info(f"Dinner {dinner.id} moderated by {moderator.id}: {dinner.moderation_status}")
        return dinner


# Singleton instance
moderation_service = ModerationService()
