"""
Profile submission service.

Validate, assemble, then hand the rows to the persistence sink in one atomic
call. Nothing is written when validation fails, and sink failures come back as
a classified ``SubmissionResult`` instead of an exception.
"""

from typing import Optional, Sequence

from app.account_setup.assembly import build_profile_transaction
from app.account_setup.validation import validate_profile
from app.exceptions import ProfileSubmissionError
from app.schemas.attribute import Attribute
from app.schemas.profile import SubmissionResult
from app.schemas.quest import Quest
from app.storage.profiles import ProfileStorage
from app.storage.users import UserStorage
from app.utils.error_codes import classify_submission_error
from app.utils.logger import get_logger
from app.utils.user_id import normalize_user_id

logger = get_logger(__name__)


class ProfileService:
    """Submit finished account setups."""

    def __init__(
        self,
        profile_storage: Optional[ProfileStorage] = None,
        user_storage: Optional[UserStorage] = None,
    ):
        self.profile_storage = profile_storage or ProfileStorage()
        self.user_storage = user_storage

    async def submit_profile(
        self,
        user_id: str,
        attributes: Sequence[Attribute],
        quests: Sequence[Quest],
    ) -> SubmissionResult:
        user_id = normalize_user_id(user_id)
        field_errors = validate_profile(attributes, quests)
        if field_errors:
            logger.warning("Profile for %s failed validation: %s", user_id, field_errors)
            return SubmissionResult(
                success=False,
                message="Fields not valid. Failed to create account.",
                errors=field_errors,
            )

        payload = build_profile_transaction(attributes, quests)
        try:
            await self.profile_storage.create_profile_transaction(user_id, payload)
        except ProfileSubmissionError as exc:
            kind, message = classify_submission_error(exc.code, exc.message)
            exc.kind = kind
            logger.error("Profile creation failed for %s (%s, code=%s): %s", user_id, kind, exc.code, exc.message)
            return SubmissionResult(
                success=False,
                message=message,
                errors=exc.field_errors,
                error_kind=kind,
            )

        if self.user_storage is not None:
            if not await self.user_storage.mark_profile_complete(user_id):
                logger.info("User %s is not registered, profile flag not set", user_id)

        return SubmissionResult(success=True, message="Profile created")
