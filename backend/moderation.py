"""
Profile visibility and moderation.

Visibility is derived from the stored flags, so exactly one state holds:

    draft         not public, not under review, no rejection reason
    under_review  waiting for an admin
    rejected      reviewed and turned down, reason kept for the owner
    public        listed in the directory

Creator profiles move draft/rejected -> under_review -> public|rejected.
Brand profiles skip review and toggle draft <-> public themselves. There is
no way back from public to draft for creators.

Every transition is pure: it returns a new record with updated_at bumped and
never touches the one it was given.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from auth import SessionContext
from errors import Forbidden, PreconditionFailed, ValidationError
from schemas import ProfileRecord

DRAFT = "draft"
UNDER_REVIEW = "under_review"
REJECTED = "rejected"
PUBLIC = "public"

VISIBILITY_FIELDS = ("is_public", "under_review", "approved", "rejection_reason", "updated_at")


def visibility_state(profile: ProfileRecord) -> str:
    if profile.is_public:
        return PUBLIC
    if profile.under_review:
        return UNDER_REVIEW
    if profile.rejection_reason and profile.rejection_reason.strip():
        return REJECTED
    return DRAFT


def _transition(profile: ProfileRecord, now: Optional[datetime], **changes) -> ProfileRecord:
    changes["updated_at"] = now or datetime.utcnow()
    return profile.model_copy(update=changes)


def submit_for_review(profile: ProfileRecord, now: Optional[datetime] = None) -> ProfileRecord:
    if profile.type != "creator":
        raise PreconditionFailed("Brand profiles are published without review")

    state = visibility_state(profile)
    if state == UNDER_REVIEW:
        raise PreconditionFailed("Profile is already under review")
    if state == PUBLIC:
        raise PreconditionFailed("Profile is already public")

    return _transition(profile, now, under_review=True, rejection_reason=None)


def approve(profile: ProfileRecord, now: Optional[datetime] = None) -> ProfileRecord:
    if visibility_state(profile) != UNDER_REVIEW:
        raise PreconditionFailed("Only profiles under review can be approved")

    return _transition(
        profile,
        now,
        is_public=True,
        under_review=False,
        approved=True,
        rejection_reason=None,
    )


def reject(profile: ProfileRecord, reason: Optional[str], now: Optional[datetime] = None) -> ProfileRecord:
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Please provide a reason for rejection", field="reason")
    if visibility_state(profile) != UNDER_REVIEW:
        raise PreconditionFailed("Only profiles under review can be rejected")

    return _transition(
        profile,
        now,
        is_public=False,
        under_review=False,
        approved=False,
        rejection_reason=reason,
    )


def set_public(profile: ProfileRecord, is_public: bool, now: Optional[datetime] = None) -> ProfileRecord:
    if profile.type != "brand":
        raise Forbidden("Creator profiles are published through review")
    if profile.is_public == is_public:
        return profile
    return _transition(profile, now, is_public=is_public, under_review=False, rejection_reason=None)


def can_view_profile(session: Optional[SessionContext], profile: ProfileRecord) -> bool:
    if profile.is_public:
        return True
    if session is None:
        return False
    return session.is_admin or session.user_id == profile.id


def visibility_changes(profile: ProfileRecord) -> dict:
    """Column values to persist after a transition."""
    return {field: getattr(profile, field) for field in VISIBILITY_FIELDS}
