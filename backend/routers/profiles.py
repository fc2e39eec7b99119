from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from uuid import UUID

import config
import moderation
from auth import SessionContext, get_optional_session, get_session
from db import get_db
from directory import FilterSpec, apply_profile_directory
from engagement import calculate_engagement, completion_score, public_engagement
from errors import NotFound, PreconditionFailed, ValidationError
from logging_config import get_logger
from models import Profile
from normalize import PROFILE_LIST_FIELDS, normalize_profile, total_followers
from schemas import (
    EngagementPreviewOut,
    EngagementPreviewRequest,
    ProfileCreate,
    ProfileOut,
    ProfileRecord,
    ProfileSummary,
    ProfileType,
    ProfileUpdate,
    VisibilityRequest,
)

logger = get_logger("marketplace", component="api")

router = APIRouter()


def _load_row(db: Session, profile_id: UUID) -> Profile:
    row = db.query(Profile).get(profile_id)
    if not row:
        raise NotFound("Profile not found")
    return row


def profile_out(record: ProfileRecord, session: Optional[SessionContext]) -> ProfileOut:
    """Profile as seen by `session`; hidden analytics only reach the owner."""
    is_owner = session is not None and session.user_id == record.id
    data = record.model_dump()

    stats = record.engagement_stats
    if stats is not None and stats.hideAnalytics and not is_owner:
        data["engagement_stats"] = None

    engagement = public_engagement(record, viewer_is_owner=is_owner)
    return ProfileOut(
        **data,
        visibility=moderation.visibility_state(record),
        engagement=engagement.as_dict() if engagement else None,
    )


def _apply_fields(row: Profile, fields: Dict[str, Any]) -> None:
    if "name" in fields:
        name = (fields["name"] or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name")
        fields["name"] = name

    if fields.get("engagement_stats") is not None and row.type != "creator":
        raise ValidationError("Engagement stats only apply to creator profiles", field="engagement_stats")

    # followers_count always follows the linked accounts
    if "social_links" in fields:
        links = fields["social_links"] or []
        fields["social_links"] = links
        fields["followers_count"] = total_followers(links)

    for k in PROFILE_LIST_FIELDS:
        if k in fields and fields[k] is None:
            fields[k] = []

    for k, v in fields.items():
        setattr(row, k, v)


def _save(db: Session, row: Profile) -> ProfileRecord:
    db.commit()
    db.refresh(row)
    return normalize_profile(row)


@router.post("", response_model=ProfileOut)
def create_profile(
    payload: ProfileCreate,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    if db.query(Profile).get(session.user_id):
        raise PreconditionFailed("Profile already exists")

    fields = payload.model_dump(exclude_unset=True)
    fields.setdefault("email", session.email)
    profile_type = fields.pop("type")

    row = Profile(id=session.user_id, type=profile_type, name="")
    _apply_fields(row, fields)
    for k in PROFILE_LIST_FIELDS:
        if getattr(row, k) is None:
            setattr(row, k, [])

    db.add(row)
    record = _save(db, row)

    logger.info("profile_created", extra={"user_id": str(session.user_id), "profile_type": profile_type})
    return profile_out(record, session)


@router.get("", response_model=List[ProfileSummary])
def list_profiles(
    type: ProfileType = "creator",
    q: Optional[str] = None,
    categories: Optional[List[str]] = Query(None),
    follower_ranges: Optional[List[str]] = Query(None),
    engagement: Optional[List[str]] = Query(None),
    platforms: Optional[List[str]] = Query(None),
    sort: str = "newest",
    limit: int = config.DIRECTORY_LIMIT,
    db: Session = Depends(get_db),
):
    """
    Directory of public profiles.

    Examples:
      /profiles?type=creator&categories=Fitness%20Creator&sort=followers
      /profiles?type=creator&follower_ranges=10K-50K&follower_ranges=500K%2B
      /profiles?type=brand&q=coffee&sort=alphabetical
    """
    if limit < 1 or limit > 500:
        raise ValidationError("limit must be between 1 and 500", field="limit")

    spec = FilterSpec.build(
        query=q,
        categories=categories,
        follower_ranges=follower_ranges,
        engagement_levels=engagement,
        platforms=platforms,
        sort=sort,
    )

    rows = (
        db.query(Profile)
        .filter(Profile.type == type)
        .filter(Profile.is_public.is_(True))
        .all()
    )
    records = apply_profile_directory([normalize_profile(r) for r in rows], spec)

    out = []
    for record in records[:limit]:
        engagement_result = public_engagement(record)
        out.append(
            ProfileSummary(
                **record.model_dump(include=set(ProfileSummary.model_fields) - {"engagement"}),
                engagement=engagement_result.as_dict() if engagement_result else None,
            )
        )
    return out


@router.get("/me", response_model=ProfileOut)
def get_my_profile(session: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    return profile_out(normalize_profile(_load_row(db, session.user_id)), session)


@router.patch("/me", response_model=ProfileOut)
def update_my_profile(
    payload: ProfileUpdate,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    row = _load_row(db, session.user_id)
    _apply_fields(row, payload.model_dump(exclude_unset=True))
    return profile_out(_save(db, row), session)


@router.post("/me/submit_for_review", response_model=ProfileOut)
def submit_my_profile_for_review(
    payload: Optional[ProfileUpdate] = None,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    """Saves any pending edits, then moves the profile into the review queue."""
    row = _load_row(db, session.user_id)
    if payload is not None:
        _apply_fields(row, payload.model_dump(exclude_unset=True))

    record = moderation.submit_for_review(normalize_profile(row))
    for k, v in moderation.visibility_changes(record).items():
        setattr(row, k, v)
    record = _save(db, row)

    logger.info("profile_submitted_for_review", extra={"user_id": str(session.user_id)})
    return profile_out(record, session)


@router.post("/me/visibility", response_model=ProfileOut)
def set_my_visibility(
    payload: VisibilityRequest,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    row = _load_row(db, session.user_id)
    record = moderation.set_public(normalize_profile(row), payload.is_public)
    for k, v in moderation.visibility_changes(record).items():
        setattr(row, k, v)
    return profile_out(_save(db, row), session)


@router.post("/engagement/preview", response_model=EngagementPreviewOut)
def preview_engagement(payload: EngagementPreviewRequest, session: SessionContext = Depends(get_session)):
    """Live numbers for the analytics section of the edit form."""
    followers = payload.total_followers
    if followers is None:
        followers = total_followers(payload.social_links or [])

    result = calculate_engagement(payload.engagement_stats, followers)
    return EngagementPreviewOut(
        total_followers=followers,
        engagement=result.as_dict(),
        completion_score=completion_score(payload.engagement_stats, followers),
    )


@router.get("/{profile_id}", response_model=ProfileOut)
def get_profile(
    profile_id: UUID,
    session: Optional[SessionContext] = Depends(get_optional_session),
    db: Session = Depends(get_db),
):
    record = normalize_profile(_load_row(db, profile_id))
    # private profiles look missing to anyone but the owner and admins
    if not moderation.can_view_profile(session, record):
        raise NotFound("Profile not found")
    return profile_out(record, session)
