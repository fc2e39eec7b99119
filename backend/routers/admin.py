from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

import moderation
from auth import SessionContext, get_admin_session
from db import get_db
from errors import NotFound, RemoteFailure
from logging_config import get_logger
from models import Profile
from normalize import normalize_profile
from outbox import ModerationOutbox, get_outbox
from routers.profiles import profile_out
from rpc import call_procedure
from schemas import ModerationResult, OutboxEntryOut, ProfileOut, RejectRequest, ReplayResult

logger = get_logger("marketplace", component="admin")

router = APIRouter()

PAST_TENSE = {"approve": "approved", "reject": "rejected"}


def _load_record(db: Session, profile_id: UUID):
    row = db.query(Profile).get(profile_id)
    if not row:
        raise NotFound("Profile not found")
    return normalize_profile(row)


def _run(
    db: Session,
    outbox: ModerationOutbox,
    response: Response,
    action: str,
    profile_id: UUID,
    procedure: str,
    **args,
) -> ModerationResult:
    try:
        call_procedure(db, procedure, profile_id=profile_id, **args)
    except RemoteFailure as e:
        outbox.enqueue(action, profile_id, args, error=e.message)
        response.status_code = 202
        return ModerationResult(
            profile_id=profile_id,
            action=action,
            status="pending",
            detail=f"Profile marked as {PAST_TENSE[action]} (database update pending)",
        )

    # a fresh decision supersedes anything still queued for this profile
    outbox.discard(profile_id)
    logger.info("profile_moderated", extra={"action": action, "profile_id": str(profile_id)})
    return ModerationResult(profile_id=profile_id, action=action, status="applied")


@router.get("/profiles/under_review", response_model=List[ProfileOut])
def list_profiles_under_review(
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    rows = (
        db.query(Profile)
        .filter(Profile.under_review.is_(True))
        .order_by(Profile.updated_at.desc())
        .limit(200)
        .all()
    )
    return [profile_out(normalize_profile(r), session) for r in rows]


@router.post("/profiles/{profile_id}/approve", response_model=ModerationResult)
def approve_profile(
    profile_id: UUID,
    response: Response,
    session: SessionContext = Depends(get_admin_session),
    outbox: ModerationOutbox = Depends(get_outbox),
    db: Session = Depends(get_db),
):
    # check the transition here too so bad requests never reach the outbox
    moderation.approve(_load_record(db, profile_id))
    return _run(db, outbox, response, "approve", profile_id, "approve_profile_admin")


@router.post("/profiles/{profile_id}/reject", response_model=ModerationResult)
def reject_profile(
    profile_id: UUID,
    payload: RejectRequest,
    response: Response,
    session: SessionContext = Depends(get_admin_session),
    outbox: ModerationOutbox = Depends(get_outbox),
    db: Session = Depends(get_db),
):
    reason = (payload.reason or "").strip()
    moderation.reject(_load_record(db, profile_id), reason)
    return _run(db, outbox, response, "reject", profile_id, "reject_profile_admin", reason=reason)


@router.get("/outbox", response_model=List[OutboxEntryOut])
def list_pending_moderation(
    session: SessionContext = Depends(get_admin_session),
    outbox: ModerationOutbox = Depends(get_outbox),
):
    return [OutboxEntryOut.model_validate(e) for e in outbox.entries()]


@router.post("/outbox/replay", response_model=ReplayResult)
def replay_pending_moderation(
    session: SessionContext = Depends(get_admin_session),
    outbox: ModerationOutbox = Depends(get_outbox),
    db: Session = Depends(get_db),
):
    summary = outbox.replay(db)
    return ReplayResult(
        applied_count=summary.applied_count,
        already_applied_count=summary.already_applied_count,
        still_pending_count=summary.still_pending_count,
        pending=[OutboxEntryOut.model_validate(e) for e in summary.pending],
    )
