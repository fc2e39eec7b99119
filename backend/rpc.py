# rpc.py
"""
Server-side procedures for moderation.

Approve/reject are not plain row updates: the procedure re-reads the profile,
re-checks the transition and writes it in its own commit. Callers go through
call_procedure() so any storage failure surfaces as RemoteFailure with the
session rolled back.
"""
from typing import Any, Callable, Dict
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import moderation
from errors import NotFound, RemoteFailure
from logging_config import get_logger
from models import Profile
from normalize import normalize_profile
from schemas import ProfileRecord

logger = get_logger("marketplace", component="rpc")

PROCEDURES: Dict[str, Callable[..., ProfileRecord]] = {}


def procedure(name: str):
    def register(fn):
        PROCEDURES[name] = fn
        return fn
    return register


def _load(db: Session, profile_id: UUID) -> Profile:
    row = db.query(Profile).get(profile_id)
    if not row:
        raise NotFound("Profile not found")
    return row


def _write(db: Session, row: Profile, record: ProfileRecord) -> ProfileRecord:
    for k, v in moderation.visibility_changes(record).items():
        setattr(row, k, v)
    db.commit()
    db.refresh(row)
    return normalize_profile(row)


@procedure("approve_profile_admin")
def approve_profile_admin(db: Session, profile_id: UUID) -> ProfileRecord:
    row = _load(db, profile_id)
    return _write(db, row, moderation.approve(normalize_profile(row)))


@procedure("reject_profile_admin")
def reject_profile_admin(db: Session, profile_id: UUID, reason: str) -> ProfileRecord:
    row = _load(db, profile_id)
    return _write(db, row, moderation.reject(normalize_profile(row), reason))


def call_procedure(db: Session, name: str, **args: Any) -> ProfileRecord:
    fn = PROCEDURES.get(name)
    if fn is None:
        raise RemoteFailure(f"Unknown procedure: {name}")

    try:
        result = fn(db, **args)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("procedure_failed", extra={"procedure": name, "procedure_args": {k: str(v) for k, v in args.items()}})
        raise RemoteFailure(f"{name} failed: {e.__class__.__name__}") from e

    logger.info("procedure_completed", extra={"procedure": name, "profile_id": str(result.id)})
    return result
