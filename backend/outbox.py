# outbox.py
"""
Approve/reject actions whose remote procedure failed.

An admin may have seen "approved" on screen while the store never recorded
it. Instead of losing that decision, the action is held here until an admin
replays it. One entry per profile: a newer decision replaces an older one.
Replay is idempotent; an entry whose effect is already in the store is
dropped without calling the procedure again.
"""
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import moderation
from errors import NotFound, PreconditionFailed, RemoteFailure, ValidationError
from logging_config import get_logger
from models import Profile
from normalize import normalize_profile
from rpc import call_procedure
from schemas import ProfileRecord

logger = get_logger("marketplace", component="outbox")

PROCEDURE_FOR_ACTION = {
    "approve": "approve_profile_admin",
    "reject": "reject_profile_admin",
}


@dataclass
class OutboxEntry:
    action: str
    target_id: UUID
    payload: Dict[str, Any] = field(default_factory=dict)
    attempts: int = 1
    last_error: Optional[str] = None
    queued_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class ReplaySummary:
    applied_count: int = 0
    already_applied_count: int = 0
    still_pending_count: int = 0
    pending: List[OutboxEntry] = field(default_factory=list)


def already_applied(entry: OutboxEntry, profile: ProfileRecord) -> bool:
    state = moderation.visibility_state(profile)
    if entry.action == "approve":
        return state == moderation.PUBLIC
    if entry.action == "reject":
        return (
            state == moderation.REJECTED
            and profile.rejection_reason == (entry.payload.get("reason") or "").strip()
        )
    return False


class ModerationOutbox:
    def __init__(self):
        self._entries: Dict[UUID, OutboxEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> List[OutboxEntry]:
        with self._lock:
            return sorted(self._entries.values(), key=lambda e: e.queued_at)

    def get(self, target_id: UUID) -> Optional[OutboxEntry]:
        return self._entries.get(target_id)

    def enqueue(self, action: str, target_id: UUID, payload: Optional[Dict[str, Any]] = None,
                error: Optional[str] = None) -> OutboxEntry:
        if action not in PROCEDURE_FOR_ACTION:
            raise ValueError(f"Unsupported moderation action: {action}")

        with self._lock:
            entry = OutboxEntry(action=action, target_id=target_id, payload=dict(payload or {}), last_error=error)
            self._entries[target_id] = entry

        logger.warning(
            "moderation_action_queued",
            extra={"action": action, "profile_id": str(target_id), "error": error},
        )
        return entry

    def discard(self, target_id: UUID) -> None:
        with self._lock:
            self._entries.pop(target_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def replay(self, db: Session, caller: Callable[..., ProfileRecord] = call_procedure) -> ReplaySummary:
        summary = ReplaySummary()

        for entry in self.entries():
            try:
                row = db.query(Profile).get(entry.target_id)
            except SQLAlchemyError as e:
                db.rollback()
                self._mark_failed(entry, f"load failed: {e.__class__.__name__}")
                continue

            if row is None:
                logger.warning("moderation_target_missing", extra={"profile_id": str(entry.target_id)})
                self._drop(entry)
                continue

            if already_applied(entry, normalize_profile(row)):
                self._drop(entry)
                summary.already_applied_count += 1
                continue

            try:
                caller(db, PROCEDURE_FOR_ACTION[entry.action], profile_id=entry.target_id, **entry.payload)
            except RemoteFailure as e:
                self._mark_failed(entry, e.message)
                continue
            except (NotFound, PreconditionFailed, ValidationError) as e:
                # the profile moved on since the action was taken
                logger.warning(
                    "moderation_action_stale",
                    extra={"action": entry.action, "profile_id": str(entry.target_id), "error": e.message},
                )
                self._drop(entry)
                continue

            self._drop(entry)
            summary.applied_count += 1

        summary.pending = self.entries()
        summary.still_pending_count = len(summary.pending)

        logger.info(
            "outbox_replayed",
            extra={
                "applied_count": summary.applied_count,
                "already_applied_count": summary.already_applied_count,
                "still_pending_count": summary.still_pending_count,
            },
        )
        return summary

    def _drop(self, entry: OutboxEntry) -> None:
        # leave a newer decision for the same profile in place
        with self._lock:
            if self._entries.get(entry.target_id) is entry:
                del self._entries[entry.target_id]

    def _mark_failed(self, entry: OutboxEntry, error: str) -> None:
        with self._lock:
            current = self._entries.get(entry.target_id)
            if current is entry:
                entry.attempts += 1
                entry.last_error = error


moderation_outbox = ModerationOutbox()


def get_outbox() -> ModerationOutbox:
    return moderation_outbox
