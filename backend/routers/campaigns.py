from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

import config
from access import can_view_campaign, is_campaign_owner, require_brand, require_campaign_owner
from auth import SessionContext, get_session
from db import get_db
from directory import FilterSpec, apply_campaign_directory
from errors import NotFound, ValidationError
from logging_config import get_logger
from models import Campaign, Profile
from normalize import CAMPAIGN_LIST_FIELDS, normalize_campaign, normalize_profile
from schemas import (
    BrandSummary,
    CampaignCreate,
    CampaignOut,
    CampaignRecord,
    CampaignStatus,
    CampaignStatusUpdate,
    CampaignUpdate,
)

logger = get_logger("marketplace", component="api")

router = APIRouter()


def _brand_summaries(db: Session, brand_ids) -> Dict[UUID, BrandSummary]:
    ids = list(set(brand_ids))
    if not ids:
        return {}
    rows = db.query(Profile).filter(Profile.id.in_(ids)).all()
    return {
        r.id: BrandSummary(id=r.id, name=r.name or "", avatar_url=r.avatar_url)
        for r in rows
    }


def campaign_out(record: CampaignRecord, session: SessionContext,
                 brand: Optional[BrandSummary] = None) -> CampaignOut:
    return CampaignOut(
        **record.model_dump(),
        is_owner=is_campaign_owner(session, record),
        brand=brand,
    )


def _load_row(db: Session, campaign_id: UUID) -> Campaign:
    row = db.query(Campaign).get(campaign_id)
    if not row:
        raise NotFound("Campaign not found")
    return row


def _apply_fields(row: Campaign, fields: Dict[str, Any]) -> None:
    if "title" in fields:
        title = (fields["title"] or "").strip()
        if not title:
            raise ValidationError("Title is required", field="title")
        fields["title"] = title

    for k in CAMPAIGN_LIST_FIELDS + ("preferred_gender",):
        if k in fields and fields[k] is None:
            fields[k] = []

    for k, v in fields.items():
        setattr(row, k, v)


@router.post("", response_model=CampaignOut)
def create_campaign(
    payload: CampaignCreate,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    brand_row = db.query(Profile).get(session.user_id)
    require_brand(normalize_profile(brand_row) if brand_row else None)

    fields = payload.model_dump(exclude_unset=True)
    fields.setdefault("status", "draft")

    c = Campaign(brand_id=session.user_id, title="")
    _apply_fields(c, fields)
    for k in CAMPAIGN_LIST_FIELDS + ("preferred_gender",):
        if getattr(c, k) is None:
            setattr(c, k, [])

    db.add(c)
    db.commit()
    db.refresh(c)

    logger.info("campaign_created", extra={"campaign_id": str(c.id), "user_id": str(session.user_id)})
    record = normalize_campaign(c)
    return campaign_out(record, session, _brand_summaries(db, [c.brand_id]).get(c.brand_id))


@router.get("", response_model=List[CampaignOut])
def list_campaigns(
    scope: Literal["all", "my"] = "all",
    status: Optional[CampaignStatus] = None,
    q: Optional[str] = None,
    niches: Optional[List[str]] = Query(None),
    follower_ranges: Optional[List[str]] = Query(None),
    engagement: Optional[List[str]] = Query(None),
    platforms: Optional[List[str]] = Query(None),
    sort: str = "newest",
    limit: int = config.DIRECTORY_LIMIT,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    """
    scope=all: active campaigns from other brands (what creators browse)
    scope=my:  the caller's own campaigns in every status

    Examples:
      /campaigns?sort=highest-paying
      /campaigns?scope=my&status=draft
      /campaigns?platforms=Instagram&niches=Fitness&q=summer
    """
    if limit < 1 or limit > 500:
        raise ValidationError("limit must be between 1 and 500", field="limit")

    spec = FilterSpec.build(
        query=q,
        categories=niches,
        follower_ranges=follower_ranges,
        engagement_levels=engagement,
        platforms=platforms,
        sort=sort,
    )

    query = db.query(Campaign)
    if scope == "my":
        query = query.filter(Campaign.brand_id == session.user_id)
    else:
        query = query.filter(Campaign.status == "active").filter(Campaign.brand_id != session.user_id)
    if status:
        query = query.filter(Campaign.status == status)

    rows = query.all()
    brands = _brand_summaries(db, [r.brand_id for r in rows])

    records = [
        r for r in (normalize_campaign(row) for row in rows)
        if can_view_campaign(session, r)
    ]
    records = apply_campaign_directory(records, spec)

    return [campaign_out(r, session, brands.get(r.brand_id)) for r in records[:limit]]


@router.get("/{campaign_id}", response_model=CampaignOut)
def get_campaign(
    campaign_id: UUID,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    record = normalize_campaign(_load_row(db, campaign_id))
    if not can_view_campaign(session, record):
        raise NotFound("Campaign not found")
    return campaign_out(record, session, _brand_summaries(db, [record.brand_id]).get(record.brand_id))


@router.patch("/{campaign_id}", response_model=CampaignOut)
def update_campaign(
    campaign_id: UUID,
    payload: CampaignUpdate,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    row = _load_row(db, campaign_id)
    require_campaign_owner(session, normalize_campaign(row))

    _apply_fields(row, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(row)
    return campaign_out(normalize_campaign(row), session, _brand_summaries(db, [row.brand_id]).get(row.brand_id))


@router.patch("/{campaign_id}/status", response_model=CampaignOut)
def update_campaign_status(
    campaign_id: UUID,
    payload: CampaignStatusUpdate,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    row = _load_row(db, campaign_id)
    require_campaign_owner(session, normalize_campaign(row))

    previous = row.status
    row.status = payload.status
    db.commit()
    db.refresh(row)

    logger.info(
        "campaign_status_changed",
        extra={"campaign_id": str(row.id), "from_status": previous, "to_status": row.status},
    )
    return campaign_out(normalize_campaign(row), session, _brand_summaries(db, [row.brand_id]).get(row.brand_id))


@router.delete("/{campaign_id}")
def delete_campaign(
    campaign_id: UUID,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    row = _load_row(db, campaign_id)
    require_campaign_owner(session, normalize_campaign(row))

    db.delete(row)
    db.commit()

    logger.info("campaign_deleted", extra={"campaign_id": str(campaign_id), "user_id": str(session.user_id)})
    return {"deleted": True, "campaign_id": str(campaign_id)}
