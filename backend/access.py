"""Who may see and change campaigns."""
from __future__ import annotations

from typing import Optional

from auth import SessionContext
from errors import Forbidden
from schemas import CampaignRecord, ProfileRecord

ACTIVE = "active"


def is_campaign_owner(session: Optional[SessionContext], campaign: CampaignRecord) -> bool:
    return session is not None and session.user_id == campaign.brand_id


def can_view_campaign(session: Optional[SessionContext], campaign: CampaignRecord) -> bool:
    """
    The owning brand always sees its campaigns. Everyone else, creators and
    other brands alike, only sees active ones.
    """
    if is_campaign_owner(session, campaign):
        return True
    return campaign.status == ACTIVE


def require_campaign_owner(session: Optional[SessionContext], campaign: CampaignRecord) -> None:
    if not is_campaign_owner(session, campaign):
        raise Forbidden("Not authorized")


def require_brand(profile: Optional[ProfileRecord]) -> None:
    if profile is None or profile.type != "brand":
        raise Forbidden("Only brands can create campaigns")
