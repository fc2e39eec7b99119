# schemas.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, Dict, Any, List, Literal
from uuid import UUID
from datetime import datetime

ProfileType = Literal["creator", "brand"]
Gender = Literal["male", "female", "other", "prefer_not_to_say"]
PreferredContact = Literal["email", "phone"]
CampaignStatus = Literal["draft", "active", "paused", "completed"]
PaymentType = Literal["fixed", "negotiable", "performance", "product"]
GenderPreference = Literal["male", "female", "any", "open to all"]
VisibilityState = Literal["draft", "under_review", "rejected", "public"]


# ---------- Shared pieces ----------
class SocialLink(BaseModel):
    platform: str = "other"
    url: str = ""
    followers: int = Field(0, ge=0)


class EngagementStats(BaseModel):
    likes: List[float] = Field(default_factory=lambda: [0, 0, 0], min_length=3, max_length=3)
    comments: List[float] = Field(default_factory=lambda: [0, 0, 0], min_length=3, max_length=3)
    analyticsImage: Optional[str] = None
    hideAnalytics: bool = False


class ContactInfo(BaseModel):
    email: Optional[str] = None
    social_links: List[str] = Field(default_factory=list)


# ---------- Records (normalized rows) ----------
class ProfileRecord(BaseModel):
    id: UUID
    name: str
    type: ProfileType = "creator"
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    avatar_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    preferred_contact: PreferredContact = "email"
    gender: Gender = "prefer_not_to_say"
    date_of_birth: Optional[str] = None

    followers_count: int = 0
    categories: List[str] = Field(default_factory=list)
    platforms: List[str] = Field(default_factory=list)
    social_links: List[SocialLink] = Field(default_factory=list)
    engagement_stats: Optional[EngagementStats] = None

    budget_range: Optional[str] = None
    min_budget: float = 0
    max_budget: float = 0
    collaboration_types: List[str] = Field(default_factory=list)
    preferred_creator_niches: List[str] = Field(default_factory=list)
    partnership_goals: Optional[str] = None
    past_collaborations: Optional[str] = None

    is_public: bool = False
    under_review: bool = False
    approved: bool = False
    rejection_reason: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CampaignRecord(BaseModel):
    id: UUID
    brand_id: UUID
    title: str
    description: Optional[str] = None
    requirements: Optional[str] = None

    content_type: List[str] = Field(default_factory=list)
    preferred_niches: List[str] = Field(default_factory=list)
    preferred_platforms: List[str] = Field(default_factory=list)
    geographic_targeting: List[str] = Field(default_factory=list)
    hashtags: List[str] = Field(default_factory=list)

    budget_range: Optional[str] = None
    min_budget: float = 0
    max_budget: float = 0
    # legacy rows may carry values outside PaymentType
    payment_type: Optional[str] = None

    follower_range: Optional[str] = None
    min_engagement_rate: float = 0
    preferred_gender: List[str] = Field(default_factory=list)

    usage_rights: Optional[str] = None
    past_collaborations: Optional[str] = None
    extra_notes: Optional[str] = None
    contact_info: ContactInfo = Field(default_factory=ContactInfo)

    status: str = "draft"
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------- Profiles ----------
class ProfileFields(BaseModel):
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    avatar_url: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    preferred_contact: Optional[PreferredContact] = None
    gender: Optional[Gender] = None
    date_of_birth: Optional[str] = None
    categories: Optional[List[str]] = None
    platforms: Optional[List[str]] = None
    social_links: Optional[List[SocialLink]] = None
    engagement_stats: Optional[EngagementStats] = None
    budget_range: Optional[str] = None
    min_budget: Optional[float] = Field(None, ge=0)
    max_budget: Optional[float] = Field(None, ge=0)
    collaboration_types: Optional[List[str]] = None
    preferred_creator_niches: Optional[List[str]] = None
    partnership_goals: Optional[str] = None
    past_collaborations: Optional[str] = None


class ProfileCreate(ProfileFields):
    name: str
    type: ProfileType


class ProfileUpdate(ProfileFields):
    name: Optional[str] = None


class EngagementOut(BaseModel):
    avg_likes: float
    avg_comments: float
    rate: float
    level: str


class ProfileOut(ProfileRecord):
    visibility: VisibilityState
    engagement: Optional[EngagementOut] = None


class ProfileSummary(BaseModel):
    id: UUID
    name: str
    type: ProfileType
    bio: Optional[str] = None
    location: Optional[str] = None
    avatar_url: Optional[str] = None
    followers_count: int = 0
    categories: List[str] = Field(default_factory=list)
    platforms: List[str] = Field(default_factory=list)
    engagement: Optional[EngagementOut] = None
    created_at: Optional[datetime] = None


class VisibilityRequest(BaseModel):
    is_public: bool


class EngagementPreviewRequest(BaseModel):
    engagement_stats: EngagementStats
    total_followers: Optional[int] = Field(None, ge=0)
    # used to derive total_followers when it is not given
    social_links: Optional[List[SocialLink]] = None


class EngagementPreviewOut(BaseModel):
    total_followers: int
    engagement: EngagementOut
    completion_score: int


# ---------- Campaigns ----------
class CampaignFields(BaseModel):
    description: Optional[str] = None
    requirements: Optional[str] = None
    content_type: Optional[List[str]] = None
    preferred_niches: Optional[List[str]] = None
    preferred_platforms: Optional[List[str]] = None
    geographic_targeting: Optional[List[str]] = None
    hashtags: Optional[List[str]] = None
    budget_range: Optional[str] = None
    min_budget: Optional[float] = Field(None, ge=0)
    max_budget: Optional[float] = Field(None, ge=0)
    payment_type: Optional[PaymentType] = None
    follower_range: Optional[str] = None
    min_engagement_rate: Optional[float] = Field(None, ge=0)
    preferred_gender: Optional[List[GenderPreference]] = None
    usage_rights: Optional[str] = None
    past_collaborations: Optional[str] = None
    extra_notes: Optional[str] = None
    contact_info: Optional[ContactInfo] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class CampaignCreate(CampaignFields):
    title: str
    status: CampaignStatus = "draft"


class CampaignUpdate(CampaignFields):
    title: Optional[str] = None
    status: Optional[CampaignStatus] = None


class CampaignStatusUpdate(BaseModel):
    status: CampaignStatus


class BrandSummary(BaseModel):
    id: UUID
    name: str
    avatar_url: Optional[str] = None


class CampaignOut(CampaignRecord):
    is_owner: bool = False
    brand: Optional[BrandSummary] = None


# ---------- Moderation ----------
class RejectRequest(BaseModel):
    reason: str = ""


class ModerationResult(BaseModel):
    profile_id: UUID
    action: Literal["approve", "reject"]
    # "pending" means the remote call failed and the action sits in the outbox
    status: Literal["applied", "pending"]
    detail: Optional[str] = None


class OutboxEntryOut(BaseModel):
    action: Literal["approve", "reject"]
    target_id: UUID
    payload: Dict[str, Any] = Field(default_factory=dict)
    attempts: int
    last_error: Optional[str] = None
    queued_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReplayResult(BaseModel):
    applied_count: int
    already_applied_count: int
    still_pending_count: int
    pending: List[OutboxEntryOut]


# ---------- Session ----------
class SessionOut(BaseModel):
    user_id: UUID
    email: Optional[str] = None
    is_admin: bool = False


class DevSignInRequest(BaseModel):
    user_id: UUID
    email: EmailStr


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
