# models.py
import uuid
from sqlalchemy import (
    Boolean, Column, String, Integer, DateTime, Text, ForeignKey, Numeric, JSON, Uuid
)
from sqlalchemy.orm import relationship
from datetime import datetime
from db import Base


class Profile(Base):
    __tablename__ = "profiles"
    # same id as the identity provider's user
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False, index=True)  # creator/brand

    bio = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    website = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    preferred_contact = Column(String, nullable=True)  # email/phone
    gender = Column(String, nullable=True)
    date_of_birth = Column(String, nullable=True)

    followers_count = Column(Integer, nullable=True, default=0)
    categories = Column(JSON, nullable=True)
    platforms = Column(JSON, nullable=True)
    social_links = Column(JSON, nullable=True)
    engagement_stats = Column(JSON, nullable=True)

    # brand-only
    budget_range = Column(String, nullable=True)
    min_budget = Column(Numeric, nullable=True)
    max_budget = Column(Numeric, nullable=True)
    collaboration_types = Column(JSON, nullable=True)
    preferred_creator_niches = Column(JSON, nullable=True)
    partnership_goals = Column(Text, nullable=True)
    past_collaborations = Column(Text, nullable=True)

    is_public = Column(Boolean, nullable=False, default=False, index=True)
    under_review = Column(Boolean, nullable=False, default=False, index=True)
    approved = Column(Boolean, nullable=False, default=False)
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    campaigns = relationship("Campaign", back_populates="brand", cascade="all, delete-orphan")


class Campaign(Base):
    __tablename__ = "campaigns"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    brand_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    requirements = Column(Text, nullable=True)

    content_type = Column(JSON, nullable=True)
    preferred_niches = Column(JSON, nullable=True)
    preferred_platforms = Column(JSON, nullable=True)
    geographic_targeting = Column(JSON, nullable=True)
    hashtags = Column(JSON, nullable=True)

    budget_range = Column(String, nullable=True)
    min_budget = Column(Numeric, nullable=True)
    max_budget = Column(Numeric, nullable=True)
    payment_type = Column(String, nullable=True)  # fixed/negotiable/performance/product

    follower_range = Column(String, nullable=True)
    min_engagement_rate = Column(Numeric, nullable=True)
    # legacy rows hold a plain string or a JSON-encoded string here
    preferred_gender = Column(JSON, nullable=True)

    usage_rights = Column(Text, nullable=True)
    past_collaborations = Column(Text, nullable=True)
    extra_notes = Column(Text, nullable=True)
    contact_info = Column(JSON, nullable=True)

    status = Column(String, nullable=False, default="draft", index=True)
    start_date = Column(String, nullable=True)
    end_date = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    brand = relationship("Profile", back_populates="campaigns")
