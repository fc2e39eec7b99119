"""
Load-time normalization of profile and campaign rows.

Rows may come back from storage with nulls or with shapes written by older
clients (a string where a list is expected, a JSON-encoded list, numbers as
strings). Everything here coerces instead of raising; a profile without a
usable name is shown under a placeholder.
"""
from __future__ import annotations

import json
import math
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

from schemas import CampaignRecord, ContactInfo, EngagementStats, ProfileRecord, SocialLink

PROFILE_LIST_FIELDS = (
    "categories",
    "platforms",
    "collaboration_types",
    "preferred_creator_niches",
)

CAMPAIGN_LIST_FIELDS = (
    "content_type",
    "preferred_niches",
    "preferred_platforms",
    "geographic_targeting",
    "hashtags",
)

UNNAMED_PROFILE = "Unnamed profile"

GENDERS = {"male", "female", "other", "prefer_not_to_say"}
CONTACT_METHODS = {"email", "phone"}


def row_to_dict(row: Any) -> Dict[str, Any]:
    """Plain dict from an ORM row (column attributes only) or a mapping."""
    if isinstance(row, Mapping):
        return dict(row)
    return {c.name: getattr(row, c.name) for c in row.__table__.columns}


def coerce_string_list(raw: Any) -> List[str]:
    """
    Canonical list-of-strings from any of the shapes seen in stored rows:

      None / ""                  -> []
      ["a", "b"]                 -> ["a", "b"]
      "a"                        -> ["a"]
      '["a", "b"]'               -> ["a", "b"]
      '"a"'                      -> ["a"]
      '{"0": "a"}' or {"0": "a"} -> ["a"]
    """
    if raw is None:
        return []

    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return []
        try:
            decoded = json.loads(text)
        except ValueError:
            return [text]
        if decoded is None:
            return []
        if isinstance(decoded, str):
            return _clean([decoded])
        if isinstance(decoded, (list, dict)):
            return coerce_string_list(decoded)
        # a bare JSON number/bool is still just the original text
        return [text]

    if isinstance(raw, Mapping):
        return _clean(raw.values())

    if isinstance(raw, (list, tuple, set, frozenset)):
        return _clean(raw)

    return _clean([raw])


def _clean(values: Iterable[Any]) -> List[str]:
    out: List[str] = []
    for v in values:
        if v is None:
            continue
        s = str(v).strip()
        if s:
            out.append(s)
    return out


def _number(value: Any, default: float = 0) -> float:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
        return number if math.isfinite(number) else default
    try:
        number = float(str(value).strip())
    except ValueError:
        return default
    return number if math.isfinite(number) else default


def _non_negative_int(value: Any) -> int:
    return max(0, int(_number(value)))


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value)
    return s if s.strip() else None


def _triple(values: Any) -> List[float]:
    nums = [_number(v) for v in values] if isinstance(values, (list, tuple)) else []
    return (nums + [0.0, 0.0, 0.0])[:3]


def normalize_social_links(raw: Any) -> List[SocialLink]:
    if not isinstance(raw, list):
        return []
    links: List[SocialLink] = []
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        links.append(
            SocialLink(
                platform=str(item.get("platform") or "other"),
                url=str(item.get("url") or ""),
                followers=_non_negative_int(item.get("followers")),
            )
        )
    return links


def total_followers(links: Iterable[Any]) -> int:
    total = 0
    for link in links:
        followers = link.get("followers") if isinstance(link, Mapping) else link.followers
        total += _non_negative_int(followers)
    return total


def normalize_engagement_stats(raw: Any) -> Optional[EngagementStats]:
    if raw is None:
        return None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None
    if not isinstance(raw, Mapping):
        return None
    return EngagementStats(
        likes=_triple(raw.get("likes")),
        comments=_triple(raw.get("comments")),
        analyticsImage=_text(raw.get("analyticsImage")),
        hideAnalytics=_flag(raw.get("hideAnalytics")),
    )


def normalize_profile(raw: Any) -> ProfileRecord:
    data = row_to_dict(raw)

    # blank names are rejected on write; old rows may still carry one
    name = _text(data.get("name")) or UNNAMED_PROFILE

    profile_type = data.get("type") if data.get("type") in ("creator", "brand") else "creator"
    gender = data.get("gender") if data.get("gender") in GENDERS else "prefer_not_to_say"
    contact = data.get("preferred_contact")
    if contact not in CONTACT_METHODS:
        contact = "email"

    record: Dict[str, Any] = {
        "id": data["id"],
        "name": name,
        "type": profile_type,
        "bio": _text(data.get("bio")),
        "location": _text(data.get("location")),
        "website": _text(data.get("website")),
        "avatar_url": _text(data.get("avatar_url")),
        "email": _text(data.get("email")),
        "phone": _text(data.get("phone")),
        "preferred_contact": contact,
        "gender": gender,
        "date_of_birth": _text(data.get("date_of_birth")),
        "followers_count": _non_negative_int(data.get("followers_count")),
        "social_links": normalize_social_links(data.get("social_links")),
        "engagement_stats": normalize_engagement_stats(data.get("engagement_stats")),
        "budget_range": _text(data.get("budget_range")),
        "min_budget": _number(data.get("min_budget")),
        "max_budget": _number(data.get("max_budget")),
        "partnership_goals": _text(data.get("partnership_goals")),
        "past_collaborations": _text(data.get("past_collaborations")),
        "is_public": _flag(data.get("is_public")),
        "under_review": _flag(data.get("under_review")),
        "approved": _flag(data.get("approved")),
        "rejection_reason": _text(data.get("rejection_reason")),
        "created_at": data.get("created_at"),
        "updated_at": data.get("updated_at"),
    }
    for field in PROFILE_LIST_FIELDS:
        record[field] = coerce_string_list(data.get(field))

    return ProfileRecord(**record)


def normalize_contact_info(raw: Any) -> ContactInfo:
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return ContactInfo(email=_text(raw))
    if not isinstance(raw, Mapping):
        return ContactInfo()
    return ContactInfo(
        email=_text(raw.get("email")),
        social_links=coerce_string_list(raw.get("social_links")),
    )


def normalize_campaign(raw: Any) -> CampaignRecord:
    data = row_to_dict(raw)

    record: Dict[str, Any] = {
        "id": data["id"],
        "brand_id": data["brand_id"],
        "title": _text(data.get("title")) or "Untitled campaign",
        "description": _text(data.get("description")),
        "requirements": _text(data.get("requirements")),
        "budget_range": _text(data.get("budget_range")),
        "min_budget": _number(data.get("min_budget")),
        "max_budget": _number(data.get("max_budget")),
        "payment_type": _text(data.get("payment_type")),
        "follower_range": _text(data.get("follower_range")),
        "min_engagement_rate": _number(data.get("min_engagement_rate")),
        "preferred_gender": coerce_string_list(data.get("preferred_gender")),
        "usage_rights": _text(data.get("usage_rights")),
        "past_collaborations": _text(data.get("past_collaborations")),
        "extra_notes": _text(data.get("extra_notes")),
        "contact_info": normalize_contact_info(data.get("contact_info")),
        "status": _text(data.get("status")) or "draft",
        "start_date": _text(data.get("start_date")),
        "end_date": _text(data.get("end_date")),
        "created_at": data.get("created_at"),
        "updated_at": data.get("updated_at"),
    }
    for field in CAMPAIGN_LIST_FIELDS:
        record[field] = coerce_string_list(data.get(field))

    return CampaignRecord(**record)
