from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from engagement import LEVELS, engagement_level, public_engagement
from errors import ValidationError
from schemas import CampaignRecord, ProfileRecord

# label -> (min, max); max None means no upper bound. Bounds are inclusive.
FOLLOWER_RANGES: Dict[str, Tuple[int, Optional[int]]] = {
    "1K-10K": (1_000, 10_000),
    "10K-50K": (10_000, 50_000),
    "50K-100K": (50_000, 100_000),
    "100K-500K": (100_000, 500_000),
    "500K+": (500_000, None),
}

PROFILE_SORTS = ("newest", "oldest", "followers", "alphabetical", "engagement")
CAMPAIGN_SORTS = ("newest", "oldest", "highest-paying", "lowest-paying", "alphabetical")

_EPOCH = datetime.min


def _norm_set(values: Optional[Iterable[str]]) -> FrozenSet[str]:
    return frozenset(v for v in (values or ()) if v)


@dataclass(frozen=True)
class FilterSpec:
    query: str = ""
    categories: FrozenSet[str] = field(default_factory=frozenset)
    follower_ranges: FrozenSet[str] = field(default_factory=frozenset)
    engagement_levels: FrozenSet[str] = field(default_factory=frozenset)
    platforms: FrozenSet[str] = field(default_factory=frozenset)
    sort: str = "newest"

    @classmethod
    def build(
        cls,
        *,
        query: Optional[str] = None,
        categories: Optional[Iterable[str]] = None,
        follower_ranges: Optional[Iterable[str]] = None,
        engagement_levels: Optional[Iterable[str]] = None,
        platforms: Optional[Iterable[str]] = None,
        sort: Optional[str] = None,
    ) -> "FilterSpec":
        ranges = _norm_set(follower_ranges)
        unknown = sorted(r for r in ranges if r not in FOLLOWER_RANGES)
        if unknown:
            raise ValidationError(
                f"Unknown follower range(s): {', '.join(unknown)}", field="follower_ranges"
            )

        levels = frozenset(level.lower() for level in _norm_set(engagement_levels))
        unknown = sorted(level for level in levels if level not in LEVELS)
        if unknown:
            raise ValidationError(
                f"Unknown engagement level(s): {', '.join(unknown)}", field="engagement"
            )

        return cls(
            query=(query or "").strip(),
            categories=_norm_set(categories),
            follower_ranges=ranges,
            engagement_levels=levels,
            platforms=_norm_set(platforms),
            sort=sort or "newest",
        )


# ----------------------------
# Individual predicates
# ----------------------------
def _matches_text(query: str, *fields: Optional[str]) -> bool:
    if not query:
        return True
    needle = query.lower()
    return any(f and needle in f.lower() for f in fields)


def _intersects(selected: FrozenSet[str], values: Sequence[str]) -> bool:
    if not selected:
        return True
    return any(v in selected for v in values)


def in_follower_ranges(followers: int, labels: FrozenSet[str]) -> bool:
    if not labels:
        return True
    for label in labels:
        low, high = FOLLOWER_RANGES[label]
        if followers >= low and (high is None or followers <= high):
            return True
    return False


def profile_engagement_level(profile: ProfileRecord) -> Optional[str]:
    result = public_engagement(profile)
    return result.level if result else None


def profile_engagement_rate(profile: ProfileRecord) -> float:
    result = public_engagement(profile)
    return result.rate if result else 0.0


# ----------------------------
# Filtering
# ----------------------------
def profile_matches(profile: ProfileRecord, spec: FilterSpec) -> bool:
    if not _matches_text(spec.query, profile.name, profile.bio):
        return False
    if not _intersects(spec.categories, profile.categories):
        return False
    if not in_follower_ranges(profile.followers_count, spec.follower_ranges):
        return False
    if spec.engagement_levels and profile_engagement_level(profile) not in spec.engagement_levels:
        return False
    if not _intersects(spec.platforms, profile.platforms):
        return False
    return True


def campaign_matches(campaign: CampaignRecord, spec: FilterSpec) -> bool:
    if not _matches_text(spec.query, campaign.title, campaign.description):
        return False
    if not _intersects(spec.categories, campaign.preferred_niches):
        return False
    if spec.follower_ranges and campaign.follower_range not in spec.follower_ranges:
        return False
    if spec.engagement_levels and engagement_level(campaign.min_engagement_rate) not in spec.engagement_levels:
        return False
    if not _intersects(spec.platforms, campaign.preferred_platforms):
        return False
    return True


def filter_profiles(profiles: Iterable[ProfileRecord], spec: FilterSpec) -> List[ProfileRecord]:
    return [p for p in profiles if profile_matches(p, spec)]


def filter_campaigns(campaigns: Iterable[CampaignRecord], spec: FilterSpec) -> List[CampaignRecord]:
    return [c for c in campaigns if campaign_matches(c, spec)]


# ----------------------------
# Sorting
# ----------------------------
def _created(record) -> datetime:
    return record.created_at or _EPOCH


# sort key -> (key function, descending)
_PROFILE_KEYS: Dict[str, Tuple[Callable[[ProfileRecord], object], bool]] = {
    "newest": (_created, True),
    "oldest": (_created, False),
    "followers": (lambda p: p.followers_count, True),
    "alphabetical": (lambda p: p.name.casefold(), False),
    "engagement": (profile_engagement_rate, True),
}

_CAMPAIGN_KEYS: Dict[str, Tuple[Callable[[CampaignRecord], object], bool]] = {
    "newest": (_created, True),
    "oldest": (_created, False),
    "highest-paying": (lambda c: c.max_budget, True),
    "lowest-paying": (lambda c: c.min_budget, False),
    "alphabetical": (lambda c: c.title.casefold(), False),
}


def sort_profiles(profiles: Iterable[ProfileRecord], sort: str) -> List[ProfileRecord]:
    if sort not in _PROFILE_KEYS:
        raise ValidationError(
            f"sort must be one of: {', '.join(PROFILE_SORTS)}", field="sort"
        )
    key, descending = _PROFILE_KEYS[sort]
    # sorted() keeps equal items in input order, reverse=True included
    return sorted(profiles, key=key, reverse=descending)


def sort_campaigns(campaigns: Iterable[CampaignRecord], sort: str) -> List[CampaignRecord]:
    if sort not in _CAMPAIGN_KEYS:
        raise ValidationError(
            f"sort must be one of: {', '.join(CAMPAIGN_SORTS)}", field="sort"
        )
    key, descending = _CAMPAIGN_KEYS[sort]
    return sorted(campaigns, key=key, reverse=descending)


def apply_profile_directory(profiles: Iterable[ProfileRecord], spec: FilterSpec) -> List[ProfileRecord]:
    return sort_profiles(filter_profiles(profiles, spec), spec.sort)


def apply_campaign_directory(campaigns: Iterable[CampaignRecord], spec: FilterSpec) -> List[CampaignRecord]:
    return sort_campaigns(filter_campaigns(campaigns, spec), spec.sort)
