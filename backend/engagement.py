from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from schemas import EngagementStats, ProfileRecord

# (lower bound inclusive, level), checked highest first
LEVEL_THRESHOLDS = (
    (6.0, "viral"),
    (3.0, "high"),
    (1.0, "moderate"),
)
LEVELS = ("low", "moderate", "high", "viral")

# samples per metric; the edit form always collects the last three posts
SAMPLE_SIZE = 3


@dataclass(frozen=True)
class EngagementResult:
    avg_likes: float
    avg_comments: float
    rate: float
    level: str

    def as_dict(self) -> dict:
        return {
            "avg_likes": self.avg_likes,
            "avg_comments": self.avg_comments,
            "rate": self.rate,
            "level": self.level,
        }


def _mean(samples: Sequence[float]) -> float:
    return sum(samples) / SAMPLE_SIZE


def engagement_level(rate: float) -> str:
    for lower, level in LEVEL_THRESHOLDS:
        if rate >= lower:
            return level
    return "low"


def engagement_rate(stats: EngagementStats, total_followers: int) -> float:
    if not total_followers or total_followers <= 0:
        return 0.0
    return ((_mean(stats.likes) + _mean(stats.comments)) / total_followers) * 100


def calculate_engagement(stats: EngagementStats, total_followers: int) -> EngagementResult:
    """
    rate = (avg likes + avg comments) / followers * 100, or 0 without followers.
    """
    rate = engagement_rate(stats, total_followers)
    return EngagementResult(
        avg_likes=_mean(stats.likes),
        avg_comments=_mean(stats.comments),
        rate=rate,
        level=engagement_level(rate),
    )


def completion_score(stats: EngagementStats, total_followers: int) -> int:
    """How much of the analytics section is filled in, 0-100."""
    score = 0
    if total_followers > 0:
        score += 20
    if any(v > 0 for v in stats.likes):
        score += 20
    if any(v > 0 for v in stats.comments):
        score += 20
    if stats.analyticsImage:
        score += 40
    return score


def public_engagement(profile: ProfileRecord, viewer_is_owner: bool = False) -> Optional[EngagementResult]:
    """
    Engagement as shown to a viewer. Hidden analytics are only computed for
    the profile owner; everyone else gets None.
    """
    stats = profile.engagement_stats
    if stats is None:
        return None
    if stats.hideAnalytics and not viewer_is_owner:
        return None
    return calculate_engagement(stats, profile.followers_count)
