from enum import Enum

from pydantic import BaseModel

from app.models.profile import Role
from app.schemas.profile import MatchAttributes, ProfileResponse


class MatchTier(str, Enum):
    BEST = "best"    # primary and secondary category both match
    GOOD = "good"    # primary category matches
    OTHER = "other"


class RankRequest(BaseModel):
    role: Role
    attributes: MatchAttributes = MatchAttributes()


class RankedCandidateItem(BaseModel):
    profile: ProfileResponse
    score: int
    reasons: list[str]
    tier: MatchTier


class RankedCandidatesResponse(BaseModel):
    candidates: list[RankedCandidateItem]
    tier_counts: dict[MatchTier, int]
    total: int
