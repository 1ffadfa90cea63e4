"""
Kindred — Candidate ranking

Full-scan ranking of every available profile of the opposite role:

  1. Query the profile store for the opposite role.
  2. Drop profiles whose availability flag is explicitly False (unset
     counts as available).
  3. Score each remaining candidate with ``MatchScorer``.
  4. Stable sort by descending score; ties keep query order.
  5. Assign a presentation tier from raw category equality, never from the
     score: a high score earned on tags alone still lands in "other".

Nothing is cached; each call re-reads live profiles.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

import structlog

from app.exceptions import NotFound
from app.models.profile import Profile, Role
from app.schemas.match import MatchTier
from app.services.match_scorer import MatchScorer
from app.store.profiles import ProfileStore

logger = structlog.get_logger("kindred.candidate_ranker")

# Score bands reported per ranking pass: (label, inclusive lower bound).
_SCORE_BANDS: list[tuple[str, int]] = [
    ("perfect", 120),
    ("great", 80),
    ("good", 50),
    ("partial", 1),
    ("none", 0),
]


@dataclass(frozen=True)
class RankedCandidate:
    profile: Profile
    score: int
    reasons: list[str] = field(default_factory=list)
    tier: MatchTier = MatchTier.OTHER


class CandidateRanker:
    """Rank candidate peers for a requester.

    The profile store and scorer are injected so the ranker can run against
    in-memory doubles.
    """

    def __init__(
        self,
        profile_store: ProfileStore,
        scorer: MatchScorer | None = None,
    ) -> None:
        self.profiles = profile_store
        self.scorer = scorer or MatchScorer()

    # ── Public API ────────────────────────────────────────────────────────

    async def rank(
        self,
        requester_role: Role | str,
        requester: Any,
    ) -> list[RankedCandidate]:
        """Score and order all available candidates of the opposite role.

        Parameters
        ----------
        requester_role:
            Role of the requesting user; candidates are of the other role.
        requester:
            The requester's matchable attributes (``MatchAttributes`` or a
            stored ``Profile``).

        Returns
        -------
        list[RankedCandidate]
            Sorted by descending score, each carrying its tier.  Empty when
            no candidate is available.
        """
        role = Role(requester_role)
        target_role = role.opposite
        log = logger.bind(requester_role=role.value, target_role=target_role.value)

        candidates = await self.profiles.query(role=target_role)
        available = [c for c in candidates if c.is_available]

        log.info(
            "candidates_fetched",
            total=len(candidates),
            available=len(available),
        )

        if not available:
            return []

        scored: list[RankedCandidate] = []
        for candidate in available:
            result = self.scorer.score(requester, candidate)
            scored.append(RankedCandidate(
                profile=candidate,
                score=result.score,
                reasons=result.reasons,
                tier=self.classify_tier(requester, candidate),
            ))

        # sorted() is stable, also with reverse=True.
        ranked = sorted(scored, key=lambda c: c.score, reverse=True)

        log.info(
            "candidates_ranked",
            total=len(ranked),
            tiers={t.value: n for t, n in self.tier_counts(ranked).items()},
            score_bands=self.score_bands(ranked),
        )
        return ranked

    async def rank_for_user(self, user_id: str) -> list[RankedCandidate]:
        """Rank candidates for a stored profile."""
        requester = await self.profiles.get(user_id)
        if requester is None:
            raise NotFound(f"Profile {user_id} not found.")
        return await self.rank(requester.role, requester)

    # ── Tiering ──────────────────────────────────────────────────────────

    def classify_tier(self, requester: Any, candidate: Any) -> MatchTier:
        if not self.scorer.primary_category_matches(requester, candidate):
            return MatchTier.OTHER
        if self.scorer.secondary_category_matches(requester, candidate):
            return MatchTier.BEST
        return MatchTier.GOOD

    @staticmethod
    def group_by_tier(
        ranked: list[RankedCandidate],
    ) -> dict[MatchTier, list[RankedCandidate]]:
        """Bucket a ranked list by tier, preserving score order inside each."""
        groups: dict[MatchTier, list[RankedCandidate]] = {tier: [] for tier in MatchTier}
        for candidate in ranked:
            groups[candidate.tier].append(candidate)
        return groups

    @staticmethod
    def tier_counts(ranked: list[RankedCandidate]) -> dict[MatchTier, int]:
        counts = Counter(c.tier for c in ranked)
        return {tier: counts.get(tier, 0) for tier in MatchTier}

    @staticmethod
    def score_bands(ranked: list[RankedCandidate]) -> dict[str, int]:
        bands = {label: 0 for label, _ in _SCORE_BANDS}
        for candidate in ranked:
            for label, floor in _SCORE_BANDS:
                if candidate.score >= floor:
                    bands[label] += 1
                    break
        return bands
