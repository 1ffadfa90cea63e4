"""
Kindred — Peer compatibility scoring

Scores one candidate against a requester with additive, independent factors
evaluated in a fixed order (so the reasons list is always ordered the same):

  1. Primary category exact match          +50   "same primary category"
  2. Secondary category exact match        +50   "same secondary category"
     (only when the requester has one)
  3. Need/offer tag overlap                +10 per tag, capped at 50
  4. Interest tag fuzzy overlap            +3 per tag, capped at 10
     (case-insensitive substring in either direction)
  5. Age bracket exact match               +10   "similar age"
  6. Stage: both survivors                 +10   "both survivors"
     else same numbered stage              +10   "same stage"
  7. Recurrence exact match                +10   "similar recurrence history"

No normalisation: the score is the raw integer sum (ceiling ~220).  The two
tag caps are independent and are never pooled.

Profiles are read by attribute, so both ``app.models.profile.Profile`` rows
and ``app.schemas.profile.MatchAttributes`` payloads can be scored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

import structlog

from app.config import get_settings

logger = structlog.get_logger("kindred.match_scorer")


@dataclass(frozen=True)
class MatchResult:
    """Ephemeral score for one (requester, candidate) pair."""

    score: int = 0
    reasons: list[str] = field(default_factory=list)


def _present(value: str | None) -> bool:
    return bool(value and value.strip())


def _clean_tags(tags: Iterable[str] | None) -> list[str]:
    """Drop blanks and duplicates, keeping first-seen order."""
    if not tags:
        return []
    return list(dict.fromkeys(t.strip() for t in tags if t and t.strip()))


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


class MatchScorer:
    """Pure, deterministic scorer.

    Points per factor come from settings at construction; scoring itself does
    no I/O and keeps no state between calls.
    """

    def __init__(self) -> None:
        settings = get_settings()
        self.primary_points: int = settings.PRIMARY_CATEGORY_POINTS
        self.secondary_points: int = settings.SECONDARY_CATEGORY_POINTS
        self.support_tag_points: int = settings.SUPPORT_TAG_POINTS
        self.support_tag_cap: int = settings.SUPPORT_TAG_CAP
        self.interest_tag_points: int = settings.INTEREST_TAG_POINTS
        self.interest_tag_cap: int = settings.INTEREST_TAG_CAP
        self.age_points: int = settings.AGE_BRACKET_POINTS
        self.stage_points: int = settings.STAGE_POINTS
        self.recurrence_points: int = settings.RECURRENCE_POINTS

    # ── Public API ────────────────────────────────────────────────────────

    def score(self, requester: Any, candidate: Any) -> MatchResult:
        """Score ``candidate`` from ``requester``'s point of view.

        Parameters
        ----------
        requester:
            The requesting user's matchable attributes (the scoring context).
        candidate:
            A profile of the opposite role.

        Returns
        -------
        MatchResult
            Non-negative integer score and the ordered match reasons.
        """
        score = 0
        reasons: list[str] = []

        # 1. Primary category
        if self.primary_category_matches(requester, candidate):
            score += self.primary_points
            reasons.append("same primary category")

        # 2. Secondary category (requester must have one)
        if self.secondary_category_matches(requester, candidate):
            score += self.secondary_points
            reasons.append("same secondary category")

        # 3. Need/offer tags
        overlap = self._support_overlap(requester.support_tags, candidate.support_tags)
        if overlap:
            score += min(self.support_tag_cap, overlap * self.support_tag_points)
            reasons.append(
                f"{overlap} support {_plural(overlap, 'match', 'matches')}"
            )

        # 4. Interest tags (fuzzy)
        shared = self._interest_overlap(requester.interest_tags, candidate.interest_tags)
        if shared:
            score += min(self.interest_tag_cap, shared * self.interest_tag_points)
            reasons.append(
                f"{shared} shared {_plural(shared, 'interest', 'interests')}"
            )

        # 5. Age bracket
        if _present(requester.age_bracket) and candidate.age_bracket == requester.age_bracket:
            score += self.age_points
            reasons.append("similar age")

        # 6. Stage: at most one of the two rules fires
        stage_reason = self._stage_reason(requester.stage, candidate.stage)
        if stage_reason is not None:
            score += self.stage_points
            reasons.append(stage_reason)

        # 7. Recurrence history
        if _present(requester.recurrence) and candidate.recurrence == requester.recurrence:
            score += self.recurrence_points
            reasons.append("similar recurrence history")

        score = max(0, score)
        logger.debug(
            "candidate_scored",
            candidate_id=getattr(candidate, "id", None),
            score=score,
            factors_matched=len(reasons),
        )
        return MatchResult(score=score, reasons=reasons)

    @staticmethod
    def primary_category_matches(requester: Any, candidate: Any) -> bool:
        return (
            _present(requester.primary_category)
            and candidate.primary_category == requester.primary_category
        )

    @staticmethod
    def secondary_category_matches(requester: Any, candidate: Any) -> bool:
        return (
            _present(requester.secondary_category)
            and candidate.secondary_category == requester.secondary_category
        )

    # ── Factor helpers ───────────────────────────────────────────────────

    @staticmethod
    def _support_overlap(
        needs: Iterable[str] | None,
        offers: Iterable[str] | None,
    ) -> int:
        """Count requester tags that appear verbatim in the candidate's tags."""
        offered = set(_clean_tags(offers))
        return sum(1 for tag in _clean_tags(needs) if tag in offered)

    @staticmethod
    def _interest_overlap(
        mine: Iterable[str] | None,
        theirs: Iterable[str] | None,
    ) -> int:
        """Count requester interests that fuzzily match any candidate interest.

        "hiking" matches "Hiking & camping" and "art" matches "Art"; each
        requester interest counts at most once.
        """
        theirs_lower = [t.lower() for t in _clean_tags(theirs)]
        if not theirs_lower:
            return 0

        shared = 0
        for tag in _clean_tags(mine):
            lowered = tag.lower()
            if any(lowered in other or other in lowered for other in theirs_lower):
                shared += 1
        return shared

    @staticmethod
    def _stage_reason(requester_stage: Any, candidate_stage: Any) -> str | None:
        if requester_stage is None or candidate_stage is None:
            return None
        if requester_stage.is_survivor and candidate_stage.is_survivor:
            return "both survivors"
        if requester_stage.same_numbered_stage(candidate_stage):
            return "same stage"
        return None
