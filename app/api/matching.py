"""
Kindred — Matching API

Endpoints for ranking candidate peers, either from attributes supplied in
the request body or from the caller's stored profile.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from app.api.deps import get_candidate_ranker
from app.schemas.match import (
    RankedCandidateItem,
    RankedCandidatesResponse,
    RankRequest,
)
from app.schemas.profile import ProfileResponse
from app.services.candidate_ranker import CandidateRanker, RankedCandidate

logger = structlog.get_logger("kindred.api.matching")

router = APIRouter()


def _to_response(ranked: list[RankedCandidate]) -> RankedCandidatesResponse:
    return RankedCandidatesResponse(
        candidates=[
            RankedCandidateItem(
                profile=ProfileResponse.model_validate(c.profile),
                score=c.score,
                reasons=c.reasons,
                tier=c.tier,
            )
            for c in ranked
        ],
        tier_counts=CandidateRanker.tier_counts(ranked),
        total=len(ranked),
    )


# ──────────────────────────────────────────────────────────────────────────────
# POST /rank — Rank candidates for the supplied attributes
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/rank",
    response_model=RankedCandidatesResponse,
    summary="Rank candidate peers for a requester",
)
async def rank_candidates(
    payload: RankRequest,
    ranker: CandidateRanker = Depends(get_candidate_ranker),
) -> RankedCandidatesResponse:
    """Score every available profile of the opposite role and return them
    best-first, each tagged with its presentation tier (best / good / other).
    """
    logger.info("rank_candidates", role=payload.role.value)
    ranked = await ranker.rank(payload.role, payload.attributes)
    return _to_response(ranked)


# ──────────────────────────────────────────────────────────────────────────────
# GET /for/{user_id} — Rank candidates for a stored profile
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/for/{user_id}",
    response_model=RankedCandidatesResponse,
    summary="Rank candidate peers for a stored profile",
)
async def rank_for_user(
    user_id: str,
    ranker: CandidateRanker = Depends(get_candidate_ranker),
) -> RankedCandidatesResponse:
    logger.info("rank_for_user", user_id=user_id)
    ranked = await ranker.rank_for_user(user_id)
    return _to_response(ranked)
