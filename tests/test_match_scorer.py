"""Unit tests for MatchScorer — additive factor scoring and reasons."""
import pytest

from app.models.profile import Role
from app.schemas.profile import MatchAttributes
from tests.fakes import make_profile


def _seeker(**attrs):
    return make_profile("seeker", role=Role.SEEKER, **attrs)


def _supporter(**attrs):
    return make_profile("supporter", role=Role.SUPPORTER, **attrs)


class TestWorkedExample:
    """Breast Cancer / Chemotherapy requester against two supporters."""

    def test_candidate_x_scores_110(self, scorer, breast_cancer_seeker):
        candidate_x = _supporter(
            primary_category="Breast Cancer",
            secondary_category="Chemotherapy",
            support_tags=["Peer Support"],
        )
        result = scorer.score(breast_cancer_seeker, candidate_x)
        assert result.score == 110
        assert result.reasons == [
            "same primary category",
            "same secondary category",
            "1 support match",
        ]

    def test_candidate_y_scores_zero(self, scorer, breast_cancer_seeker):
        candidate_y = _supporter(primary_category="Lung Cancer")
        result = scorer.score(breast_cancer_seeker, candidate_y)
        assert result.score == 0
        assert result.reasons == []


class TestDeterminism:

    def test_repeated_calls_identical(self, scorer):
        requester = _seeker(
            primary_category="Lymphoma",
            support_tags=["Emotional support", "Nutrition"],
            interest_tags=["hiking", "art"],
            age_bracket="30-39",
            stage_descriptor="Stage 3",
            recurrence="First diagnosis",
        )
        candidate = _supporter(
            primary_category="Lymphoma",
            support_tags=["Nutrition", "Emotional support"],
            interest_tags=["Art", "Hiking & camping"],
            age_bracket="30-39",
            stage_descriptor="stage 3",
            recurrence="First diagnosis",
        )
        first = scorer.score(requester, candidate)
        second = scorer.score(requester, candidate)
        assert first == second
        assert first.reasons == second.reasons


class TestCategoryFactors:

    def test_primary_only_scores_fifty(self, scorer):
        result = scorer.score(
            _seeker(primary_category="Lymphoma", secondary_category="Radiation"),
            _supporter(primary_category="Lymphoma", secondary_category="Surgery"),
        )
        assert result.score == 50
        assert result.reasons == ["same primary category"]

    def test_primary_and_secondary_scores_hundred(self, scorer):
        result = scorer.score(
            _seeker(primary_category="Lymphoma", secondary_category="Radiation"),
            _supporter(primary_category="Lymphoma", secondary_category="Radiation"),
        )
        assert result.score == 100

    def test_missing_requester_values_never_match(self, scorer):
        """Two blank profiles share nothing worth points."""
        result = scorer.score(_seeker(), _supporter())
        assert result.score == 0
        assert result.reasons == []

    def test_whitespace_category_counts_as_missing(self, scorer):
        result = scorer.score(
            _seeker(primary_category="  "),
            _supporter(primary_category="  "),
        )
        assert result.score == 0

    def test_secondary_match_without_primary(self, scorer):
        result = scorer.score(
            _seeker(primary_category="Lymphoma", secondary_category="Radiation"),
            _supporter(primary_category="Leukemia", secondary_category="Radiation"),
        )
        assert result.score == 50
        assert result.reasons == ["same secondary category"]


class TestTagFactors:

    def test_support_overlap_capped_at_fifty(self, scorer):
        tags = [f"tag-{i}" for i in range(7)]
        result = scorer.score(_seeker(support_tags=tags), _supporter(support_tags=tags))
        assert result.score == 50
        assert result.reasons == ["7 support matches"]

    def test_support_overlap_is_exact(self, scorer):
        result = scorer.score(
            _seeker(support_tags=["Peer Support"]),
            _supporter(support_tags=["peer support"]),
        )
        assert result.score == 0

    def test_interest_fuzzy_substring(self, scorer):
        result = scorer.score(
            _seeker(interest_tags=["hiking"]),
            _supporter(interest_tags=["Hiking & camping"]),
        )
        assert result.score == 3
        assert result.reasons == ["1 shared interest"]

    def test_interest_overlap_capped_at_ten(self, scorer):
        result = scorer.score(
            _seeker(interest_tags=["art", "music", "cooking", "yoga"]),
            _supporter(interest_tags=["Art", "Music", "Cooking", "Yoga"]),
        )
        assert result.score == 10
        assert result.reasons == ["4 shared interests"]

    def test_tag_caps_are_independent(self, scorer):
        support = [f"need-{i}" for i in range(5)]
        result = scorer.score(
            _seeker(support_tags=support, interest_tags=["art", "music", "yoga", "chess"]),
            _supporter(support_tags=support, interest_tags=["art", "music", "yoga", "chess"]),
        )
        assert result.score == 60

    def test_blank_and_duplicate_tags_ignored(self, scorer):
        result = scorer.score(
            _seeker(support_tags=["Nutrition", "Nutrition", ""]),
            _supporter(support_tags=["Nutrition", " "]),
        )
        assert result.score == 10
        assert result.reasons == ["1 support match"]

    def test_null_tags_treated_as_empty(self, scorer):
        result = scorer.score(
            _seeker(support_tags=None, interest_tags=None),
            _supporter(support_tags=["Nutrition"], interest_tags=["art"]),
        )
        assert result.score == 0


class TestStageFactor:

    @pytest.mark.parametrize(
        "mine, theirs, expected",
        [
            ("Survivor", "5 years cancer-free", "both survivors"),
            ("2 years out", "10 years", "both survivors"),
            ("Stage 2", "stage 2", "same stage"),
            ("Stage 2", "Stage 3", None),
            ("Stage 2", "Survivor", None),
            ("Stage 2, 3 years out", "Stage 2", "same stage"),
            ("Stage 2", "Stage 2 survivor", "same stage"),
            ("Stage 2 survivor", "Stage 3, 4 years out", "both survivors"),
            ("Stage 3, 1 year out", "Stage 2", None),
            ("Unsure", "Unsure", None),
            (None, None, None),
        ],
    )
    def test_stage_rules(self, scorer, mine, theirs, expected):
        result = scorer.score(
            _seeker(stage_descriptor=mine),
            _supporter(stage_descriptor=theirs),
        )
        if expected is None:
            assert result.score == 0
            assert result.reasons == []
        else:
            assert result.score == 10
            assert result.reasons == [expected]


class TestOtherFactors:

    def test_age_and_recurrence(self, scorer):
        result = scorer.score(
            _seeker(age_bracket="40-49", recurrence="Recurrence"),
            _supporter(age_bracket="40-49", recurrence="Recurrence"),
        )
        assert result.score == 20
        assert result.reasons == ["similar age", "similar recurrence history"]

    def test_reason_order_is_fixed(self, scorer):
        attrs = dict(
            primary_category="Lymphoma",
            secondary_category="Radiation",
            support_tags=["Nutrition"],
            interest_tags=["art"],
            age_bracket="40-49",
            stage_descriptor="Survivor",
            recurrence="Recurrence",
        )
        result = scorer.score(_seeker(**attrs), _supporter(**attrs))
        assert result.reasons == [
            "same primary category",
            "same secondary category",
            "1 support match",
            "1 shared interest",
            "similar age",
            "both survivors",
            "similar recurrence history",
        ]
        assert result.score == 50 + 50 + 10 + 3 + 10 + 10 + 10

    def test_match_attributes_payload_as_requester(self, scorer):
        requester = MatchAttributes(primary_category="Lymphoma", stage_descriptor="Stage 4")
        candidate = _supporter(primary_category="Lymphoma", stage_descriptor="Stage IV, stage 4")
        result = scorer.score(requester, candidate)
        assert result.reasons == ["same primary category", "same stage"]
