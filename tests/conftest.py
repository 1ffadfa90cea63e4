"""Shared pytest fixtures for Kindred tests."""
from unittest.mock import MagicMock, patch

import pytest

from app.models.profile import Role
from app.services.chat_provisioner import ChatProvisioner
from app.services.connection_registry import ConnectionRegistry
from app.services.match_scorer import MatchScorer
from tests.fakes import FakeChatStore, FakeProfileStore, FakeRequestStore, make_profile


@pytest.fixture
def scorer():
    with patch("app.services.match_scorer.get_settings") as mock:
        settings = MagicMock()
        settings.PRIMARY_CATEGORY_POINTS = 50
        settings.SECONDARY_CATEGORY_POINTS = 50
        settings.SUPPORT_TAG_POINTS = 10
        settings.SUPPORT_TAG_CAP = 50
        settings.INTEREST_TAG_POINTS = 3
        settings.INTEREST_TAG_CAP = 10
        settings.AGE_BRACKET_POINTS = 10
        settings.STAGE_POINTS = 10
        settings.RECURRENCE_POINTS = 10
        mock.return_value = settings
        service = MatchScorer()
    return service


@pytest.fixture
def profile_store():
    return FakeProfileStore()


@pytest.fixture
def request_store():
    return FakeRequestStore()


@pytest.fixture
def chat_store():
    return FakeChatStore()


@pytest.fixture
def provisioner(chat_store):
    return ChatProvisioner(chat_store)


@pytest.fixture
def registry(request_store, provisioner):
    return ConnectionRegistry(request_store, provisioner)


@pytest.fixture
def breast_cancer_seeker():
    """Requester from the worked ranking example."""
    return make_profile(
        "seeker-1",
        role=Role.SEEKER,
        first_name="Maya",
        primary_category="Breast Cancer",
        secondary_category="Chemotherapy",
        support_tags=["Peer Support", "Spiritual"],
    )
