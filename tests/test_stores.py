"""Unit tests for the SQLAlchemy-backed stores, against mocked sessions."""
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.database import utcnow
from app.exceptions import DuplicateRequest, StoreUnavailable
from app.models.connection import ConnectionRequest, RequestStatus
from app.store.chats import ChatStore
from app.store.profiles import ProfileStore
from app.store.requests import RequestStore
from tests.fakes import make_profile


class _Savepoint:
    """Stands in for ``AsyncSession.begin_nested()``; optionally fails on exit."""

    def __init__(self, exc=None):
        self.exc = exc

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        if self.exc is not None:
            raise self.exc
        return False


def _session(savepoint_error=None):
    db = MagicMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.flush = AsyncMock()
    db.delete = AsyncMock()
    db.commit = AsyncMock()
    db.begin_nested = MagicMock(return_value=_Savepoint(savepoint_error))
    return db


def _integrity_error():
    return IntegrityError("INSERT", {}, Exception("duplicate key value"))


def _request():
    now = utcnow()
    return ConnectionRequest(
        id=uuid.uuid4(),
        sender_id="alice",
        sender_name="Alice",
        receiver_id="bob",
        receiver_name="Bob",
        status=RequestStatus.PENDING.value,
        active_pair_key="alice_bob",
        created_at=now,
        updated_at=now,
    )


class TestTransientErrors:

    @pytest.mark.asyncio
    async def test_operational_error_becomes_store_unavailable(self):
        db = _session()
        db.get.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

        with pytest.raises(StoreUnavailable) as exc_info:
            await ProfileStore(db).get("u1")
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_os_error_becomes_store_unavailable(self):
        db = _session()
        db.execute.side_effect = ConnectionResetError("reset by peer")

        with pytest.raises(StoreUnavailable):
            await RequestStore(db).find_active("alice_bob")

    @pytest.mark.asyncio
    async def test_other_errors_propagate_unchanged(self):
        db = _session()
        db.get.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await ProfileStore(db).get("u1")


class TestProfileStore:

    @pytest.mark.asyncio
    async def test_save_adds_and_flushes(self):
        db = _session()
        profile = make_profile("u1")

        assert await ProfileStore(db).save(profile) is profile
        db.add.assert_called_once_with(profile)
        db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_query_rejects_unknown_attribute(self):
        db = _session()
        with pytest.raises(ValueError):
            await ProfileStore(db).query(role="seeker", bio="hello")
        db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_query_returns_rows(self):
        db = _session()
        rows = [make_profile("p1"), make_profile("p2")]
        result = MagicMock()
        result.scalars.return_value.all.return_value = rows
        db.execute.return_value = result

        found = await ProfileStore(db).query(role="supporter", primary_category="Lymphoma")
        assert found == rows


class TestRequestStore:

    @pytest.mark.asyncio
    async def test_create_conflict_becomes_duplicate(self):
        db = _session(savepoint_error=_integrity_error())

        with pytest.raises(DuplicateRequest):
            await RequestStore(db).create(_request())

    @pytest.mark.asyncio
    async def test_create_inside_savepoint(self):
        db = _session()
        request = _request()

        assert await RequestStore(db).create(request) is request
        db.begin_nested.assert_called_once()
        db.add.assert_called_once_with(request)

    @pytest.mark.asyncio
    async def test_find_active(self):
        db = _session()
        request = _request()
        result = MagicMock()
        result.scalar_one_or_none.return_value = request
        db.execute.return_value = result

        assert await RequestStore(db).find_active("alice_bob") is request


class TestChatStore:

    @pytest.mark.asyncio
    async def test_create_race_returns_false(self):
        db = _session(savepoint_error=_integrity_error())
        chat = MagicMock(id="a_b")

        assert await ChatStore(db).create(chat) is False

    @pytest.mark.asyncio
    async def test_existing_ids_empty_input(self):
        db = _session()
        assert await ChatStore(db).existing_ids([]) == set()
        db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existing_ids(self):
        db = _session()
        result = MagicMock()
        result.scalars.return_value.all.return_value = ["a_b"]
        db.execute.return_value = result

        assert await ChatStore(db).existing_ids(["a_b", "b_a"]) == {"a_b"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rowcount, expected", [(1, True), (0, False)])
    async def test_update_last_message(self, rowcount, expected):
        db = _session()
        db.execute.return_value = MagicMock(rowcount=rowcount)

        updated = await ChatStore(db).update_last_message(
            "a_b", {"text": "hi"}, utcnow()
        )
        assert updated is expected
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_last_message_commit_failure_is_transient(self):
        db = _session()
        db.execute.return_value = MagicMock(rowcount=1)
        db.commit.side_effect = OperationalError("COMMIT", {}, Exception("connection reset"))

        with pytest.raises(StoreUnavailable):
            await ChatStore(db).update_last_message("a_b", {"text": "hi"}, utcnow())
