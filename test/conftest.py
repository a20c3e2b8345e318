"""
In-memory stand-ins for Firestore, Cloud Storage and FCM used by the handler
and API tests.
"""
import asyncio
import logging
from typing import Dict, Iterable, List, Optional

import pytest

from chat_functions.app.clients import Clients, DataStore, ObjectStore, PushGateway
from chat_functions.app.config import Settings
from chat_functions.app.errors import ObjectNotFound
from chat_functions.app.notifications.schemas import MulticastSummary, TokenResult
from chat_functions.app.schemas import Found, NotFound, Room, UserProfile


class FakeDataStore(DataStore):
    def __init__(self, rooms: Optional[Dict[str, dict]] = None, users: Optional[Dict[str, dict]] = None,
                 failing_users: Iterable[str] = ()):
        self.rooms = rooms or {}
        self.users = users or {}
        self.failing_users = set(failing_users)
        self.room_reads: List[str] = []
        self.user_reads: List[str] = []
        self._in_flight = 0
        self.max_concurrent_user_reads = 0

    async def get_room(self, room_id):
        self.room_reads.append(room_id)
        if room_id not in self.rooms:
            return NotFound(room_id)
        return Found(Room.from_document(room_id, self.rooms[room_id]))

    async def get_user_profile(self, user_id):
        self.user_reads.append(user_id)
        self._in_flight += 1
        self.max_concurrent_user_reads = max(self.max_concurrent_user_reads, self._in_flight)
        try:
            await asyncio.sleep(0)
            if user_id in self.failing_users:
                raise RuntimeError(f"firestore unavailable for {user_id}")
            if user_id not in self.users:
                return NotFound(user_id)
            return Found(UserProfile.from_document(user_id, self.users[user_id]))
        finally:
            self._in_flight -= 1


class FakePushGateway(PushGateway):
    def __init__(self, failing_tokens: Iterable[str] = (), error: Optional[Exception] = None):
        self.failing_tokens = set(failing_tokens)
        self.error = error
        self.requests = []

    async def send_multicast(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        results = [
            TokenResult(
                token=token,
                success=token not in self.failing_tokens,
                messageId=None if token in self.failing_tokens else f"msg-{token}",
                errorCode="messaging/registration-token-not-registered" if token in self.failing_tokens else None,
            )
            for token in request.tokens
        ]
        successes = sum(1 for r in results if r.success)
        return MulticastSummary(
            successCount=successes,
            failureCount=len(results) - successes,
            responses=results,
        )


class FakeObjectStore(ObjectStore):
    def __init__(self, existing: Iterable[str] = (), failing: Iterable[str] = ()):
        self.existing = set(existing)
        self.failing = set(failing)
        self.attempts: List[str] = []
        self.batches: List[List[str]] = []
        self._in_flight = 0
        self.max_in_flight = 0

    async def delete_object(self, path):
        if self._in_flight == 0:
            # Nothing outstanding: a new batch has started
            self.batches.append([])
        self._in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self._in_flight)
        self.attempts.append(path)
        self.batches[-1].append(path)
        try:
            await asyncio.sleep(0)
            if path in self.failing:
                raise PermissionError(f"403 Forbidden: {path}")
            if path not in self.existing:
                raise ObjectNotFound(path)
            self.existing.discard(path)
        finally:
            self._in_flight -= 1


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo the root handler swap done by setup_logging at app startup."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, environment="dev")


@pytest.fixture
def room_data():
    return {
        "r1": {"participants": ["alice", "bob", "carol"]},
    }


@pytest.fixture
def user_data():
    return {
        "alice": {"firstName": "Alice", "lastName": "Nguyen", "fcmToken": "tok-alice"},
        "bob": {"firstName": "Bob", "lastName": "Tran", "fcmToken": "tok-bob"},
        "carol": {"firstName": "Carol", "fcmToken": "tok-carol"},
    }


@pytest.fixture
def data_store(room_data, user_data):
    return FakeDataStore(rooms=room_data, users=user_data)


@pytest.fixture
def push_gateway():
    return FakePushGateway()


@pytest.fixture
def object_store():
    return FakeObjectStore()


@pytest.fixture
def clients(data_store, object_store, push_gateway):
    return Clients(data_store=data_store, object_store=object_store, push_gateway=push_gateway)
