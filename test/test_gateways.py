"""
Adapters over firebase_admin, google-cloud-storage and boto3, exercised with
the SDK entry points patched out.
"""
from types import SimpleNamespace

import pytest
from botocore.exceptions import ClientError
from google.api_core.exceptions import Forbidden, NotFound

from chat_functions.app.aws import s3_client
from chat_functions.app.aws.s3_client import S3ObjectStore
from chat_functions.app.errors import ObjectNotFound
from chat_functions.app.firebase import push_gateway
from chat_functions.app.firebase.push_gateway import FcmPushGateway
from chat_functions.app.firebase.storage import FirebaseStorageObjectStore
from chat_functions.app.notifications.schemas import (
    MulticastRequest,
    NotificationContent,
    NotificationData,
)


def _request(tokens):
    return MulticastRequest(
        tokens=tokens,
        notification=NotificationContent(title="Alice", body="hi"),
        data=NotificationData(roomId="r1", senderId="alice", type="private_message"),
    )


class _UnregisteredError(Exception):
    code = "NOT_FOUND"


async def test_fcm_gateway_batches_and_merges(monkeypatch):
    sent = []

    def fake_send(message, app=None):
        sent.append(message)
        responses = []
        for token in message.tokens:
            if token == "stale":
                responses.append(SimpleNamespace(success=False, message_id=None, exception=_UnregisteredError()))
            else:
                responses.append(SimpleNamespace(success=True, message_id=f"id-{token}", exception=None))
        ok = sum(1 for r in responses if r.success)
        return SimpleNamespace(responses=responses, success_count=ok, failure_count=len(responses) - ok)

    monkeypatch.setattr(push_gateway.messaging, "send_each_for_multicast", fake_send)
    gateway = FcmPushGateway(app=None, batch_size=2)

    summary = await gateway.send_multicast(_request(["t1", "stale", "t3"]))

    assert [m.tokens for m in sent] == [["t1", "stale"], ["t3"]]
    assert sent[0].notification.title == "Alice"
    assert sent[0].data == {"roomId": "r1", "senderId": "alice", "type": "private_message"}
    assert (summary.successCount, summary.failureCount) == (2, 1)
    assert summary.to_log_dict()["failures"] == [{"token": "stale", "errorCode": "NOT_FOUND"}]


async def test_fcm_gateway_propagates_transport_errors(monkeypatch):
    def fake_send(message, app=None):
        raise ConnectionError("fcm down")

    monkeypatch.setattr(push_gateway.messaging, "send_each_for_multicast", fake_send)

    with pytest.raises(ConnectionError):
        await FcmPushGateway().send_multicast(_request(["t1"]))


class _FakeBlob:
    def __init__(self, error=None):
        self.error = error
        self.deleted = False

    def delete(self):
        if self.error is not None:
            raise self.error
        self.deleted = True


class _FakeBucket:
    name = "mw-chat.appspot.com"

    def __init__(self, blobs):
        self.blobs = blobs

    def blob(self, path):
        return self.blobs[path]


async def test_firebase_storage_maps_not_found():
    blobs = {"ok.jpg": _FakeBlob(), "gone.jpg": _FakeBlob(NotFound("no such object"))}
    store = FirebaseStorageObjectStore(_FakeBucket(blobs))

    await store.delete_object("ok.jpg")
    with pytest.raises(ObjectNotFound):
        await store.delete_object("gone.jpg")

    assert blobs["ok.jpg"].deleted


async def test_firebase_storage_propagates_other_errors():
    store = FirebaseStorageObjectStore(_FakeBucket({"x.jpg": _FakeBlob(Forbidden("denied"))}))

    with pytest.raises(Forbidden):
        await store.delete_object("x.jpg")


class _FakeS3:
    def __init__(self, error_code=None):
        self.error_code = error_code
        self.calls = []

    def delete_object(self, Bucket, Key):
        self.calls.append((Bucket, Key))
        if self.error_code:
            raise ClientError({"Error": {"Code": self.error_code, "Message": "boom"}}, "DeleteObject")
        return {}


@pytest.fixture
def s3_store(monkeypatch, test_settings):
    monkeypatch.setattr(s3_client.boto3, "client", lambda *args, **kwargs: _FakeS3())
    return S3ObjectStore(test_settings)


async def test_s3_deletes_from_configured_bucket(s3_store, test_settings):
    await s3_store.delete_object("privateChats/r1/a.jpg")

    assert s3_store.s3.calls == [(test_settings.aws_s3_bucket_name, "privateChats/r1/a.jpg")]


@pytest.mark.parametrize("code", ["NoSuchKey", "404"])
async def test_s3_maps_missing_keys(code, s3_store):
    s3_store.s3 = _FakeS3(error_code=code)

    with pytest.raises(ObjectNotFound):
        await s3_store.delete_object("a.jpg")


async def test_s3_propagates_access_denied(s3_store):
    s3_store.s3 = _FakeS3(error_code="AccessDenied")

    with pytest.raises(ClientError):
        await s3_store.delete_object("a.jpg")


def test_object_store_backend_selection(monkeypatch):
    from chat_functions.app.bootstrap import build_object_store
    from chat_functions.app.config import Settings

    monkeypatch.setattr(s3_client.boto3, "client", lambda *args, **kwargs: _FakeS3())
    bucket = _FakeBucket({})
    firebase_app = SimpleNamespace(get_bucket=lambda: bucket)

    s3_store = build_object_store(Settings(_env_file=None, object_store_backend="s3"), firebase_app)
    gcs_store = build_object_store(Settings(_env_file=None, object_store_backend="Firebase"), firebase_app)

    assert isinstance(s3_store, S3ObjectStore)
    assert isinstance(gcs_store, FirebaseStorageObjectStore)
    assert gcs_store.bucket is bucket
    with pytest.raises(ValueError):
        build_object_store(Settings(_env_file=None, object_store_backend="ftp"), firebase_app)
