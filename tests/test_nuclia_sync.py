import asyncio

import httpx

from edubox.config import get_settings
from edubox.models import StoredFile, User
from edubox.schemas.sync import FileBlob
from edubox.services.nuclia_sync_service import (
    SyncBackendResponse,
    attach_remote_files,
    forward_to_sync_backend,
    merge_file_blobs,
)
from tests.conftest import PERSIST_SECRET_HEADER, TEST_USER_ID


class _FakeBackend:
    def __init__(self, response):
        self.response = response
        self.calls = []

    async def __call__(self, path, body, *, client=None):
        self.calls.append((path, body))
        return self.response


async def _no_remote_files(payload, *, client=None, skip_existing=True):
    return 0


def test_sync_forwards_server_built_payload(client, signed_in, seed, monkeypatch):
    seed(StoredFile(id="file-1", user_id=TEST_USER_ID, file_name="notes.pdf", storage_id="st-1"))
    backend = _FakeBackend(SyncBackendResponse(202, json_body={"queued": True}))
    monkeypatch.setattr("edubox.routers.nuclia_sync.forward_to_sync_backend", backend)
    monkeypatch.setattr("edubox.routers.nuclia_sync.attach_remote_files", _no_remote_files)

    response = client.post(
        "/api/nuclia/sync",
        json={"fileBlobs": [{"id": "file-1", "base64": "QUJD"}], "userId": "user_2"},
    )

    assert response.status_code == 202
    assert response.json() == {"queued": True}
    path, body = backend.calls[0]
    assert path == "/sync"
    assert body["userId"] == TEST_USER_ID
    assert body["userProfile"] == {
        "id": TEST_USER_ID, "email": "student@example.edu", "phone": None, "name": "Sam Student",
    }
    assert body["payload"]["recentFiles"][0]["base64"] == "QUJD"


def test_manual_sync_relays_text(client, signed_in, monkeypatch):
    backend = _FakeBackend(SyncBackendResponse(502, text="upstream busy"))
    monkeypatch.setattr("edubox.routers.nuclia_sync.forward_to_sync_backend", backend)
    monkeypatch.setattr("edubox.routers.nuclia_sync.attach_remote_files", _no_remote_files)

    response = client.post("/api/nuclia/sync/manual", content=b"not json")

    assert response.status_code == 502
    assert response.text == "upstream busy"
    assert backend.calls[0][0] == "/sync/manual"


def test_sync_backend_unreachable_is_500(client, signed_in, monkeypatch):
    async def unreachable(path, body, *, client=None):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr("edubox.routers.nuclia_sync.forward_to_sync_backend", unreachable)
    monkeypatch.setattr("edubox.routers.nuclia_sync.attach_remote_files", _no_remote_files)

    response = client.post("/api/nuclia/sync", json={})

    assert response.status_code == 500
    assert response.json() == {"error": "proxy_failed", "message": "connection refused"}


def test_sync_requires_sign_in(client):
    response = client.post("/api/nuclia/sync", json={})
    assert response.status_code == 401
    assert response.json() == {"error": "unauthenticated", "message": "User must be signed in"}


def test_get_mappings_for_signed_in_user(client, signed_in, seed):
    seed(
        StoredFile(id="f1", user_id=TEST_USER_ID, file_name="a.pdf", nuclia_resource_id="rid-1"),
        StoredFile(id="f2", user_id=TEST_USER_ID, file_name="b.pdf"),
        StoredFile(id="f3", user_id="user_2", file_name="c.pdf", nuclia_resource_id="rid-3"),
    )

    response = client.post(
        "/api/nuclia/sync/get-mappings",
        json={"userId": "user_2", "fileIds": ["f1", "f2", "f3"]},
    )

    assert response.status_code == 200
    assert response.json() == {"mappings": [{"fileId": "f1", "nucliaResourceId": "rid-1"}]}


def test_get_mappings_with_shared_secret(client, seed):
    seed(StoredFile(id="f3", user_id="user_2", file_name="c.pdf", nuclia_resource_id="rid-3"))

    response = client.post(
        "/api/nuclia/sync/get-mappings",
        json={"userId": "user_2", "fileIds": ["f3"]},
        headers=PERSIST_SECRET_HEADER,
    )
    assert response.json() == {"mappings": [{"fileId": "f3", "nucliaResourceId": "rid-3"}]}

    no_user = client.post("/api/nuclia/sync/get-mappings", json={"fileIds": ["f3"]}, headers=PERSIST_SECRET_HEADER)
    assert no_user.json() == {"mappings": []}


def test_get_mappings_rejects_anonymous_and_wrong_secret(client):
    assert client.post("/api/nuclia/sync/get-mappings", json={"fileIds": []}).status_code == 401
    wrong = client.post(
        "/api/nuclia/sync/get-mappings",
        json={"userId": "user_2", "fileIds": []},
        headers={"x-nuclia-persist-secret": "guess"},
    )
    assert wrong.status_code == 401


def test_persist_mapping_for_signed_in_user(client, signed_in, seed, rows):
    seed(
        User(clerk_id=TEST_USER_ID, full_name="Sam"),
        User(clerk_id="user_2", full_name="Other"),
        StoredFile(id="f1", user_id=TEST_USER_ID, file_name="a.pdf"),
        StoredFile(id="f2", user_id="user_2", file_name="b.pdf"),
    )

    response = client.post(
        "/api/nuclia/sync/persist-mapping",
        json={"mappings": [
            {"fileId": "f1", "nucliaResourceId": "rid-1"},
            {"clerkId": TEST_USER_ID, "nucliaResourceId": "kb-user-1"},
            {"clerkId": "user_2", "nucliaResourceId": "hijack"},
            {"fileId": "f2", "userId": "user_2", "nucliaResourceId": "hijack"},
            {"fileId": "f1"},
        ]},
    )

    assert response.status_code == 200
    assert response.json() == {"ok": True, "updated": 2}
    files = {f.id: f.nuclia_resource_id for f in rows(StoredFile)}
    assert files == {"f1": "rid-1", "f2": None}
    users = {u.clerk_id: u.nuclia_resource_id for u in rows(User)}
    assert users == {TEST_USER_ID: "kb-user-1", "user_2": None}


def test_persist_mapping_with_shared_secret(client, seed, rows):
    seed(StoredFile(id="f2", user_id="user_2", file_name="b.pdf"))

    response = client.post(
        "/api/nuclia/sync/persist-mapping",
        json={"mappings": [{"fileId": "f2", "userId": "user_2", "nucliaResourceId": "rid-2"}]},
        headers=PERSIST_SECRET_HEADER,
    )

    assert response.json() == {"ok": True, "updated": 1}
    assert rows(StoredFile)[0].nuclia_resource_id == "rid-2"


def test_merge_file_blobs_matches_id_storage_id_or_name():
    payload = {"recentFiles": [
        {"id": "a", "name": "one.pdf"},
        {"id": None, "storageId": "st-b", "name": "two.pdf"},
        {"name": "three.pdf"},
        {"id": "d", "name": "four.pdf"},
    ]}
    blobs = [
        FileBlob(id="a", base64="AAA"),
        FileBlob(storageId="st-b", base64="BBB"),
        FileBlob(name="three.pdf", base64="CCC"),
    ]

    assert merge_file_blobs(payload, blobs) == 3
    assert [f.get("base64") for f in payload["recentFiles"]] == ["AAA", "BBB", "CCC", None]
    assert merge_file_blobs({"recentFiles": None}, blobs) == 0


def test_attach_remote_files_skips_failures_and_large_files():
    limit = get_settings().attachment_max_bytes

    def handler(request):
        if request.url.path == "/ok":
            return httpx.Response(200, content=b"ABC")
        if request.url.path == "/big":
            return httpx.Response(200, content=b"x" * (limit + 1))
        return httpx.Response(404)

    payload = {"recentFiles": [
        {"name": "ok", "url": "https://files.example/ok"},
        {"name": "big", "url": "https://files.example/big"},
        {"name": "missing", "url": "https://files.example/missing"},
        {"name": "no-url"},
        {"name": "bad-url", "url": "https://files.example/\x00bad"},
        {"name": "done", "url": "https://files.example/ok", "base64": "KEEP"},
    ]}

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            return await attach_remote_files(payload, client=http)

    assert asyncio.run(run()) == 1
    assert [f.get("base64") for f in payload["recentFiles"]] == ["QUJD", None, None, None, None, "KEEP"]


def test_forward_to_sync_backend_relays_json_and_text(monkeypatch):
    monkeypatch.setattr(get_settings(), "nuclia_sync_url", "http://sync.internal/")
    seen = []

    def handler(request):
        seen.append(str(request.url))
        if request.url.path == "/sync":
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(500, text="boom")

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            return (
                await forward_to_sync_backend("/sync", {"userId": "u"}, client=http),
                await forward_to_sync_backend("/sync/manual", {"userId": "u"}, client=http),
            )

    as_json, as_text = asyncio.run(run())

    assert seen == ["http://sync.internal/sync", "http://sync.internal/sync/manual"]
    assert as_json.is_json and as_json.json_body == {"ok": True}
    assert not as_text.is_json and as_text.status_code == 500 and as_text.text == "boom"
