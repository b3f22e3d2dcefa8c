"""
Pytest configuration and fixtures.

Requests never leave the process: every client is wired to an
httpx.MockTransport that answers with canned Waifu Vault envelopes.
"""

import json
import uuid

import httpx
import pytest

from waifuvault.api import WaifuClient

API_URL = "https://vault.test/rest"


def file_body(token="file-token", **overrides):
    body = {
        "token": token,
        "url": f"https://vault.test/f/{token}/x.bin",
        "bucket": None,
        "album": None,
        "views": 0,
        "retentionPeriod": 3600000,
        "options": {"hideFilename": False, "oneTimeDownload": False, "protected": False},
    }
    body.update(overrides)
    return body


def album_body(token="album-token", bucket_token="bucket-token", files=None):
    return {
        "token": token,
        "bucketToken": bucket_token,
        "publicToken": None,
        "name": "holiday",
        "files": files if files is not None else [file_body()],
    }


def error_body(status=404, name="NotFound", message="Unknown token"):
    return {"name": name, "message": message, "status": status}


@pytest.fixture
def make_client():
    """Build a client whose transport is the given handler."""
    clients = []

    def factory(handler):
        client = WaifuClient(base_url=API_URL, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()


@pytest.fixture
def recorder(make_client):
    """Client answering every call with one response, keeping the requests it saw."""

    class Recorder:
        def __init__(self):
            self.requests = []
            self.reply(True)

        def reply(self, body=None, status=200, content=None):
            self.status, self.body, self.content = status, body, content

        def __call__(self, request):
            self.requests.append(request)
            if self.content is not None:
                return httpx.Response(self.status, content=self.content)
            return httpx.Response(self.status, json=self.body)

        @property
        def last(self):
            return self.requests[-1]

    rec = Recorder()
    rec.client = make_client(rec)
    return rec


class FakeVault:
    """Tiny in-memory stand-in for the file endpoints of the service."""

    def __init__(self):
        self.files = {}

    def __call__(self, request):
        path = request.url.path
        if request.method == "PUT":
            return self._upload(request)

        token = path.rsplit("/", 1)[-1]
        entry = self.files.get(token)
        if entry is None:
            return httpx.Response(400, json=error_body(400, "BadRequest", "Unknown token"))

        if request.method == "GET":
            return httpx.Response(200, json=entry)
        if request.method == "PATCH":
            changes = json.loads(request.content)
            options = entry["options"]
            if "password" in changes:
                options["protected"] = True
            if "hideFilename" in changes:
                options["hideFilename"] = changes["hideFilename"]
            if "customExpiry" in changes:
                entry["retentionPeriod"] = 300000
            return httpx.Response(200, json=entry)
        if request.method == "DELETE":
            del self.files[token]
            return httpx.Response(200, json=True)
        return httpx.Response(405, json=error_body(405, "MethodNotAllowed", "Method not allowed"))

    def _upload(self, request):
        params = request.url.params
        token = uuid.uuid4().hex
        entry = file_body(
            token,
            options={
                "hideFilename": params.get("hide_filename") == "true",
                "oneTimeDownload": params.get("one_time_download") == "true",
                "protected": b'name="password"' in request.content,
            },
        )
        self.files[token] = entry
        return httpx.Response(200, json=entry)


@pytest.fixture
def vault(make_client):
    fake = FakeVault()
    fake.client = make_client(fake)
    return fake
