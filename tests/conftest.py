"""Shared fixtures: a recording transport and an in-memory repository group endpoint."""

import json
from urllib.parse import urlparse

import pytest
import requests

from nexus_admin.client import NexusClient
from nexus_admin.config import reset_config_manager
from nexus_admin.config.config_manager import ConfigManager

BASE_URL = "http://nexus.example.com/nexus"

# Basic credentials for user:password
USER_PASSWORD_TOKEN = "dXNlcjpwYXNzd29yZA=="

SNAPSHOT_GROUP = {
    "data": {
        "provider": "maven2",
        "name": "SnapshotGroup",
        "repositories": [
            {
                "name": "plat.trnk.trnk679",
                "id": "plat.trnk.trnk679",
                "resourceURI": "http://localhost:8081/nexus/service/local/repo_groups/snapshotgroup/plat.trnk.trnk679"
            }
        ],
        "format": "maven2",
        "repoType": "group",
        "exposed": True,
        "id": "snapshotgroup",
        "contentResourceURI": "http://localhost:8081/nexus/content/groups/snapshotgroup"
    }
}


def make_response(request, status_code, body=""):
    """Build a requests.Response for a prepared request."""
    response = requests.Response()
    response.status_code = status_code
    response._content = body.encode("utf-8") if isinstance(body, str) else body
    response.encoding = "utf-8"
    response.request = request
    response.url = request.url
    return response


class RecordingSession(requests.Session):
    """
    A requests.Session that never touches the network.

    Each prepared request is recorded and handed to ``handler``, which
    returns ``(status_code, body)`` or raises a requests exception.
    """

    def __init__(self, handler):
        super().__init__()
        self.trust_env = False
        self.handler = handler
        self.sent = []

    def send(self, request, **kwargs):
        self.sent.append(request)
        status_code, body = self.handler(request)
        return make_response(request, status_code, body)

    def methods(self):
        return [request.method for request in self.sent]


class FakeGroupEndpoint:
    """Serves GET and PUT on /service/local/repo_groups/{id} from a dict of envelopes."""

    def __init__(self, groups, put_status=200, put_body=""):
        self.groups = {group_id: json.loads(json.dumps(envelope)) for group_id, envelope in groups.items()}
        self.put_status = put_status
        self.put_body = put_body
        self.puts = []

    def __call__(self, request):
        prefix = "/service/local/repo_groups/"
        path = urlparse(request.url).path
        assert prefix in path, f"unexpected path {path}"
        group_id = path.split(prefix, 1)[1]

        if request.method == "GET":
            if group_id not in self.groups:
                return 404, ""
            return 200, json.dumps(self.groups[group_id])

        if request.method == "PUT":
            envelope = json.loads(request.body)
            self.puts.append(envelope)
            if self.put_status == 200:
                self.groups[group_id] = envelope
            return self.put_status, self.put_body

        raise AssertionError(f"Wanted GET or PUT but got {request.method}")

    def member_ids(self, group_id):
        return [member["id"] for member in self.groups[group_id]["data"]["repositories"]]


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep the process environment and the global config out of every test."""
    for env_var in ConfigManager()._create_env_var_mapping():
        monkeypatch.delenv(env_var, raising=False)
    reset_config_manager()
    yield
    reset_config_manager()


@pytest.fixture
def make_client():
    """Build a NexusClient for user:password over a RecordingSession."""

    def factory(handler, **kwargs):
        session = RecordingSession(handler)
        kwargs.setdefault("base_url", BASE_URL)
        kwargs.setdefault("username", "user")
        kwargs.setdefault("password", "password")
        client = NexusClient(session=session, **kwargs)
        return client, session

    return factory


@pytest.fixture
def snapshot_group():
    return json.loads(json.dumps(SNAPSHOT_GROUP))
