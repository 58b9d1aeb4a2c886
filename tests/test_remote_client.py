"""Unit tests for the manager HTTP adapter.

Most tests patch `ManagerClient._send` at the class level (slots-safe) so no
real HTTP call is made; the transport tests patch `urllib.request.urlopen`
one level lower to check headers and error mapping.
"""

from __future__ import annotations

import io
import json
import urllib.error
from typing import Any

import pytest

from flecto_agent.core.contracts import Agent, AgentStatus, RedirectType
from flecto_agent.core.errors import AgentValidationError, ProtocolError, TransportError
from flecto_agent.core.settings import Settings
from flecto_agent.remote.client import ManagerClient, RawResponse

BASE = "http://localhost:8080/api/namespace/test-ns/project/test-proj"


def _settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "manager_url": "http://localhost:8080",
        "namespace_code": "test-ns",
        "project_code": "test-proj",
        "agent_name": "test-node",
        "token_jwt": "test-token",
    }
    values.update(overrides)
    return Settings(**values)


class _Recorder:
    """Queued responses plus a log of every request `_send` was asked to make."""

    def __init__(self, *responses: RawResponse) -> None:
        self.responses = list(responses)
        self.requests: list[dict[str, Any]] = []

    def send(
        self,
        method: str,
        url: str,
        body: bytes | None,
        headers: dict[str, str] | None,
    ) -> RawResponse:
        self.requests.append({"method": method, "url": url, "body": body, "headers": headers})
        return self.responses.pop(0)


def _ok(body: str | bytes = b"") -> RawResponse:
    data = body.encode("utf-8") if isinstance(body, str) else body
    return RawResponse(status=200, reason="OK", body=data)


def _install(monkeypatch: Any, *responses: RawResponse) -> _Recorder:
    recorder = _Recorder(*responses)

    def fake_send(
        self: ManagerClient,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> RawResponse:
        """Record the request and return the next queued response."""
        return recorder.send(method, url, body, headers)

    # Patch the network seam at the class level (slots-safe).
    monkeypatch.setattr(ManagerClient, "_send", fake_send)
    return recorder


# --------------------------------------------------------------------------- #
# Version
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize(
    ("body", "expected"),
    [("42", 42), ("  123  \n", 123), ("0", 0)],
)
def test_get_version_parses_plain_text(monkeypatch: Any, body: str, expected: int) -> None:
    recorder = _install(monkeypatch, _ok(body))

    assert ManagerClient(_settings()).get_version() == expected
    assert recorder.requests[0]["method"] == "GET"
    assert recorder.requests[0]["url"] == f"{BASE}/version"


@pytest.mark.parametrize("status", [401, 404, 500])
def test_get_version_non_200_is_protocol_error(monkeypatch: Any, status: int) -> None:
    _install(monkeypatch, RawResponse(status=status, reason="Nope", body=b"error"))

    with pytest.raises(ProtocolError, match="unexpected status code") as info:
        ManagerClient(_settings()).get_version()
    assert f"({status}) error" in str(info.value)


@pytest.mark.parametrize("body", ["not-a-number", "-3", ""])
def test_get_version_rejects_bad_text(monkeypatch: Any, body: str) -> None:
    _install(monkeypatch, _ok(body))

    with pytest.raises(ProtocolError, match="invalid version"):
        ManagerClient(_settings()).get_version()


# --------------------------------------------------------------------------- #
# Collections
# --------------------------------------------------------------------------- #


def test_get_redirects_page_decodes_items(monkeypatch: Any) -> None:
    payload = {
        "items": [
            {"type": "basic", "source": "/old1", "target": "/new1", "status": 301},
            {"type": "regex", "source": "^/a/(.*)$", "target": "/b/$1", "status": 302},
        ],
        "total": 2,
        "limit": 100,
        "offset": 0,
    }
    recorder = _install(monkeypatch, _ok(json.dumps(payload)))

    page = ManagerClient(_settings()).get_redirects_page(0, 100)

    assert recorder.requests[0]["url"] == f"{BASE}/redirects?limit=100&offset=0"
    assert page.total == 2
    assert page.items[1].type is RedirectType.REGEX
    assert int(page.items[1].status) == 302


def test_get_pages_page_builds_offset_query(monkeypatch: Any) -> None:
    payload = {"items": [{"type": "basic", "path": "/robots.txt"}], "total": 101}
    recorder = _install(monkeypatch, _ok(json.dumps(payload)))

    page = ManagerClient(_settings()).get_pages_page(100, 100)

    assert recorder.requests[0]["url"] == f"{BASE}/pages?limit=100&offset=100"
    assert page.items[0].path == "/robots.txt"


@pytest.mark.parametrize(
    "body",
    [b"invalid json", b'{"items": [{"type": "bogus", "path": "/x"}], "total": 1}', b"\xff"],
)
def test_malformed_collection_body_is_protocol_error(monkeypatch: Any, body: bytes) -> None:
    _install(monkeypatch, _ok(body))

    with pytest.raises(ProtocolError, match="malformed response body"):
        ManagerClient(_settings()).get_pages_page(0, 100)


def test_collection_non_200_is_protocol_error(monkeypatch: Any) -> None:
    _install(monkeypatch, RawResponse(status=403, reason="Forbidden", body=b"denied"))

    with pytest.raises(ProtocolError, match="unexpected status code"):
        ManagerClient(_settings()).get_redirects_page(0, 100)


# --------------------------------------------------------------------------- #
# Agent status
# --------------------------------------------------------------------------- #


def test_post_agent_status_sends_json(monkeypatch: Any) -> None:
    recorder = _install(monkeypatch, _ok())
    agent = Agent(name="test-node", version=2, status=AgentStatus.SUCCESS, load_duration=1.5)

    ManagerClient(_settings()).post_agent_status(agent)

    request = recorder.requests[0]
    assert request["method"] == "POST"
    assert request["url"] == f"{BASE}/agents"
    assert request["headers"] == {"Content-Type": "application/json"}
    sent = json.loads(request["body"])
    assert sent["name"] == "test-node"
    assert sent["version"] == 2
    assert sent["status"] == "success"
    assert sent["load_duration"] == "1.5s"


def test_post_agent_status_rejects_empty_name(monkeypatch: Any) -> None:
    recorder = _install(monkeypatch)

    with pytest.raises(AgentValidationError):
        ManagerClient(_settings()).post_agent_status(Agent(name=""))

    assert recorder.requests == []


def test_post_agent_status_non_200(monkeypatch: Any) -> None:
    _install(monkeypatch, RawResponse(status=500, reason="Internal Server Error", body=b""))

    with pytest.raises(ProtocolError, match="unexpected status code"):
        ManagerClient(_settings()).post_agent_status(Agent(name="test-node"))


def test_post_agent_hit_uses_patch(monkeypatch: Any) -> None:
    recorder = _install(monkeypatch, _ok())

    ManagerClient(_settings()).post_agent_hit("test-node")

    assert recorder.requests[0]["method"] == "PATCH"
    assert recorder.requests[0]["url"] == f"{BASE}/agents/test-node/hit"


def test_post_agent_hit_encodes_name(monkeypatch: Any) -> None:
    recorder = _install(monkeypatch, _ok())

    ManagerClient(_settings()).post_agent_hit("edge node/1")

    assert recorder.requests[0]["url"] == f"{BASE}/agents/edge%20node%2F1/hit"


# --------------------------------------------------------------------------- #
# Transport (`_send`)
# --------------------------------------------------------------------------- #


class _FakeHTTPResponse(io.BytesIO):
    status = 200
    reason = "OK"

    def __enter__(self) -> _FakeHTTPResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def test_send_adds_bearer_header(monkeypatch: Any) -> None:
    captured: dict[str, Any] = {}

    def fake_urlopen(request: Any, timeout: float) -> _FakeHTTPResponse:
        captured["request"] = request
        captured["timeout"] = timeout
        return _FakeHTTPResponse(b"7")

    monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
    client = ManagerClient(_settings(header_authorization_name="X-Auth"), timeout_seconds=3.0)

    assert client.get_version() == 7
    assert captured["request"].get_header("X-auth") == "Bearer test-token"
    assert captured["request"].get_method() == "GET"
    assert captured["timeout"] == 3.0


def test_send_maps_http_error_to_response(monkeypatch: Any) -> None:
    def fake_urlopen(request: Any, timeout: float) -> Any:
        raise urllib.error.HTTPError(
            request.full_url, 404, "Not Found", None, io.BytesIO(b"missing")  # type: ignore[arg-type]
        )

    monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)

    with pytest.raises(ProtocolError, match=r"Not Found \(404\) missing"):
        ManagerClient(_settings()).get_version()


def test_send_maps_network_failure_to_transport_error(monkeypatch: Any) -> None:
    def fake_urlopen(request: Any, timeout: float) -> Any:
        raise urllib.error.URLError("connection refused")

    monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)

    with pytest.raises(TransportError, match="connection refused"):
        ManagerClient(_settings()).get_version()


def test_invalid_manager_url_is_transport_error() -> None:
    client = ManagerClient(_settings(manager_url="://invalid-url"))

    with pytest.raises(TransportError):
        client.get_version()


def test_from_settings_uses_request_timeout() -> None:
    client = ManagerClient.from_settings(_settings(request_timeout=2.5))
    assert client.timeout_seconds == 2.5
