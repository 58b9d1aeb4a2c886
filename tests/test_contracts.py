"""Unit tests for the wire contracts."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from flecto_agent.core.contracts import (
    Agent,
    AgentStatus,
    AgentType,
    ItemList,
    Page,
    PageContentType,
    Redirect,
    RedirectStatus,
    format_duration,
    validate_agent,
)
from flecto_agent.core.errors import AgentValidationError


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0.0, "0s"),
        (1.5, "1.5s"),
        (2.0, "2s"),
        (0.25, "250ms"),
        (0.000012, "12µs"),
        (0.0000005, "500ns"),
        (1.2345678, "1.2345678s"),
        (90.0, "1m30s"),
        (3725.5, "1h2m5.5s"),
    ],
)
def test_format_duration(seconds: float, expected: str) -> None:
    assert format_duration(seconds) == expected


def test_agent_serializes_duration_string() -> None:
    agent = Agent(
        name="node-1",
        type=AgentType.TRAEFIK,
        version=3,
        status=AgentStatus.ERROR,
        error="boom",
        load_duration=0.25,
    )

    payload = json.loads(agent.model_dump_json())

    assert payload == {
        "name": "node-1",
        "type": "traefik",
        "version": 3,
        "status": "error",
        "error": "boom",
        "load_duration": "250ms",
    }


def test_validate_agent_rejects_blank_name() -> None:
    with pytest.raises(AgentValidationError, match="must not be empty"):
        validate_agent(Agent(name="   "))


def test_agent_type_is_valid() -> None:
    assert AgentType.is_valid("default")
    assert AgentType.is_valid(AgentType.NGINX)
    assert not AgentType.is_valid("invalid-type")


def test_redirect_defaults_and_status_validation() -> None:
    rule = Redirect(source="/old", target="/new")
    assert rule.status is RedirectStatus.MOVED_PERMANENT

    with pytest.raises(ValidationError):
        Redirect(source="/old", target="/new", status=200)


def test_item_list_validates_items() -> None:
    listing = ItemList[Page].model_validate(
        {"items": [{"path": "/sitemap.xml", "content_type": "application/xml"}], "total": 1}
    )

    assert listing.items[0].content_type is PageContentType.XML

    with pytest.raises(ValidationError):
        ItemList[Page].model_validate({"items": [], "total": -1})


def test_agent_type_parse() -> None:
    assert AgentType.parse("traefik") is AgentType.TRAEFIK

    with pytest.raises(AgentValidationError, match="invalid agent type"):
        AgentType.parse("apache")
