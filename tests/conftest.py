"""Shared fixtures: scripted agents, deterministic ids and a pinned clock."""

from __future__ import annotations

import itertools
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from a2a_gateway.agents import AgentBase, AgentRegistry
from a2a_gateway.models import AgentResult
from a2a_gateway.server import create_app

FIXED_NOW = datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


class ScriptedAgent(AgentBase):
    """Returns a canned result and records every call. No network."""

    def __init__(self, agent_id: str = "planner", text: str = "Done.", tool_results=None, error=None):
        self.id = agent_id
        self.name = agent_id.capitalize()
        self.description = "scripted test agent"
        self.ready = True
        self.reason = ""
        self._result = AgentResult(text=text, tool_results=tool_results or [])
        self._error = error
        self.calls: list[list[dict]] = []

    def generate(self, turns):
        self.calls.append(turns)
        if self._error is not None:
            raise self._error
        return self._result


class SequentialIds:
    def __init__(self, prefix: str = "id"):
        self._prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"


@pytest.fixture
def agent():
    return ScriptedAgent()


@pytest.fixture
def registry(agent):
    return AgentRegistry([agent])


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def client(registry, ids):
    app = create_app(registry=registry, id_factory=ids, now=lambda: FIXED_NOW)
    with TestClient(app) as c:
        yield c


def rpc(params=None, id="req-1", method="message/send"):
    body = {"jsonrpc": "2.0", "id": id, "method": method}
    if params is not None:
        body["params"] = params
    return body


def text_message(text: str, role: str = "user", **extra):
    return {"kind": "message", "role": role, "parts": [{"kind": "text", "text": text}], **extra}
