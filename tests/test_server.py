"""End-to-end tests for POST /a2a/agent/{agentId} and the meta routes."""

import pytest
from fastapi.testclient import TestClient

from a2a_gateway.agents import AgentRegistry, NotReadyAgent
from a2a_gateway.server import create_app

from conftest import ScriptedAgent, SequentialIds, rpc, text_message


# =============================================================================
# Envelope & resolution errors
# =============================================================================

@pytest.mark.parametrize(
    "body, expected_id",
    [
        ({"jsonrpc": "1.0", "id": "abc", "method": "message/send"}, "abc"),
        ({"id": 5, "method": "message/send"}, 5),
        ({"jsonrpc": "2.0", "method": "message/send"}, None),
        ({"jsonrpc": "2.0", "id": 0}, None),
        ([1, 2, 3], None),
    ],
)
def test_invalid_envelope_is_32600_with_400(client, agent, body, expected_id):
    r = client.post("/a2a/agent/planner", json=body)
    assert r.status_code == 400
    data = r.json()
    assert data["jsonrpc"] == "2.0"
    assert data["id"] == expected_id
    assert data["error"]["code"] == -32600
    assert "result" not in data
    assert agent.calls == []


def test_unknown_agent_is_32601(client, agent):
    r = client.post("/a2a/agent/nobody", json=rpc({"message": text_message("hi")}))
    assert r.status_code == 400
    data = r.json()
    assert data["id"] == "req-1"
    assert data["error"]["code"] == -32601
    assert data["error"]["message"] == "Agent 'nobody' not found"
    assert agent.calls == []


def test_validation_runs_before_resolution(client):
    r = client.post("/a2a/agent/nobody", json={"jsonrpc": "2.0"})
    assert r.json()["error"]["code"] == -32600


# =============================================================================
# Internal errors
# =============================================================================

def _client_for(agent, ids=None):
    app = create_app(registry=AgentRegistry([agent]), id_factory=ids or SequentialIds())
    return TestClient(app)


def test_agent_exception_is_32603_with_500():
    boom = ScriptedAgent(error=RuntimeError("upstream exploded"))
    with _client_for(boom) as c:
        r = c.post("/a2a/agent/planner", json=rpc({"message": text_message("hi")}, id=42))
    assert r.status_code == 500
    data = r.json()
    assert "result" not in data
    assert data["id"] == 42
    assert data["error"]["code"] == -32603
    assert data["error"]["message"] == "Internal error"
    assert data["error"]["data"]["details"] == "upstream exploded"


def test_malformed_agent_output_is_32603():
    class Weird(ScriptedAgent):
        def generate(self, turns):
            return 12345

    with _client_for(Weird()) as c:
        r = c.post("/a2a/agent/planner", json=rpc({"message": text_message("hi")}))
    assert r.status_code == 500
    assert r.json()["error"]["code"] == -32603


def test_non_object_message_is_tolerated_as_empty(client, agent):
    r = client.post("/a2a/agent/planner", json=rpc({"message": "just a string"}))
    assert r.status_code == 200
    assert agent.calls == [[{"role": "user", "content": ""}]]
    assert len(r.json()["result"]["history"]) == 2


def test_falsy_message_falls_through_to_messages(client, agent):
    r = client.post("/a2a/agent/planner", json=rpc({"message": "", "messages": [text_message("from list")]}))
    assert r.status_code == 200
    assert agent.calls == [[{"role": "user", "content": "from list"}]]


def test_non_list_parts_is_32603(client, agent):
    r = client.post("/a2a/agent/planner", json=rpc({"message": {"role": "user", "parts": "not a list"}}))
    assert r.status_code == 500
    assert r.json()["error"]["code"] == -32603
    assert agent.calls == []


def test_unparseable_body_is_32603_with_null_id(client):
    r = client.post("/a2a/agent/planner", content=b"{not json", headers={"content-type": "application/json"})
    assert r.status_code == 500
    data = r.json()
    assert data["id"] is None
    assert data["error"]["code"] == -32603


def test_not_ready_agent_is_32603():
    with _client_for(NotReadyAgent("planner", reason="missing key")) as c:
        r = c.post("/a2a/agent/planner", json=rpc({"message": text_message("hi")}))
    assert r.status_code == 500
    assert "missing key" in r.json()["error"]["data"]["details"]


# =============================================================================
# Successful tasks
# =============================================================================

def test_single_message_roundtrip(client, agent):
    msg = text_message("A")
    msg["parts"].append({"kind": "data", "data": {"x": 1}})
    r = client.post("/a2a/agent/planner", json=rpc({"message": msg}))
    assert r.status_code == 200
    data = r.json()
    assert data["id"] == "req-1"
    assert "error" not in data
    assert agent.calls == [[{"role": "user", "content": 'A\n{"x":1}'}]]

    task = data["result"]
    assert task["kind"] == "task"
    assert task["status"]["status"] == "completed"
    assert task["status"]["timestamp"] == "2025-01-02T03:04:05.678Z"
    assert task["status"]["message"]["role"] == "agent"
    assert task["status"]["message"]["parts"] == [{"kind": "text", "text": "Done."}]
    assert task["artifacts"][0]["parts"] == [{"kind": "text", "text": "Done."}]


def test_no_messages_invokes_agent_with_zero_turns(client, agent):
    r = client.post("/a2a/agent/planner", json=rpc({}))
    assert r.status_code == 200
    assert agent.calls == [[]]
    history = r.json()["result"]["history"]
    assert len(history) == 1
    assert history[0]["role"] == "agent"


def test_missing_params_is_tolerated(client, agent):
    r = client.post("/a2a/agent/planner", json=rpc())
    assert r.status_code == 200
    assert agent.calls == [[]]


def test_caller_task_id_is_echoed(client):
    r = client.post("/a2a/agent/planner", json=rpc({"message": text_message("x"), "taskId": "T1", "contextId": "C1"}))
    task = r.json()["result"]
    assert task["id"] == "T1"
    assert task["contextId"] == "C1"
    assert {m["taskId"] for m in task["history"]} == {"T1"}


def test_generated_task_ids_differ_between_requests():
    agent = ScriptedAgent()
    app = create_app(registry=AgentRegistry([agent]))  # real uuid ids
    with TestClient(app) as c:
        body = rpc({"message": text_message("same")})
        first = c.post("/a2a/agent/planner", json=body).json()["result"]
        second = c.post("/a2a/agent/planner", json=body).json()["result"]
    assert first["id"] and second["id"]
    assert first["id"] != second["id"]
    assert first["contextId"] != second["contextId"]


def test_tool_results_artifact():
    agent = ScriptedAgent(tool_results=["r1", "r2"])
    with _client_for(agent) as c:
        task = c.post("/a2a/agent/planner", json=rpc({"message": text_message("x")})).json()["result"]
    assert len(task["artifacts"]) == 2
    assert task["artifacts"][0]["name"] == "plannerResponse"
    tools = task["artifacts"][1]
    assert tools["name"] == "ToolResults"
    assert tools["parts"] == [{"kind": "text", "text": "r1"}, {"kind": "text", "text": "r2"}]


def test_history_is_inputs_plus_one_agent_message(client):
    messages = [
        text_message("first", messageId="m-1", taskId="own-task"),
        text_message("second"),
        {"role": "user", "parts": [{"kind": "file", "file": {"uri": "s3://bucket/key"}}]},
    ]
    r = client.post("/a2a/agent/planner", json=rpc({"messages": messages, "taskId": "T9"}))
    history = r.json()["result"]["history"]
    assert len(history) == len(messages) + 1
    assert history[0]["messageId"] == "m-1"
    assert history[0]["taskId"] == "own-task"
    assert history[1]["taskId"] == "T9"
    assert history[1]["messageId"]
    # unknown parts are re-emitted as the caller sent them
    assert history[2]["parts"] == [{"kind": "file", "file": {"uri": "s3://bucket/key"}}]
    assert history[-1]["role"] == "agent"
    assert history[-1]["parts"] == [{"kind": "text", "text": "Done."}]


def test_method_and_metadata_are_not_interpreted(client, agent):
    r = client.post(
        "/a2a/agent/planner",
        json=rpc({"message": text_message("x"), "metadata": {"trace": "t"}}, method="tasks/get"),
    )
    assert r.status_code == 200
    assert len(agent.calls) == 1


# =============================================================================
# Meta routes & headers
# =============================================================================

def test_request_id_header_is_echoed(client):
    r = client.post("/a2a/agent/planner", json=rpc({}), headers={"X-Request-ID": "rid-1"})
    assert r.headers["x-request-id"] == "rid-1"
    assert r.headers["cache-control"] == "no-store"


def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    assert r.headers["x-request-id"]


def test_readyz_reflects_agent_readiness():
    with TestClient(create_app(registry=AgentRegistry([ScriptedAgent()]))) as c:
        assert c.get("/readyz").status_code == 200
    with TestClient(create_app(registry=AgentRegistry([NotReadyAgent("x", "nope")]))) as c:
        r = c.get("/readyz")
    assert r.status_code == 503
    assert r.json()["status"] == "not-ready"
    with TestClient(create_app(registry=AgentRegistry())) as c:
        assert c.get("/readyz").status_code == 503


def test_agents_listing(client):
    agents = client.get("/a2a/agents").json()["agents"]
    assert [a["id"] for a in agents] == ["planner"]
    assert agents[0]["ready"] is True


def test_agent_card(client):
    r = client.get("/.well-known/planner/agent-card.json")
    assert r.status_code == 200
    card = r.json()
    assert card["url"].endswith("/a2a/agent/planner")
    assert card["preferredTransport"] == "JSONRPC"
    assert card["capabilities"]["streaming"] is False
    assert card["skills"][0]["id"] == "planner"


def test_agent_card_unknown_agent(client):
    r = client.get("/.well-known/nobody/agent-card.json")
    assert r.status_code == 404
    assert r.json() == {"error": "Agent 'nobody' not found"}


@pytest.mark.parametrize("rpc_id", [1.5, 1e20])
def test_float_ids_are_echoed_verbatim(client, agent, rpc_id):
    r = client.post("/a2a/agent/planner", json=rpc({"message": text_message("hi")}, id=rpc_id))
    assert r.status_code == 200
    assert r.json()["id"] == rpc_id
    assert len(agent.calls) == 1
