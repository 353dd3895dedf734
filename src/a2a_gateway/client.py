from __future__ import annotations
import uuid
import httpx
from typing import Any, Dict, List, Optional


class A2AClientError(Exception):
    """The server answered with a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(f"[{code}] {message}")
        self.code = code
        self.message = message
        self.data = data


class A2AClient:
    def __init__(self, base_url: str, transport: Optional[httpx.BaseTransport] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    def _post(self, path: str, payload: Dict[str, Any], timeout: Optional[float]) -> Dict[str, Any]:
        with httpx.Client(base_url=self.base_url, transport=self._transport, timeout=timeout) as c:
            r = c.post(path, json=payload)
        # JSON-RPC errors come back as 4xx/5xx with a well-formed body
        try:
            data = r.json()
        except ValueError:
            r.raise_for_status()
            raise
        if isinstance(data, dict) and "error" in data:
            err = data["error"] or {}
            raise A2AClientError(err.get("code", 0), err.get("message", ""), err.get("data"))
        r.raise_for_status()
        return data

    def send_message(
        self,
        agent_id: str,
        text: str = "",
        *,
        messages: Optional[List[Dict[str, Any]]] = None,
        task_id: Optional[str] = None,
        context_id: Optional[str] = None,
        timeout: Optional[float] = 60.0,
    ) -> Dict[str, Any]:
        """Send one message (or a prepared ``messages`` list) and return the Task."""
        params: Dict[str, Any] = {}
        if messages is not None:
            params["messages"] = messages
        else:
            params["message"] = {
                "kind": "message",
                "role": "user",
                "messageId": str(uuid.uuid4()),
                "parts": [{"kind": "text", "text": text}],
            }
        if task_id:
            params["taskId"] = task_id
        if context_id:
            params["contextId"] = context_id
        payload = {"jsonrpc": "2.0", "id": str(uuid.uuid4()), "method": "message/send", "params": params}
        return self._post(f"/a2a/agent/{agent_id}", payload, timeout)["result"]

    def send(self, agent_id: str, text: str, timeout: Optional[float] = 60.0) -> str:
        task = self.send_message(agent_id, text, timeout=timeout)
        for p in ((task.get("status") or {}).get("message") or {}).get("parts", []):
            if p.get("kind") == "text":
                return p.get("text", "")
        return ""

    def list_agents(self, timeout: Optional[float] = 10.0) -> List[Dict[str, Any]]:
        with httpx.Client(base_url=self.base_url, transport=self._transport, timeout=timeout) as c:
            r = c.get("/a2a/agents")
        r.raise_for_status()
        return r.json().get("agents", [])

    def card(self, agent_id: str, timeout: Optional[float] = 10.0) -> Dict[str, Any]:
        with httpx.Client(base_url=self.base_url, transport=self._transport, timeout=timeout) as c:
            r = c.get(f"/.well-known/{agent_id}/agent-card.json")
        r.raise_for_status()
        return r.json()
