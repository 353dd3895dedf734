from __future__ import annotations
from typing import Dict, List, Optional
import os
import httpx

from ..agents import AgentBase
from ..models import AgentResult
from .openai import to_chat_messages


class Agent(AgentBase):
    id = "ollama"
    name = "Ollama"
    description = "Chat agent backed by a local Ollama daemon."

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._base = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434").rstrip("/")
        self._model = os.getenv("OLLAMA_MODEL", "llama3")
        self._transport = transport
        # Lazy-ready: assume daemon reachable; errors surface at call time
        self.ready = True
        self.reason = f"Ollama ready (model={self._model})"

    async def generate(self, turns: List[Dict[str, str]]) -> AgentResult:
        payload = {"model": self._model, "messages": to_chat_messages(turns), "stream": False}
        async with httpx.AsyncClient(base_url=self._base, transport=self._transport) as client:
            r = await client.post("/api/chat", json=payload, timeout=None)
            r.raise_for_status()
            data = r.json()
        message = data.get("message") or {}
        tool_results = [c.get("function", c) for c in (message.get("tool_calls") or [])]
        return AgentResult(text=(message.get("content") or "").strip(), tool_results=tool_results)
