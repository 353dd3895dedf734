from __future__ import annotations
from typing import Dict, List
import os

from ..agents import AgentBase
from ..models import AgentResult

# A2A uses "agent" where chat APIs use "assistant"
_ROLE_MAP = {"agent": "assistant", "assistant": "assistant", "system": "system", "user": "user"}


def to_chat_messages(turns: List[Dict[str, str]]) -> List[Dict[str, str]]:
    return [
        {"role": _ROLE_MAP.get((t.get("role") or "").lower(), "user"), "content": t.get("content") or ""}
        for t in turns
    ]


class Agent(AgentBase):
    id = "openai"
    name = "OpenAI"
    description = "Chat agent backed by the OpenAI Chat Completions API."

    def __init__(self) -> None:
        api_key = os.getenv("OPENAI_API_KEY")
        self._client = None
        self._model = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        if not api_key:
            self.ready = False
            self.reason = "OPENAI_API_KEY not set"
            return
        try:
            from openai import OpenAI  # type: ignore
        except ImportError as e:
            self.ready = False
            self.reason = f"OpenAI SDK not available: {e}"
            return
        self._client = OpenAI(api_key=api_key)
        self.ready = True
        self.reason = f"OpenAI ready (model={self._model})"

    def generate(self, turns: List[Dict[str, str]]) -> AgentResult:
        if not self.ready or self._client is None:
            raise RuntimeError(f"openai agent not ready: {self.reason}")
        messages = to_chat_messages(turns) or [{"role": "user", "content": "Say hello."}]
        res = self._client.chat.completions.create(model=self._model, messages=messages)
        choice = res.choices[0].message
        tool_results = [
            {"name": c.function.name, "arguments": c.function.arguments}
            for c in (getattr(choice, "tool_calls", None) or [])
        ]
        return AgentResult(text=(choice.content or "").strip(), tool_results=tool_results)
