from __future__ import annotations
from typing import Dict, List

from ..agents import AgentBase
from ..models import AgentResult


class Agent(AgentBase):
    id = "echo"
    name = "Echo"
    description = "Greets the user and echoes their latest message."
    ready = True
    reason = "Echo agent is always ready."

    def generate(self, turns: List[Dict[str, str]]) -> AgentResult:
        last = ""
        for t in reversed(turns):
            if t.get("role") == "user":
                last = (t.get("content") or "").strip()
                break
        return AgentResult(text=f"Hello, you said: {last}" if last else "Hello, World!")
