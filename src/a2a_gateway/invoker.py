from __future__ import annotations

import asyncio
import inspect
from typing import Any, Dict, List, Mapping

from .models import AgentResult


def coerce_result(raw: Any) -> AgentResult:
    """Accept an AgentResult, a ``{text, toolResults}`` mapping, or a bare string."""
    if isinstance(raw, AgentResult):
        return raw
    if isinstance(raw, str):
        return AgentResult(text=raw)
    if isinstance(raw, Mapping):
        return AgentResult.model_validate(dict(raw))
    raise TypeError(f"agent returned {type(raw).__name__}, expected text and tool results")


async def invoke_agent(agent: Any, turns: List[Dict[str, str]]) -> AgentResult:
    """
    Call ``agent.generate(turns)`` exactly once.

    Coroutine functions are awaited; sync callables run in a worker thread so
    the event loop keeps serving other requests. Exceptions propagate.
    """
    gen = getattr(agent, "generate", None)
    if gen is None or not callable(gen):
        raise TypeError("agent has no callable 'generate'")

    if inspect.iscoroutinefunction(gen):
        raw = await gen(turns)
    else:
        raw = await asyncio.to_thread(gen, turns)
        # Sync wrappers around async agents hand back an awaitable
        if inspect.isawaitable(raw):
            raw = await raw
    return coerce_result(raw)
