"""Assemble the A2A Task returned as the JSON-RPC ``result``."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from .models import (
    AgentResult,
    Artifact,
    DataPart,
    Message,
    Part,
    Task,
    TaskStatus,
    TextPart,
)

IdFactory = Callable[[], str]
Clock = Callable[[], datetime]


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(dt: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def tool_result_part(result: Any) -> Part:
    if isinstance(result, str):
        return TextPart(text=result)
    return DataPart(data=result)


def make_agent_message(text: str, task_id: str, context_id: str, id_factory: IdFactory) -> Message:
    return Message(
        role="agent",
        parts=[TextPart(text=text)],
        messageId=id_factory(),
        taskId=task_id,
        contextId=context_id,
    )


def build_artifacts(agent_id: str, result: AgentResult, id_factory: IdFactory) -> List[Artifact]:
    artifacts = [
        Artifact(
            artifactId=id_factory(),
            name=f"{agent_id}Response",
            description="Agent response",
            parts=[TextPart(text=result.text)],
        )
    ]
    if result.tool_results:
        artifacts.append(
            Artifact(
                artifactId=id_factory(),
                name="ToolResults",
                description="Tool call results",
                parts=[tool_result_part(r) for r in result.tool_results],
            )
        )
    return artifacts


def stamp_message(msg: Message, task_id: str, context_id: str, id_factory: IdFactory) -> Message:
    """Copy of ``msg`` with every identifier resolved. The input is not mutated."""
    return msg.model_copy(
        update={
            "messageId": msg.messageId or id_factory(),
            "taskId": msg.taskId or task_id,
            "contextId": msg.contextId or context_id,
        }
    )


def compose_task(
    agent_id: str,
    result: AgentResult,
    messages: List[Message],
    task_id: Optional[str] = None,
    context_id: Optional[str] = None,
    id_factory: IdFactory = new_id,
    now: Clock = utcnow,
) -> Task:
    """
    Build the completed Task for one request.

    ``task_id``/``context_id`` are the caller's values when given, otherwise
    generated here exactly once and reused for every message in the task.
    """
    task_id = task_id or id_factory()
    context_id = context_id or id_factory()

    artifacts = build_artifacts(agent_id, result, id_factory)
    final = make_agent_message(result.text, task_id, context_id, id_factory)
    history = [stamp_message(m, task_id, context_id, id_factory) for m in messages]
    history.append(final)

    return Task(
        id=task_id,
        contextId=context_id,
        status=TaskStatus(status="completed", timestamp=iso_timestamp(now()), message=final),
        artifacts=artifacts,
        history=history,
    )
