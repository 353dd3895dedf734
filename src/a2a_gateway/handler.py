"""
Request pipeline behind ``POST /a2a/agent/{agentId}``.

Stages run in order and each one may fail into a single JSON-RPC error:

    validating -> resolving -> normalizing -> invoking -> composing -> responded
                                                                    \\-> failed

Validation failures map to -32600, resolution failures to -32601, and every
other exception (including an unparseable body) to -32603.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

from .agents import AgentRegistry
from .composer import Clock, IdFactory, compose_task, new_id, utcnow
from .envelope import echo_id, validate_envelope
from .errors import A2AError, AgentNotFound, InternalError, error_response
from .invoker import invoke_agent
from .models import JSONRPCSuccess, RequestId
from .normalizer import extract_messages, normalize_messages, parse_params

log = logging.getLogger("a2a.handler")

VALIDATING = "validating"
RESOLVING = "resolving"
NORMALIZING = "normalizing"
INVOKING = "invoking"
COMPOSING = "composing"
RESPONDED = "responded"
FAILED = "failed"


class A2ARouteHandler:
    """Translate one JSON-RPC request into one agent call and one response."""

    def __init__(
        self,
        registry: AgentRegistry,
        id_factory: IdFactory = new_id,
        now: Clock = utcnow,
    ) -> None:
        self.registry = registry
        self.id_factory = id_factory
        self.now = now

    async def handle(
        self, agent_id: str, raw: bytes, request_id: Optional[str] = None
    ) -> Tuple[int, Dict[str, Any]]:
        """Return ``(http_status, body)``. Never raises."""
        stage = VALIDATING
        rpc_id: Optional[RequestId] = None
        try:
            body = json.loads(raw)
            rpc_id = echo_id(body)
            rpc = validate_envelope(body)

            stage = RESOLVING
            agent = self.registry.get_agent(agent_id)
            if agent is None:
                raise AgentNotFound(agent_id)

            stage = NORMALIZING
            params = parse_params(rpc.params)
            messages = extract_messages(params)
            turns = normalize_messages(messages)

            stage = INVOKING
            result = await invoke_agent(agent, turns)

            stage = COMPOSING
            task = compose_task(
                agent_id,
                result,
                messages,
                task_id=params.taskId,
                context_id=params.contextId,
                id_factory=self.id_factory,
                now=self.now,
            )
            payload = JSONRPCSuccess(id=rpc.id, result=task).model_dump(mode="json")
        except A2AError as err:
            return self._fail(err, rpc_id, agent_id, stage, request_id)
        except Exception as exc:
            log.exception(
                "a2a.internal_error",
                extra={"request_id": request_id, "agent_id": agent_id, "stage": stage},
            )
            return self._fail(InternalError.from_exception(exc), rpc_id, agent_id, stage, request_id)

        log.info(
            "a2a.request",
            extra={
                "request_id": request_id,
                "agent_id": agent_id,
                "method": rpc.method,
                "state": RESPONDED,
                "turns": len(turns),
                "tool_results": len(result.tool_results),
                "task_id": task.id,
            },
        )
        return 200, payload

    def _fail(
        self,
        err: A2AError,
        rpc_id: Optional[RequestId],
        agent_id: str,
        stage: str,
        request_id: Optional[str],
    ) -> Tuple[int, Dict[str, Any]]:
        log.warning(
            "a2a.error",
            extra={
                "request_id": request_id,
                "agent_id": agent_id,
                "stage": stage,
                "state": FAILED,
                "code": err.code,
                "detail": err.message,
            },
        )
        return err.http_status, error_response(err, rpc_id)
