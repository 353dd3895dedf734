"""JSON-RPC error taxonomy for the A2A route and the mapping to response bodies."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .models import JSONRPCError, JSONRPCErrorObj, RequestId

INVALID_REQUEST = -32600
AGENT_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


class A2AError(Exception):
    """Base for every failure the route turns into a JSON-RPC error object."""

    code: int = INTERNAL_ERROR
    http_status: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: Optional[str] = None, data: Any = None) -> None:
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)


class InvalidRequest(A2AError):
    """The body is not a usable JSON-RPC 2.0 request."""

    code = INVALID_REQUEST
    http_status = 400
    default_message = "Invalid Request: jsonrpc must be 2.0 and id is required"


class AgentNotFound(A2AError):
    """No agent is registered under the requested id."""

    code = AGENT_NOT_FOUND
    http_status = 400

    def __init__(self, agent_id: str) -> None:
        self.agent_id = agent_id
        super().__init__(f"Agent '{agent_id}' not found")


class InternalError(A2AError):
    """Anything that fails after the agent was resolved."""

    @classmethod
    def from_exception(cls, exc: BaseException) -> "InternalError":
        return cls(data={"details": str(exc) or exc.__class__.__name__, "type": exc.__class__.__name__})


def error_response(err: A2AError, request_id: Optional[RequestId]) -> Dict[str, Any]:
    """Render an error as a JSON-RPC response body. ``data`` is omitted when empty."""
    body = JSONRPCError(
        id=request_id,
        error=JSONRPCErrorObj(code=err.code, message=err.message, data=err.data),
    ).model_dump(mode="json")
    if body["error"].get("data") is None:
        body["error"].pop("data", None)
    return body
