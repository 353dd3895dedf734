from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Parts
# =============================================================================

class TextPart(BaseModel):
    kind: Literal["text"] = "text"
    text: str = ""


class DataPart(BaseModel):
    kind: Literal["data"] = "data"
    data: Any = None


class UnknownPart(BaseModel):
    """Any part kind we do not understand. Raw fields are kept for re-emission."""
    model_config = ConfigDict(extra="allow")

    kind: Any = None


Part = Union[TextPart, DataPart, UnknownPart]


def _scalar_text(value: Any) -> str:
    """Text of a scalar as JSON renders it; null and containers give ""."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return ""


def parse_part(raw: Any) -> Part:
    """Resolve a raw part into the closed variant; unknown kinds fall through."""
    if isinstance(raw, (TextPart, DataPart, UnknownPart)):
        return raw
    if not isinstance(raw, dict):
        return UnknownPart()
    # Older A2A revisions tag parts with "type" instead of "kind"
    kind = raw.get("kind", raw.get("type"))
    if kind == "text":
        return TextPart(text=_scalar_text(raw.get("text")))
    if kind == "data":
        return DataPart(data=raw.get("data"))
    return UnknownPart.model_validate(raw)


# =============================================================================
# Messages, artifacts, tasks
# =============================================================================

def _opt_id(v: Any) -> Optional[str]:
    """Empty ids count as absent; numeric ids are kept as their string form."""
    if v is None or v == "":
        return None
    if isinstance(v, bool):
        raise ValueError("identifier must be a string")
    if isinstance(v, (int, float)):
        return str(v)
    return v


class Message(BaseModel):
    kind: Literal["message"] = "message"
    role: str = "user"
    parts: List[Part] = Field(default_factory=list)
    messageId: Optional[str] = None
    taskId: Optional[str] = None
    contextId: Optional[str] = None

    @field_validator("parts", mode="before")
    @classmethod
    def _val_parts(cls, v: Any) -> List[Part]:
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("parts must be a list")
        return [parse_part(p) for p in v]

    @field_validator("kind", mode="before")
    @classmethod
    def _val_kind(cls, _: Any) -> str:
        return "message"

    @field_validator("role", mode="before")
    @classmethod
    def _val_role(cls, v: Any) -> Any:
        return "user" if v is None or v == "" else v

    @field_validator("messageId", "taskId", "contextId", mode="before")
    @classmethod
    def _val_ids(cls, v: Any) -> Optional[str]:
        return _opt_id(v)


class Artifact(BaseModel):
    artifactId: str
    name: str
    description: Optional[str] = None
    parts: List[Part]


class TaskStatus(BaseModel):
    status: Literal["completed"] = "completed"
    timestamp: str
    message: Message


class Task(BaseModel):
    kind: Literal["task"] = "task"
    id: str
    contextId: str
    status: TaskStatus
    artifacts: List[Artifact]
    history: List[Message]


def _is_falsy(v: Any) -> bool:
    """JSON falsiness: null, false, 0 and "" (empty objects and arrays are truthy)."""
    if v is None or v is False:
        return True
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return v == 0
    return v == ""


class SendParams(BaseModel):
    """Request params as the pipeline reads them. Unknown keys are ignored."""
    model_config = ConfigDict(extra="ignore")

    message: Optional[Message] = None
    messages: Optional[List[Message]] = None
    contextId: Optional[str] = None
    taskId: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("message", mode="before")
    @classmethod
    def _val_message(cls, v: Any) -> Any:
        # Falsy means absent (so "messages" is consulted); any other
        # non-object becomes a message with no parts
        if _is_falsy(v):
            return None
        return v if isinstance(v, (dict, Message)) else {}

    @field_validator("messages", mode="before")
    @classmethod
    def _val_messages(cls, v: Any) -> Optional[List[Any]]:
        # A non-list "messages" is treated as absent
        if not isinstance(v, list):
            return None
        return [m if isinstance(m, (dict, Message)) else {} for m in v]

    @field_validator("contextId", "taskId", mode="before")
    @classmethod
    def _val_ids(cls, v: Any) -> Optional[str]:
        return _opt_id(v)

    @field_validator("metadata", mode="before")
    @classmethod
    def _val_metadata(cls, v: Any) -> Optional[Dict[str, Any]]:
        return v if isinstance(v, dict) else None


# =============================================================================
# Agent contract
# =============================================================================

class AgentResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    tool_results: List[Any] = Field(default_factory=list, alias="toolResults")

    @field_validator("text", mode="before")
    @classmethod
    def _val_text(cls, v: Any) -> str:
        return "" if v is None else v

    @field_validator("tool_results", mode="before")
    @classmethod
    def _val_tool_results(cls, v: Any) -> List[Any]:
        return [] if v is None else v


# =============================================================================
# JSON-RPC 2.0
# =============================================================================

RequestId = Union[str, int, float]


class JSONRPCRequest(BaseModel):
    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId
    method: Optional[str] = None
    params: Any = None


class JSONRPCSuccess(BaseModel):
    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId
    result: Task


class JSONRPCErrorObj(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None


class JSONRPCError(BaseModel):
    jsonrpc: Literal["2.0"] = "2.0"
    id: Optional[RequestId]
    error: JSONRPCErrorObj
