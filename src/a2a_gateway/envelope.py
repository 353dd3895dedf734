from __future__ import annotations

from typing import Any, Optional

from .errors import InvalidRequest
from .models import JSONRPCRequest, RequestId


def _usable_id(value: Any) -> bool:
    # bool is an int subclass but never a valid JSON-RPC id
    if isinstance(value, bool):
        return False
    return isinstance(value, (str, int, float)) and bool(value)


def echo_id(body: Any) -> Optional[RequestId]:
    """Id to put on an error response: the caller's when usable, else null."""
    if isinstance(body, dict) and _usable_id(body.get("id")):
        return body["id"]
    return None


def validate_envelope(body: Any) -> JSONRPCRequest:
    """
    Check the JSON-RPC 2.0 envelope only.

    ``method`` and ``params`` are passed through untouched; their shape is
    handled (or rejected) further down the pipeline.
    """
    if not isinstance(body, dict):
        raise InvalidRequest()
    if body.get("jsonrpc") != "2.0" or not _usable_id(body.get("id")):
        raise InvalidRequest()
    method = body.get("method")
    return JSONRPCRequest(
        id=body["id"],
        method=method if isinstance(method, str) else None,
        params=body.get("params"),
    )
