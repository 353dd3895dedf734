# src/a2a_gateway/server.py
from __future__ import annotations

import uuid
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.cors import CORSMiddleware

from .config import Settings, settings as default_settings
from .logging_config import configure_logging
from .agents import AgentRegistry, build_registry
from .card import agent_card
from .composer import Clock, IdFactory, new_id, utcnow
from .handler import A2ARouteHandler


log = logging.getLogger("a2a.server")


def _log(level: str, event: str, **fields: Any) -> None:
    """Structured logging helper: fields land as top-level JSON keys."""
    fn = getattr(log, level, log.info)
    fn(event, extra=fields)


def _request_id(req: Request) -> str:
    """Return incoming X-Request-ID or generate a new one."""
    rid = req.headers.get("x-request-id")
    return rid if rid else str(uuid.uuid4())


def _with_diag_headers(rid: str) -> Dict[str, str]:
    """Standard headers we attach to all responses."""
    return {
        "X-Request-ID": rid,
        "Cache-Control": "no-store",
    }


def create_app(
    registry: Optional[AgentRegistry] = None,
    id_factory: IdFactory = new_id,
    now: Clock = utcnow,
    cfg: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    `registry`, `id_factory` and `now` are injectable so tests can pin agents,
    identifiers and timestamps. The registry is read-only after this point.
    """
    cfg = cfg or default_settings
    agents = registry if registry is not None else build_registry(cfg.enabled_agents)
    handler = A2ARouteHandler(agents, id_factory=id_factory, now=now)

    app = FastAPI(
        title=cfg.agent_name,
        version=cfg.agent_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.registry = agents
    app.state.handler = handler

    app.add_middleware(
        CORSMiddleware,
        allow_origins=(cfg.cors_allow_origins or ["*"]),
        allow_credentials=cfg.cors_allow_credentials,
        allow_methods=(cfg.cors_allow_methods or ["*"]),
        allow_headers=(cfg.cors_allow_headers or ["*"]),
    )

    @app.on_event("startup")
    async def _on_startup() -> None:
        _log("info", "startup", agents=agents.list_agents())

    # =========================================================================
    # Meta & Health
    # =========================================================================

    @app.get("/", include_in_schema=False)
    async def root() -> RedirectResponse:
        return RedirectResponse(url="/docs", status_code=307)

    @app.get("/healthz")
    async def healthz(req: Request) -> JSONResponse:
        rid = _request_id(req)
        return JSONResponse({"status": "ok"}, headers=_with_diag_headers(rid))

    @app.get("/readyz")
    async def readyz(req: Request) -> JSONResponse:
        rid = _request_id(req)
        listed = agents.list_agents()
        ok = bool(listed) and all(a["ready"] for a in listed)
        payload = {"status": "ready" if ok else "not-ready", "agents": listed}
        return JSONResponse(payload, status_code=200 if ok else 503, headers=_with_diag_headers(rid))

    @app.get("/a2a/agents")
    async def list_agents(req: Request) -> JSONResponse:
        rid = _request_id(req)
        return JSONResponse({"agents": agents.list_agents()}, headers=_with_diag_headers(rid))

    @app.get("/.well-known/{agent_id}/agent-card.json")
    async def card(agent_id: str, req: Request) -> JSONResponse:
        rid = _request_id(req)
        agent = agents.get_agent(agent_id)
        if agent is None:
            raise HTTPException(status_code=404, detail=f"Agent '{agent_id}' not found")
        return JSONResponse(agent_card(agent_id, agent, cfg), headers=_with_diag_headers(rid))

    # =========================================================================
    # A2A JSON-RPC endpoint
    # =========================================================================

    @app.post("/a2a/agent/{agent_id}")
    async def a2a_agent(agent_id: str, req: Request) -> JSONResponse:
        rid = _request_id(req)
        raw = await req.body()
        status, body = await handler.handle(agent_id, raw, request_id=rid)
        return JSONResponse(body, status_code=status, headers=_with_diag_headers(rid))

    # =========================================================================
    # Global Exception Handlers
    # =========================================================================

    @app.exception_handler(HTTPException)
    async def _http_error_handler(req: Request, exc: HTTPException) -> JSONResponse:
        rid = _request_id(req)
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=_with_diag_headers(rid))

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(req: Request, exc: Exception) -> JSONResponse:
        rid = _request_id(req)
        _log("error", "unhandled.exception", request_id=rid, error=str(exc))
        # Avoid leaking internals; log has details.
        return JSONResponse({"error": "internal_error"}, status_code=500, headers=_with_diag_headers(rid))

    return app


configure_logging(default_settings.log_level)
app = create_app()
