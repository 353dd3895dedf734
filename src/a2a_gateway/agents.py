"""
Agent registry for the A2A gateway.

- Stable base contract (`AgentBase`) with a single `generate(turns)` method,
  sync or async.
- Plugin discovery: builtins under `a2a_gateway.agent_plugins` plus the
  `a2a_gateway.agents` entry-point group.
- Import/init failures become `NotReadyAgent` entries with an actionable
  `reason`; calling them raises so the route reports an internal error.
- The registry is read-only once built; requests only call `get_agent()`.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from importlib.metadata import entry_points
from typing import Any, Callable, Dict, Iterable, List, Optional

from .models import AgentResult

log = logging.getLogger("a2a.agents")


# ===== Base contract ============================================================

class AgentBase:
    """
    Implementations override:
      - id (route identifier, e.g. 'echo')
      - name / description (used for the agent card)
      - ready / reason
      - generate(turns) -> AgentResult | {"text", "toolResults"} | str
    """

    id: str = "base"
    name: str = "BaseAgent"
    description: str = ""
    ready: bool = False
    reason: str = "Not initialized"

    def generate(self, turns: List[Dict[str, str]]) -> Any:  # pragma: no cover - interface
        raise NotImplementedError


class NotReadyAgent(AgentBase):
    """Registered in place of a plugin that failed to load or initialize."""

    def __init__(self, agent_id: str, reason: str) -> None:
        self.id = agent_id
        self.name = agent_id.capitalize()
        self.description = f"{agent_id} (not ready)"
        self.ready = False
        self.reason = reason

    def generate(self, turns: List[Dict[str, str]]) -> AgentResult:
        raise RuntimeError(f"agent '{self.id}' is not ready: {self.reason}")


# ===== Plugin discovery =========================================================

PLUGIN_PACKAGE = "a2a_gateway.agent_plugins"
ENTRY_POINT_GROUP = "a2a_gateway.agents"
Factory = Callable[[], AgentBase]


def _coerce(obj: Any, fallback_id: str) -> AgentBase:
    """Accept an instance, an AgentBase subclass, or a zero-arg factory."""
    if isinstance(obj, AgentBase):
        return obj
    if inspect.isclass(obj) and issubclass(obj, AgentBase):
        return obj()
    if callable(obj):
        agent = obj()
        if isinstance(agent, AgentBase):
            return agent
    return NotReadyAgent(fallback_id, reason="plugin did not yield an AgentBase")


def _safe_factory_from_module(module_name: str, fallback_id: str) -> Factory:
    try:
        mod = importlib.import_module(module_name)
    except Exception as e:
        # `e` is unbound once the except block exits; close over the message
        reason = f"Import error: {e}"

        def _err() -> AgentBase:
            return NotReadyAgent(fallback_id, reason=reason)
        return _err

    # Prefer get_agent(), then class Agent(AgentBase)
    target = getattr(mod, "get_agent", None) or getattr(mod, "Agent", None)
    if target is None:
        def _stub() -> AgentBase:
            return NotReadyAgent(fallback_id, reason="Module did not expose Agent or get_agent")
        return _stub

    def _ok() -> AgentBase:
        try:
            return _coerce(target, fallback_id)
        except Exception as e:
            return NotReadyAgent(fallback_id, reason=f"init failed: {e}")
    return _ok


def _discover_builtin() -> Dict[str, Factory]:
    out: Dict[str, Factory] = {}
    pkg = importlib.import_module(PLUGIN_PACKAGE)
    prefix = pkg.__name__ + "."
    for _, name, ispkg in pkgutil.iter_modules(pkg.__path__, prefix):
        if ispkg:
            continue
        short = name.rsplit(".", 1)[-1]
        out[short] = _safe_factory_from_module(name, short)
    return out


def _discover_entry_points() -> Dict[str, Factory]:
    out: Dict[str, Factory] = {}
    for ep in entry_points(group=ENTRY_POINT_GROUP):
        def _factory(ep=ep) -> AgentBase:
            try:
                return _coerce(ep.load(), ep.name)
            except Exception as e:
                return NotReadyAgent(ep.name, reason=f"entry point load error: {e}")
        out[ep.name] = _factory
    return out


def list_plugins() -> Dict[str, str]:
    """Map of discoverable agent ids -> 'builtin' | 'entrypoint'."""
    out: Dict[str, str] = {}
    for k in _discover_builtin():
        out[k] = "builtin"
    for k in _discover_entry_points():
        out[k] = "entrypoint"
    return out


# ===== Registry =================================================================

class AgentRegistry:
    """Read-only lookup from agent id to agent, shared by all requests."""

    def __init__(self, agents: Optional[Iterable[AgentBase]] = None) -> None:
        self._agents: Dict[str, AgentBase] = {}
        for agent in agents or ():
            self.register(agent)

    def register(self, agent: AgentBase, agent_id: Optional[str] = None) -> None:
        key = agent_id or agent.id
        if key in self._agents:
            raise ValueError(f"agent '{key}' is already registered")
        self._agents[key] = agent

    def get_agent(self, agent_id: str) -> Optional[AgentBase]:
        return self._agents.get(agent_id)

    def list_agents(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": key,
                "name": getattr(a, "name", key),
                "description": getattr(a, "description", ""),
                "ready": bool(getattr(a, "ready", False)),
                "reason": getattr(a, "reason", ""),
            }
            for key, a in self._agents.items()
        ]

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def __len__(self) -> int:
        return len(self._agents)


def build_registry(enabled: Optional[List[str]] = None) -> AgentRegistry:
    """
    Build the registry from discovered plugins.

    `enabled` restricts the set to the given ids (empty/None = everything
    discovered). Requested ids with no plugin are registered as not ready.
    """
    factories: Dict[str, Factory] = {}
    factories.update(_discover_builtin())
    factories.update(_discover_entry_points())

    wanted = [e.strip() for e in (enabled or []) if e and e.strip()]
    ids = wanted or sorted(factories)

    registry = AgentRegistry()
    for agent_id in ids:
        factory = factories.get(agent_id)
        agent = factory() if factory else NotReadyAgent(agent_id, reason="No such agent plugin")
        registry.register(agent, agent_id)
        log.debug("agent.registered", extra={"agent_id": agent_id, "ready": agent.ready})
    return registry
