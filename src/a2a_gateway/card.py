from __future__ import annotations
from typing import Any, Dict, Optional

from .agents import AgentBase
from .config import Settings, settings as default_settings


def agent_card(agent_id: str, agent: AgentBase, cfg: Optional[Settings] = None) -> Dict[str, Any]:
    cfg = cfg or default_settings
    return {
        "protocolVersion": cfg.protocol_version,
        "name": getattr(agent, "name", agent_id),
        "description": getattr(agent, "description", "") or cfg.agent_description,
        "version": cfg.agent_version,
        "preferredTransport": "JSONRPC",
        "url": f"{cfg.agent_base_url}/a2a/agent/{agent_id}",
        "provider": {"organization": cfg.agent_name, "url": cfg.agent_base_url},
        "capabilities": {"streaming": False, "pushNotifications": False, "stateTransitionHistory": True},
        "defaultInputModes": ["text/plain", "application/json"],
        "defaultOutputModes": ["text/plain", "application/json"],
        "skills": [
            {
                "id": agent_id,
                "name": getattr(agent, "name", agent_id),
                "description": getattr(agent, "description", ""),
                "tags": ["a2a", agent_id],
            }
        ],
    }
