from __future__ import annotations

import importlib.metadata

try:
    # Dynamically pull version from installed package metadata
    __version__ = importlib.metadata.version("a2a-agent-gateway")
except importlib.metadata.PackageNotFoundError:
    # Fallback when running from a source checkout
    __version__ = "0.0.0.dev0"

from .agents import AgentBase, AgentRegistry, build_registry
from .client import A2AClient, A2AClientError
from .models import AgentResult

__all__ = [
    "A2AClient",
    "A2AClientError",
    "AgentBase",
    "AgentRegistry",
    "AgentResult",
    "build_registry",
    "__version__",
]
