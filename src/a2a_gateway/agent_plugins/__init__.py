"""Built-in agent plugins. Each module exposes ``Agent`` or ``get_agent()``."""
