# src/a2a_gateway/config.py
from __future__ import annotations

import json
from typing import Annotated, Any, List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _env(name: str) -> AliasChoices:
    """Accept both the UPPERCASE env name and the field name."""
    return AliasChoices(name.upper(), name)


def _strip_comment(value: Any) -> Any:
    # .env lines like 'false   # note' keep the comment in the value
    return value.split("#", 1)[0].strip() if isinstance(value, str) else value


def _env_list(value: Any) -> List[str]:
    """A JSON array or a comma-separated string; blanks are dropped."""
    value = _strip_comment(value)
    if isinstance(value, str) and value.startswith("["):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            pass
    if isinstance(value, str):
        value = value.split(",")
    if value is None:
        return []
    return [str(v).strip() for v in value if str(v).strip()]


EnvList = Annotated[List[str], NoDecode]


class Settings(BaseSettings):
    """Gateway settings, read from the environment and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Identity advertised on agent cards and the OpenAPI docs
    agent_name: str = Field(default="A2A Agent Gateway", validation_alias=_env("agent_name"))
    agent_description: str = Field(
        default="Drives registered agents through the A2A task protocol over JSON-RPC 2.0.",
        validation_alias=_env("agent_description"),
    )
    agent_version: str = Field(default="0.1.0", validation_alias=_env("agent_version"))
    protocol_version: str = Field(default="0.3.0", validation_alias=_env("protocol_version"))

    a2a_host: str = Field(default="0.0.0.0", validation_alias=_env("a2a_host"))
    a2a_port: int = Field(default=8000, validation_alias=_env("a2a_port"))
    # Plain str: strict URL validation rejects 'http://localhost'
    public_url: Optional[str] = Field(default=None, validation_alias=_env("public_url"))

    log_level: str = Field(default="INFO", validation_alias=_env("log_level"))
    # Empty means every discovered agent plugin
    enabled_agents: EnvList = Field(default_factory=list, validation_alias=_env("enabled_agents"))

    cors_allow_origins: EnvList = Field(default_factory=lambda: ["*"], validation_alias=_env("cors_allow_origins"))
    cors_allow_methods: EnvList = Field(default_factory=lambda: ["*"], validation_alias=_env("cors_allow_methods"))
    cors_allow_headers: EnvList = Field(default_factory=lambda: ["*"], validation_alias=_env("cors_allow_headers"))
    cors_allow_credentials: bool = Field(default=False, validation_alias=_env("cors_allow_credentials"))

    @field_validator("enabled_agents", "cors_allow_origins", "cors_allow_methods", "cors_allow_headers", mode="before")
    @classmethod
    def _val_lists(cls, v: Any) -> List[str]:
        return _env_list(v)

    @field_validator("cors_allow_credentials", mode="before")
    @classmethod
    def _val_bool(cls, v: Any) -> Any:
        v = _strip_comment(v)
        return False if v == "" else v

    @field_validator("public_url", mode="before")
    @classmethod
    def _val_public_url(cls, v: Any) -> Optional[str]:
        return _strip_comment(v) or None

    @field_validator("log_level", mode="before")
    @classmethod
    def _val_log_level(cls, v: Any) -> str:
        return (_strip_comment(v) or "INFO").upper()

    @property
    def agent_base_url(self) -> str:
        return (self.public_url or f"http://localhost:{self.a2a_port}").rstrip("/")


settings = Settings()
