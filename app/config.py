import os

from pathlib import Path
from typing import Any, Dict

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Pick up the legacy environment variable name for the agent key."""

        super().model_post_init(__context)

        if not self.agent_private_key:
            fallback = os.getenv("PRIVATE_KEY")
            if fallback:
                object.__setattr__(self, "agent_private_key", fallback)

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # Agent Wallet
    agent_private_key: str = Field(
        default="",
        description="Private key the agent signs transactions with",
        validation_alias=AliasChoices("agent_private_key", "AGENT_PRIVATE_KEY"),
    )
    network_id: str = Field(default="31337", description="Chain id of the active network")
    network_name: str = Field(default="foundry", description="Human readable network name")
    rpc_url: str = Field(default="http://127.0.0.1:8545", description="JSON-RPC endpoint of the chain node")
    deployed_contracts_path: Path = Field(
        default=BASE_DIR / "contracts" / "deployed_contracts.json",
        description="Build artifact with deployed contract addresses and ABIs per network",
    )

    # Subgraphs
    graph_api_key: str = Field(default="", description="The Graph gateway API key")
    subgraph_endpoint_overrides: Dict[str, str] = Field(
        default_factory=dict,
        description="Subgraph endpoint URLs keyed by name, replacing the gateway defaults",
    )

    # Auth
    auth_jwt_secret: str = Field(default="", description="Secret used to sign session tokens")
    siwe_domain: str = Field(default="localhost:3000", description="Domain expected in SIWE messages")
    access_token_expire_minutes: int = Field(default=60, ge=1, description="Session token lifetime")
    nonce_ttl_seconds: int = Field(default=600, ge=1, description="Lifetime of a sign-in nonce")

    # LLM Provider Settings
    llm_provider: str = Field(default="anthropic", description="Default LLM provider")
    anthropic_api_key: str = Field(default="", description="Anthropic API key")

    # LLM Configuration
    llm_model: str = Field(default="claude-sonnet-4-20250514", description="Default LLM model")
    max_tokens: int = Field(default=4000, description="Maximum tokens for LLM response")
    temperature: float = Field(default=0.7, description="LLM temperature setting")

    # Chat Limits
    max_tool_rounds: int = Field(default=5, ge=1, description="Maximum model/tool round trips per request")
    max_duration_seconds: int = Field(default=30, ge=1, description="Maximum duration of a chat request")
    request_timeout_seconds: int = Field(default=30, description="Timeout for RPC and subgraph HTTP calls")

    @property
    def has_agent_key(self) -> bool:
        return bool(self.agent_private_key)

    @property
    def has_anthropic_key(self) -> bool:
        return bool(self.anthropic_api_key)

    @property
    def has_llm_key(self) -> bool:
        """Check if we have an API key for the configured LLM provider"""
        if self.llm_provider.lower() in ["anthropic", "claude"]:
            return self.has_anthropic_key
        return False


# Global settings instance
settings = Settings()
