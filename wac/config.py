import os

from pathlib import Path
from typing import Any, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]

DEFAULT_SYSTEM_PROMPT = (
    "You are wac.ai, a Web3 investing assistant. Help the user swap, bridge, stake and "
    "manage a crypto portfolio across Ethereum, Polygon, Arbitrum, Optimism and Base. "
    "Be concise, quote costs in USD, flag risks plainly, and never execute anything "
    "without an explicit confirmation from the user."
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Pick up the environment variable names used by the web client build."""

        super().model_post_init(__context)

        if not self.chat_api_url:
            fallback = os.getenv("VITE_RUST_API_URL")
            if fallback:
                object.__setattr__(self, "chat_api_url", fallback)

        if not self.api_base_url:
            fallback = os.getenv("VITE_TS_API_URL")
            object.__setattr__(self, "api_base_url", fallback or "http://localhost:8000")

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8080, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="auto", description="Log renderer: json, console or auto (console at DEBUG)")

    # Backend endpoints
    api_base_url: str = Field(default="", description="Base URL of the portfolio/market/gamification API")
    chat_api_url: str = Field(default="", description="Base URL of the remote chat API (empty disables it)")
    request_timeout_seconds: float = Field(default=15.0, description="HTTP request timeout")
    enable_demo_fallback: bool = Field(
        default=True,
        description="Serve hardcoded demo data when the backend is unreachable",
    )

    # Chat
    chat_system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, description="System prompt sent with every chat request")
    max_chat_threads: int = Field(default=50, ge=1, description="Maximum threads kept in local history")
    storage_path: Path = Field(
        default=BASE_DIR / ".wac" / "storage.json",
        description="JSON file backing the local key/value store",
    )

    # Cache Settings
    news_cache_ttl_seconds: int = Field(default=300, description="News cache TTL in seconds")
    max_cache_size: int = Field(default=1000, description="Maximum cache size")

    # Quotes
    default_slippage_tolerance: float = Field(default=0.5, ge=0, description="Slippage tolerance in percent")
    quote_seed: Optional[int] = Field(
        default=None,
        description="Seed for the synthetic quote generator (deterministic quotes when set)",
    )
    supported_chain_ids: List[int] = Field(
        default_factory=lambda: [1, 137, 42161, 10, 8453],
        description="Chains inspected by the portfolio analyzer",
    )

    @property
    def has_chat_api(self) -> bool:
        return bool(self.chat_api_url)


# Global settings instance
settings = Settings()
