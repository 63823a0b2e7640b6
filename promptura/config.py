"""Runtime configuration loaded from environment variables"""

from __future__ import annotations

import os
from typing import Optional
from pydantic import BaseModel


class Settings(BaseModel):
    """Promptura settings, read from environment variables"""

    # Remote completion endpoint
    together_api_key: Optional[str] = None
    together_api_url: str = "https://api.together.xyz/v1/chat/completions"
    request_timeout_seconds: Optional[float] = None

    # Outbound rate limiting
    max_requests_per_minute: int = 10
    window_seconds: float = 60.0

    # Version store backend: "memory" or "redis"
    version_store: str = "memory"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 6

    # Tracing (optional)
    langfuse_secret_key: Optional[str] = None
    langfuse_public_key: Optional[str] = None
    langfuse_host: str = "http://localhost:3000"

    log_level: str = "INFO"
    gateway_host: str = "0.0.0.0"
    gateway_port: int = 8000

    @property
    def has_remote_credentials(self) -> bool:
        return bool(self.together_api_key)

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        timeout = os.getenv("REQUEST_TIMEOUT_SECONDS")
        return cls(
            together_api_key=os.getenv("TOGETHER_API_KEY") or None,
            together_api_url=os.getenv(
                "TOGETHER_API_URL", "https://api.together.xyz/v1/chat/completions"
            ),
            request_timeout_seconds=float(timeout) if timeout else None,
            max_requests_per_minute=int(os.getenv("OPTIMIZER_MAX_REQUESTS_PER_MINUTE", "10")),
            window_seconds=float(os.getenv("OPTIMIZER_WINDOW_SECONDS", "60")),
            version_store=os.getenv("VERSION_STORE", "memory"),
            redis_host=os.getenv("REDIS_HOST", "localhost"),
            redis_port=int(os.getenv("REDIS_PORT", "6379")),
            redis_password=os.getenv("REDIS_PASSWORD") or None,
            redis_db=int(os.getenv("REDIS_DB", "6")),
            langfuse_secret_key=os.getenv("LANGFUSE_SECRET_KEY") or None,
            langfuse_public_key=os.getenv("LANGFUSE_PUBLIC_KEY") or None,
            langfuse_host=os.getenv("LANGFUSE_HOST", "http://localhost:3000"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            gateway_host=os.getenv("GATEWAY_HOST", "0.0.0.0"),
            gateway_port=int(os.getenv("GATEWAY_PORT", "8000")),
        )
