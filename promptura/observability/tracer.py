"""
LangFuse Tracer - generation outcome tracing

Records, for every optimization request, which technique was used and
whether the result came from the remote model or the local fallback (and
why). Tracing is optional and never affects results.
"""

import logging
from typing import Optional, Dict, Any

from langfuse import Langfuse

from promptura.config import Settings

logger = logging.getLogger(__name__)


class LangFuseTracer:
    """
    LangFuse tracer for the template engine

    Enabled only when both the secret and public keys are configured.
    """

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or Settings.from_env()
        self.secret_key = settings.langfuse_secret_key
        self.public_key = settings.langfuse_public_key
        self.host = settings.langfuse_host
        self.client: Optional[Langfuse] = None
        self.enabled = bool(self.secret_key and self.public_key)

    async def initialize(self):
        """Initialize LangFuse client"""
        if not self.enabled:
            logger.info("LangFuse not configured. Tracing disabled.")
            return

        try:
            self.client = Langfuse(
                secret_key=self.secret_key,
                public_key=self.public_key,
                host=self.host,
            )
        except Exception as e:
            logger.warning(f"LangFuse initialization failed: {e}")
            self.enabled = False

    def _event(self, trace_name: str, event_name: str, metadata: Dict[str, Any]):
        if not self.enabled or not self.client:
            return

        try:
            trace = self.client.trace(name=trace_name)
            trace.event(name=event_name, metadata=metadata)
            self.client.flush()
        except Exception as e:
            logger.warning(f"Failed to trace {event_name}: {e}")

    def trace_generation(
        self,
        technique: Optional[str],
        source: str,
        target_model: Optional[str] = None,
        latency_ms: float = 0.0,
        reason: Optional[str] = None,
    ):
        """Trace the outcome of one generate() call"""
        self._event(
            "prompt_generation",
            "fallback" if source == "fallback" else "remote_success",
            {
                "technique": technique,
                "source": source,
                "target_model": target_model,
                "latency_ms": latency_ms,
                "reason": reason,
            },
        )

    def trace_error(self, error: str, status: Optional[int] = None, target_model: Optional[str] = None):
        """Trace a remote failure"""
        self._event(
            "prompt_generation_error",
            "remote_error",
            {"error": error, "status": status, "target_model": target_model},
        )

    def flush(self):
        if self.client:
            self.client.flush()
