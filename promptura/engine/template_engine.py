"""
Template Engine - prompt optimization with guaranteed local fallback

generate() walks a fixed sequence: rate check, credential check, remote
call, sanitize, adequacy check. Any step that fails resolves to the local
fallback template, so callers always get a usable prompt. There are no
retries inside a call; callers may simply call again.
"""

import asyncio
import logging
import random
import time
from typing import Optional, Tuple

from promptura.config import Settings
from promptura.errors import (
    InadequateResponseError,
    InvalidOperationError,
    RateLimitedError,
    RemoteError,
)
from promptura.models.optimization import (
    IntentAnalysis,
    OptimizationResult,
    PromptConfig,
    QualityReport,
)
from promptura.observability.tracer import LangFuseTracer
from promptura.prompts.fallback import get_fallback
from promptura.prompts.openers import random_opener
from promptura.prompts.optimizer import PromptOptimizer
from promptura.prompts.sanitizer import clean
from promptura.prompts.templates import build_instruction
from promptura.rate_limiter.limiter import RateLimiter
from promptura.router.completion import CompletionClient, system_preamble

logger = logging.getLogger(__name__)

MIN_RESPONSE_LENGTH = 50
REFUSAL_MARKERS = ("i cannot", "i'm sorry")

REWRITE_INSTRUCTIONS = {
    "clarity": "Rewrite this prompt to be clearer and more specific, removing ambiguity and adding precise instructions",
    "brevity": "Rewrite this prompt to be more concise while keeping all essential information and requirements",
    "creativity": "Rewrite this prompt to encourage more creative and original responses",
    "specificity": "Rewrite this prompt to be more specific and detailed, adding concrete requirements and clear success criteria",
}


class TemplateEngine:
    """
    Orchestrates prompt optimization

    Args:
        client: Remote completion client
        rate_limiter: Outbound limiter; defaults to 10 requests per minute
        tracer: Optional LangFuse tracer
        rng: Random source for opener phrases
        timeout: Default per-call timeout in seconds (None = no timeout)
    """

    def __init__(
        self,
        client: CompletionClient,
        rate_limiter: Optional[RateLimiter] = None,
        tracer: Optional[LangFuseTracer] = None,
        rng: Optional[random.Random] = None,
        timeout: Optional[float] = None,
    ):
        self.client = client
        self.rate_limiter = rate_limiter or RateLimiter()
        self.tracer = tracer
        self.rng = rng or random.Random()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings, tracer: Optional[LangFuseTracer] = None) -> "TemplateEngine":
        return cls(
            client=CompletionClient(settings.together_api_key, settings.together_api_url),
            rate_limiter=RateLimiter(settings.max_requests_per_minute, settings.window_seconds),
            tracer=tracer,
            timeout=settings.request_timeout_seconds,
        )

    async def generate(
        self,
        text: str,
        technique: Optional[str] = None,
        config: Optional[PromptConfig] = None,
        target_model: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        abort: Optional[asyncio.Event] = None,
    ) -> OptimizationResult:
        """
        Optimize a prompt with the given technique

        Args:
            text: The user's prompt
            technique: Technique key, or None for the generic template
            config: Generation options
            target_model: Display name of the model being optimized for
            timeout: Seconds to wait for the remote call
            abort: Event the caller sets to cancel the remote call

        Returns:
            OptimizationResult with source "remote" or "fallback"

        Raises:
            InvalidOperationError: text is empty or whitespace
        """
        if not text or not text.strip():
            raise InvalidOperationError("Prompt text must not be empty")

        config = config or PromptConfig()
        start_time = time.time()

        if not self.rate_limiter.check_limit():
            return self._fallback(text, technique, target_model, RateLimitedError().message)

        if not self.client.has_credentials:
            return self._fallback(text, technique, target_model, "Completion API key not configured")

        self.rate_limiter.record_request()
        instruction = build_instruction(
            text, technique, target_model, config, opener=random_opener(self.rng)
        )

        try:
            raw = await self._call_remote(
                instruction,
                system_preamble(target_model),
                config,
                target_model,
                timeout if timeout is not None else self.timeout,
                abort,
            )
        except RemoteError as e:
            if self.tracer:
                self.tracer.trace_error(e.message, status=e.status, target_model=target_model)
            return self._fallback(text, technique, target_model, self._describe_remote_error(e))
        except Exception as e:
            logger.exception("Unexpected error calling completion API")
            return self._fallback(text, technique, target_model, f"Unexpected error: {e}")

        optimized = clean(raw)
        try:
            self._check_adequate(optimized)
        except InadequateResponseError as e:
            return self._fallback(text, technique, target_model, e.message)

        if self.tracer:
            self.tracer.trace_generation(
                technique,
                "remote",
                target_model=target_model,
                latency_ms=(time.time() - start_time) * 1000,
            )
        return OptimizationResult(text=optimized, source="remote")

    def get_fallback(
        self,
        text: str,
        technique: Optional[str],
        target_model: Optional[str] = None,
    ) -> str:
        """Local technique-specific prompt; no network access"""
        return get_fallback(text, technique, target_model, opener=random_opener(self.rng))

    async def generate_variations(
        self,
        text: str,
        technique_a: Optional[str],
        technique_b: Optional[str],
        config: Optional[PromptConfig] = None,
        target_model: Optional[str] = None,
    ) -> Tuple[OptimizationResult, OptimizationResult]:
        """Generate two A/B variations concurrently"""
        variation_a, variation_b = await asyncio.gather(
            self.generate(text, technique_a, config, target_model),
            self.generate(text, technique_b, config, target_model),
        )
        return variation_a, variation_b

    async def auto_rewrite(self, text: str, rewrite_type: str) -> OptimizationResult:
        """Rewrite a prompt for clarity, brevity, creativity or specificity"""
        instruction = REWRITE_INSTRUCTIONS.get(rewrite_type)
        if instruction is None:
            raise InvalidOperationError(
                f"Unknown rewrite type '{rewrite_type}'. "
                f"Expected one of: {', '.join(REWRITE_INSTRUCTIONS)}"
            )
        rewrite_prompt = (
            f'{instruction}:\n\nOriginal prompt: "{text}"\n\n'
            "Provide only the rewritten prompt, no explanations."
        )
        return await self.generate(rewrite_prompt, None, PromptConfig(temperature=0.3))

    def recommend(self, text: str) -> str:
        return PromptOptimizer.recommend_technique(text)

    def score(self, text: str) -> QualityReport:
        return PromptOptimizer.score_prompt_quality(text)

    def estimate_tokens(self, text: str) -> int:
        return PromptOptimizer.estimate_tokens(text)

    def detect_intent(self, text: str) -> IntentAnalysis:
        return PromptOptimizer.detect_intent(text)

    async def close(self):
        await self.client.close()

    async def _call_remote(
        self,
        instruction: str,
        preamble: str,
        config: PromptConfig,
        target_model: Optional[str],
        timeout: Optional[float],
        abort: Optional[asyncio.Event],
    ) -> str:
        """Run the completion call, honoring the caller's timeout and abort signal"""
        if abort is not None and abort.is_set():
            raise RemoteError(None, "Request aborted")

        request = asyncio.ensure_future(
            self.client.complete(instruction, preamble, config, target_model)
        )
        waiters = {request}
        aborted = None
        if abort is not None:
            aborted = asyncio.ensure_future(abort.wait())
            waiters.add(aborted)

        try:
            done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in waiters:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*waiters, return_exceptions=True)

        if request in done:
            return request.result()
        if aborted is not None and aborted in done:
            raise RemoteError(None, "Request aborted")
        raise RemoteError(None, f"Request timeout after {timeout}s")

    @staticmethod
    def _check_adequate(text: str):
        if len(text) < MIN_RESPONSE_LENGTH:
            raise InadequateResponseError(
                f"Response too short ({len(text)} < {MIN_RESPONSE_LENGTH} characters)"
            )
        lowered = text.lower()
        for marker in REFUSAL_MARKERS:
            if marker in lowered:
                raise InadequateResponseError(f"Response contains refusal marker '{marker}'")

    @staticmethod
    def _describe_remote_error(error: RemoteError) -> str:
        if error.status is None:
            return error.message
        if error.status == 429:
            return f"Upstream rate limit: {error.message}"
        if error.status in (401, 403):
            return f"Access error: {error.message}"
        if error.status >= 500:
            return f"Upstream failure: {error.message}"
        return f"API request failed: {error.message}"

    def _fallback(
        self,
        text: str,
        technique: Optional[str],
        target_model: Optional[str],
        reason: str,
    ) -> OptimizationResult:
        logger.warning(f"Using fallback prompt: {reason}")
        if self.tracer:
            self.tracer.trace_generation(technique, "fallback", target_model=target_model, reason=reason)
        return OptimizationResult(
            text=self.get_fallback(text, technique, target_model),
            source="fallback",
        )
