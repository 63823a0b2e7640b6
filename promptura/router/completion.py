"""
Remote Completion Client

Thin wrapper over one chat-completions POST. Every failure surfaces as
RemoteError so the engine can fall back without inspecting transport
details.
"""

import logging
from typing import Optional, Dict, Any

import httpx

from promptura.errors import RemoteError
from promptura.models.optimization import PromptConfig
from promptura.router.router import resolve_model_identifier

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.together.xyz/v1/chat/completions"
DEFAULT_TEMPERATURE = 0.2
DEFAULT_MAX_TOKENS = 1200
TOP_P = 0.8
REPETITION_PENALTY = 1.1

STATUS_HINTS = {
    401: "Check that the completion API key is valid.",
    403: "The API key may not have access to this model or feature.",
    429: "Upstream rate limit exceeded. Try again in a moment.",
}
SERVER_ERROR_HINT = "The completion service is experiencing issues. Try again later."


def system_preamble(target_model: Optional[str] = None) -> str:
    """Fixed system message for optimization requests"""
    expertise = f" with expertise in optimizing prompts for {target_model}" if target_model else ""
    return (
        "You are an expert prompt engineer specializing in advanced prompt engineering "
        f"techniques{expertise}. Your ONLY task is to transform the given prompt into an "
        "optimized version using the specified technique. Return ONLY the optimized prompt - "
        "no explanations, no commentary, no additional text."
    )


class CompletionClient:
    """Client for an OpenAI-compatible chat-completions endpoint"""

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = DEFAULT_API_URL,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.client = http_client or httpx.AsyncClient(timeout=60.0)

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)

    async def close(self):
        """Close the underlying HTTP client"""
        await self.client.aclose()

    def build_payload(
        self,
        instruction: str,
        preamble: str,
        config: PromptConfig,
        target_model: Optional[str] = None,
    ) -> Dict[str, Any]:
        return {
            "model": resolve_model_identifier(target_model),
            "messages": [
                {"role": "system", "content": preamble},
                {"role": "user", "content": instruction},
            ],
            "temperature": config.temperature if config.temperature is not None else DEFAULT_TEMPERATURE,
            "max_tokens": config.max_tokens or DEFAULT_MAX_TOKENS,
            "top_p": TOP_P,
            "repetition_penalty": REPETITION_PENALTY,
        }

    async def complete(
        self,
        instruction: str,
        preamble: str,
        config: Optional[PromptConfig] = None,
        target_model: Optional[str] = None,
    ) -> str:
        """
        Send one completion request

        Returns:
            Raw ``choices[0].message.content``

        Raises:
            RemoteError: non-2xx status (with status), network failure
                (status None), malformed body or missing content field
        """
        payload = self.build_payload(instruction, preamble, config or PromptConfig(), target_model)

        try:
            response = await self.client.post(
                self.api_url,
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
            )
        except httpx.HTTPError as e:
            raise RemoteError(None, f"Network error: {e}") from e

        if not response.is_success:
            raise RemoteError(response.status_code, self._error_message(response))

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteError(response.status_code, "Malformed JSON in response body") from e

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not content or not isinstance(content, str):
            raise RemoteError(response.status_code, "Response is missing choices[0].message.content")

        return content

    def _error_message(self, response: httpx.Response) -> str:
        message = f"API request failed: {response.status_code} {response.reason_phrase}"

        try:
            error = response.json().get("error") or {}
            if isinstance(error, dict) and error.get("message"):
                message += f". {error['message']}"
        except (ValueError, AttributeError):
            pass

        hint = STATUS_HINTS.get(response.status_code)
        if hint is None and response.status_code >= 500:
            hint = SERVER_ERROR_HINT
        if hint:
            message += f" - {hint}"
        return message
