"""
Convivio - Completion Client.

Sends an assembled Prompt to OpenAI or Anthropic and returns the raw text.
All completion calls go through here for consistency and observability.

Policy:
- No automatic retry (SDK retries are disabled too); failures surface verbatim
- Fixed wall-clock budget per call via asyncio.wait_for
- Every call is recorded in the debug log, success or failure; recording
  is best-effort and the prompt file is written off the event loop
"""

import asyncio
import logging
import time

import anthropic
import openai
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from convivio.config import Settings, get_settings
from convivio.errors import (
    CompletionError,
    CompletionTimeoutError,
    ConfigurationError,
    NetworkError,
    RateLimitError,
)
from convivio.llm.model_router import Tier, get_max_tokens, get_model_config
from convivio.llm.prompt_logger import DebugLog, enable_prompt_logging, log_prompt
from convivio.prompts.builder import Prompt

logger = logging.getLogger(__name__)


def _retry_after(response) -> float | None:
    """Read a Retry-After header (seconds) if the provider sent one."""
    if response is None:
        return None
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class CompletionClient:
    """
    Async completion client for the configured provider.

    SDK clients can be injected (tests do); otherwise they are created lazily
    from the settings' API key the first time a call is made.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        debug_log: DebugLog | None = None,
        openai_client: AsyncOpenAI | None = None,
        anthropic_client: AsyncAnthropic | None = None,
    ):
        self.settings = settings
        self.debug_log = debug_log if debug_log is not None else DebugLog(
            settings.debug_log_max_entries
        )
        self._openai = openai_client
        self._anthropic = anthropic_client
        if settings.convivio_log_prompts:
            enable_prompt_logging()

    @property
    def provider(self) -> str:
        return self.settings.llm_provider

    @property
    def is_configured(self) -> bool:
        if self.provider == "openai" and self._openai is not None:
            return True
        if self.provider == "anthropic" and self._anthropic is not None:
            return True
        return self.settings.has_completion_credential

    def ensure_configured(self) -> None:
        """Raise ConfigurationError if no credential exists for the provider."""
        if not self.is_configured:
            raise ConfigurationError(
                f"No API key configured for provider '{self.provider}'. "
                f"Set {self.provider.upper()}_API_KEY."
            )

    def _get_openai(self) -> AsyncOpenAI:
        if self._openai is None:
            self._openai = AsyncOpenAI(
                api_key=self.settings.credential("openai"),
                max_retries=0,
            )
        return self._openai

    def _get_anthropic(self) -> AsyncAnthropic:
        if self._anthropic is None:
            self._anthropic = AsyncAnthropic(
                api_key=self.settings.credential("anthropic"),
                max_retries=0,
            )
        return self._anthropic

    # =========================================================================
    # Public API
    # =========================================================================

    async def complete(
        self,
        prompt: Prompt,
        *,
        tier: Tier = "capable",
        task: str = "menu",
        max_tokens: int | None = None,
        timeout: float | None = None,
        json_mode: bool = True,
    ) -> str:
        """
        Run one completion and return the raw response text.

        Args:
            prompt: System + user prompt pair
            tier: "capable" or "cheap" model selection
            task: Pipeline task, used for the token ceiling and logging
            max_tokens: Override the task's token ceiling
            timeout: Wall-clock budget in seconds (defaults to the full-menu budget)
            json_mode: Ask the provider for a single JSON object

        Raises:
            ConfigurationError: No credential for the selected provider
            NetworkError: No connectivity or a non-2xx answer
            CompletionTimeoutError: The budget was exceeded
            RateLimitError: The provider asked us to back off
        """
        self.ensure_configured()

        config = get_model_config(self.provider, tier)
        model = config["model"]
        temperature = config.get("temperature", 0.7)
        max_tokens = max_tokens or get_max_tokens(task)
        timeout = timeout or self.settings.completion_timeout_seconds

        if self.provider == "anthropic":
            endpoint = "anthropic:messages"
            call = self._call_anthropic(prompt, model, max_tokens, temperature)
        else:
            endpoint = "openai:chat.completions"
            call = self._call_openai(prompt, model, max_tokens, temperature, json_mode)

        start = time.monotonic()
        try:
            text = await asyncio.wait_for(call, timeout=timeout)
        except CompletionError as e:
            await self._record(endpoint, model, task, prompt, time.monotonic() - start, error=e)
            logger.warning(f"Completion failed ({task}, {model}): {e}")
            raise
        except asyncio.TimeoutError as e:
            error = CompletionTimeoutError(
                f"Completion exceeded {timeout:.0f}s budget", timeout=timeout
            )
            await self._record(endpoint, model, task, prompt, time.monotonic() - start, error=error)
            logger.warning(f"Completion timed out ({task}, {model}) after {timeout:.0f}s")
            raise error from e

        duration = time.monotonic() - start
        await self._record(endpoint, model, task, prompt, duration, response=text)
        logger.info(f"Completion ok ({task}, {model}) in {duration:.1f}s, {len(text)} chars")
        return text

    # =========================================================================
    # Providers
    # =========================================================================

    async def _call_openai(
        self,
        prompt: Prompt,
        model: str,
        max_tokens: int,
        temperature: float,
        json_mode: bool,
    ) -> str:
        client = self._get_openai()
        api_kwargs = {
            "model": model,
            "messages": [
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user},
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if json_mode:
            api_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await client.chat.completions.create(**api_kwargs)
        except openai.APITimeoutError as e:
            raise CompletionTimeoutError(f"OpenAI request timed out: {e}") from e
        except openai.RateLimitError as e:
            raise RateLimitError(
                f"OpenAI rate limit: {e}", retry_after=_retry_after(e.response)
            ) from e
        except openai.APIStatusError as e:
            raise NetworkError(
                f"OpenAI returned HTTP {e.status_code}: {e.message}",
                status_code=e.status_code,
            ) from e
        except openai.APIConnectionError as e:
            raise NetworkError(f"Cannot reach OpenAI: {e}") from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def _call_anthropic(
        self,
        prompt: Prompt,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        client = self._get_anthropic()
        try:
            response = await client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=prompt.system,
                messages=[{"role": "user", "content": prompt.user}],
            )
        except anthropic.APITimeoutError as e:
            raise CompletionTimeoutError(f"Anthropic request timed out: {e}") from e
        except anthropic.RateLimitError as e:
            raise RateLimitError(
                f"Anthropic rate limit: {e}", retry_after=_retry_after(e.response)
            ) from e
        except anthropic.APIStatusError as e:
            raise NetworkError(
                f"Anthropic returned HTTP {e.status_code}: {e.message}",
                status_code=e.status_code,
            ) from e
        except anthropic.APIConnectionError as e:
            raise NetworkError(f"Cannot reach Anthropic: {e}") from e

        return "".join(block.text for block in response.content if block.type == "text")

    # =========================================================================
    # Logging
    # =========================================================================

    async def _record(
        self,
        endpoint: str,
        model: str,
        task: str,
        prompt: Prompt,
        duration: float,
        *,
        response: str | None = None,
        error: Exception | None = None,
    ) -> None:
        """Best-effort: a logging failure never fails the completion."""
        try:
            error_text = str(error) if error is not None else None
            self.debug_log.record(
                endpoint=endpoint,
                model=model,
                prompt=f"{prompt.system}\n\n{prompt.user}",
                response=response,
                duration=duration,
                success=error is None,
                error=error_text,
            )
            # File write runs off the event loop
            await asyncio.to_thread(
                log_prompt,
                task=task,
                model=model,
                system_prompt=prompt.system,
                user_prompt=prompt.user,
                response=response,
                error=error_text,
                duration=duration,
            )
        except Exception as e:
            logger.debug(f"Completion record dropped ({task}): {e}")


# Singleton client instance
_client: CompletionClient | None = None


def get_completion_client() -> CompletionClient:
    """
    Get the shared completion client.

    Uses singleton pattern to reuse connections. Only the CLI and web layer
    use this; pipeline components receive their client explicitly.
    """
    global _client
    if _client is None:
        _client = CompletionClient(get_settings())
    return _client
