"""
Client for the OpenAI-compatible chat completions endpoint.

Each call performs exactly one HTTP request. There is no retry, caching or
request deduplication; a non-success status is raised as ``UpstreamError``.
Model selection and credential format are checked before any network I/O.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from proposal_maker.config.settings import get_settings
from proposal_maker.utils.error_handling import (
    EmptyCompletion,
    InvalidCredentialFormat,
    InvalidModel,
    UpstreamError,
)

logger = logging.getLogger(__name__)

FAST_MODEL = "openai/gpt-oss-20b"
LARGE_MODEL = "openai/gpt-oss-120b"
VISION_MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"

MODEL_ALIASES = {
    "fast": FAST_MODEL,
    "large": LARGE_MODEL,
    "vision": VISION_MODEL,
}
ALLOWED_MODELS = frozenset(MODEL_ALIASES.values())
TEXT_MODELS = frozenset({FAST_MODEL, LARGE_MODEL})

# Upstream bodies can be large HTML error pages
_MAX_ERROR_BODY_CHARS = 2000


def resolve_model(selector: str, allowed=ALLOWED_MODELS) -> str:
    """Map an alias or full model id to a model id from the allow-list.

    Raises:
        InvalidModel: If *selector* is not an allowed model.
    """
    model = MODEL_ALIASES.get(selector, selector) if isinstance(selector, str) else None
    if model not in allowed:
        raise InvalidModel(details={"model": selector, "allowed": sorted(allowed)})
    return model


class ChatCompletionsClient:
    """Thin synchronous wrapper around ``POST {base_url}/chat/completions``."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        credential_prefix: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        settings = get_settings()
        self.api_key = api_key
        self.base_url = (base_url or settings.llm_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.llm_timeout_seconds
        self.credential_prefix = (
            credential_prefix if credential_prefix is not None else settings.credential_prefix
        )
        self._http_client = http_client

    def __repr__(self) -> str:
        return f"ChatCompletionsClient(base_url={self.base_url!r})"

    def check_credential_format(self) -> None:
        if not isinstance(self.api_key, str) or not self.api_key.startswith(self.credential_prefix):
            raise InvalidCredentialFormat()

    def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self._http_client is not None:
            return self._http_client.post(url, json=payload, headers=headers, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(url, json=payload, headers=headers)

    def complete(
        self,
        messages: List[Dict[str, Any]],
        model: str,
        max_tokens: int = 4000,
        temperature: float = 0.7,
        response_format: Optional[Dict[str, str]] = None,
        max_tokens_field: str = "max_tokens",
    ) -> str:
        """Send *messages* and return the first completion's text.

        Raises:
            InvalidModel: Model not in the allow-list (no request sent).
            InvalidCredentialFormat: API key lacks the expected prefix (no request sent).
            UpstreamError: Non-2xx response from the model service.
            EmptyCompletion: Response has no completion text.
        """
        model_id = resolve_model(model)
        self.check_credential_format()

        payload: Dict[str, Any] = {
            "model": model_id,
            "messages": messages,
            max_tokens_field: max_tokens,
            "temperature": temperature,
        }
        if response_format:
            payload["response_format"] = response_format

        logger.info(f"Calling model service (model={model_id}, messages={len(messages)})")
        try:
            response = self._post(payload)
        except httpx.TimeoutException as e:
            logger.error(f"Model service request timed out after {self.timeout}s")
            raise UpstreamError(504, str(e), message="Model service request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Model service request failed: {e}")
            raise UpstreamError(502, str(e), message="Could not reach the model service") from e

        if not response.is_success:
            body = response.text[:_MAX_ERROR_BODY_CHARS]
            logger.error(f"Model service error: {response.status_code} {response.reason_phrase}")
            raise UpstreamError(response.status_code, body)

        try:
            data = response.json()
            content = data["choices"][0]["message"].get("content")
        except (ValueError, KeyError, IndexError, TypeError, AttributeError):
            content = None

        if not content:
            raise EmptyCompletion()
        return content

    def complete_prompt(self, prompt: str, model: str, **kwargs) -> str:
        """Single user-message completion."""
        return self.complete([{"role": "user", "content": prompt}], model, **kwargs)

    def complete_with_image(
        self,
        prompt: str,
        image_base64: str,
        mime_type: str = "image/jpeg",
        model: str = VISION_MODEL,
    ) -> str:
        """Send *prompt* together with an inlined base64 image.

        Callers are responsible for validating the image size beforehand.
        """
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{mime_type};base64,{image_base64}"},
                    },
                ],
            }
        ]
        return self.complete(
            messages,
            model,
            max_tokens=4000,
            temperature=0.7,
            response_format={"type": "json_object"},
            max_tokens_field="max_completion_tokens",
        )

    def verify_credential(self) -> bool:
        """Check the API key against the model service with a tiny request."""
        try:
            self.complete_prompt("Hello", FAST_MODEL, max_tokens=10)
            return True
        except EmptyCompletion:
            # Authenticated, the tiny token budget just produced no text
            return True
        except (UpstreamError, InvalidCredentialFormat) as e:
            logger.warning(f"API key verification failed: {type(e).__name__}")
            return False
