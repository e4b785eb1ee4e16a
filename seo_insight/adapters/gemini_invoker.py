from __future__ import annotations

import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from seo_insight.domain.errors import ModelInvocationError
from seo_insight.ports.llm import ModelInvoker

logger = logging.getLogger(__name__)


class GeminiModelInvoker(ModelInvoker):
    """
    Thin adapter over google-genai. Retries/backoff are left to the SDK.
    The client is created on first use so a missing API key fails the run,
    not the app startup.
    """

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash", client: Optional[Any] = None):
        self.api_key = api_key
        self.model = model
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.api_key:
                raise ModelInvocationError("Gemini API key is not configured.")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def invoke(self, prompt: str, enable_search_grounding: bool = True) -> str:
        config = None
        if enable_search_grounding:
            config = types.GenerateContentConfig(
                tools=[types.Tool(google_search=types.GoogleSearch())],
            )

        logger.info("Calling model=%s grounding=%s prompt_chars=%d", self.model, enable_search_grounding, len(prompt))

        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except ModelInvocationError:
            raise
        except Exception as e:
            raise ModelInvocationError(f"Model call failed: {e}") from e

        text = getattr(response, "text", None)
        if not text:
            raise ModelInvocationError("Nessuna risposta generata.")
        return text
