"""
OpenAI Chat Completions Adapter

Forwards a single prompt (plus an optional system instruction) to the
chat-completion endpoint and returns the first choice's text.
"""

from typing import Any, Dict, List, Optional

import httpx

from aqvision_api.services.upstream import UpstreamService
from aqvision_core.config import Settings
from aqvision_core.exceptions import InvalidRequest, ServerMisconfigured, UpstreamFailure


class OpenAIAdapter(UpstreamService):
    """
    Adapter for the OpenAI Chat Completions API

    The API key and model come from Settings; a missing key only disables
    this adapter, the rest of the proxy keeps working.
    """

    provider = "openai"

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        super().__init__(client, settings)
        self.api_key = settings.openai_api_key
        self.model = settings.openai_model
        self.base_url = settings.openai_base_url.rstrip("/")

    @staticmethod
    def build_messages(prompt: str, system_instruction: Optional[str] = None) -> List[Dict[str, str]]:
        """System message (when given) followed by the user prompt"""
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})
        return messages

    @staticmethod
    def extract_text(result: Any) -> str:
        """First choice's message content, or an empty string"""
        if not isinstance(result, dict):
            return ""
        choices = result.get("choices") or []
        if not choices or not isinstance(choices[0], dict):
            return ""
        message = choices[0].get("message") or {}
        return message.get("content") or ""

    async def generate(self, prompt: Optional[str], system_instruction: Optional[str] = None) -> str:
        """
        Generate a completion

        Args:
            prompt: User prompt (required, non-empty)
            system_instruction: Optional system role message

        Returns:
            Generated text ("" when the model returned no content)

        Raises:
            ServerMisconfigured: OPENAI_API_KEY is not set
            InvalidRequest: empty prompt
            UpstreamFailure: non-success answer, with the parsed error body
                attached as ``details``
        """
        if not self.api_key:
            raise ServerMisconfigured("OPENAI_API_KEY is not configured on the server.")
        if not prompt:
            raise InvalidRequest("Prompt is required.")

        payload = {
            "model": self.model,
            "messages": self.build_messages(prompt, system_instruction),
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        self.log.info(f"Calling OpenAI with model={self.model}, prompt={len(prompt)} chars")
        response = await self.send(
            "POST", f"{self.base_url}/chat/completions", headers=headers, json=payload
        )

        if not response.is_success:
            try:
                details = response.json()
            except ValueError:
                details = {"message": response.text}
            self.log.error(f"OpenAI API error: {response.status_code} - {details}")
            raise UpstreamFailure(
                "OpenAI API error",
                status_code=response.status_code,
                details=details,
                provider=self.provider,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise UpstreamFailure(
                "OpenAI returned an invalid response", status_code=502, provider=self.provider
            ) from e

        text = self.extract_text(result)
        self.log.info(f"OpenAI generated {len(text)} characters")
        return text
