from abc import ABC, abstractmethod
from typing import Optional
import logging

import openai
from openai import AsyncOpenAI

from content_recognition.core.errors import ProviderFailure

logger = logging.getLogger(__name__)


class VisionProvider(ABC):
    """Remote model that turns an image into a text description"""

    @abstractmethod
    async def describe(self, image_data_uri: str, system_prompt: str, user_prompt: str) -> str:
        """
        Describe an image

        Args:
            image_data_uri: Image inlined as data:{mime};base64,{data}
            system_prompt: Instruction constraining the model output
            user_prompt: Instruction sent alongside the image

        Returns:
            Raw text produced by the model (may be empty)

        Raises:
            ProviderFailure: If the call fails or the response is malformed
        """


class OpenAIVisionProvider(VisionProvider):
    """Vision provider backed by an OpenAI-compatible chat completions API"""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        model: str = "gpt-4o-mini",
        detail: str = "low"
    ):
        self.api_key = api_key
        self.base_url = base_url or None
        self.model = model
        self.detail = detail
        self._client: Optional[AsyncOpenAI] = None

    def _get_client(self) -> AsyncOpenAI:
        # Built on first use so a missing key fails the request, not startup
        if self._client is None:
            if not self.api_key:
                raise ProviderFailure("AI_VISION_API_KEY is not configured")
            try:
                self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
            except openai.OpenAIError as e:
                raise ProviderFailure(f"Vision client could not be created: {e}") from e
        return self._client

    async def describe(self, image_data_uri: str, system_prompt: str, user_prompt: str) -> str:
        client = self._get_client()

        logger.info(f"Sending image to vision endpoint (model: {self.model}, detail: {self.detail})")

        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "system",
                        "content": system_prompt
                    },
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": user_prompt},
                            {
                                "type": "image_url",
                                "image_url": {
                                    "url": image_data_uri,
                                    "detail": self.detail
                                }
                            }
                        ]
                    }
                ]
            )
        except openai.OpenAIError as e:
            raise ProviderFailure(f"Vision provider call failed: {e}") from e

        if not getattr(response, "choices", None):
            raise ProviderFailure("Vision provider returned no choices")

        message = getattr(response.choices[0], "message", None)
        if message is None:
            raise ProviderFailure("Vision provider returned a choice without a message")

        return message.content or ""
