import base64
import logging

from content_recognition.core.errors import EmptyBuffer, EmptyDescription
from content_recognition.services.vision_provider import VisionProvider

logger = logging.getLogger(__name__)

# Output is restricted to non-sensitive physical objects
SYSTEM_PROMPT = (
    "You are an expert in image recognition. "
    "Describe ONLY the non-sensitive physical objects detected in the image, "
    "excluding people, faces, animals, license plates, texts that reveal identities, "
    "or any private information. "
    "Return a concise plain English list of objects, separated by commas or new lines, "
    "without any additional commentary, suggestions, guesses, or formatting."
)

USER_PROMPT = "Analyze this image and describe only the non-sensitive physical objects."


def build_data_uri(image_buffer: bytes, mime_type: str) -> str:
    """Inline image bytes as a base64 data URI"""
    encoded = base64.b64encode(image_buffer).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


class RecognitionService:
    """Service for describing images through a vision provider"""

    def __init__(self, provider: VisionProvider):
        self.provider = provider

    async def recognize(self, image_buffer: bytes, mime_type: str) -> str:
        """
        Describe the non-sensitive objects in an image

        Args:
            image_buffer: Raw image bytes from the upload
            mime_type: Declared MIME type, e.g. image/jpeg

        Returns:
            Trimmed, non-empty description

        Raises:
            EmptyBuffer: If image_buffer is empty
            ProviderFailure: If the provider call fails
            EmptyDescription: If the provider returned no text
        """
        logger.info("Starting image recognition")

        if not image_buffer:
            logger.warning("Image recognition requested with an empty buffer")
            raise EmptyBuffer("Image buffer is empty. Unable to process image.")

        data_uri = build_data_uri(image_buffer, mime_type)
        logger.debug(f"Image encoded for provider request ({len(image_buffer)} bytes, {mime_type})")

        text = await self.provider.describe(data_uri, SYSTEM_PROMPT, USER_PROMPT)
        text = (text or "").strip()

        if not text:
            logger.warning("Vision provider returned an empty description")
            raise EmptyDescription("Image could not be interpreted. No description was returned.")

        logger.info(f"Image recognition completed ({len(text)} characters)")
        return text
