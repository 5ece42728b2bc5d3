"""
Upload of resized photos to the recognition backend.

Every call returns a typed outcome instead of raising, so callers only have to
decide how to present a RecognitionSuccess or a RecognitionFailure.
"""
from typing import Optional
import logging

import httpx
from PIL import UnidentifiedImageError

from content_recognition.client.image_resizer import IMAGE_QUALITY, MAX_IMAGE_DIMENSION, resize
from content_recognition.client.picker import ImagePicker, pick_image
from content_recognition.client.results import (
    CompressedImage,
    FailureReason,
    InvalidDimensions,
    Outcome,
    RecognitionFailure,
    RecognitionSuccess,
)
from content_recognition.core.config import ClientSettings

logger = logging.getLogger(__name__)

RECOGNIZE_PATH = "/api/v1/vision/recognize"
UPLOAD_FIELD_NAME = "image"
UPLOAD_FILENAME = "photo.jpg"

GENERIC_SERVER_MESSAGE = "The server could not process the image. Please try again."
EMPTY_RESPONSE_MESSAGE = "Received empty response from server."


class RecognitionClient:
    """HTTP client for the image recognition endpoint"""

    def __init__(
        self,
        backend_url: str = "http://localhost:4000",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.backend_url = backend_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, client_settings: Optional[ClientSettings] = None) -> "RecognitionClient":
        client_settings = client_settings or ClientSettings()
        return cls(
            backend_url=client_settings.BACKEND_URL,
            timeout=client_settings.CLIENT_TIMEOUT_SECONDS
        )

    @property
    def recognize_url(self) -> str:
        return f"{self.backend_url}{RECOGNIZE_PATH}"

    def submit(self, image: CompressedImage) -> Outcome:
        """
        Upload an image and interpret the server response

        Args:
            image: Resized JPEG

        Returns:
            RecognitionSuccess with the recognized text, or RecognitionFailure
        """
        files = {UPLOAD_FIELD_NAME: (UPLOAD_FILENAME, image.data, image.mime_type)}
        # Content-Type is left to httpx so it carries the multipart boundary
        headers = {"Accept": "application/json"}

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.recognize_url, files=files, headers=headers)
        except httpx.RequestError as e:
            logger.warning(f"Recognition request failed: {e}")
            return RecognitionFailure(
                FailureReason.NETWORK_ERROR,
                f"Network error: {e}. Please check your backend connection."
            )

        if not response.is_success:
            return RecognitionFailure(FailureReason.SERVER_ERROR, self._error_message(response))

        try:
            text = response.json().get("text")
        except (ValueError, AttributeError):
            text = None

        if not isinstance(text, str) or not text:
            return RecognitionFailure(FailureReason.EMPTY_RESPONSE, EMPTY_RESPONSE_MESSAGE)

        return RecognitionSuccess(text)

    def _error_message(self, response: httpx.Response) -> str:
        logger.info(f"Recognition endpoint answered HTTP {response.status_code}")
        try:
            error = response.json().get("error")
        except (ValueError, AttributeError):
            return GENERIC_SERVER_MESSAGE

        if isinstance(error, str) and error:
            return error
        return GENERIC_SERVER_MESSAGE


def recognize_photo(
    picker: ImagePicker,
    client: RecognitionClient,
    max_dimension: int = MAX_IMAGE_DIMENSION,
    quality: float = IMAGE_QUALITY
) -> Optional[Outcome]:
    """
    Pick, resize and submit a photo

    Returns:
        Outcome of the submission, or None if the user cancelled
    """
    picked = pick_image(picker)
    if picked is None or isinstance(picked, RecognitionFailure):
        return picked

    try:
        compressed = resize(picked, max_dimension=max_dimension, quality=quality)
    except InvalidDimensions as e:
        return RecognitionFailure(FailureReason.INVALID_IMAGE, str(e))
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Failed to process picked image: {e}")
        return RecognitionFailure(FailureReason.INVALID_IMAGE, "Failed to process image.")

    return client.submit(compressed)
