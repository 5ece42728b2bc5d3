from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile
from typing import Optional
import logging

from content_recognition.core.config import settings
from content_recognition.core.errors import (
    MissingUpload,
    RecognitionError,
    UnhandledError,
    missing_upload_message,
)
from content_recognition.models.responses import ErrorResponse, RecognitionResponse
from content_recognition.services.image_service import ImageService
from content_recognition.services.recognition_service import RecognitionService
from content_recognition.services.vision_provider import OpenAIVisionProvider, VisionProvider

logger = logging.getLogger(__name__)

router = APIRouter()

# Singleton instances
_vision_provider: Optional[VisionProvider] = None
_image_service: Optional[ImageService] = None


def get_vision_provider() -> VisionProvider:
    """Get or create the vision provider singleton"""
    global _vision_provider
    if _vision_provider is None:
        _vision_provider = OpenAIVisionProvider(
            api_key=settings.AI_VISION_API_KEY,
            base_url=settings.AI_VISION_PROVIDER_URL,
            model=settings.VISION_MODEL,
            detail=settings.VISION_IMAGE_DETAIL
        )
    return _vision_provider


def get_image_service() -> ImageService:
    """Get or create the upload validation service singleton"""
    global _image_service
    if _image_service is None:
        _image_service = ImageService(
            max_upload_size=settings.MAX_UPLOAD_SIZE,
            supported_types=settings.SUPPORTED_IMAGE_TYPES
        )
    return _image_service


def get_recognition_service(
    provider: VisionProvider = Depends(get_vision_provider)
) -> RecognitionService:
    return RecognitionService(provider)


# The form is parsed inside the handler so parse failures and non-file
# values follow the same error contract as the rest of the pipeline
UPLOAD_REQUEST_BODY = {
    "required": True,
    "content": {
        "multipart/form-data": {
            "schema": {
                "type": "object",
                "properties": {
                    settings.UPLOAD_FIELD_NAME: {"type": "string", "format": "binary"}
                },
                "required": [settings.UPLOAD_FIELD_NAME]
            }
        }
    }
}


@router.post(
    "/recognize",
    response_model=RecognitionResponse,
    responses={400: {"model": ErrorResponse}},
    openapi_extra={"requestBody": UPLOAD_REQUEST_BODY}
)
async def recognize_image(
    request: Request,
    image_service: ImageService = Depends(get_image_service),
    recognition_service: RecognitionService = Depends(get_recognition_service)
):
    """
    Describe the non-sensitive physical objects in an uploaded image

    Accepts a multipart upload with a single image file.

    Returns:
        RecognitionResponse with the recognized text
    """
    logger.info("HTTP request received for image recognition endpoint")

    try:
        image_service.check_content_length(request.headers.get("content-length"))

        async with request.form() as form:
            image = form.get(settings.UPLOAD_FIELD_NAME)

            if not isinstance(image, UploadFile):
                logger.warning("Image recognition request received without an image file")
                raise MissingUpload(missing_upload_message(settings.UPLOAD_FIELD_NAME))

            submission = await image_service.read_submission(image)

        logger.debug(
            f"Image received: {image.filename} ({submission.mime_type}, {len(submission.data)} bytes)"
        )

        text = await recognition_service.recognize(submission.data, submission.mime_type)

    except RecognitionError:
        raise
    except Exception as e:
        logger.error(f"Image recognition failed unexpectedly: {e}", exc_info=True)
        raise UnhandledError(str(e)) from e

    logger.info("Image successfully processed, returning recognized text")
    return RecognitionResponse(text=text)
