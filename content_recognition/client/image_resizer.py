"""
Client-side image downsizing.

Photos are scaled so that neither side exceeds the maximum dimension and
re-encoded as JPEG, which keeps upload payloads well under the server limit.
"""
from typing import Optional, Tuple
import io
import logging
import math

from PIL import Image

from content_recognition.client.results import CompressedImage, InvalidDimensions, RawImage

logger = logging.getLogger(__name__)

MAX_IMAGE_DIMENSION = 1080
IMAGE_QUALITY = 0.7


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_target_size(
    width: Optional[int],
    height: Optional[int],
    max_dimension: int = MAX_IMAGE_DIMENSION
) -> Tuple[int, int]:
    """
    Compute the downscaled size of an image, preserving aspect ratio

    Args:
        width: Original width in pixels
        height: Original height in pixels
        max_dimension: Largest allowed width or height

    Returns:
        Tuple of (width, height); never larger than the original

    Raises:
        InvalidDimensions: If width or height is missing or not positive
    """
    if not width or not height or width <= 0 or height <= 0:
        raise InvalidDimensions("Invalid image dimensions.")

    ratio = min(max_dimension / width, max_dimension / height, 1)
    return _round_half_up(width * ratio), _round_half_up(height * ratio)


def resize(
    image: RawImage,
    max_dimension: int = MAX_IMAGE_DIMENSION,
    quality: float = IMAGE_QUALITY
) -> CompressedImage:
    """
    Downsize an image and re-encode it as JPEG

    Args:
        image: Picked image with its reported dimensions
        max_dimension: Largest allowed width or height
        quality: JPEG quality between 0 and 1

    Returns:
        CompressedImage with the JPEG bytes and final dimensions
    """
    target_width, target_height = compute_target_size(image.width, image.height, max_dimension)

    with Image.open(io.BytesIO(image.data)) as img:
        if img.mode != "RGB":
            img = img.convert("RGB")

        if img.size != (target_width, target_height):
            img = img.resize((target_width, target_height), Image.LANCZOS)
            logger.debug(
                f"Resized image from {image.width}x{image.height} to {target_width}x{target_height}"
            )

        buffer = io.BytesIO()
        img.save(buffer, format="JPEG", quality=_round_half_up(quality * 100))

    return CompressedImage(data=buffer.getvalue(), width=target_width, height=target_height)
