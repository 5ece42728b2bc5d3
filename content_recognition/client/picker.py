from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union
import logging

from PIL import Image

from content_recognition.client.results import FailureReason, RawImage, RecognitionFailure

logger = logging.getLogger(__name__)

PERMISSION_DENIED_MESSAGE = "Image permissions are required to select a photo."


class ImagePicker(ABC):
    """Source of user-selected photos"""

    @abstractmethod
    def request_permission(self) -> bool:
        """Ask for access to the photo library"""

    @abstractmethod
    def pick_image(self) -> Optional[RawImage]:
        """Return the selected image, or None if the user cancelled"""


class FileImagePicker(ImagePicker):
    """Picker that reads a photo from the local file system"""

    def __init__(self, path: Union[str, Path, None]):
        self.path = Path(path) if path else None

    def request_permission(self) -> bool:
        return True

    def pick_image(self) -> Optional[RawImage]:
        if self.path is None:
            return None

        data = self.path.read_bytes()
        with Image.open(self.path) as img:
            width, height = img.size

        logger.debug(f"Picked {self.path.name} ({width}x{height}, {len(data)} bytes)")
        return RawImage(data=data, width=width, height=height)


def pick_image(picker: ImagePicker) -> Union[RawImage, RecognitionFailure, None]:
    """
    Ask the picker for an image

    Returns:
        RawImage on success, RecognitionFailure if permission was denied,
        None if the user cancelled
    """
    if not picker.request_permission():
        return RecognitionFailure(FailureReason.PERMISSION_DENIED, PERMISSION_DENIED_MESSAGE)

    return picker.pick_image()
