from dataclasses import dataclass
from typing import Iterable, Optional
from starlette.datastructures import UploadFile
import logging

from content_recognition.core.errors import UnsupportedImageType, UploadTooLarge

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageSubmission:
    """Uploaded image bytes with their declared MIME type"""
    data: bytes
    mime_type: str


class ImageService:
    """Service for validating uploaded images"""

    def __init__(
        self,
        max_upload_size: int,
        supported_types: Iterable[str],
        multipart_overhead: int = 64 * 1024
    ):
        self.max_upload_size = max_upload_size
        self.multipart_overhead = multipart_overhead
        self.supported_types = {t.lower() for t in supported_types}

    def check_content_length(self, content_length: Optional[str]) -> None:
        """
        Reject a request whose declared body cannot hold an upload within the limit

        Runs before the multipart body is parsed. Missing or malformed headers
        are left to the bounded read in read_submission.

        Raises:
            UploadTooLarge: If the declared length exceeds the limit plus multipart framing
        """
        try:
            declared = int(content_length)
        except (TypeError, ValueError):
            return

        if declared > self.max_upload_size + self.multipart_overhead:
            raise UploadTooLarge(f"Request body of {declared} bytes exceeds limit of {self.max_upload_size}")

    def normalize_mime_type(self, content_type: Optional[str]) -> str:
        """
        Validate the declared content type of an upload

        Args:
            content_type: Content type from the multipart part headers

        Returns:
            Lowercased MIME type without parameters

        Raises:
            UnsupportedImageType: If the type is missing or not accepted
        """
        mime_type = (content_type or "").split(";")[0].strip().lower()

        if mime_type not in self.supported_types:
            logger.debug(f"Invalid content type: {content_type}")
            raise UnsupportedImageType(f"Unsupported image content type: {content_type!r}")

        return mime_type

    async def read_submission(self, file: UploadFile) -> ImageSubmission:
        """
        Read an uploaded image into memory, enforcing the size ceiling

        Args:
            file: Uploaded image file

        Returns:
            ImageSubmission with the raw bytes

        Raises:
            UnsupportedImageType: If the declared type is not accepted
            UploadTooLarge: If the file exceeds the configured limit
        """
        mime_type = self.normalize_mime_type(file.content_type)

        if file.size is not None and file.size > self.max_upload_size:
            raise UploadTooLarge(f"Upload of {file.size} bytes exceeds limit of {self.max_upload_size}")

        # Read one byte past the limit to detect oversize bodies without a declared size
        content = await file.read(self.max_upload_size + 1)
        if len(content) > self.max_upload_size:
            raise UploadTooLarge(f"Upload exceeds limit of {self.max_upload_size} bytes")

        return ImageSubmission(data=content, mime_type=mime_type)
