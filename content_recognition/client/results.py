from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class InvalidDimensions(ValueError):
    """Image width or height is missing or not positive"""


@dataclass(frozen=True)
class RawImage:
    """Image as returned by a picker, before resizing"""
    data: bytes
    width: Optional[int]
    height: Optional[int]


@dataclass(frozen=True)
class CompressedImage:
    """Resized JPEG ready for upload"""
    data: bytes
    width: int
    height: int
    mime_type: str = "image/jpeg"


class FailureReason(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    INVALID_IMAGE = "invalid_image"
    SERVER_ERROR = "server_error"
    EMPTY_RESPONSE = "empty_response"
    NETWORK_ERROR = "network_error"
    EMPTY_INPUT = "empty_input"
    SPEECH_UNAVAILABLE = "speech_unavailable"
    SPEECH_ERROR = "speech_error"


@dataclass(frozen=True)
class RecognitionSuccess:
    text: str


@dataclass(frozen=True)
class RecognitionFailure:
    reason: FailureReason
    message: str


Outcome = Union[RecognitionSuccess, RecognitionFailure]
