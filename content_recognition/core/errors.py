GENERIC_ERROR_MESSAGE = "Unable to process the provided image. Please verify the file and try again."


def missing_upload_message(field_name: str = "image") -> str:
    return f'Image file is required under field "{field_name}".'


class RecognitionError(Exception):
    """Base class for failures of the image recognition pipeline.

    The message is meant for logs only. Callers receive GENERIC_ERROR_MESSAGE.
    """


class MissingUpload(RecognitionError):
    """No file was attached under the expected form field"""


class UploadTooLarge(RecognitionError):
    """Upload exceeds the configured byte ceiling"""


class UnsupportedImageType(RecognitionError):
    """Declared MIME type is not one the vision provider accepts"""


class EmptyBuffer(RecognitionError):
    """Zero-length image payload reached the recognition step"""


class ProviderFailure(RecognitionError):
    """Vision provider call failed or returned malformed data"""


class EmptyDescription(RecognitionError):
    """Vision provider returned no usable text"""


class UnhandledError(RecognitionError):
    """Unexpected failure while handling a recognition request"""
