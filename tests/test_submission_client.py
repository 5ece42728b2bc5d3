import io

import httpx
import pytest
from PIL import Image

from content_recognition.client.picker import FileImagePicker, ImagePicker
from content_recognition.client.presenter import render_outcome
from content_recognition.client.results import (
    CompressedImage,
    FailureReason,
    RawImage,
    RecognitionFailure,
    RecognitionSuccess,
)
from content_recognition.core.config import ClientSettings
from content_recognition.client.submission import (
    EMPTY_RESPONSE_MESSAGE,
    GENERIC_SERVER_MESSAGE,
    RecognitionClient,
    recognize_photo,
)

IMAGE = CompressedImage(data=b"\xff\xd8\xff", width=3, height=1)


def make_client(handler):
    return RecognitionClient(backend_url="http://backend.test/", transport=httpx.MockTransport(handler))


def test_submit_builds_multipart_request():
    seen = {}

    def handler(request):
        seen["request"] = request
        return httpx.Response(200, json={"text": "table, chair"})

    outcome = make_client(handler).submit(IMAGE)

    assert outcome == RecognitionSuccess("table, chair")
    request = seen["request"]
    assert request.method == "POST"
    assert str(request.url) == "http://backend.test/api/v1/vision/recognize"
    assert request.headers["accept"] == "application/json"
    assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
    body = request.content
    assert b'name="image"; filename="photo.jpg"' in body
    assert b"Content-Type: image/jpeg" in body
    assert b"\xff\xd8\xff" in body


def test_server_error_message_is_surfaced():
    client = make_client(lambda request: httpx.Response(400, json={"error": "Bad image"}))

    assert client.submit(IMAGE) == RecognitionFailure(FailureReason.SERVER_ERROR, "Bad image")


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="<html>oops</html>"),
        httpx.Response(400, json={"detail": "nope"}),
        httpx.Response(400, json={"error": ""}),
        httpx.Response(502, json=["error"]),
    ],
)
def test_unparseable_error_falls_back_to_generic(response):
    client = make_client(lambda request: response)

    assert client.submit(IMAGE) == RecognitionFailure(FailureReason.SERVER_ERROR, GENERIC_SERVER_MESSAGE)


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"text": ""}),
        httpx.Response(200, json={}),
        httpx.Response(200, text="not json"),
    ],
)
def test_empty_success_response(response):
    client = make_client(lambda request: response)

    assert client.submit(IMAGE) == RecognitionFailure(FailureReason.EMPTY_RESPONSE, EMPTY_RESPONSE_MESSAGE)


def test_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused")

    outcome = make_client(handler).submit(IMAGE)

    assert outcome.reason == FailureReason.NETWORK_ERROR
    assert outcome.message == "Network error: connection refused. Please check your backend connection."


class StubPicker(ImagePicker):
    def __init__(self, granted=True, image=None):
        self.granted = granted
        self.image = image

    def request_permission(self):
        return self.granted

    def pick_image(self):
        return self.image


def jpeg_bytes(width, height):
    buffer = io.BytesIO()
    Image.new("RGB", (width, height)).save(buffer, format="JPEG")
    return buffer.getvalue()


def test_recognize_photo_permission_denied():
    outcome = recognize_photo(StubPicker(granted=False), make_client(lambda r: httpx.Response(200)))

    assert outcome.reason == FailureReason.PERMISSION_DENIED


def test_recognize_photo_cancelled_is_noop():
    calls = []
    client = make_client(lambda r: calls.append(r) or httpx.Response(200))

    assert recognize_photo(StubPicker(image=None), client) is None
    assert calls == []


def test_recognize_photo_resizes_before_upload():
    seen = {}

    def handler(request):
        seen["body"] = request.content
        return httpx.Response(200, json={"text": "lamp"})

    picker = StubPicker(image=RawImage(data=jpeg_bytes(2000, 1000), width=2000, height=1000))

    assert recognize_photo(picker, make_client(handler)) == RecognitionSuccess("lamp")
    start = seen["body"].index(b"\xff\xd8")
    with Image.open(io.BytesIO(seen["body"][start:])) as img:
        assert img.size == (1080, 540)


def test_recognize_photo_invalid_dimensions():
    picker = StubPicker(image=RawImage(data=b"", width=0, height=0))

    outcome = recognize_photo(picker, make_client(lambda r: httpx.Response(200)))

    assert outcome == RecognitionFailure(FailureReason.INVALID_IMAGE, "Invalid image dimensions.")


def test_recognize_photo_undecodable_image():
    picker = StubPicker(image=RawImage(data=b"not an image", width=10, height=10))

    outcome = recognize_photo(picker, make_client(lambda r: httpx.Response(200)))

    assert outcome == RecognitionFailure(FailureReason.INVALID_IMAGE, "Failed to process image.")


def test_file_picker_reads_dimensions(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(jpeg_bytes(40, 20))

    image = FileImagePicker(path).pick_image()

    assert (image.width, image.height) == (40, 20)
    assert image.data == path.read_bytes()


def test_client_from_settings():
    settings = ClientSettings(BACKEND_URL="http://10.0.2.2:4000/", CLIENT_TIMEOUT_SECONDS=5)

    client = RecognitionClient.from_settings(settings)

    assert client.recognize_url == "http://10.0.2.2:4000/api/v1/vision/recognize"
    assert client.timeout == 5


def test_render_outcome():
    assert render_outcome(RecognitionSuccess("table")) == "table"
    assert render_outcome(RecognitionFailure(FailureReason.NETWORK_ERROR, "offline")) == "Toast: offline"
    assert render_outcome(None) is None
