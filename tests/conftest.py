import pytest
from fastapi.testclient import TestClient

from content_recognition.api.endpoints.vision import get_vision_provider
from content_recognition.main import app
from content_recognition.services.vision_provider import VisionProvider


class FakeVisionProvider(VisionProvider):
    """Records every describe() call and answers with a canned result"""

    def __init__(self, result="recognized text from image", error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def describe(self, image_data_uri, system_prompt, user_prompt):
        self.calls.append({
            "image_data_uri": image_data_uri,
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
        })
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_provider():
    return FakeVisionProvider()


@pytest.fixture
def client(fake_provider):
    app.dependency_overrides[get_vision_provider] = lambda: fake_provider
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
