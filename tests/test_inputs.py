from content_recognition.client.inputs import SpeechRecognizer, VoiceSession, confirm_text
from content_recognition.client.results import FailureReason, RecognitionSuccess


class StubRecognizer(SpeechRecognizer):
    def __init__(self, granted=True, available=True, partials=(), fail_on=None):
        self.granted = granted
        self.available = available
        self.partials = partials
        self.fail_on = fail_on
        self.stopped = False

    def request_permission(self):
        if self.fail_on == "permission":
            raise RuntimeError("permission service down")
        return self.granted

    def get_availability(self):
        return self.available

    def start_listening(self, on_partial_result):
        if self.fail_on == "start":
            raise RuntimeError("microphone busy")
        for partial in self.partials:
            on_partial_result(partial)

    def stop_listening(self):
        if self.fail_on == "stop":
            raise RuntimeError("already stopped")
        self.stopped = True


def test_confirm_text_trims():
    assert confirm_text("  hello world \n") == RecognitionSuccess("hello world")


def test_confirm_text_rejects_blank():
    outcome = confirm_text("   ")

    assert outcome.reason == FailureReason.EMPTY_INPUT


def test_voice_session_unavailable_without_permission():
    session = VoiceSession(StubRecognizer(granted=False))

    assert session.initialize() is False
    assert session.start().reason == FailureReason.SPEECH_UNAVAILABLE


def test_voice_session_initialize_error_means_unavailable():
    session = VoiceSession(StubRecognizer(fail_on="permission"))

    assert session.initialize() is False


def test_voice_session_keeps_latest_partial():
    recognizer = StubRecognizer(partials=["hel", "hello", "", "hello there "])
    session = VoiceSession(recognizer)
    session.initialize()

    assert session.start() is None
    assert session.listening is True

    assert session.stop() == RecognitionSuccess("hello there")
    assert recognizer.stopped is True
    assert session.listening is False


def test_voice_session_nothing_heard():
    session = VoiceSession(StubRecognizer())
    session.initialize()
    session.start()

    assert session.stop().reason == FailureReason.EMPTY_INPUT


def test_voice_session_start_error():
    session = VoiceSession(StubRecognizer(fail_on="start"))
    session.initialize()

    assert session.start().reason == FailureReason.SPEECH_ERROR
    assert session.listening is False


def test_voice_session_stop_error():
    session = VoiceSession(StubRecognizer(fail_on="stop"))
    session.initialize()
    session.start()

    assert session.stop().reason == FailureReason.SPEECH_ERROR
    assert session.listening is False
