from abc import ABC, abstractmethod
from typing import Callable, Optional
import logging

from content_recognition.client.results import (
    FailureReason,
    Outcome,
    RecognitionFailure,
    RecognitionSuccess,
)

logger = logging.getLogger(__name__)


def confirm_text(draft: str) -> Outcome:
    """Normalize manually typed text"""
    text = (draft or "").strip()
    if not text:
        return RecognitionFailure(FailureReason.EMPTY_INPUT, "Please enter some text before confirming.")
    return RecognitionSuccess(text)


class SpeechRecognizer(ABC):
    """On-device speech-to-text engine"""

    @abstractmethod
    def request_permission(self) -> bool:
        ...

    @abstractmethod
    def get_availability(self) -> bool:
        ...

    @abstractmethod
    def start_listening(self, on_partial_result: Callable[[str], None]) -> None:
        ...

    @abstractmethod
    def stop_listening(self) -> None:
        ...


class VoiceSession:
    """Collects a transcript from a speech recognizer"""

    def __init__(self, recognizer: SpeechRecognizer):
        self.recognizer = recognizer
        self.available = False
        self.listening = False
        self.transcript = ""

    def initialize(self) -> bool:
        try:
            granted = self.recognizer.request_permission()
            self.available = bool(granted and self.recognizer.get_availability())
        except Exception as e:
            logger.warning(f"Speech recognition unavailable: {e}")
            self.available = False
        return self.available

    def _on_partial_result(self, text: str) -> None:
        if text:
            self.transcript = text

    def start(self) -> Optional[RecognitionFailure]:
        """Start listening; returns None once the recognizer is running"""
        if not self.available:
            return RecognitionFailure(
                FailureReason.SPEECH_UNAVAILABLE,
                "Speech recognition is not available on this device."
            )

        self.transcript = ""
        try:
            self.recognizer.start_listening(self._on_partial_result)
        except Exception as e:
            logger.warning(f"Failed to start voice recognition: {e}")
            return RecognitionFailure(
                FailureReason.SPEECH_ERROR,
                "There was an error while starting voice recognition."
            )

        self.listening = True
        return None

    def stop(self) -> Outcome:
        try:
            self.recognizer.stop_listening()
        except Exception as e:
            logger.warning(f"Failed to stop voice recognition: {e}")
            return RecognitionFailure(
                FailureReason.SPEECH_ERROR,
                "There was an error while stopping voice recognition."
            )
        finally:
            self.listening = False

        text = self.transcript.strip()
        if not text:
            return RecognitionFailure(FailureReason.EMPTY_INPUT, "No speech was recognized.")
        return RecognitionSuccess(text)
