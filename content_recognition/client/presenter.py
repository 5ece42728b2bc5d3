from typing import Optional

from content_recognition.client.results import Outcome, RecognitionFailure, RecognitionSuccess


def render_outcome(outcome: Optional[Outcome]) -> Optional[str]:
    """
    Turn an outcome into the text shown to the user

    Successes render as the recognized text, failures as a toast line.
    A cancelled action (None) renders nothing.
    """
    if outcome is None:
        return None
    if isinstance(outcome, RecognitionSuccess):
        return outcome.text
    if isinstance(outcome, RecognitionFailure):
        return f"Toast: {outcome.message}"
    raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")
