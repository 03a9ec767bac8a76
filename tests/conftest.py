"""Shared pytest fixtures for the SurveyDesk test suite.

Provides sample backend payloads, a mocked API client and generated audio
used across the unit tests.
"""

import io
import math
import struct
import wave
from unittest.mock import MagicMock

import pytest

from surveydesk.core.models import Survey

# ---------------------------------------------------------------------------
# Backend payload fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def admin_payload():
    """User payload returned by POST /auth/login for an admin."""
    return {"id": 1, "username": "alice", "email": "alice@example.com", "role": "ADMIN"}


@pytest.fixture
def user_payload():
    """User payload returned by POST /auth/login for a regular user."""
    return {"id": 2, "username": "bob", "email": "bob@example.com", "role": "USER"}


@pytest.fixture
def survey_payload():
    """A survey with one question of every type, as the backend returns it."""
    return {
        "id": 10,
        "title": "Team feedback",
        "description": "Quarterly check-in",
        "questions": [
            {"id": 101, "questionText": "What went well?", "type": "TEXT", "options": None},
            {
                "id": 102,
                "questionText": "Favourite tool?",
                "type": "MULTIPLE_CHOICE",
                "options": "Editor, Terminal ,Browser",
            },
            {"id": 103, "questionText": "Rate the quarter", "type": "RATING"},
            {"id": 104, "questionText": "Would you recommend us?", "type": "YES_NO"},
            {
                "id": 105,
                "questionText": "Say hello",
                "type": "AUDIO",
                "audioData": "data:audio/wav;base64,AAAA",
                "audioMimeType": "audio/wav",
            },
        ],
    }


@pytest.fixture
def survey(survey_payload):
    return Survey.model_validate(survey_payload)


@pytest.fixture
def text_rating_survey():
    """Two-question survey (TEXT, RATING)."""
    return Survey.model_validate(
        {
            "id": 20,
            "title": "Short",
            "questions": [
                {"id": 201, "questionText": "Comments", "type": "TEXT"},
                {"id": 202, "questionText": "Score", "type": "RATING"},
            ],
        }
    )


@pytest.fixture
def report_payload():
    """Report payload with one question report per aggregate kind."""
    return {
        "surveyTitle": "Team feedback",
        "totalResponses": 3,
        "questionReports": [
            {
                "questionText": "Favourite tool?",
                "questionType": "MULTIPLE_CHOICE",
                "answerCounts": {"Editor": 2, "Terminal": 1, "Browser": 0},
            },
            {
                "questionText": "What went well?",
                "questionType": "TEXT",
                "allAnswers": ["Shipping", "  Pairing  "],
            },
            {
                "questionText": "Say hello",
                "questionType": "AUDIO",
                "audioAnswers": ["data:audio/wav;base64,AAAA", "data:audio/wav;base64,BBBB"],
            },
        ],
    }


# ---------------------------------------------------------------------------
# Client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_client(admin_payload, survey_payload):
    """Mock APIClient whose calls succeed with the sample payloads."""
    client = MagicMock()
    client.login.return_value = admin_payload
    client.list_surveys.return_value = [survey_payload]
    client.create_survey.return_value = {"id": 11}
    client.submit_response.return_value = None
    client.register.return_value = None
    return client


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


def _sine_frames(sample_rate: int, channels: int, duration: float) -> bytes:
    amplitude = 16000  # ~50% of max int16
    frames = []
    for i in range(int(sample_rate * duration)):
        value = int(amplitude * math.sin(2 * math.pi * 440.0 * i / sample_rate))
        frames.append(struct.pack("<h", value) * channels)
    return b"".join(frames)


@pytest.fixture
def stereo_wav_bytes():
    """Half a second of a 440Hz tone as a 44.1kHz stereo 16-bit WAV file."""
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(2)
        wf.setsampwidth(2)
        wf.setframerate(44100)
        wf.writeframes(_sine_frames(44100, 2, 0.5))
    return buf.getvalue()
