"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """SurveyDesk client settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        api_base_url: Root URL of the survey backend (including the ``/api`` prefix).
        request_timeout: Seconds before a backend request is abandoned.
        audio_mime_type: MIME type of audio captured by the browser recorder.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Backend ---
    api_base_url: str = "http://localhost:8080/api"
    request_timeout: float = 30.0

    # --- Audio capture ---
    audio_mime_type: str = "audio/wav"  # st.audio_input records WAV
    audio_chunk_size: int = 32000  # 1 second of 16kHz 16-bit mono
    audio_normalize: bool = True  # Downmix/resample WAV before encoding
    audio_sample_rate: int = 16000
    capture_drain_timeout: float = 3.0  # Seconds to wait for buffered chunks on stop

    # --- Application ---
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
