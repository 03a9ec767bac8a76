"""Audio encoding utilities for captured recordings.

Turns a finalized recording into a self-describing ``data:`` URI suitable
for JSON transport, and back again for playback.
"""

import asyncio
import base64
import io
import logging

import numpy as np
import soundfile as sf

logger = logging.getLogger(__name__)

WAV_MIME_TYPES = frozenset({"audio/wav", "audio/x-wav", "audio/wave"})


class AudioEncoder:
    """Encodes raw audio blobs into data URIs.

    WAV input can optionally be normalised to mono 16-bit PCM at a fixed
    sample rate before encoding, which keeps payloads small. Other formats
    are passed through untouched.
    """

    def __init__(self, sample_rate: int = 16000, normalize: bool = True) -> None:
        """Initialize the encoder.

        Args:
            sample_rate: Target sample rate in Hz for normalised WAV output.
            normalize: Whether to downmix/resample WAV input before encoding.
        """
        self.sample_rate = sample_rate
        self.normalize = normalize

    def normalize_wav(self, blob: bytes) -> bytes:
        """Read WAV bytes, downmix to mono, resample, and re-encode as PCM_16 WAV."""
        data, sample_rate = sf.read(io.BytesIO(blob), dtype="float32")

        if data.ndim > 1:
            data = data.mean(axis=1)

        if sample_rate != self.sample_rate and len(data) > 0:
            duration = len(data) / sample_rate
            num_samples = max(int(duration * self.sample_rate), 1)
            indices = np.linspace(0, len(data) - 1, num_samples)
            data = np.interp(indices, np.arange(len(data)), data)

        out = io.BytesIO()
        sf.write(out, data.clip(-1.0, 1.0), self.sample_rate, format="WAV", subtype="PCM_16")
        return out.getvalue()

    def to_data_uri(self, blob: bytes, mime_type: str) -> str:
        """Wrap raw bytes in a base64 ``data:`` URI tagged with ``mime_type``."""
        encoded = base64.b64encode(blob).decode("ascii")
        return f"data:{mime_type};base64,{encoded}"

    def encode_sync(self, blob: bytes, mime_type: str) -> str:
        """Blocking encode; see :meth:`encode`."""
        if self.normalize and mime_type in WAV_MIME_TYPES:
            blob = self.normalize_wav(blob)
        return self.to_data_uri(blob, mime_type)

    async def encode(self, blob: bytes, mime_type: str) -> str:
        """Encode ``blob`` off the event loop and return the data URI."""
        return await asyncio.to_thread(self.encode_sync, blob, mime_type)


def decode_data_uri(payload: str) -> tuple[bytes, str]:
    """Split a base64 ``data:`` URI into ``(raw_bytes, mime_type)``.

    Raises:
        ValueError: If ``payload`` is not a base64 data URI.
    """
    if not payload.startswith("data:") or "," not in payload:
        raise ValueError("Not a data URI")
    header, _, body = payload.partition(",")
    meta = header[len("data:") :]
    if not meta.endswith(";base64"):
        raise ValueError("Only base64 data URIs are supported")
    # May keep parameters, e.g. "audio/webm;codecs=opus"
    mime_type = meta[: -len(";base64")] or "application/octet-stream"
    return base64.b64decode(body), mime_type
