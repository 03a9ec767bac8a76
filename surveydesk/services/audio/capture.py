"""
Audio capture pipeline - turns a microphone stream into an encoded payload.

States: idle -> requesting_device -> recording -> encoding -> idle

The device is held only between a successful ``start()`` and the release
performed by ``stop()`` or ``abandon()``; it is released before encoding so
an encoding failure can never leave it held.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from surveydesk.core.config import get_settings
from surveydesk.core.exceptions import CaptureAlreadyActiveError, CaptureError
from surveydesk.services.audio.devices import AudioDevice, BufferedAudioDevice
from surveydesk.services.audio.encoder import AudioEncoder

logger = logging.getLogger(__name__)


class CaptureState(StrEnum):
    """Lifecycle of a single capture."""

    IDLE = "idle"
    REQUESTING_DEVICE = "requesting_device"
    RECORDING = "recording"
    ENCODING = "encoding"


@dataclass(frozen=True)
class CaptureResult:
    """Encoded recording and the MIME type it was tagged with."""

    payload: str
    mime_type: str


class AudioCapturePipeline:
    """Records chunks from an ``AudioDevice`` and encodes them on stop.

    Args:
        device_factory: Called once per ``start()`` to obtain a fresh device.
        encoder: Encoder for the finalized recording (defaults from settings).
        mime_type: MIME type of the chunks the device produces.
        on_complete: Optional ``(payload, mime_type)`` callback invoked after
            a successful ``stop()``.
        drain_timeout: Seconds to wait for buffered chunks after release.
    """

    def __init__(
        self,
        device_factory: Callable[[], AudioDevice],
        encoder: AudioEncoder | None = None,
        mime_type: str | None = None,
        on_complete: Callable[[str, str], None] | None = None,
        drain_timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self._device_factory = device_factory
        self._encoder = encoder or AudioEncoder(
            sample_rate=settings.audio_sample_rate,
            normalize=settings.audio_normalize,
        )
        self._mime_type = mime_type or settings.audio_mime_type
        self._on_complete = on_complete
        self._drain_timeout = (
            drain_timeout if drain_timeout is not None else settings.capture_drain_timeout
        )
        self._state = CaptureState.IDLE
        self._device: AudioDevice | None = None
        self._reader: asyncio.Task | None = None
        self._chunks: list[bytes] = []
        self._result: CaptureResult | None = None

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def result(self) -> CaptureResult | None:
        """Result of the last successful capture, if any."""
        return self._result

    @property
    def chunk_count(self) -> int:
        """Number of chunks buffered so far in the current recording."""
        return len(self._chunks)

    async def __aenter__(self) -> "AudioCapturePipeline":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.abandon()

    async def start(self) -> None:
        """Acquire the device and begin buffering chunks.

        Raises:
            CaptureAlreadyActiveError: If a capture is already in progress.
            CaptureError: If the device is denied or unavailable.
        """
        if self._state != CaptureState.IDLE:
            raise CaptureAlreadyActiveError()

        self._state = CaptureState.REQUESTING_DEVICE
        self._result = None
        device: AudioDevice | None = None
        try:
            device = self._device_factory()
            await device.open()
        except Exception as exc:
            logger.warning("Microphone access failed: %s", exc)
            if device is not None:
                try:
                    await device.close()
                except Exception as close_exc:
                    logger.warning("Error while closing capture device: %s", close_exc)
            self._state = CaptureState.IDLE
            raise CaptureError() from exc

        self._device = device
        self._chunks = []
        self._reader = asyncio.create_task(self._buffer_chunks(device))
        self._state = CaptureState.RECORDING
        logger.info("Recording started (%s)", self._mime_type)

    async def _buffer_chunks(self, device: AudioDevice) -> None:
        async for chunk in device.chunks():
            if chunk:
                self._chunks.append(chunk)

    async def _release(self) -> None:
        """Close the device, then wait for the chunk stream to drain."""
        device, reader = self._device, self._reader
        self._device = None
        self._reader = None
        try:
            if device is not None:
                await device.close()
                logger.debug("Capture device released")
        finally:
            if reader is not None:
                try:
                    await asyncio.wait_for(reader, timeout=self._drain_timeout)
                except TimeoutError:
                    logger.warning(
                        "Chunk stream did not drain within %.1fs", self._drain_timeout
                    )

    async def stop(self) -> CaptureResult | None:
        """Finish the recording, release the device, and encode the audio.

        Returns:
            The encoded recording, or None if no recording was in progress.

        Raises:
            CaptureError: If nothing was recorded or encoding failed.
        """
        if self._state != CaptureState.RECORDING:
            return None

        self._state = CaptureState.ENCODING
        try:
            await self._release()
            blob = b"".join(self._chunks)
            if not blob:
                raise CaptureError("No audio was captured. Please try again.")
            payload = await self._encoder.encode(blob, self._mime_type)
        except CaptureError:
            raise
        except Exception as exc:
            logger.warning("Failed to finalize recording: %s", exc)
            raise CaptureError("Failed to encode the recording.") from exc
        finally:
            self._chunks = []
            self._state = CaptureState.IDLE

        result = CaptureResult(payload=payload, mime_type=self._mime_type)
        self._result = result
        logger.info("Recording encoded (%d chars)", len(payload))
        if self._on_complete is not None:
            self._on_complete(result.payload, result.mime_type)
        return result

    async def abandon(self) -> None:
        """Drop an in-progress recording and release the device."""
        if self._state != CaptureState.RECORDING:
            return
        try:
            await self._release()
        except Exception as exc:
            logger.warning("Error while abandoning recording: %s", exc)
        finally:
            self._chunks = []
            self._state = CaptureState.IDLE
        logger.info("Recording abandoned")

    async def capture(self) -> CaptureResult:
        """Record a finite source to its end and return the encoded result."""
        async with self:
            await self.start()
            try:
                await self._reader
            except Exception as exc:
                raise CaptureError("Recording was interrupted.") from exc
            result = await self.stop()
        return result


async def capture_audio(
    data: bytes | None,
    mime_type: str | None = None,
    on_complete: Callable[[str, str], None] | None = None,
) -> CaptureResult:
    """Run the pipeline over audio recorded browser-side.

    Args:
        data: Raw bytes from the recorder widget (None when nothing was recorded).
        mime_type: Format of ``data`` (defaults to ``settings.audio_mime_type``).
        on_complete: Optional ``(payload, mime_type)`` callback.
    """
    settings = get_settings()
    pipeline = AudioCapturePipeline(
        lambda: BufferedAudioDevice(data, chunk_size=settings.audio_chunk_size),
        mime_type=mime_type,
        on_complete=on_complete,
    )
    return await pipeline.capture()
