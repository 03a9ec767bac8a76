"""
Microphone boundary for the capture pipeline.

An ``AudioDevice`` is acquired with ``open()`` (which may be denied),
streams chunks in arrival order through ``chunks()``, and is released with
``close()``. ``close()`` must be idempotent and must end the chunk stream.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator


class AudioDevice(ABC):
    """Interface that every capture source must implement."""

    @abstractmethod
    async def open(self) -> None:
        """Acquire the device.

        Raises:
            PermissionError: If access to the microphone is denied.
            OSError: If no usable input device exists.
        """

    @abstractmethod
    def chunks(self) -> AsyncIterator[bytes]:
        """Yield recorded chunks in arrival order until the device is closed."""

    @abstractmethod
    async def close(self) -> None:
        """Release the device. Safe to call more than once."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """True between a successful ``open()`` and ``close()``."""


class BufferedAudioDevice(AudioDevice):
    """Replays audio already recorded by the browser widget.

    ``st.audio_input`` records in the browser and hands the server one
    finished WAV file; this device serves it back as fixed-size chunks so
    the rest of the pipeline is the same as for a live source.
    """

    def __init__(self, data: bytes | None, chunk_size: int = 32000) -> None:
        self._data = data
        self._chunk_size = chunk_size
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    async def open(self) -> None:
        if not self._data:
            raise PermissionError("No microphone input was provided")
        self._open = True

    async def chunks(self) -> AsyncIterator[bytes]:
        offset = 0
        while self._open and offset < len(self._data):
            yield self._data[offset : offset + self._chunk_size]
            offset += self._chunk_size
            await asyncio.sleep(0)

    async def close(self) -> None:
        self._open = False


class QueueAudioDevice(AudioDevice):
    """Live source fed by a producer calling :meth:`feed`.

    Chunks fed before ``close()`` are always delivered; ``close()`` ends the
    stream once the queue has been drained.
    """

    _CLOSED = object()

    def __init__(self, permitted: bool = True) -> None:
        self._permitted = permitted
        self._queue: asyncio.Queue = asyncio.Queue()
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    async def open(self) -> None:
        if not self._permitted:
            raise PermissionError("Microphone access denied")
        self._open = True

    def feed(self, chunk: bytes) -> None:
        """Deliver one chunk from the producer."""
        if not self._open:
            raise RuntimeError("Device is not open")
        self._queue.put_nowait(chunk)

    async def chunks(self) -> AsyncIterator[bytes]:
        while True:
            item = await self._queue.get()
            if item is self._CLOSED:
                return
            yield item

    async def close(self) -> None:
        if self._open:
            self._open = False
            self._queue.put_nowait(self._CLOSED)
