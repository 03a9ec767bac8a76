"""
Audio module - Microphone capture and payload encoding.
"""

from .capture import AudioCapturePipeline, CaptureResult, CaptureState, capture_audio
from .devices import AudioDevice, BufferedAudioDevice, QueueAudioDevice
from .encoder import AudioEncoder, decode_data_uri

__all__ = [
    "AudioCapturePipeline",
    "AudioDevice",
    "AudioEncoder",
    "BufferedAudioDevice",
    "CaptureResult",
    "CaptureState",
    "QueueAudioDevice",
    "capture_audio",
    "decode_data_uri",
]
