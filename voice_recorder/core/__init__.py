"""Core voice recording components."""

from voice_recorder.core.models import Device, RecordingResult, SessionState, TrimmedClip
from voice_recorder.core.protocols import CaptureSource, ClipEncoder, DeviceProvider
from voice_recorder.core.session import RecordingSession

__all__ = [
    "CaptureSource",
    "ClipEncoder",
    "Device",
    "DeviceProvider",
    "RecordingResult",
    "RecordingSession",
    "SessionState",
    "TrimmedClip",
]
