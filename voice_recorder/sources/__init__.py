"""Audio source implementations."""

from voice_recorder.sources.catalog import DeviceCatalog
from voice_recorder.sources.microphone import MicrophoneCapture

__all__ = ["DeviceCatalog", "MicrophoneCapture"]
