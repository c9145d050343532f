"""Custom exceptions for the voice recorder."""


class VoiceRecorderError(Exception):
    """Base exception for all voice recorder errors."""


class NoDeviceAvailableError(VoiceRecorderError):
    """Raised when no capture device is connected."""

    def __init__(self, device_type: str = "microphone") -> None:
        self.device_type = device_type
        super().__init__(f"No {device_type} devices available")


class AudioCaptureError(VoiceRecorderError):
    """Raised when audio capture cannot be started."""


class CaptureUnavailableError(VoiceRecorderError):
    """Raised when the capture buffer is missing at stop time."""


class EmptyRecordingError(VoiceRecorderError):
    """Raised when a stopped session produced zero samples."""

    def __init__(self, elapsed_seconds: float) -> None:
        self.elapsed_seconds = elapsed_seconds
        super().__init__(f"Recording is empty ({elapsed_seconds:.3f} seconds elapsed)")


class AudioWriteError(VoiceRecorderError):
    """Raised when writing audio data fails."""
