"""Value types shared by the recording session and its collaborators."""

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from voice_recorder.exceptions import VoiceRecorderError

if TYPE_CHECKING:
    from voice_recorder.core.protocols import CaptureSource


@dataclass(frozen=True)
class Device:
    """Represents a capture device.

    Attributes:
        index: Sounddevice device index.
        name: Device name as seen by sounddevice.
        min_frequency: Lowest supported sample rate in Hz (0 means any).
        max_frequency: Highest supported sample rate in Hz (0 means any).
        input_channels: Number of input channels.
    """

    index: int
    name: str
    min_frequency: int = 0
    max_frequency: int = 0
    input_channels: int = 1

    def sample_rate(self, fallback: int) -> int:
        """Rate to record at: the highest supported, or fallback when unbounded."""
        return self.max_frequency or fallback

    def __str__(self) -> str:
        return f"{self.name} -- Min: {self.min_frequency} - Max: {self.max_frequency}"


class SessionState(enum.Enum):
    """Lifecycle state of a recording session."""

    IDLE = "idle"
    RECORDING = "recording"


@dataclass(frozen=True)
class TrimmedClip:
    """Mono audio extracted from a finished capture.

    Attributes:
        sample_rate: Rate the clip was captured at, in Hz.
        samples: 1-D float32 amplitudes in [-1.0, 1.0].
        channels: Always 1.
    """

    sample_rate: int
    samples: NDArray[np.float32]
    channels: int = 1

    @property
    def frame_count(self) -> int:
        """Number of samples in the clip."""
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        """Clip length in seconds."""
        return self.frame_count / self.sample_rate


@dataclass
class ActiveRecording:
    """Everything held while a session is recording."""

    device: Device
    started_at: float
    remaining_seconds: float
    sample_rate: int
    capture: "CaptureSource"


@dataclass(frozen=True)
class RecordingResult:
    """Outcome of stopping a session.

    Attributes:
        clip: Extracted audio, if any samples were recorded.
        path: File the clip was written to, if saving succeeded.
        error: What went wrong, if anything.
        automatic: Whether the countdown triggered the stop.
    """

    clip: TrimmedClip | None = None
    path: Path | None = None
    error: VoiceRecorderError | None = None
    automatic: bool = False

    @property
    def ok(self) -> bool:
        """Whether a file was written."""
        return self.error is None and self.path is not None
