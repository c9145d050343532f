"""Configuration dataclasses for voice recording."""

from dataclasses import dataclass, field
from pathlib import Path

STANDARD_SAMPLE_RATES: tuple[int, ...] = (
    8000,
    11025,
    16000,
    22050,
    32000,
    44100,
    48000,
    88200,
    96000,
    176400,
    192000,
)


@dataclass(frozen=True)
class CaptureConfig:
    """Configuration for microphone capture parameters.

    Attributes:
        max_recording_seconds: Hard ceiling on a session's length (default: 10 minutes).
        fallback_sample_rate: Rate used when a device reports no upper bound.
        channels: Number of captured channels (mono).
        block_size: Number of frames per PortAudio callback block.
        dtype: NumPy dtype string for captured samples.
        candidate_rates: Sample rates tried when querying device capabilities.
    """

    max_recording_seconds: int = 600
    fallback_sample_rate: int = 48000
    channels: int = 1
    block_size: int = 1024
    dtype: str = "float32"
    candidate_rates: tuple[int, ...] = STANDARD_SAMPLE_RATES

    def __post_init__(self) -> None:
        if self.max_recording_seconds <= 0:
            raise ValueError(
                f"max_recording_seconds must be positive, got {self.max_recording_seconds}"
            )
        if self.fallback_sample_rate <= 0:
            raise ValueError(
                f"fallback_sample_rate must be positive, got {self.fallback_sample_rate}"
            )
        if self.channels != 1:
            raise ValueError(f"Only mono capture is supported, got {self.channels} channels")


@dataclass(frozen=True)
class StorageConfig:
    """Where finished recordings are written.

    Attributes:
        storage_root: Persistent storage directory.
        recordings_dir: Subdirectory of storage_root holding the WAV files.
        file_name: Default file name (without extension).
        subtype: soundfile subtype for the WAV container (uncompressed PCM).
    """

    storage_root: Path = field(default_factory=Path.cwd)
    recordings_dir: str = "Recordings"
    file_name: str = "recording"
    subtype: str = "PCM_16"

    def __post_init__(self) -> None:
        if isinstance(self.storage_root, str):
            object.__setattr__(self, "storage_root", Path(self.storage_root))
        if self.subtype not in ("PCM_16", "PCM_24", "PCM_32", "PCM_U8"):
            raise ValueError(f"Unsupported PCM subtype: {self.subtype}")

    @property
    def recordings_path(self) -> Path:
        """Directory that holds the recordings."""
        return self.storage_root / self.recordings_dir

    def path_for(self, file_name: str) -> Path:
        """Resolve the WAV path for a recording name."""
        return self.recordings_path / f"{file_name}.wav"


@dataclass
class RecorderConfig:
    """Configuration for a recording session.

    Attributes:
        capture: Capture parameters.
        storage: Output location settings.
        verbose: Enable verbose logging.
    """

    capture: CaptureConfig = field(default_factory=CaptureConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    verbose: bool = False
