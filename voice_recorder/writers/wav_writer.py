"""WAV output for finished recordings using soundfile."""

import logging
from pathlib import Path

import soundfile as sf

from voice_recorder.core.models import TrimmedClip
from voice_recorder.exceptions import AudioWriteError

logger = logging.getLogger(__name__)


class WavClipEncoder:
    """Persists trimmed clips as uncompressed PCM WAV files.

    Args:
        subtype: soundfile PCM subtype used for every file (default: 16-bit).

    Example:
        encoder = WavClipEncoder()
        encoder.save(Path("Recordings/recording.wav"), clip)
    """

    def __init__(self, subtype: str = "PCM_16") -> None:
        self._subtype = subtype

    def save(self, path: Path, clip: TrimmedClip) -> None:
        """Write a clip to path, creating its directory if needed.

        An existing file at path is replaced.

        Raises:
            AudioWriteError: If the directory or file cannot be written.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise AudioWriteError(f"Failed to create {path.parent}: {e}") from e

        try:
            sf.write(path, clip.samples, clip.sample_rate, subtype=self._subtype, format="WAV")
        except (sf.SoundFileError, OSError) as e:
            raise AudioWriteError(f"Failed to write {path}: {e}") from e
        logger.info("Saved %s (%.2f seconds, %d samples)", path, clip.duration, clip.frame_count)
