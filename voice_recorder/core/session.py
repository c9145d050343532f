"""Recording session orchestration.

This module provides the RecordingSession state machine that owns one
microphone capture at a time, enforces the maximum recording length through
an externally driven countdown, and trims and saves the capture on stop.
"""

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path

from voice_recorder.config import RecorderConfig
from voice_recorder.core.models import (
    ActiveRecording,
    Device,
    RecordingResult,
    SessionState,
    TrimmedClip,
)
from voice_recorder.core.protocols import CaptureSource, ClipEncoder, DeviceProvider
from voice_recorder.core.trimming import build_clip, clamp_elapsed, compute_sample_count
from voice_recorder.exceptions import (
    AudioCaptureError,
    AudioWriteError,
    CaptureUnavailableError,
    EmptyRecordingError,
    NoDeviceAvailableError,
    VoiceRecorderError,
)

logger = logging.getLogger(__name__)


class RecordingSession:
    """Single-capture recording session.

    The session is Idle until start() opens the default microphone, and
    returns to Idle on stop(), whether called by the user or triggered by
    tick() once the countdown runs out. Every stop releases the device and
    attempts to save, regardless of earlier failures.

    Args:
        catalog: Device discovery, queried on every start().
        capture_factory: Creates a fresh capture primitive per session.
        encoder: Persists the trimmed clip.
        config: Recorder configuration.
        clock: Monotonic time source in seconds.

    Example:
        session = RecordingSession.from_config(RecorderConfig())
        session.file_name = "take-1"
        session.start()
        while session.is_recording:
            session.tick(frame_delta)
        result = session.last_result
    """

    def __init__(
        self,
        catalog: DeviceProvider,
        capture_factory: Callable[[], CaptureSource],
        encoder: ClipEncoder,
        config: RecorderConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or RecorderConfig()
        self._catalog = catalog
        self._capture_factory = capture_factory
        self._encoder = encoder
        self._clock = clock
        self._lock = threading.RLock()
        self._active: ActiveRecording | None = None
        self._file_name = self._config.storage.file_name
        self.last_result: RecordingResult | None = None

    @classmethod
    def from_config(cls, config: RecorderConfig) -> "RecordingSession":
        """Build a session backed by sounddevice capture and WAV output."""
        from voice_recorder.sources.catalog import DeviceCatalog
        from voice_recorder.sources.microphone import MicrophoneCapture
        from voice_recorder.writers.wav_writer import WavClipEncoder

        return cls(
            catalog=DeviceCatalog(config.capture.candidate_rates),
            capture_factory=lambda: MicrophoneCapture(config.capture),
            encoder=WavClipEncoder(config.storage.subtype),
            config=config,
        )

    @property
    def state(self) -> SessionState:
        """Current lifecycle state."""
        with self._lock:
            return SessionState.IDLE if self._active is None else SessionState.RECORDING

    @property
    def is_recording(self) -> bool:
        return self.state is SessionState.RECORDING

    @property
    def device(self) -> Device | None:
        """Device held by the active recording."""
        with self._lock:
            return None if self._active is None else self._active.device

    @property
    def started_at(self) -> float | None:
        with self._lock:
            return None if self._active is None else self._active.started_at

    @property
    def remaining_seconds(self) -> float | None:
        """Countdown until the automatic stop, or None when idle."""
        with self._lock:
            return None if self._active is None else self._active.remaining_seconds

    @property
    def file_name(self) -> str:
        """Name of the WAV file written on stop (without extension)."""
        return self._file_name

    @file_name.setter
    def file_name(self, value: str) -> None:
        if not value:
            raise ValueError("file_name must not be empty")
        self._file_name = value

    @property
    def output_path(self) -> Path:
        """Where the next stop will save the recording."""
        return self._config.storage.path_for(self._file_name)

    def start(self) -> Device:
        """Start recording from the default microphone.

        Does nothing if a recording is already in progress.

        Returns:
            The device being recorded.

        Raises:
            NoDeviceAvailableError: If no microphone is connected.
            AudioCaptureError: If the capture stream cannot be opened.
        """
        with self._lock:
            if self._active is not None:
                logger.debug("Already recording on %s", self._active.device.name)
                return self._active.device

            device = self._catalog.select_default()
            if device is None:
                logger.error("Failed to start recording. No microphone detected!")
                raise NoDeviceAvailableError("microphone")

            logger.info(
                "Using microphone [%s] with frequency: [%d] - [%d]",
                device.name,
                device.min_frequency,
                device.max_frequency,
            )

            max_seconds = self._config.capture.max_recording_seconds
            sample_rate = device.sample_rate(self._config.capture.fallback_sample_rate)
            capture = self._capture_factory()
            try:
                capture.open(device, max_seconds, sample_rate)
            except AudioCaptureError:
                capture.close()
                raise

            self._active = ActiveRecording(
                device=device,
                started_at=self._clock(),
                remaining_seconds=float(max_seconds),
                sample_rate=sample_rate,
                capture=capture,
            )
            logger.info("Recording started (%d Hz, up to %d seconds)", sample_rate, max_seconds)
            return device

    def tick(self, delta_seconds: float) -> RecordingResult | None:
        """Advance the countdown, stopping automatically when it expires.

        Args:
            delta_seconds: Time since the previous tick.

        Returns:
            The stop result if this tick ended the recording, otherwise None.
        """
        with self._lock:
            if self._active is None:
                return None

            self._active.remaining_seconds -= delta_seconds
            if self._active.remaining_seconds > 0:
                return None

            logger.warning(
                "Recording exceeded maximum length (%d seconds), stopping and saving",
                self._config.capture.max_recording_seconds,
            )
            clip, error, path = self._finish(self._active)

        return self._save(clip, error, path, automatic=True)

    def stop(self) -> RecordingResult | None:
        """Stop recording and save the trimmed clip.

        Errors are reported in the returned result rather than raised. The
        device is released and the session is Idle afterwards in every case.

        Returns:
            The stop result, or None if nothing was recording.
        """
        with self._lock:
            if self._active is None:
                return None
            clip, error, path = self._finish(self._active)

        return self._save(clip, error, path, automatic=False)

    def _finish(
        self, active: ActiveRecording
    ) -> tuple[TrimmedClip | None, VoiceRecorderError | None, Path]:
        """Extract the recorded window, release the device and go Idle.

        Must be called with the lock held. A failure while releasing the
        device is logged; the session is Idle regardless.
        """
        path = self.output_path
        clip: TrimmedClip | None = None
        error: VoiceRecorderError | None = None

        try:
            elapsed = clamp_elapsed(
                self._clock() - active.started_at,
                self._config.capture.max_recording_seconds,
            )
            capture = active.capture
            if capture.buffer is None:
                raise CaptureUnavailableError(
                    f"Capture buffer for {active.device.name} is missing"
                )
            count = compute_sample_count(elapsed, active.sample_rate, capture.capacity)
            if count == 0:
                raise EmptyRecordingError(elapsed)
            clip = build_clip(capture.read_samples(count), active.sample_rate)
            logger.debug("Extracted %d samples (%.3f seconds)", count, elapsed)
        except (CaptureUnavailableError, EmptyRecordingError) as e:
            error = e
        finally:
            self._active = None
            try:
                active.capture.close()
            except Exception as e:
                logger.error("Error releasing %s: %s", active.device.name, e)
            logger.info("Recording stopped")

        return clip, error, path

    def _save(
        self,
        clip: TrimmedClip | None,
        error: VoiceRecorderError | None,
        path: Path,
        automatic: bool,
    ) -> RecordingResult:
        """Hand the clip to the encoder and record the outcome."""
        if error is None and clip is not None:
            try:
                self._encoder.save(path, clip)
            except AudioWriteError as e:
                error = e
            except OSError as e:
                error = AudioWriteError(f"Failed to save {path}: {e}")

        if isinstance(error, EmptyRecordingError):
            logger.warning("Nothing recorded, no file written: %s", error)
        elif error is not None:
            logger.error("Recording not saved: %s", error)
        else:
            logger.info("Recording saved to %s", path)

        result = RecordingResult(
            clip=clip,
            path=path if error is None else None,
            error=error,
            automatic=automatic,
        )
        self.last_result = result
        return result
