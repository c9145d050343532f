"""Microphone capture into a fixed-capacity buffer using sounddevice.

The buffer is allocated for the full session length up front and filled from
the PortAudio callback thread. Capture never wraps: once the buffer is full,
further blocks are dropped.
"""

import logging
import threading
from typing import Any

import numpy as np
import sounddevice as sd
from numpy.typing import NDArray

from voice_recorder.config import CaptureConfig
from voice_recorder.core.models import Device
from voice_recorder.exceptions import AudioCaptureError, CaptureUnavailableError

logger = logging.getLogger(__name__)


class MicrophoneCapture:
    """Captures mono audio from one device into a preallocated buffer.

    Args:
        config: Capture configuration (block size, dtype).

    Example:
        capture = MicrophoneCapture(config)
        capture.open(device, max_duration_seconds=600, sample_rate=48000)
        try:
            ...
            samples = capture.read_samples(count)
        finally:
            capture.close()
    """

    def __init__(self, config: CaptureConfig | None = None) -> None:
        self._config = config or CaptureConfig()
        self._lock = threading.Lock()
        self._stream: sd.InputStream | None = None
        self._buffer: NDArray[np.float32] | None = None
        self._cursor = 0
        self._sample_rate = 0
        self._device_name = ""
        self._dropped_blocks = 0

    @property
    def buffer(self) -> NDArray[np.float32] | None:
        """The capture buffer, or None when nothing is open."""
        return self._buffer

    @property
    def capacity(self) -> int:
        """Buffer size in samples."""
        return 0 if self._buffer is None else len(self._buffer)

    @property
    def sample_rate(self) -> int:
        """Requested capture rate in Hz."""
        return self._sample_rate

    @property
    def frames_written(self) -> int:
        """Position of the write cursor."""
        with self._lock:
            return self._cursor

    @property
    def is_active(self) -> bool:
        """Whether the stream is currently capturing audio."""
        return self._stream is not None and self._stream.active

    def _audio_callback(
        self,
        indata: NDArray[np.float32],
        frames: int,
        time_info: Any,
        status: sd.CallbackFlags,
    ) -> None:
        """Callback invoked by sounddevice when audio data is available.

        This runs in a separate thread - must be thread-safe and fast.
        """
        if status.input_overflow:
            logger.warning("Input overflow on %s", self._device_name)

        with self._lock:
            if self._buffer is None:
                return
            room = len(self._buffer) - self._cursor
            count = min(frames, room)
            if count > 0:
                self._buffer[self._cursor : self._cursor + count] = indata[:count, 0]
                self._cursor += count
            if count < frames:
                self._dropped_blocks += 1
                if self._dropped_blocks % 10 == 1:  # Log every 10th drop
                    logger.warning(
                        "Capture buffer full on %s (dropped blocks: %d)",
                        self._device_name,
                        self._dropped_blocks,
                    )

    def open(self, device: Device, max_duration_seconds: int, sample_rate: int) -> None:
        """Allocate the buffer and start capturing from a device.

        Args:
            device: Device to capture from.
            max_duration_seconds: Buffer length in seconds.
            sample_rate: Requested sample rate in Hz.

        Raises:
            AudioCaptureError: If the stream cannot be opened.
        """
        if self._stream is not None:
            logger.warning("Capture on %s already open", self._device_name)
            return

        with self._lock:
            self._buffer = np.zeros(max_duration_seconds * sample_rate, dtype=np.float32)
            self._cursor = 0
            self._dropped_blocks = 0
        self._sample_rate = sample_rate
        self._device_name = device.name

        try:
            self._stream = sd.InputStream(
                device=device.index,
                samplerate=sample_rate,
                channels=self._config.channels,
                dtype=self._config.dtype,
                blocksize=self._config.block_size,
                callback=self._audio_callback,
            )
            self._stream.start()
            logger.info("Started capture from %s (index %d)", device.name, device.index)
        except sd.PortAudioError as e:
            if self._stream is not None:
                try:
                    self._stream.close()
                except sd.PortAudioError as close_error:
                    logger.error("Error closing stream %s: %s", device.name, close_error)
            self._stream = None
            with self._lock:
                self._buffer = None
            raise AudioCaptureError(f"Failed to start capture from {device.name}: {e}") from e

    def close(self) -> None:
        """Stop capturing and release the device."""
        with self._lock:
            self._buffer = None

        if self._stream is None:
            return

        try:
            self._stream.stop()
            self._stream.close()
        except sd.PortAudioError as e:
            logger.error("Error stopping stream %s: %s", self._device_name, e)
        finally:
            self._stream = None
            logger.info("Stopped capture from %s", self._device_name)

    def read_samples(self, count: int) -> NDArray[np.float32]:
        """Copy samples from the start of the buffer.

        Args:
            count: Number of samples to read, clamped to the capacity.

        Raises:
            CaptureUnavailableError: If no buffer is allocated.
        """
        with self._lock:
            if self._buffer is None:
                raise CaptureUnavailableError(f"No capture buffer for {self._device_name}")
            count = max(0, min(count, len(self._buffer)))
            return self._buffer[:count].copy()
