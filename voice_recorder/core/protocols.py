"""Protocol definitions for voice recording components.

These protocols define the contracts that device catalogs, capture sources
and clip encoders must implement, following the Dependency Inversion Principle.
"""

from pathlib import Path
from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from voice_recorder.core.models import Device, TrimmedClip


class DeviceProvider(Protocol):
    """Protocol for capture device discovery."""

    def list_devices(self) -> list[Device]:
        """List connected capture devices (empty when there are none)."""
        ...

    def select_default(self) -> Device | None:
        """Return the device to record from, or None."""
        ...


class CaptureSource(Protocol):
    """Protocol for capture primitives.

    Implementations write mono samples into a buffer sized for the whole
    session and expose it for extraction from offset 0.
    """

    @property
    def buffer(self) -> NDArray[np.float32] | None:
        """The capture buffer, or None when capture is unavailable."""
        ...

    @property
    def capacity(self) -> int:
        """Buffer size in samples."""
        ...

    @property
    def sample_rate(self) -> int:
        """Requested capture rate in Hz."""
        ...

    def open(self, device: Device, max_duration_seconds: int, sample_rate: int) -> None:
        """Start capturing from a device.

        Raises:
            AudioCaptureError: If capture cannot be started.
        """
        ...

    def close(self) -> None:
        """Stop capturing and release the device."""
        ...

    def read_samples(self, count: int) -> NDArray[np.float32]:
        """Copy count samples from the start of the buffer.

        Raises:
            CaptureUnavailableError: If no buffer is allocated.
        """
        ...


class ClipEncoder(Protocol):
    """Protocol for persisting trimmed clips."""

    def save(self, path: Path, clip: TrimmedClip) -> None:
        """Write the clip to path.

        Raises:
            AudioWriteError: If writing fails.
        """
        ...
