"""Shared fixtures: deterministic clock and in-memory collaborators.

The fakes stand in for the sounddevice catalog, the capture primitive and
the WAV encoder so the session state machine can be tested without audio
hardware.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from voice_recorder.config import CaptureConfig, RecorderConfig, StorageConfig
from voice_recorder.core.models import Device, TrimmedClip
from voice_recorder.core.session import RecordingSession
from voice_recorder.exceptions import AudioCaptureError, CaptureUnavailableError

CAPTURED_LEVEL = 0.25


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCatalog:
    def __init__(self, devices: list[Device] | None = None) -> None:
        self.devices = list(devices or [])
        self.queries = 0

    def list_devices(self) -> list[Device]:
        self.queries += 1
        return list(self.devices)

    def select_default(self) -> Device | None:
        devices = self.list_devices()
        return devices[0] if devices else None


class FakeCapture:
    """Capture primitive whose buffer reads back a constant level.

    The full-length buffer is never materialised; only the capacity is tracked.
    """

    def __init__(
        self, fail_open: bool = False, lose_buffer: bool = False, fail_close: bool = False
    ) -> None:
        self.fail_open = fail_open
        self.fail_close = fail_close
        self.lose_buffer = lose_buffer
        self.device: Device | None = None
        self.max_duration_seconds = 0
        self._sample_rate = 0
        self._open = False
        self.close_calls = 0
        self.reads: list[int] = []

    @property
    def buffer(self) -> np.ndarray | None:
        if not self._open or self.lose_buffer:
            return None
        return np.zeros(0, dtype=np.float32)

    @property
    def capacity(self) -> int:
        return self.max_duration_seconds * self._sample_rate if self._open else 0

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self, device: Device, max_duration_seconds: int, sample_rate: int) -> None:
        if self.fail_open:
            raise AudioCaptureError(f"cannot open {device.name}")
        self.device = device
        self.max_duration_seconds = max_duration_seconds
        self._sample_rate = sample_rate
        self._open = True

    def close(self) -> None:
        self.close_calls += 1
        self._open = False
        if self.fail_close:
            raise RuntimeError("driver crashed while releasing")

    def read_samples(self, count: int) -> np.ndarray:
        if self.buffer is None:
            raise CaptureUnavailableError("closed")
        self.reads.append(count)
        return np.full(min(count, self.capacity), CAPTURED_LEVEL, dtype=np.float32)


class FakeEncoder:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.saved: list[tuple[Path, TrimmedClip]] = []

    def save(self, path: Path, clip: TrimmedClip) -> None:
        if self.error is not None:
            raise self.error
        self.saved.append((path, clip))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def microphone() -> Device:
    return Device(index=3, name="USB Mic", min_frequency=8000, max_frequency=48000)


@pytest.fixture
def catalog(microphone: Device) -> FakeCatalog:
    return FakeCatalog([microphone])


@pytest.fixture
def encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture
def captures() -> list[FakeCapture]:
    """Every capture handed out by the session's factory, in order."""
    return []


@pytest.fixture
def recorder_config(tmp_path: Path) -> RecorderConfig:
    return RecorderConfig(
        capture=CaptureConfig(),
        storage=StorageConfig(storage_root=tmp_path, file_name="test"),
    )


@pytest.fixture
def make_session(
    catalog: FakeCatalog,
    encoder: FakeEncoder,
    clock: FakeClock,
    captures: list[FakeCapture],
    recorder_config: RecorderConfig,
) -> Callable[..., RecordingSession]:
    def factory(**capture_kwargs: bool) -> RecordingSession:
        def new_capture() -> FakeCapture:
            capture = FakeCapture(**capture_kwargs)
            captures.append(capture)
            return capture

        return RecordingSession(
            catalog=catalog,
            capture_factory=new_capture,
            encoder=encoder,
            config=recorder_config,
            clock=clock,
        )

    return factory


@pytest.fixture
def session(make_session: Callable[..., RecordingSession]) -> RecordingSession:
    return make_session()
