from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from voice_recorder.config import RecorderConfig, StorageConfig
from voice_recorder.core.models import TrimmedClip
from voice_recorder.core.session import RecordingSession
from voice_recorder.exceptions import AudioWriteError
from voice_recorder.writers.wav_writer import WavClipEncoder


def _tone(frames: int, sample_rate: int) -> np.ndarray:
    t = np.arange(frames, dtype=np.float32) / sample_rate
    return (0.5 * np.sin(2 * np.pi * 440.0 * t)).astype(np.float32)


def test_encoder_writes_mono_pcm_wav(tmp_path: Path) -> None:
    path = tmp_path / "Recordings" / "clip.wav"
    clip = TrimmedClip(sample_rate=22050, samples=_tone(2205, 22050))

    WavClipEncoder().save(path, clip)

    info = sf.info(str(path))
    assert info.format == "WAV"
    assert info.subtype == "PCM_16"
    assert info.channels == 1
    assert info.samplerate == 22050
    assert info.frames == 2205
    data, _ = sf.read(str(path), dtype="float32")
    np.testing.assert_allclose(data, clip.samples, atol=1e-4)


def test_encoder_reports_unwritable_location(tmp_path: Path) -> None:
    blocker = tmp_path / "Recordings"
    blocker.write_text("not a directory")
    clip = TrimmedClip(sample_rate=8000, samples=_tone(80, 8000))

    with pytest.raises(AudioWriteError):
        WavClipEncoder().save(blocker / "clip.wav", clip)


def test_encoder_replaces_existing_file(tmp_path: Path) -> None:
    path = tmp_path / "clip.wav"
    WavClipEncoder().save(path, TrimmedClip(sample_rate=8000, samples=_tone(8000, 8000)))

    WavClipEncoder().save(path, TrimmedClip(sample_rate=16000, samples=_tone(400, 16000)))

    info = sf.info(str(path))
    assert info.frames == 400
    assert info.samplerate == 16000


def test_encoder_reports_file_write_failure(tmp_path: Path) -> None:
    target = tmp_path / "clip.wav"
    target.mkdir()
    clip = TrimmedClip(sample_rate=8000, samples=_tone(80, 8000))

    with pytest.raises(AudioWriteError, match="Failed to write"):
        WavClipEncoder().save(target, clip)


def test_session_saves_trimmed_wav(tmp_path: Path, catalog, clock, captures) -> None:
    from conftest import FakeCapture

    def new_capture() -> FakeCapture:
        capture = FakeCapture()
        captures.append(capture)
        return capture

    session = RecordingSession(
        catalog=catalog,
        capture_factory=new_capture,
        encoder=WavClipEncoder(),
        config=RecorderConfig(storage=StorageConfig(storage_root=tmp_path, file_name="test")),
        clock=clock,
    )
    session.start()
    clock.advance(2.5)
    session.tick(2.5)

    result = session.stop()

    assert result.ok
    assert result.path == tmp_path / "Recordings" / "test.wav"
    info = sf.info(str(result.path))
    assert info.frames == 120000
    assert info.samplerate == 48000
    assert info.channels == 1
