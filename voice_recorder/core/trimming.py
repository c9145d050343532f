"""Sample-window arithmetic for trimming a capture buffer.

The number of valid samples is derived from elapsed wall-clock time and the
requested sample rate, not from the capture's write cursor.
"""

import math

import numpy as np
from numpy.typing import NDArray

from voice_recorder.core.models import TrimmedClip


def clamp_elapsed(elapsed_seconds: float, max_seconds: float) -> float:
    """Clamp an elapsed duration to [0, max_seconds]."""
    return min(max(elapsed_seconds, 0.0), float(max_seconds))


def compute_sample_count(elapsed_seconds: float, sample_rate: int, capacity: int) -> int:
    """Number of samples recorded in elapsed_seconds at sample_rate.

    Args:
        elapsed_seconds: Time since capture began.
        sample_rate: Requested capture rate in Hz.
        capacity: Buffer size in samples.

    Returns:
        floor(elapsed_seconds * sample_rate), clamped to [0, capacity].
    """
    count = math.floor(elapsed_seconds * sample_rate)
    return max(0, min(count, capacity))


def build_clip(samples: NDArray[np.float32], sample_rate: int) -> TrimmedClip:
    """Wrap extracted samples as a mono clip, bounded to [-1.0, 1.0]."""
    data = np.clip(np.asarray(samples, dtype=np.float32).reshape(-1), -1.0, 1.0)
    return TrimmedClip(sample_rate=sample_rate, samples=data)
