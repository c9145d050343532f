"""Bounded-length microphone recorder that saves trimmed WAV files."""

__version__ = "0.1.0"
