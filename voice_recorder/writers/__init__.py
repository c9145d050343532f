"""Audio file writers."""

from voice_recorder.writers.wav_writer import WavClipEncoder

__all__ = ["WavClipEncoder"]
