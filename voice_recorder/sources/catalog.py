"""Capture device discovery using sounddevice.

This module enumerates the input-capable devices reported by PortAudio and
checks the sample rates each of them accepts. Nothing is cached: every call
re-queries the host so hot-plugged microphones show up on the next session.
"""

import logging

import sounddevice as sd

from voice_recorder.config import STANDARD_SAMPLE_RATES
from voice_recorder.core.models import Device

logger = logging.getLogger(__name__)


class DeviceCatalog:
    """Enumerates capture devices and their sample-rate range.

    Args:
        candidate_rates: Sample rates to try against each device.

    Example:
        catalog = DeviceCatalog()
        device = catalog.select_default()
        if device is None:
            ...  # no microphone plugged in
    """

    def __init__(self, candidate_rates: tuple[int, ...] = STANDARD_SAMPLE_RATES) -> None:
        self._candidate_rates = tuple(sorted(candidate_rates))

    def _query_input_devices(self) -> list[dict]:
        """Get all devices with input capability, in host order."""
        try:
            devices = sd.query_devices()
        except sd.PortAudioError as e:
            logger.error("Failed to query audio devices: %s", e)
            return []

        if isinstance(devices, dict):
            devices = [devices]

        return [
            {**d, "index": i}
            for i, d in enumerate(devices)
            if d.get("max_input_channels", 0) > 0
        ]

    def _supported_frequencies(self, index: int) -> tuple[int, int]:
        """Find the lowest and highest sample rates a device accepts.

        Returns:
            (min_frequency, max_frequency), or (0, 0) if no rate was accepted.
        """
        supported = []
        for rate in self._candidate_rates:
            try:
                sd.check_input_settings(device=index, samplerate=rate, channels=1)
            except (sd.PortAudioError, ValueError):
                continue
            supported.append(rate)

        if not supported:
            return 0, 0
        return supported[0], supported[-1]

    def list_devices(self) -> list[Device]:
        """List connected capture devices.

        Returns:
            Devices in the order the host reports them. Empty if none are
            connected; that is not an error.
        """
        devices = []
        for d in self._query_input_devices():
            min_freq, max_freq = self._supported_frequencies(d["index"])
            devices.append(
                Device(
                    index=d["index"],
                    name=d["name"],
                    min_frequency=min_freq,
                    max_frequency=max_freq,
                    input_channels=d.get("max_input_channels", 1),
                )
            )
        return devices

    def select_default(self) -> Device | None:
        """Return the first enumerated device, or None when there is none."""
        devices = self.list_devices()
        if not devices:
            logger.error("No microphone detected!")
            return None
        return devices[0]

    def describe_devices(self) -> list[str]:
        """Describe every connected device for operator tooling."""
        logger.info("Listing all connected microphone devices:")
        lines = []
        for i, device in enumerate(self.list_devices()):
            line = f"#{i}: {device}"
            logger.info("%s", line)
            lines.append(line)
        return lines
