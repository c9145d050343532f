"""Command-line interface for the voice recorder.

This module provides the main entry point and argument parsing
for the voice recorder CLI tool.
"""

import argparse
import logging
import signal
import sys
import time
from pathlib import Path
from types import FrameType
from typing import Any

from voice_recorder import __version__
from voice_recorder.config import CaptureConfig, RecorderConfig, StorageConfig
from voice_recorder.core.models import RecordingResult
from voice_recorder.core.session import RecordingSession
from voice_recorder.exceptions import VoiceRecorderError

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0 / 30


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity setting."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def list_devices(config: CaptureConfig) -> int:
    """Print all connected capture devices."""
    from voice_recorder.sources.catalog import DeviceCatalog

    print("Available Microphones")
    print("=" * 50)

    lines = DeviceCatalog(config.candidate_rates).describe_devices()
    if not lines:
        print("  No microphone detected")
    for line in lines:
        print(f"  {line}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="voice-recorder",
        description="Record the default microphone into a trimmed WAV file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Record until Ctrl+C (or the 10 minute ceiling)
  voice-recorder -n interview

  # List available microphones
  voice-recorder --list-devices

  # Timed recording into a custom storage root
  voice-recorder -n memo --storage-root ~/voice --duration 30
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-n",
        "--name",
        type=str,
        default="recording",
        help="Recording file name without extension (default: recording)",
    )

    parser.add_argument(
        "--storage-root",
        type=Path,
        default=Path.cwd(),
        metavar="DIR",
        help="Persistent storage root; files go to DIR/Recordings (default: cwd)",
    )

    parser.add_argument(
        "--list-devices",
        action="store_true",
        help="List available microphones and exit",
    )

    recording_group = parser.add_argument_group("Recording Options")
    recording_group.add_argument(
        "--duration",
        type=float,
        default=None,
        metavar="SECS",
        help="Stop after this many seconds (default: until Ctrl+C)",
    )
    recording_group.add_argument(
        "--max-seconds",
        type=int,
        default=600,
        metavar="SECS",
        help="Hard ceiling on recording length (default: 600)",
    )
    recording_group.add_argument(
        "--fallback-rate",
        type=int,
        default=48000,
        metavar="HZ",
        help="Sample rate when the device reports no limit (default: 48000)",
    )
    recording_group.add_argument(
        "--subtype",
        type=str,
        choices=["PCM_16", "PCM_24", "PCM_32", "PCM_U8"],
        default="PCM_16",
        help="WAV sample format (default: PCM_16)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Raises:
        ValueError: If arguments are invalid.
    """
    if not args.name:
        raise ValueError("Recording name must not be empty")

    if args.duration is not None and args.duration <= 0:
        raise ValueError(f"Duration must be positive, got {args.duration}")

    if args.max_seconds <= 0:
        raise ValueError(f"Maximum length must be positive, got {args.max_seconds}")

    if args.fallback_rate <= 0:
        raise ValueError(f"Fallback rate must be positive, got {args.fallback_rate}")


def build_config(args: argparse.Namespace) -> RecorderConfig:
    """Build recorder configuration from arguments."""
    return RecorderConfig(
        capture=CaptureConfig(
            max_recording_seconds=args.max_seconds,
            fallback_sample_rate=args.fallback_rate,
        ),
        storage=StorageConfig(
            storage_root=args.storage_root,
            file_name=args.name,
            subtype=args.subtype,
        ),
        verbose=args.verbose,
    )


class SessionRunner:
    """Drives a session's countdown until it stops.

    Installs SIGINT/SIGTERM handlers so Ctrl+C ends the recording and saves it.
    """

    def __init__(self, session: RecordingSession, duration: float | None = None) -> None:
        self._session = session
        self._duration = duration
        self._running = False
        self._original_sigint: Any = None
        self._original_sigterm: Any = None

    def _setup_signal_handlers(self) -> None:
        """Install signal handlers for graceful shutdown."""

        def handler(signum: int, frame: FrameType | None) -> None:
            sig_name = signal.Signals(signum).name
            logger.info("Received %s, stopping recording...", sig_name)
            self._running = False

        self._original_sigint = signal.signal(signal.SIGINT, handler)
        self._original_sigterm = signal.signal(signal.SIGTERM, handler)

    def _restore_signal_handlers(self) -> None:
        """Restore original signal handlers."""
        if self._original_sigint is not None:
            signal.signal(signal.SIGINT, self._original_sigint)
        if self._original_sigterm is not None:
            signal.signal(signal.SIGTERM, self._original_sigterm)

    def run(self) -> RecordingResult | None:
        """Start recording and tick until stopped.

        Raises:
            NoDeviceAvailableError: If no microphone is connected.
        """
        self._session.start()
        self._setup_signal_handlers()
        self._running = True

        start_time = last = time.monotonic()
        result = None
        try:
            logger.info("Recording... Press Ctrl+C to stop")
            while self._running:
                now = time.monotonic()
                result = self._session.tick(now - last)
                last = now
                if result is not None:
                    break
                if self._duration is not None and now - start_time >= self._duration:
                    logger.info("Duration limit reached (%.1f seconds)", now - start_time)
                    break
                time.sleep(TICK_INTERVAL)
        finally:
            self._running = False
            if self._session.is_recording:
                result = self._session.stop()
            self._restore_signal_handlers()

        return result


def main() -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args()

    setup_logging(args.verbose)

    try:
        validate_args(args)
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.list_devices:
        try:
            return list_devices(config.capture)
        except (VoiceRecorderError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    try:
        session = RecordingSession.from_config(config)
        result = SessionRunner(session, duration=args.duration).run()
    except VoiceRecorderError as e:
        logger.error("Recording failed: %s", e)
        return 1
    except OSError as e:  # PortAudio shared library missing
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if result is None or not result.ok:
        return 1
    print(result.path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
