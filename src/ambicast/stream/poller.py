"""
Poller
======

Drives the sampling cadence and fans frames out to every Sender.

Each iteration:
    1. If the topology is unknown, fetch it. On failure broadcast
       UNAVAILABLE, back off and start over.
    2. Fetch the current colors. On failure forget the topology,
       broadcast UNAVAILABLE, back off and start over.
    3. Encode and broadcast a DATA frame, then wait in ~1 ms steps until
       the refresh interval has elapsed since the iteration started.

Pacing measures elapsed time instead of using a fixed-rate timer, so a
slow sampler delays the next frame rather than causing a burst. Drift is
not corrected.
"""

import logging
import threading
import time
from typing import Optional, Sequence

from ambicast.errors import SamplingError
from ambicast.models.ambilight import Topology
from ambicast.sampler.base import Sampler
from ambicast.stream.codec import encode_data, encode_unavailable
from ambicast.stream.sender import DELAY_UNAVAILABLE, Sender


logger = logging.getLogger(__name__)


# Granularity of the pacing wait (seconds)
PACING_STEP = 0.001


class PollerMetrics:
    """Metrics for Poller observability."""

    __slots__ = (
        "available",
        "data_frames",
        "unavailable_frames",
        "sampling_errors",
    )

    def __init__(self) -> None:
        self.available: bool = False
        self.data_frames: int = 0
        self.unavailable_frames: int = 0
        self.sampling_errors: int = 0

    def to_dict(self) -> dict:
        return {
            "available": self.available,
            "data_frames": self.data_frames,
            "unavailable_frames": self.unavailable_frames,
            "sampling_errors": self.sampling_errors,
        }


class Poller(threading.Thread):
    """
    Polls the sampler and broadcasts encoded frames.

    The topology is kept local to run(); nothing outside this thread
    sees or mutates it.

    Example:
        poller = Poller(sampler, senders, refresh_rate_ms=33)
        poller.start()

        # Later
        poller.stop()
        poller.join()
    """

    def __init__(
        self,
        sampler: Sampler,
        senders: Sequence[Sender],
        refresh_rate_ms: int,
        unavailable_delay: float = DELAY_UNAVAILABLE,
    ) -> None:
        """
        Initialize poller.

        Args:
            sampler: Source of topology and color frames
            senders: Senders to broadcast to (may be empty)
            refresh_rate_ms: Target time between DATA frames
            unavailable_delay: Seconds to back off after a sampling failure
        """
        super().__init__(name="Poller")
        self.sampler = sampler
        self.senders = list(senders)
        self.refresh_interval = refresh_rate_ms / 1000.0
        self.unavailable_delay = unavailable_delay

        self._stop_event = threading.Event()
        self.metrics = PollerMetrics()

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Signal the loop to exit; interrupts any backoff or pacing wait."""
        self._stop_event.set()

    def broadcast(self, frame: bytes) -> None:
        for sender in self.senders:
            sender.post(frame)

    def run(self) -> None:
        logger.info("Poller thread has been started.")

        topology: Optional[Topology] = None

        while not self._stop_event.is_set():
            started = time.monotonic()

            if topology is None:
                try:
                    topology = self.sampler.get_topology()
                except SamplingError as e:
                    logger.debug(f"Topology unavailable: {e}")
                    self._unavailable()
                    continue
                except Exception as e:
                    logger.error(f"Unexpected sampler error: {e}", exc_info=True)
                    self._unavailable()
                    continue

                self.metrics.available = True
                logger.info(f"Ambilight service is now available: {topology}")

            try:
                layer_set = self.sampler.get_frame()
            except Exception as e:
                topology = None
                self.metrics.available = False
                logger.info("Ambilight service is unavailable.")
                if isinstance(e, SamplingError):
                    logger.debug(f"Frame unavailable: {e}")
                else:
                    logger.error(f"Unexpected sampler error: {e}", exc_info=True)
                self._unavailable()
                continue

            if self._stop_event.is_set():
                break

            self.broadcast(encode_data(topology, layer_set))
            self.metrics.data_frames += 1

            self._pace(started)

        logger.info("Poller thread exited.")

    def _unavailable(self) -> None:
        self.metrics.sampling_errors += 1
        if self._stop_event.is_set():
            return
        self.broadcast(encode_unavailable())
        self.metrics.unavailable_frames += 1
        self._stop_event.wait(self.unavailable_delay)

    def _pace(self, started: float) -> None:
        while (
            not self._stop_event.is_set()
            and time.monotonic() - started < self.refresh_interval
        ):
            self._stop_event.wait(PACING_STEP)
