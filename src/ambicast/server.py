"""
AmbiCast Server
===============

Composition root of the relay.

Startup:
    1. Discover multicast capable interfaces
    2. Create one Sender per interface, then start them all
    3. Create and start the Poller with all senders

Shutdown (synchronous, in this order):
    1. Stop the Poller and wait for it to exit
    2. Stop each Sender and wait for it to exit

Stopping the Poller first guarantees nothing is posted to a Sender that
is being torn down.
"""

import logging
import threading
from typing import Callable, List, Optional, Sequence

from ambicast.network.discovery import Interface, discover
from ambicast.sampler.base import Sampler
from ambicast.stream.poller import Poller
from ambicast.stream.sender import DELAY_UNAVAILABLE, Sender


logger = logging.getLogger(__name__)


SenderFactory = Callable[[Interface], Sender]


class AmbiCastServer:
    """
    Relays sampled Ambilight frames to a multicast group on every interface.

    Example:
        server = AmbiCastServer(sampler, "237.36.35.34", 41414, refresh_rate_ms=33)
        server.start()

        # On SIGTERM
        server.shutdown()

    Or as a context manager:
        with AmbiCastServer(sampler, "237.36.35.34", 41414, 33):
            wait_for_signal()
    """

    def __init__(
        self,
        sampler: Sampler,
        group_address: str,
        port: int,
        refresh_rate_ms: int,
        ttl: int = 1,
        interfaces: Optional[Sequence[Interface]] = None,
        sender_factory: Optional[SenderFactory] = None,
        unavailable_delay: float = DELAY_UNAVAILABLE,
    ) -> None:
        """
        Initialize server.

        Args:
            sampler: Source of topology and color frames
            group_address: Multicast group address
            port: Multicast port
            refresh_rate_ms: Target time between frames in milliseconds
            ttl: Multicast TTL
            interfaces: Interfaces to send on. If None, discovered at start().
            sender_factory: Builds a Sender for an interface. Defaults to
                a Sender opening its own multicast socket.
            unavailable_delay: Backoff in seconds after any failure
        """
        self.sampler = sampler
        self.group_address = group_address
        self.port = port
        self.refresh_rate_ms = refresh_rate_ms
        self.ttl = ttl
        self.unavailable_delay = unavailable_delay

        self._interfaces = list(interfaces) if interfaces is not None else None
        self._sender_factory = sender_factory or self._default_sender

        self.senders: List[Sender] = []
        self.poller: Optional[Poller] = None

        self._lock = threading.Lock()
        self._started = False
        self._shut_down = False

    def start(self) -> None:
        """Start one sender per interface, then the poller."""
        with self._lock:
            if self._started:
                raise RuntimeError("AmbiCastServer already started")
            self._started = True

            interfaces = self._interfaces if self._interfaces is not None else discover()
            logger.info(
                f"Starting AmbiCast: group={self.group_address}:{self.port}, "
                f"refresh={self.refresh_rate_ms}ms, interfaces={len(interfaces)}"
            )

            # No sender runs unless every sender was built
            senders: List[Sender] = []
            try:
                for interface in interfaces:
                    senders.append(self._sender_factory(interface))
            except Exception:
                logger.error("Unable to create senders, closing those already created")
                for sender in senders:
                    sender.shutdown()
                raise

            for sender in senders:
                sender.start()
            self.senders = senders

            self.poller = Poller(
                sampler=self.sampler,
                senders=self.senders,
                refresh_rate_ms=self.refresh_rate_ms,
                unavailable_delay=self.unavailable_delay,
            )
            self.poller.start()

    def shutdown(self) -> None:
        """
        Stop the poller, then every sender, waiting for each to exit.

        Blocks until all threads have terminated. Further calls return
        immediately.
        """
        with self._lock:
            if self._shut_down:
                return
            self._shut_down = True

            logger.info("Shutting down AmbiCast...")

            if self.poller is not None:
                self.poller.stop()
                self.poller.join()

            for sender in self.senders:
                sender.shutdown()
                sender.join()

            logger.info("Shutdown complete")

    def metrics(self) -> dict:
        return {
            "poller": self.poller.metrics.to_dict() if self.poller else {},
            "senders": {
                sender.interface.name: {
                    **sender.metrics.to_dict(),
                    "dropped_count": sender.mailbox.dropped_count,
                }
                for sender in self.senders
            },
        }

    def __enter__(self) -> "AmbiCastServer":
        self.start()
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()

    def _default_sender(self, interface: Interface) -> Sender:
        return Sender(
            interface,
            self.group_address,
            self.port,
            ttl=self.ttl,
            unavailable_delay=self.unavailable_delay,
        )
