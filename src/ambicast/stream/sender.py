"""
Multicast Sender
================

One Sender thread per network interface.

Each Sender owns a UDP socket bound to its interface for multicast
egress and a single-slot Mailbox. Whatever is posted last is what gets
sent; older unsent frames are dropped.

Design Rules:
    - post() never blocks and never fails
    - A send failure is logged and followed by a backoff, never fatal
    - shutdown() closes the socket and wakes the thread; the caller joins
"""

import logging
import socket
import struct
import threading
from typing import Optional

from ambicast.errors import SocketCloseError, TransmissionError
from ambicast.network.discovery import Interface
from ambicast.stream.mailbox import Mailbox


logger = logging.getLogger(__name__)


# Pause after a failure before trying again (seconds)
DELAY_UNAVAILABLE = 3.0


def open_multicast_socket(interface: Interface, ttl: int = 1) -> socket.socket:
    """
    Create a UDP socket that sends multicast through the given interface.

    The egress interface is selected by its IPv4 address, or by index
    (struct ip_mreqn) when the interface has no IPv4 address.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    try:
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, ttl)
        if interface.address:
            value = socket.inet_aton(interface.address)
        else:
            any_addr = socket.inet_aton("0.0.0.0")
            value = struct.pack("=4s4si", any_addr, any_addr, interface.index)
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, value)
    except OSError:
        sock.close()
        raise
    return sock


class SenderMetrics:
    """Metrics for Sender observability."""

    __slots__ = ("datagrams_sent", "send_errors")

    def __init__(self) -> None:
        self.datagrams_sent: int = 0
        self.send_errors: int = 0

    def to_dict(self) -> dict:
        return {
            "datagrams_sent": self.datagrams_sent,
            "send_errors": self.send_errors,
        }


class Sender(threading.Thread):
    """
    Transmits the latest posted frame to a multicast group.

    Attributes:
        interface: Interface this sender is bound to
        metrics: Operational metrics

    Example:
        sender = Sender(interface, "237.36.35.34", 41414)
        sender.start()

        sender.post(frame_bytes)

        sender.shutdown()
        sender.join()
    """

    def __init__(
        self,
        interface: Interface,
        group_address: str,
        port: int,
        sock: Optional[socket.socket] = None,
        ttl: int = 1,
        unavailable_delay: float = DELAY_UNAVAILABLE,
    ) -> None:
        """
        Initialize sender.

        Args:
            interface: Interface used for multicast egress
            group_address: Multicast group to send to
            port: Multicast port
            sock: Pre-configured socket. If None, one is opened for interface.
            ttl: Multicast TTL for a socket opened here
            unavailable_delay: Seconds to back off after a send failure
        """
        super().__init__(name=f"Sender-{interface.name}")
        self.interface = interface
        self.unavailable_delay = unavailable_delay

        self._destination = (group_address, port)
        self._socket = sock if sock is not None else open_multicast_socket(interface, ttl)
        self._mailbox: Mailbox[bytes] = Mailbox()
        self._stop_event = threading.Event()
        self._shutdown_lock = threading.Lock()

        self.metrics = SenderMetrics()

    @property
    def mailbox(self) -> Mailbox[bytes]:
        return self._mailbox

    def post(self, frame: bytes) -> None:
        """Hand over a frame, replacing any frame not yet sent."""
        self._mailbox.put(frame)

    def shutdown(self) -> None:
        """
        Request the sender to stop.

        Closes the socket (failing any blocked or future send), then wakes
        the thread. Safe to call more than once.
        """
        with self._shutdown_lock:
            if self._stop_event.is_set():
                return
            self._stop_event.set()

        try:
            self._close_socket()
        except SocketCloseError as e:
            logger.error(f"Unable to close multicast socket: {e}", exc_info=True)

        self._mailbox.close()

    def run(self) -> None:
        logger.info(f"Sender thread started for interface {self.interface.name}")

        while not self._stop_event.is_set():
            frame = self._mailbox.get()
            if frame is None:
                break

            try:
                self._transmit(frame)
            except TransmissionError as e:
                if self._stop_event.is_set():
                    break
                self.metrics.send_errors += 1
                logger.error(f"Network error on {self.interface.name}: {e}")
                self._stop_event.wait(self.unavailable_delay)

        logger.info(f"Sender thread stopped for interface {self.interface.name}")

    def _transmit(self, frame: bytes) -> None:
        try:
            self._socket.sendto(frame, self._destination)
        except OSError as e:
            raise TransmissionError(str(e)) from e
        self.metrics.datagrams_sent += 1

    def _close_socket(self) -> None:
        try:
            self._socket.close()
        except OSError as e:
            raise SocketCloseError(str(e)) from e
