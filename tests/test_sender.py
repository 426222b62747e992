"""
Sender Tests
============

Per-interface transmission, backpressure and shutdown, against a fake socket.
"""

import socket
import threading

import pytest

from ambicast.network.discovery import Interface
from ambicast.stream.sender import Sender, open_multicast_socket

from conftest import FakeSocket, wait_for


GROUP = ("237.36.35.34", 41414)


def _sender(interface, sock, unavailable_delay=0.05):
    return Sender(
        interface,
        *GROUP,
        sock=sock,
        unavailable_delay=unavailable_delay,
    )


@pytest.fixture
def sender(interface, fake_socket):
    s = _sender(interface, fake_socket)
    yield s
    s.shutdown()
    if s.ident is not None:
        s.join(timeout=2.0)


class TestSender:
    """Tests for the Sender thread."""

    def test_thread_named_after_interface(self, sender):
        assert sender.name == "Sender-eth0"

    def test_posted_frame_is_sent_to_group(self, sender, fake_socket):
        sender.start()

        sender.post(b"\x20")

        assert wait_for(lambda: fake_socket.sent)
        assert fake_socket.sent == [(b"\x20", GROUP)]
        assert sender.metrics.datagrams_sent == 1

    def test_overwritten_frame_is_never_sent(self, sender, fake_socket):
        """Posting A then B before A is taken transmits only B."""
        sender.post(b"A")
        sender.post(b"B")

        sender.start()

        assert wait_for(lambda: fake_socket.sent)
        sender.shutdown()
        sender.join(timeout=2.0)

        assert fake_socket.payloads == [b"B"]
        assert sender.mailbox.dropped_count == 1

    def test_send_failure_does_not_stop_sender(self, interface):
        sock = FakeSocket(fail_sends=1)
        sender = _sender(interface, sock, unavailable_delay=0.05)
        sender.start()
        try:
            sender.post(b"first")
            assert wait_for(lambda: sender.metrics.send_errors == 1)
            assert sender.is_alive()

            sender.post(b"second")
            assert wait_for(lambda: sock.sent)
            assert sock.payloads == [b"second"]
        finally:
            sender.shutdown()
            sender.join(timeout=2.0)

    def test_shutdown_closes_socket_and_ends_thread(self, sender, fake_socket):
        sender.start()

        sender.shutdown()
        sender.join(timeout=2.0)

        assert not sender.is_alive()
        assert fake_socket.closed

    def test_shutdown_interrupts_backoff(self, interface):
        sock = FakeSocket(fail_sends=1)
        sender = _sender(interface, sock, unavailable_delay=30.0)
        sender.start()
        sender.post(b"x")
        assert wait_for(lambda: sender.metrics.send_errors == 1)

        sender.shutdown()
        sender.join(timeout=2.0)

        assert not sender.is_alive()

    def test_shutdown_is_idempotent(self, sender):
        sender.start()

        sender.shutdown()
        sender.shutdown()
        sender.join(timeout=2.0)

        assert not sender.is_alive()

    def test_concurrent_shutdown_closes_socket_once(self, interface):
        """Racing shutdown() calls close the socket exactly once."""
        sock = FakeSocket()
        sender = _sender(interface, sock)
        sender.start()
        barrier = threading.Barrier(8)

        def stop():
            barrier.wait()
            sender.shutdown()

        callers = [threading.Thread(target=stop) for _ in range(8)]
        for caller in callers:
            caller.start()
        for caller in callers:
            caller.join(timeout=2.0)
        sender.join(timeout=2.0)

        assert not sender.is_alive()
        assert sock.close_calls == 1

    def test_close_failure_does_not_block_shutdown(self, interface):
        sender = _sender(interface, FakeSocket(fail_close=True))
        sender.start()

        sender.shutdown()
        sender.join(timeout=2.0)

        assert not sender.is_alive()
        assert sender.mailbox.closed

    def test_post_after_shutdown_is_harmless(self, sender, fake_socket):
        sender.start()
        sender.shutdown()
        sender.join(timeout=2.0)

        sender.post(b"late")

        assert fake_socket.sent == []


class TestOpenMulticastSocket:
    """Tests for interface-bound socket creation."""

    def test_configures_interface_by_address(self):
        sock = open_multicast_socket(Interface(name="lo-test", index=0, address="127.0.0.1"), ttl=2)
        try:
            assert sock.type == socket.SOCK_DGRAM
            assert sock.getsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL) == 2
            raw = sock.getsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, 4)
            assert socket.inet_ntoa(raw) == "127.0.0.1"
        finally:
            sock.close()
