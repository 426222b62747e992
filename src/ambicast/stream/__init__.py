"""
Stream Module
=============

Frame encoding and multicast fan-out.

This module provides the relay core of AmbiCast:
    - encode_data / encode_unavailable: Wire message codec
    - Mailbox: Single-slot, latest-value-wins channel
    - Sender: One thread per interface transmitting the latest frame
    - Poller: Samples the device and broadcasts frames to all senders

Example:
    from ambicast.stream import Poller, Sender

    senders = [Sender(iface, "237.36.35.34", 41414) for iface in interfaces]
    for sender in senders:
        sender.start()

    poller = Poller(sampler, senders, refresh_rate_ms=33)
    poller.start()
"""

from ambicast.stream.codec import MessageType, encode_data, encode_unavailable
from ambicast.stream.mailbox import Mailbox
from ambicast.stream.sender import DELAY_UNAVAILABLE, Sender, SenderMetrics
from ambicast.stream.poller import Poller, PollerMetrics


__all__ = [
    "DELAY_UNAVAILABLE",
    "MessageType",
    "encode_data",
    "encode_unavailable",
    "Mailbox",
    "Sender",
    "SenderMetrics",
    "Poller",
    "PollerMetrics",
]
