"""
Frame Codec
===========

Pure encoding of wire messages. No I/O.

Wire format (one UDP datagram per message):

    byte 0      message type: 31 = DATA, 32 = UNAVAILABLE
    byte 1      layer count            (DATA only)
    bytes 2-5   left/top/right/bottom  (DATA only)
    bytes 6..   RGB triples            (DATA only)

RGB triples are ordered layer1..layer4, then left, top, right, bottom,
then pixel order within each side. Only pixels present in the sampled
LayerSet are written; the topology header is not used for padding.
"""

from enum import IntEnum

from ambicast.models.ambilight import LayerSet, Topology


class MessageType(IntEnum):
    """Leading byte of every datagram."""

    DATA = 31
    UNAVAILABLE = 32


HEADER_SIZE = 6


def encode_unavailable() -> bytes:
    """Encode the single-byte UNAVAILABLE message."""
    return bytes((MessageType.UNAVAILABLE,))


def encode_data(topology: Topology, layer_set: LayerSet) -> bytes:
    """
    Encode a DATA message.

    Args:
        topology: Topology snapshot in effect for this frame
        layer_set: Sampled colors

    Returns:
        bytes: 6-byte header followed by 3 bytes per present pixel
    """
    msg = bytearray()
    msg.append(MessageType.DATA)
    msg += topology.to_bytes()

    for layer in layer_set.layers():
        for side in layer.sides():
            for rgb in side.values():
                msg += rgb.to_bytes()

    return bytes(msg)
