"""
Error Types
===========

Exceptions raised inside the relay core.

None of these ever stops the process. Each one is recovered where it is
raised:
    - SamplingError: Poller marks the device unavailable and backs off
    - TransmissionError: the affected Sender logs and backs off
    - SocketCloseError: logged during shutdown, teardown continues
"""


class AmbiCastError(Exception):
    """Base class for all AmbiCast errors."""


class SamplingError(AmbiCastError):
    """The sampling device is unreachable or not ready."""


class TransmissionError(AmbiCastError):
    """A multicast datagram could not be sent."""


class SocketCloseError(AmbiCastError):
    """A sender socket failed to close cleanly."""
