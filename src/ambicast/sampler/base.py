"""
Sampler Protocol
================

Abstraction over the device that produces ambient color samples.

Implementations:
    - JointSpaceSampler: Philips JointSPACE HTTP API
    - MockSampler: Deterministic colors for testing and demos

Contract:
    - get_topology() returns the device geometry
    - get_frame() returns the current colors
    - Both raise SamplingError when the device is unreachable or not ready
"""

from typing import Protocol

from ambicast.errors import SamplingError
from ambicast.models.ambilight import LayerSet, Topology


__all__ = ["Sampler", "SamplingError"]


class Sampler(Protocol):
    """Protocol for sampling backends."""

    def get_topology(self) -> Topology:
        """
        Fetch the device geometry.

        Raises:
            SamplingError: If the device is unreachable or not ready
        """
        ...

    def get_frame(self) -> LayerSet:
        """
        Fetch the colors for the current cycle.

        Raises:
            SamplingError: If the device is unreachable or not ready
        """
        ...
