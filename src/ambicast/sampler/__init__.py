"""
Sampler Module
==============

Sources of ambient color data.

Example:
    from ambicast.sampler import JointSpaceSampler

    sampler = JointSpaceSampler("192.168.1.20")
    topology = sampler.get_topology()
    layers = sampler.get_frame()
"""

from ambicast.sampler.base import Sampler, SamplingError
from ambicast.sampler.jointspace import JointSpaceSampler
from ambicast.sampler.mock import MockSampler


__all__ = [
    "Sampler",
    "SamplingError",
    "JointSpaceSampler",
    "MockSampler",
]
