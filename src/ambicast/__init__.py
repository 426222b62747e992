"""
AmbiCast
========

Relays Ambilight color samples from a Philips JointSPACE TV to passive
listeners over UDP multicast, on every multicast capable interface.

Components:
    - network: Interface discovery
    - stream: Frame codec, per-interface senders and the polling loop
    - sampler: JointSPACE and mock color sources
    - server: AmbiCastServer, which wires everything together

Example:
    from ambicast.sampler import JointSpaceSampler
    from ambicast.server import AmbiCastServer

    server = AmbiCastServer(JointSpaceSampler("192.168.1.20"),
                            "237.36.35.34", 41414, refresh_rate_ms=33)
    server.start()
    ...
    server.shutdown()
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
