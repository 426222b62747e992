"""
Network Module
==============

Host network interface discovery.
"""

from ambicast.network.discovery import Interface, discover


__all__ = [
    "Interface",
    "discover",
]
