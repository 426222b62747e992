"""
Interface Discovery
===================

Enumerates host network interfaces that can carry multicast traffic.

An interface qualifies when it is up, is not a loopback device and
reports multicast support. Flags come from psutil; on platforms where
psutil reports no flags, loopback is judged from the interface's IPv4
addresses and multicast support is assumed.

An empty result is valid: the relay then runs without transmitting.
"""

import ipaddress
import logging
import socket
from dataclasses import dataclass
from typing import List, Optional

import psutil


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Interface:
    """
    A multicast-capable network interface.

    Attributes:
        name: OS interface name (e.g. "eth0")
        index: OS interface index, 0 if unknown
        address: First IPv4 address of the interface, if any
    """

    name: str
    index: int
    address: Optional[str] = None


def _ipv4_addresses(addrs) -> List[str]:
    return [a.address for a in addrs if a.family == socket.AF_INET]


def _interface_index(name: str) -> int:
    try:
        return socket.if_nametoindex(name)
    except OSError:
        return 0


def _is_eligible(stats, ipv4: List[str]) -> bool:
    if not stats.isup:
        return False

    flags = {f.strip() for f in getattr(stats, "flags", "").split(",") if f.strip()}
    if flags:
        return "loopback" not in flags and "multicast" in flags

    return not any(ipaddress.ip_address(addr).is_loopback for addr in ipv4)


def discover() -> List[Interface]:
    """
    Find every up, non-loopback, multicast-capable interface.

    Returns:
        Discovered interfaces, sorted by name. May be empty.
    """
    stats_by_name = psutil.net_if_stats()
    addrs_by_name = psutil.net_if_addrs()

    interfaces: List[Interface] = []
    for name in sorted(stats_by_name):
        ipv4 = _ipv4_addresses(addrs_by_name.get(name, []))
        if not _is_eligible(stats_by_name[name], ipv4):
            continue

        interface = Interface(
            name=name,
            index=_interface_index(name),
            address=ipv4[0] if ipv4 else None,
        )
        logger.info(
            f"Discovered multicast capable interface: {interface.name} "
            f"(index={interface.index}, address={interface.address})"
        )
        interfaces.append(interface)

    if not interfaces:
        logger.warning("No multicast capable interface found, nothing will be sent")

    return interfaces
