"""
AmbiCast Main Application
=========================

Process entry point for the Ambilight multicast relay.

Usage:
    ambicast [--config PATH]
    python -m ambicast [--config PATH]

The process runs until SIGTERM or SIGINT, then shuts the relay down
synchronously so every socket is closed before exit.
"""

import argparse
import logging
import signal
import sys
import threading
from typing import List, Optional, Union

from ambicast import __version__
from ambicast.config import Settings, load_config, setup_logging
from ambicast.sampler import JointSpaceSampler, MockSampler
from ambicast.server import AmbiCastServer


logger = logging.getLogger(__name__)


# =============================================================================
# Sampler Factory
# =============================================================================

def create_sampler(settings: Settings) -> Union[JointSpaceSampler, MockSampler]:
    """
    Create sampler based on config.

    Fails fast if the jointspace backend is requested without a host.
    """
    backend = settings.sampler.backend

    if backend == "mock":
        logger.info("Using MockSampler")
        return MockSampler()

    elif backend == "jointspace":
        device = settings.jointspace
        if not device.host:
            raise ValueError(
                "jointspace.host is required for the jointspace backend "
                "(set it in config.yml or AMBICAST_JOINTSPACE_HOST)"
            )
        return JointSpaceSampler(
            host=device.host,
            port=device.port,
            api_version=device.api_version,
            timeout=device.timeout_seconds,
        )

    else:
        raise ValueError(f"Unknown sampler backend: {backend}")


# =============================================================================
# Main Entry Point
# =============================================================================

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ambicast",
        description="Relay Ambilight colors to UDP multicast listeners",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yml (default: search ./config.yml, ./config.yaml, /etc/ambicast)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    settings = load_config(args.config)
    setup_logging(settings)

    sampler = create_sampler(settings)
    server = AmbiCastServer(
        sampler,
        settings.multicast.group_address,
        settings.multicast.port,
        settings.refresh_rate.millis,
        ttl=settings.multicast.ttl,
    )

    stop = threading.Event()

    def _handle_signal(signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}, initiating graceful shutdown...")
        stop.set()

    signal.signal(signal.SIGTERM, _handle_signal)
    signal.signal(signal.SIGINT, _handle_signal)

    try:
        server.start()
        while not stop.wait(1.0):
            pass
    finally:
        server.shutdown()
        if isinstance(sampler, JointSpaceSampler):
            sampler.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
