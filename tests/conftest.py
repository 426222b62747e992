"""
Test Configuration
==================

Pytest fixtures and in-process fakes for AmbiCast.

No test touches the real network: sockets, senders and samplers are
replaced by the recording fakes below.
"""

import threading
import time
from typing import Callable, List, Optional, Tuple, Type

import pytest

from ambicast.errors import SamplingError
from ambicast.models.ambilight import RGB, Layer, LayerSet, Topology
from ambicast.network.discovery import Interface


AMBICAST_ENV = (
    "AMBICAST_JOINTSPACE_HOST",
    "AMBICAST_JOINTSPACE_PORT",
    "AMBICAST_JOINTSPACE_API_VERSION",
    "AMBICAST_MULTICAST_GROUP",
    "AMBICAST_MULTICAST_PORT",
    "AMBICAST_REFRESH_MILLIS",
    "AMBICAST_SAMPLER_BACKEND",
    "AMBICAST_LOG_LEVEL",
)


def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    """Poll predicate until it holds or timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.002)
    return predicate()


class FakeSocket:
    """Socket stand-in that records datagrams instead of sending them."""

    def __init__(self, fail_sends: int = 0, fail_close: bool = False) -> None:
        self.sent: List[Tuple[bytes, tuple]] = []
        self.closed = False
        self.close_calls = 0
        self.fail_sends = fail_sends
        self.fail_close = fail_close
        self._lock = threading.Lock()

    def sendto(self, data: bytes, address: tuple) -> int:
        with self._lock:
            if self.closed:
                raise OSError("Bad file descriptor")
            if self.fail_sends > 0:
                self.fail_sends -= 1
                raise OSError("Network is unreachable")
            self.sent.append((data, address))
        return len(data)

    def close(self) -> None:
        with self._lock:
            self.close_calls += 1
        self.closed = True
        if self.fail_close:
            raise OSError("close failed")

    @property
    def payloads(self) -> List[bytes]:
        with self._lock:
            return [data for data, _ in self.sent]


class RecordingSender:
    """Sender stand-in that records every post with a monotonic timestamp."""

    def __init__(self) -> None:
        self.posts: List[Tuple[float, bytes]] = []
        self._lock = threading.Lock()

    def post(self, frame: bytes) -> None:
        with self._lock:
            self.posts.append((time.monotonic(), frame))

    @property
    def frames(self) -> List[bytes]:
        with self._lock:
            return [frame for _, frame in self.posts]

    @property
    def times(self) -> List[float]:
        with self._lock:
            return [t for t, _ in self.posts]


class ScriptedSampler:
    """
    Sampler that fails a given number of times per method, then succeeds.

    Failures raise error_type, SamplingError unless told otherwise.
    """

    def __init__(
        self,
        topology: Topology,
        layer_set: LayerSet,
        topology_failures: int = 0,
        frame_failures: int = 0,
        frame_delay: float = 0.0,
        error_type: Type[Exception] = SamplingError,
    ) -> None:
        self.topology = topology
        self.layer_set = layer_set
        self.topology_failures = topology_failures
        self.frame_failures = frame_failures
        self.frame_delay = frame_delay
        self.error_type = error_type
        self.topology_calls = 0
        self.frame_calls = 0

    def get_topology(self) -> Topology:
        self.topology_calls += 1
        if self.topology_failures > 0:
            self.topology_failures -= 1
            raise self.error_type("topology not ready")
        return self.topology

    def get_frame(self) -> LayerSet:
        self.frame_calls += 1
        if self.frame_delay:
            time.sleep(self.frame_delay)
        if self.frame_failures > 0:
            self.frame_failures -= 1
            raise self.error_type("frame not ready")
        return self.layer_set


@pytest.fixture
def topology() -> Topology:
    """Topology with two pixels on the left edge only."""
    return Topology(layers=1, left=2, top=0, right=0, bottom=0)


@pytest.fixture
def layer_set() -> LayerSet:
    """Layer set matching the topology fixture."""
    return LayerSet(
        layer1=Layer(left={0: RGB(r=1, g=2, b=3), 1: RGB(r=4, g=5, b=6)}),
    )


@pytest.fixture
def interface() -> Interface:
    return Interface(name="eth0", index=2, address="192.168.1.5")


@pytest.fixture
def fake_socket() -> FakeSocket:
    return FakeSocket()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove AmbiCast environment overrides inherited from the shell."""
    for name in AMBICAST_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
