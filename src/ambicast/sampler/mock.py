"""
Mock Sampler
============

Deterministic sampler for testing and demos, no device required.

The mock simulates:
    - A fixed topology (one layer by default)
    - Colors that sweep slowly around the hue circle, one step per frame
    - An optional number of initial failures, to exercise availability
      handling
"""

import colorsys
import logging
import threading
from typing import Dict

from ambicast.errors import SamplingError
from ambicast.models.ambilight import RGB, Layer, LayerSet, Side, Topology


logger = logging.getLogger(__name__)


class MockSampler:
    """
    Sampler returning generated colors.

    Attributes:
        topology: Topology reported by get_topology()
        hue_step: Hue advance per frame, as a fraction of the circle
        failures_remaining: Calls left that will raise SamplingError
    """

    def __init__(
        self,
        topology: Topology = Topology(layers=1, left=4, top=7, right=4, bottom=0),
        hue_step: float = 0.005,
        fail_first: int = 0,
    ) -> None:
        """
        Initialize mock sampler.

        Args:
            topology: Geometry to report
            hue_step: Hue advance per generated frame
            fail_first: Number of initial calls (of either method) that fail
        """
        self.topology = topology
        self.hue_step = hue_step
        self.failures_remaining = fail_first

        self._tick = 0
        self._lock = threading.Lock()

        logger.info(
            f"MockSampler initialized: topology={topology}, fail_first={fail_first}"
        )

    def get_topology(self) -> Topology:
        self._maybe_fail()
        return self.topology

    def get_frame(self) -> LayerSet:
        self._maybe_fail()
        with self._lock:
            tick = self._tick
            self._tick += 1

        layers: Dict[str, Layer] = {}
        for n in range(1, min(self.topology.layers, 4) + 1):
            layers[f"layer{n}"] = self._layer(tick, offset=n)
        return LayerSet(**layers)

    def _maybe_fail(self) -> None:
        with self._lock:
            if self.failures_remaining > 0:
                self.failures_remaining -= 1
                raise SamplingError("mock device not ready")

    def _layer(self, tick: int, offset: int) -> Layer:
        t = self.topology
        sides = {}
        position = 0
        for name, count in (("left", t.left), ("top", t.top), ("right", t.right), ("bottom", t.bottom)):
            if count == 0:
                continue
            sides[name] = self._side(tick, offset, position, count)
            position += count
        return Layer(**sides)

    def _side(self, tick: int, offset: int, start: int, count: int) -> Side:
        side: Side = {}
        for index in range(count):
            hue = (tick * self.hue_step + (start + index) * 0.01 + offset * 0.25) % 1.0
            r, g, b = colorsys.hsv_to_rgb(hue, 1.0, 1.0)
            side[index] = RGB(r=round(r * 255), g=round(g * 255), b=round(b * 255))
        return side
