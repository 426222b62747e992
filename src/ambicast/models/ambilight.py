"""
Ambilight Data Models
=====================

Pydantic models for the color data produced by the sampling device.

The shapes follow the JointSPACE API so that responses validate directly:

    GET /1/ambilight/topology
        {"layers": 1, "left": 2, "top": 0, "right": 0, "bottom": 0}

    GET /1/ambilight/processed
        {
            "layer1": {
                "left": {
                    "0": {"r": 1, "g": 2, "b": 3},
                    "1": {"r": 4, "g": 5, "b": 6}
                }
            }
        }

Design Rules:
    - Every model is frozen once validated
    - Absent layers and sides stay None (they are NOT empty containers)
    - Side pixel order is insertion order, i.e. physical order on the edge
"""

from typing import Iterator, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


class RGB(BaseModel):
    """A single pixel color, one unsigned byte per channel."""

    model_config = ConfigDict(frozen=True)

    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)

    def to_bytes(self) -> bytes:
        return bytes((self.r, self.g, self.b))


# Pixel index -> color, in physical order along the screen edge. Validation
# copies the input, and the mapping is read-only once inside a model.
Side = Mapping[int, RGB]


class Layer(BaseModel):
    """
    Colors of one layer, per screen edge.

    Attributes:
        left: Left edge pixels, or None when the device reports no left side
        top: Top edge pixels
        right: Right edge pixels
        bottom: Bottom edge pixels
    """

    model_config = ConfigDict(frozen=True)

    left: Optional[Side] = None
    top: Optional[Side] = None
    right: Optional[Side] = None
    bottom: Optional[Side] = None

    def sides(self) -> Iterator[Side]:
        """Yield present sides in wire order (left, top, right, bottom)."""
        for side in (self.left, self.top, self.right, self.bottom):
            if side is not None:
                yield side


class LayerSet(BaseModel):
    """
    One sampled frame of colors, up to four layers.

    Which layers are present is independent of the topology's layer count.
    """

    model_config = ConfigDict(frozen=True)

    layer1: Optional[Layer] = None
    layer2: Optional[Layer] = None
    layer3: Optional[Layer] = None
    layer4: Optional[Layer] = None

    def layers(self) -> Iterator[Layer]:
        """Yield present layers in wire order (layer1 .. layer4)."""
        for layer in (self.layer1, self.layer2, self.layer3, self.layer4):
            if layer is not None:
                yield layer

    @property
    def pixel_count(self) -> int:
        """Total number of pixels present across all layers and sides."""
        return sum(len(side) for layer in self.layers() for side in layer.sides())


class Topology(BaseModel):
    """
    Geometry of the sampling device.

    Attributes:
        layers: Number of layers the device exposes
        left: Pixel count on the left edge
        top: Pixel count on the top edge
        right: Pixel count on the right edge
        bottom: Pixel count on the bottom edge
    """

    model_config = ConfigDict(frozen=True)

    layers: int = Field(..., ge=0, le=255)
    left: int = Field(default=0, ge=0, le=255)
    top: int = Field(default=0, ge=0, le=255)
    right: int = Field(default=0, ge=0, le=255)
    bottom: int = Field(default=0, ge=0, le=255)

    def to_bytes(self) -> bytes:
        """Five-byte descriptor: layers, left, top, right, bottom."""
        return bytes((self.layers, self.left, self.top, self.right, self.bottom))
