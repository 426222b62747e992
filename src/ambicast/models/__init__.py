"""
Data Models
===========

Pydantic models for AmbiCast.

Models:
    - RGB: One pixel color
    - Side: Pixel index -> RGB mapping for one screen edge
    - Layer: Up to four optional sides
    - LayerSet: Up to four optional layers (one sampled frame)
    - Topology: Device geometry (layer count + per-side pixel counts)
"""

from ambicast.models.ambilight import RGB, Layer, LayerSet, Side, Topology

__all__ = [
    "RGB",
    "Side",
    "Layer",
    "LayerSet",
    "Topology",
]
