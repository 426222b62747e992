"""
Data Model Tests
================

Validation of Ambilight models against JointSPACE-shaped payloads.
"""

import pytest
from pydantic import ValidationError

from ambicast.models.ambilight import RGB, Layer, LayerSet, Topology


class TestRGB:
    """Tests for pixel colors."""

    def test_to_bytes(self):
        assert RGB(r=255, g=0, b=128).to_bytes() == bytes([255, 0, 128])

    @pytest.mark.parametrize("value", [-1, 256])
    def test_out_of_range_rejected(self, value):
        with pytest.raises(ValidationError):
            RGB(r=value, g=0, b=0)

    def test_frozen(self):
        rgb = RGB(r=1, g=2, b=3)
        with pytest.raises(ValidationError):
            rgb.r = 5


class TestTopology:
    """Tests for device geometry."""

    def test_parse_jointspace_payload(self):
        topology = Topology.model_validate(
            {"layers": 1, "left": 4, "top": 7, "right": 4, "bottom": 0}
        )

        assert topology.to_bytes() == bytes([1, 4, 7, 4, 0])

    def test_counts_limited_to_one_byte(self):
        with pytest.raises(ValidationError):
            Topology(layers=1, left=256)


class TestLayerSet:
    """Tests for sampled frames."""

    def test_parse_processed_payload(self):
        """String pixel indices from JSON become ints, order is preserved."""
        layer_set = LayerSet.model_validate(
            {
                "layer1": {
                    "left": {
                        "1": {"r": 4, "g": 5, "b": 6},
                        "0": {"r": 1, "g": 2, "b": 3},
                    },
                    "top": {"0": {"r": 7, "g": 8, "b": 9}},
                }
            }
        )

        left = layer_set.layer1.left
        assert list(left.keys()) == [1, 0]
        assert left[0] == RGB(r=1, g=2, b=3)
        assert layer_set.layer1.right is None
        assert layer_set.layer2 is None

    def test_pixel_count(self):
        layer_set = LayerSet(
            layer1=Layer(left={0: RGB(r=0, g=0, b=0), 1: RGB(r=0, g=0, b=0)}),
            layer2=Layer(bottom={0: RGB(r=0, g=0, b=0)}),
        )

        assert layer_set.pixel_count == 3

    def test_side_is_copied_on_validation(self):
        """Mutating the source dict after validation leaves the model unchanged."""
        pixels = {0: RGB(r=1, g=2, b=3)}
        layer = Layer(left=pixels)

        pixels[1] = RGB(r=4, g=5, b=6)
        del pixels[0]

        assert dict(layer.left) == {0: RGB(r=1, g=2, b=3)}
        assert LayerSet(layer1=layer).pixel_count == 1

    def test_layers_skip_absent(self):
        layer = Layer(top={})
        layer_set = LayerSet(layer3=layer)

        assert list(layer_set.layers()) == [layer]
        assert list(layer.sides()) == [{}]
