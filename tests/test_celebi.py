"""
Test the Wu-seeded k-means pipeline against its external contract:
- population conservation
- exact recovery of small palettes
- determinism
- translucent pixels and degenerate inputs
"""

import numpy as np
import pytest

import palette_quant
from palette_quant import quantize
from palette_quant.celebi import quantize_celebi
from palette_quant.point_space import RgbPointSpace
from palette_quant.utils import argbs_from_rgba

from conftest import BLUE, GREEN, MAX_COLORS, RANDO, RED


class TestKnownCases:
    """Known single and few colour inputs."""

    @pytest.mark.parametrize("colour", [RANDO, RED, GREEN, BLUE])
    def test_single_colour(self, colour):
        assert quantize([colour], MAX_COLORS).color_to_count == {colour: 1}

    def test_five_blue(self):
        assert quantize([BLUE] * 5, MAX_COLORS).color_to_count == {BLUE: 5}

    def test_two_red_three_green(self):
        colours = quantize([RED, RED, GREEN, GREEN, GREEN], MAX_COLORS).color_to_count
        assert len(colours) == 2
        assert colours == {RED: 2, GREEN: 3}

    def test_one_each(self):
        colours = quantize([RED, GREEN, BLUE], MAX_COLORS).color_to_count
        assert colours == {RED: 1, GREEN: 1, BLUE: 1}


class TestContract:
    """Properties of the public entry point."""

    def test_population_conservation(self, noisy_pixels):
        result = quantize(noisy_pixels, 8)
        assert sum(result.color_to_count.values()) == len(noisy_pixels)
        assert result.population == len(noisy_pixels)

    def test_translucent_pixels_not_counted(self, noisy_pixels):
        translucent = [(0x80 << 24) | (p & 0xFFFFFF) for p in noisy_pixels[:700]]
        result = quantize(noisy_pixels + translucent, 8, return_mapping=True)
        assert result.population == len(noisy_pixels)
        assert not set(translucent) & set(result.input_pixel_to_cluster_pixel)

    def test_exact_recovery_of_small_palette(self):
        rng = np.random.default_rng(7)
        palette = [0xFF000000 | int(c) for c in rng.integers(0, 1 << 24, size=12)]
        weights = list(range(1, 13))
        pixels = [c for c, n in zip(palette, weights) for _ in range(n)]
        rng.shuffle(pixels)
        result = quantize(pixels, 16)
        assert result.color_to_count == dict(zip(palette, weights))

    def test_at_most_max_colours(self, gradient_pixels):
        for k in (1, 3, 9, 24):
            assert len(quantize(gradient_pixels, k).color_to_count) <= k

    def test_deterministic(self, noisy_pixels):
        first = quantize(noisy_pixels, 10, return_mapping=True)
        second = quantize(noisy_pixels, 10, return_mapping=True)
        assert first == second
        assert list(first.color_to_count.items()) == list(second.color_to_count.items())

    def test_mapping_targets_palette(self, gradient_pixels):
        result = quantize(gradient_pixels, 6, return_mapping=True)
        assert set(result.input_pixel_to_cluster_pixel) == set(gradient_pixels)
        assert set(result.input_pixel_to_cluster_pixel.values()) <= set(result.color_to_count)

    def test_colors_sorted_by_population(self):
        result = quantize([RED] * 3 + [GREEN] * 5 + [BLUE], MAX_COLORS)
        assert result.colors == [GREEN, RED, BLUE]

    def test_other_point_space(self, noisy_pixels):
        result = quantize_celebi(noisy_pixels, 4, point_space=RgbPointSpace())
        assert result.population == len(noisy_pixels)
        assert len(result.color_to_count) <= 4

    def test_package_exports(self):
        assert palette_quant.quantize is quantize_celebi
        assert palette_quant.quantize_wu is not None


class TestDegenerate:
    """Degenerate inputs give empty results instead of errors."""

    def test_empty(self):
        assert quantize([], MAX_COLORS).color_to_count == {}

    def test_all_translucent(self):
        assert quantize([0x00FFFFFF, 0x10FF0000], MAX_COLORS).color_to_count == {}

    def test_zero_max_colours_warns(self, capsys):
        assert quantize([RED, GREEN], 0).color_to_count == {}
        assert "[warn]" in capsys.readouterr().out

    def test_debug_threads_through(self, noisy_pixels, capsys):
        quantize(noisy_pixels[:300], 4, debug=True)
        out = capsys.readouterr().out
        assert "[debug] [celebi]" in out
        assert "[debug] [wu]" in out
        assert "[debug] [wsmeans]" in out

    def test_quiet_by_default(self, noisy_pixels, capsys):
        quantize(noisy_pixels[:300], 4)
        assert capsys.readouterr().out == ""


class TestImageInput:
    """Decoded RGBA arrays packed into ARGB pixels."""

    def test_rgba_array(self, rgba_image):
        pixels = argbs_from_rgba(rgba_image)
        assert pixels.shape == (16,)
        result = quantize(pixels, MAX_COLORS)
        assert result.color_to_count == {RED: 8, BLUE: 4}

    def test_rgb_array_is_opaque(self):
        image = np.full((2, 3, 3), [0, 255, 0], dtype=np.uint8)
        assert argbs_from_rgba(image).tolist() == [GREEN] * 6

    def test_rejects_float_image(self):
        with pytest.raises(TypeError):
            argbs_from_rgba(np.zeros((2, 2, 3), dtype=np.float32))
