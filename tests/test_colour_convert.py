"""
Test colour conversions:
- sRGB linearisation and its inverse
- ARGB <-> Lab round trips
- scalar vs batch agreement
"""

import numpy as np
import pytest

from palette_quant import colour_convert as cc
from palette_quant.core_types import argb_from_rgb, rgb_from_argb

from conftest import BLUE, GREEN, RANDO, RED, WHITE


class TestLinearisation:
    """Test linearized / delinearized."""

    def test_endpoints(self):
        assert cc.linearized(0) == 0.0
        assert cc.linearized(255) == pytest.approx(100.0)
        assert cc.delinearized(0.0) == 0
        assert cc.delinearized(100.0) == 255

    def test_clamps_out_of_range(self):
        assert cc.delinearized(-5.0) == 0
        assert cc.delinearized(150.0) == 255

    def test_every_channel_round_trips(self):
        for c in range(256):
            assert cc.delinearized(cc.linearized(c)) == c

    def test_vectorised_matches_scalar(self):
        values = np.arange(256)
        expected = np.array([cc.linearized(int(v)) for v in values])
        np.testing.assert_allclose(cc.rgb_to_linear(values), expected, rtol=1e-12)


class TestLab:
    """Test ARGB <-> Lab conversions."""

    def test_white_and_black(self):
        l, a, b = cc.lab_from_argb(WHITE)
        assert l == pytest.approx(100.0, abs=1e-3)
        assert a == pytest.approx(0.0, abs=1e-2)
        assert b == pytest.approx(0.0, abs=1e-2)
        assert cc.lab_from_argb(0xFF000000) == pytest.approx((0.0, 0.0, 0.0), abs=1e-9)

    def test_red_is_reddish(self):
        l, a, b = cc.lab_from_argb(RED)
        assert l == pytest.approx(53.24, abs=0.1)
        assert a == pytest.approx(80.09, abs=0.2)
        assert b == pytest.approx(67.20, abs=0.2)

    @pytest.mark.parametrize("argb", [RED, GREEN, BLUE, WHITE, RANDO, 0xFF000000])
    def test_exact_round_trip(self, argb):
        assert cc.argb_from_lab(*cc.lab_from_argb(argb)) == argb

    def test_round_trip_grid(self):
        for r in range(0, 256, 15):
            for g in range(0, 256, 15):
                for b in range(0, 256, 15):
                    argb = argb_from_rgb(r, g, b)
                    back = rgb_from_argb(cc.argb_from_lab(*cc.lab_from_argb(argb)))
                    assert max(abs(x - y) for x, y in zip(back, (r, g, b))) <= 1

    def test_alpha_is_ignored_and_output_opaque(self):
        translucent = (0x40 << 24) | (RED & 0xFFFFFF)
        assert cc.lab_from_argb(translucent) == cc.lab_from_argb(RED)
        assert cc.argb_from_lab(*cc.lab_from_argb(translucent)) == RED

    def test_batch_matches_scalar(self, noisy_pixels):
        sample = noisy_pixels[:200]
        batch = cc.labs_from_argbs(sample)
        assert batch.shape == (200, 3)
        scalar = np.array([cc.lab_from_argb(p) for p in sample])
        np.testing.assert_allclose(batch, scalar, atol=1e-9)

    def test_batch_empty(self):
        assert cc.labs_from_argbs([]).shape == (0, 3)
