from __future__ import annotations

"""
Opaque pixel counting.

Exports:
  count_pixels(pixels) -> dict[argb, count]
  quantize_map(pixels, max_colors=None) -> QuantizerResult

Translucent pixels (alpha < 255) are dropped without error. The counts are
the seed corpus for the Wu histogram and the weights for k-means.
"""

from typing import Dict, Mapping, Optional

import numpy as np

from .constants import OPAQUE_ALPHA
from .core_types import ColourCounts, PixelsLike, QuantizerResult, is_opaque


def count_pixels(pixels: PixelsLike) -> ColourCounts:
    """
    Count opaque pixels by packed colour.

    Accepts an iterable of ints, a numpy integer array (any shape), or an
    already counted {pixel: count} mapping. Signed 32-bit values are read as
    unsigned. Output order follows the first occurrence of each colour.
    """
    if isinstance(pixels, Mapping):
        out: Dict[int, int] = {}
        for p, n in pixels.items():
            argb = int(p) & 0xFFFFFFFF
            if n > 0 and is_opaque(argb):
                out[argb] = out.get(argb, 0) + int(n)
        return out

    if isinstance(pixels, np.ndarray):
        if not np.issubdtype(pixels.dtype, np.integer):
            raise TypeError("expected an integer array of packed ARGB pixels")
        flat = pixels.astype(np.int64, copy=False).reshape(-1) & 0xFFFFFFFF
        flat = flat[(flat >> 24) >= OPAQUE_ALPHA]
        if flat.size == 0:
            return {}
        uniques, first_idx, counts = np.unique(
            flat, return_index=True, return_counts=True
        )
        order = np.argsort(first_idx, kind="stable")
        return {int(uniques[i]): int(counts[i]) for i in order.tolist()}

    counts_by_colour: Dict[int, int] = {}
    for pixel in pixels:
        pixel = int(pixel) & 0xFFFFFFFF
        if not is_opaque(pixel):
            continue
        counts_by_colour[pixel] = counts_by_colour.get(pixel, 0) + 1
    return counts_by_colour


def quantize_map(pixels: PixelsLike, max_colors: Optional[int] = None) -> QuantizerResult:
    """Every distinct opaque colour with its count; max_colors is ignored."""
    return QuantizerResult(count_pixels(pixels))


__all__ = ["count_pixels", "quantize_map"]
