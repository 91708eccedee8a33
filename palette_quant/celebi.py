from __future__ import annotations

"""
Wu-seeded weighted k-means: the palette extraction entry point.

Wu's box cutter is fast and deterministic but its colours are box means on a
5-bit grid. Feeding them to k-means as starting centroids refines them
against the real colour distribution in a perceptual space.
"""

from typing import Optional

from .constants import DEFAULT_MAX_ITERATIONS
from .core_types import PixelsLike, Quantizer, QuantizerResult
from .pixel_counter import count_pixels
from .point_space import PointSpace
from .utils import debug_log, key_value_pairs_to_string, warn
from .wsmeans import quantize_wsmeans
from .wu import quantize_wu


def quantize_celebi(
    pixels: PixelsLike,
    max_colors: int,
    return_mapping: bool = False,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    point_space: Optional[PointSpace] = None,
    debug: bool = False,
) -> QuantizerResult:
    """
    Reduce pixels to at most max_colors representative colours.

    Translucent pixels are ignored, so populations sum to the number of
    opaque input pixels. max_colors < 1 returns an empty result.
    """
    if max_colors < 1:
        warn(f"max_colors={max_colors} requests no colours; returning an empty palette")
        return QuantizerResult({})

    counts = count_pixels(pixels)
    if debug:
        debug_log(
            "[celebi] "
            + key_value_pairs_to_string(
                [
                    ("Opaque", sum(counts.values())),
                    ("Distinct", len(counts)),
                    ("Max colours", max_colors),
                    ("Iterations", max_iterations),
                    ("Mapping", return_mapping),
                ]
            )
        )

    wu_result = quantize_wu(counts, max_colors, debug=debug)
    return quantize_wsmeans(
        counts,
        max_colors,
        starting_clusters=wu_result.color_to_count.keys(),
        point_space=point_space,
        max_iterations=max_iterations,
        return_mapping=return_mapping,
        debug=debug,
    )


quantize: Quantizer = quantize_celebi

__all__ = ["quantize_celebi", "quantize"]
