# palette_quant/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and ARGB helpers.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .constants import OPAQUE_ALPHA

# Basic aliases

Argb = int  # packed 0xAARRGGBB
RGBTuple = Tuple[int, int, int]

Point = Tuple[float, float, float]
PointArray = NDArray[np.float64]  # (N, 3)

ColourCounts = Dict[Argb, int]  # colour -> population
PixelMap = Dict[Argb, Argb]  # input pixel -> cluster pixel
PixelsLike = Union[Iterable[int], NDArray[np.integer], Mapping[int, int]]

# Value objects


@dataclass(frozen=True)
class QuantizerResult:
    """Palette colours with populations and an optional input -> cluster map."""

    color_to_count: ColourCounts
    input_pixel_to_cluster_pixel: PixelMap = field(default_factory=dict)

    @property
    def colors(self) -> List[Argb]:
        """Palette colours, most populous first."""
        return [c for c, _n in sorted(self.color_to_count.items(), key=lambda kv: -kv[1])]

    @property
    def population(self) -> int:
        return sum(self.color_to_count.values())


@dataclass
class Box:
    """
    Axis-aligned range over the reduced histogram cube.

    Bounds are exclusive-low / inclusive-high cell indices in 0..MAX_INDEX,
    matching the zero border of the cumulative moment tables.
    """

    r0: int = 0
    r1: int = 0
    g0: int = 0
    g1: int = 0
    b0: int = 0
    b1: int = 0
    vol: int = 0

    def update_volume(self) -> None:
        self.vol = (self.r1 - self.r0) * (self.g1 - self.g0) * (self.b1 - self.b0)


# ARGB channel helpers


def alpha_from_argb(argb: Argb) -> int:
    return (argb >> 24) & 255


def red_from_argb(argb: Argb) -> int:
    return (argb >> 16) & 255


def green_from_argb(argb: Argb) -> int:
    return (argb >> 8) & 255


def blue_from_argb(argb: Argb) -> int:
    return argb & 255


def is_opaque(argb: Argb) -> bool:
    return alpha_from_argb(argb) >= OPAQUE_ALPHA


def argb_from_rgb(red: int, green: int, blue: int) -> Argb:
    """Pack 0..255 channels into an opaque ARGB int."""
    return (255 << 24) | ((red & 255) << 16) | ((green & 255) << 8) | (blue & 255)


def rgb_from_argb(argb: Argb) -> RGBTuple:
    return (red_from_argb(argb), green_from_argb(argb), blue_from_argb(argb))


def round_half_up(value: float) -> int:
    """Round to nearest, halves away from zero (Python's round() is half-even)."""
    return int(np.floor(value + 0.5)) if value >= 0.0 else -int(np.floor(-value + 0.5))


# Callable signatures

Quantizer = Callable[..., QuantizerResult]

__all__ = [
    # aliases / types
    "Argb",
    "RGBTuple",
    "Point",
    "PointArray",
    "ColourCounts",
    "PixelMap",
    "PixelsLike",
    # value objects
    "QuantizerResult",
    "Box",
    # helpers
    "alpha_from_argb",
    "red_from_argb",
    "green_from_argb",
    "blue_from_argb",
    "is_opaque",
    "argb_from_rgb",
    "rgb_from_argb",
    "round_half_up",
    # callable signatures
    "Quantizer",
]
