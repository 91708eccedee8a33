from __future__ import annotations

"""
Point spaces for clustering.

A point space maps packed ARGB pixels to 3-coordinate points and back, and
measures a squared Euclidean distance between points. The quantizers only
rely on the ordering of distances, so the square root is never taken.

Exports:
  PointSpace      : capability protocol (from_pixel, to_pixel, distance)
  points_from_pixels : batch conversion; spaces may add a faster from_pixels
  LabPointSpace   : CIE L*a*b* (D65), the default
  RgbPointSpace   : raw 0..255 sRGB channels
"""

from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

import numpy as np

from .colour_convert import argb_from_lab, lab_from_argb, labs_from_argbs
from .core_types import (
    Argb,
    Point,
    PointArray,
    argb_from_rgb,
    rgb_from_argb,
    round_half_up,
)


class PointSpace(Protocol):
    def from_pixel(self, argb: Argb) -> Point: ...

    def to_pixel(self, point: Sequence[float]) -> Argb: ...

    def distance(self, a: Sequence[float], b: Sequence[float]) -> float: ...


def points_from_pixels(space: PointSpace, argbs: Sequence[int]) -> PointArray:
    """(N, 3) float64 points; uses space.from_pixels when the space has one."""
    batch = getattr(space, "from_pixels", None)
    if batch is not None:
        points = batch(argbs)
    else:
        points = [space.from_pixel(int(p)) for p in argbs]
    return np.asarray(points, dtype=np.float64).reshape(-1, 3)


def squared_distance(a: Sequence[float], b: Sequence[float]) -> float:
    d0 = a[0] - b[0]
    d1 = a[1] - b[1]
    d2 = a[2] - b[2]
    return d0 * d0 + d1 * d1 + d2 * d2


@dataclass(frozen=True)
class LabPointSpace:
    """CIE L*a*b* points; distance is squared CIE76 delta E."""

    def from_pixel(self, argb: Argb) -> Point:
        return lab_from_argb(argb)

    def to_pixel(self, point: Sequence[float]) -> Argb:
        return argb_from_lab(float(point[0]), float(point[1]), float(point[2]))

    def distance(self, a: Sequence[float], b: Sequence[float]) -> float:
        return squared_distance(a, b)

    def from_pixels(self, argbs: Iterable[int]) -> PointArray:
        return labs_from_argbs(list(argbs))


@dataclass(frozen=True)
class RgbPointSpace:
    """Raw sRGB channel points (0..255 per axis)."""

    def from_pixel(self, argb: Argb) -> Point:
        r, g, b = rgb_from_argb(argb)
        return (float(r), float(g), float(b))

    def to_pixel(self, point: Sequence[float]) -> Argb:
        r, g, b = (max(0, min(255, round_half_up(float(c)))) for c in point[:3])
        return argb_from_rgb(r, g, b)

    def distance(self, a: Sequence[float], b: Sequence[float]) -> float:
        return squared_distance(a, b)

    def from_pixels(self, argbs: Iterable[int]) -> PointArray:
        packed = np.asarray(list(argbs), dtype=np.int64).reshape(-1)
        return np.stack(
            [(packed >> 16) & 255, (packed >> 8) & 255, packed & 255], axis=1
        ).astype(np.float64)


__all__ = [
    "PointSpace",
    "points_from_pixels",
    "LabPointSpace",
    "RgbPointSpace",
    "squared_distance",
]
