# palette_quant/colour_convert.py
from __future__ import annotations

"""
Colour conversions between packed ARGB, XYZ and CIE Lab (D65).

Exports:
  linearized(component), delinearized(component)
  xyz_from_argb(argb), argb_from_xyz(x, y, z)
  lab_from_argb(argb), argb_from_lab(l, a, b)
  rgb_to_linear(srgb)          # vectorised, 0..255 -> 0..100
  labs_from_argbs(argbs)       # vectorised batch of lab_from_argb

Scalar paths work on plain floats so the k-means hot loop avoids numpy
per-element overhead. The batch path agrees with the scalar one to float64
precision.
"""

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from .core_types import Argb, Point, argb_from_rgb, rgb_from_argb, round_half_up

SRGB_TO_XYZ = (
    (0.41233895, 0.35762064, 0.18051042),
    (0.2126, 0.7152, 0.0722),
    (0.01932141, 0.11916382, 0.95034478),
)

XYZ_TO_SRGB = (
    (3.2413774792388685, -1.5376652402851851, -0.49885366846268053),
    (-0.9691452513005321, 1.8758853451067872, 0.04156585616912061),
    (0.05562093689691305, -0.20395524564742123, 1.0571799111220335),
)

WHITE_POINT_D65 = (95.047, 100.0, 108.883)

_E = 216.0 / 24389.0
_KAPPA = 24389.0 / 27.0


# sRGB <-> linear


def linearized(component: int) -> float:
    """0..255 sRGB channel -> 0..100 linear channel."""
    normalized = component / 255.0
    if normalized <= 0.040449936:
        return normalized / 12.92 * 100.0
    return ((normalized + 0.055) / 1.055) ** 2.4 * 100.0


def delinearized(component: float) -> int:
    """0..100 linear channel -> 0..255 sRGB channel, rounded and clamped."""
    normalized = component / 100.0
    if normalized <= 0.0031308:
        value = normalized * 12.92
    else:
        value = 1.055 * normalized ** (1.0 / 2.4) - 0.055
    return max(0, min(255, round_half_up(value * 255.0)))


def rgb_to_linear(srgb: np.ndarray) -> NDArray[np.float64]:
    """
    Vectorised linearized(). Accepts 0..255 values of any shape.
    Returns float64 in 0..100.
    """
    normalized = np.asarray(srgb, dtype=np.float64) / 255.0
    return np.where(
        normalized <= 0.040449936,
        normalized / 12.92,
        ((normalized + 0.055) / 1.055) ** 2.4,
    ) * 100.0


# Lab transfer functions


def lab_f(t: float) -> float:
    if t > _E:
        return t ** (1.0 / 3.0)
    return (_KAPPA * t + 16.0) / 116.0


def lab_invf(ft: float) -> float:
    ft3 = ft * ft * ft
    if ft3 > _E:
        return ft3
    return (116.0 * ft - 16.0) / _KAPPA


# ARGB <-> XYZ


def xyz_from_argb(argb: Argb) -> Point:
    r, g, b = (linearized(c) for c in rgb_from_argb(argb))
    m = SRGB_TO_XYZ
    return (
        m[0][0] * r + m[0][1] * g + m[0][2] * b,
        m[1][0] * r + m[1][1] * g + m[1][2] * b,
        m[2][0] * r + m[2][1] * g + m[2][2] * b,
    )


def argb_from_xyz(x: float, y: float, z: float) -> Argb:
    m = XYZ_TO_SRGB
    linear_r = m[0][0] * x + m[0][1] * y + m[0][2] * z
    linear_g = m[1][0] * x + m[1][1] * y + m[1][2] * z
    linear_b = m[2][0] * x + m[2][1] * y + m[2][2] * z
    return argb_from_rgb(
        delinearized(linear_r), delinearized(linear_g), delinearized(linear_b)
    )


# ARGB <-> Lab


def lab_from_argb(argb: Argb) -> Point:
    """Packed ARGB (alpha ignored) -> (L*, a*, b*)."""
    x, y, z = xyz_from_argb(argb)
    wx, wy, wz = WHITE_POINT_D65
    fx = lab_f(x / wx)
    fy = lab_f(y / wy)
    fz = lab_f(z / wz)
    return (116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz))


def argb_from_lab(l: float, a: float, b: float) -> Argb:
    """(L*, a*, b*) -> opaque packed ARGB; out-of-gamut channels are clamped."""
    wx, wy, wz = WHITE_POINT_D65
    fy = (l + 16.0) / 116.0
    fx = a / 500.0 + fy
    fz = fy - b / 200.0
    return argb_from_xyz(lab_invf(fx) * wx, lab_invf(fy) * wy, lab_invf(fz) * wz)


# Batch


def labs_from_argbs(argbs: Sequence[int] | NDArray[np.integer]) -> NDArray[np.float64]:
    """
    Vectorised lab_from_argb.
    Args:
      argbs: N packed ARGB ints
    Returns:
      float64 array [N,3]
    """
    packed = np.asarray(argbs, dtype=np.int64).reshape(-1)
    channels = np.stack(
        [(packed >> 16) & 255, (packed >> 8) & 255, packed & 255], axis=1
    )
    linear = rgb_to_linear(channels)
    xyz = linear @ np.asarray(SRGB_TO_XYZ, dtype=np.float64).T
    normalized = xyz / np.asarray(WHITE_POINT_D65, dtype=np.float64)

    with np.errstate(invalid="ignore"):
        f = np.where(
            normalized > _E, np.cbrt(normalized), (_KAPPA * normalized + 16.0) / 116.0
        )

    out = np.empty((packed.shape[0], 3), dtype=np.float64)
    out[:, 0] = 116.0 * f[:, 1] - 16.0
    out[:, 1] = 500.0 * (f[:, 0] - f[:, 1])
    out[:, 2] = 200.0 * (f[:, 1] - f[:, 2])
    return out


__all__ = [
    "SRGB_TO_XYZ",
    "XYZ_TO_SRGB",
    "WHITE_POINT_D65",
    "linearized",
    "delinearized",
    "rgb_to_linear",
    "lab_f",
    "lab_invf",
    "xyz_from_argb",
    "argb_from_xyz",
    "lab_from_argb",
    "argb_from_lab",
    "labs_from_argbs",
]
