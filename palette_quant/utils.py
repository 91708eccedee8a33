# palette_quant/utils.py
from __future__ import annotations

"""
Shared utilities for palette_quant.

Includes compact formatting, tidy logging, and packing of decoded image
arrays into ARGB ints for the quantizers.
"""

from typing import Any, Iterable, List, Tuple

import numpy as np
from numpy.typing import NDArray


# Time formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


# Image array packing


def argbs_from_rgba(image: np.ndarray) -> NDArray[np.int64]:
    """
    Pack a decoded uint8 image (H,W,3) or (H,W,4), or rows (N,3)/(N,4),
    into a flat int64 vector of 0xAARRGGBB values. RGB input is opaque.
    """
    arr = np.asarray(image)
    if arr.dtype != np.uint8 or arr.ndim < 2 or arr.shape[-1] not in (3, 4):
        raise TypeError("expected uint8 (...,3) or (...,4) array")
    flat = arr.reshape(-1, arr.shape[-1]).astype(np.int64)
    alpha = flat[:, 3] if flat.shape[1] == 4 else np.full(flat.shape[0], 255, np.int64)
    return (alpha << 24) | (flat[:, 0] << 16) | (flat[:, 1] << 8) | flat[:, 2]


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1,234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


__all__ = [
    "format_seconds_compact",
    "argbs_from_rgba",
    "format_bool_on_off",
    "format_number_compact",
    "key_value_pairs_to_string",
    "debug_log",
    "warn",
]
