# palette_quant/__init__.py
"""
palette_quant package.

Purpose:
  Reduce packed ARGB pixels to a small representative palette: Wu histogram
  box cutting seeds a weighted k-means refinement in CIE Lab.

Public API:
  quantize        : Wu + k-means pipeline (alias of celebi.quantize_celebi).
  quantize_wu     : Wu box-cutting quantizer on its own.
  quantize_wsmeans: weighted k-means on its own.
  quantize_map    : exact opaque colour counts.
  count_pixels    : opaque pixel -> count table.
  point_space     : PointSpace protocol, LabPointSpace, RgbPointSpace.
  colour_convert  : ARGB <-> XYZ / Lab conversions.
  core_types      : shared aliases and value objects (QuantizerResult, Box).
  utils           : logging helpers and RGBA array packing.

Quick start:
  from palette_quant import quantize
  result = quantize(pixels, 16)
  result.color_to_count  # {argb: population}
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import core_types
from . import point_space
from . import utils

from .core_types import QuantizerResult
from .point_space import LabPointSpace, PointSpace, RgbPointSpace
from .pixel_counter import count_pixels, quantize_map
from .wu import quantize_wu
from .wsmeans import quantize_wsmeans
from .celebi import quantize, quantize_celebi

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "point_space",
    "utils",
    "QuantizerResult",
    "PointSpace",
    "LabPointSpace",
    "RgbPointSpace",
    "count_pixels",
    "quantize_map",
    "quantize_wu",
    "quantize_wsmeans",
    "quantize",
    "quantize_celebi",
]
