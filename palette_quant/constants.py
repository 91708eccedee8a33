# palette_quant/constants.py
"""
Tunables shared across the quantizers.

- Histogram geometry for the Wu box cutter (INDEX_BITS, SIDE_LENGTH, ...)
- K-means refinement defaults (iteration cap, seed, pruning factor)
"""
from __future__ import annotations

# ==========
# ARGB input
# ==========
OPAQUE_ALPHA: int = 255

# ================================
# Wu histogram (reduced RGB cube)
# ================================
# 5 of the 8 bits per channel keeps the cube at ~32k cells.
INDEX_BITS: int = 5
MAX_INDEX: int = 32
SIDE_LENGTH: int = 33
TOTAL_SIZE: int = 35937

# ====================
# Weighted k-means
# ====================
DEFAULT_MAX_ITERATIONS: int = 5
KMEANS_SEED: int = 0x42688
# Squared distances: 4x squared == 2x linear (triangle inequality bound).
PRUNE_DISTANCE_FACTOR: float = 4.0
