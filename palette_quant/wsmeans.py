from __future__ import annotations

"""
Weighted square-means (k-means) refinement.

Each distinct colour is one point weighted by its pixel count. Starting
centroids usually come from the Wu quantizer; missing ones are taken from
the data itself. Every round reassigns points to the nearest centroid, then
moves centroids to the weighted mean of their points.

Reassignment walks the current centroid's neighbours nearest-first and stops
once a neighbour is at least PRUNE_DISTANCE_FACTOR times the point's current
(squared) distance away: by the triangle inequality no centroid from there on
can be closer than the current one.

Exports:
  quantize_wsmeans(input_pixels, max_colors, starting_clusters=(), point_space=None,
                   max_iterations=5, return_mapping=False, *, prune=True, debug=False)
"""

import time
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .constants import DEFAULT_MAX_ITERATIONS, KMEANS_SEED, PRUNE_DISTANCE_FACTOR
from .core_types import ColourCounts, PixelMap, PixelsLike, QuantizerResult
from .pixel_counter import count_pixels
from .point_space import LabPointSpace, PointSpace, points_from_pixels
from .utils import debug_log, format_seconds_compact, key_value_pairs_to_string

Neighbours = List[List[Tuple[float, int]]]  # per centroid: [(distance, index), ...]


def sample_point_indices(point_count: int, needed: int, seed: int = KMEANS_SEED) -> List[int]:
    """Distinct point indices drawn with a private fixed-seed generator."""
    rng = np.random.default_rng(seed)
    needed = min(needed, point_count)
    indices: List[int] = []
    taken = set()
    for _ in range(needed):
        index = int(rng.integers(point_count))
        while index in taken:
            index = int(rng.integers(point_count))
        taken.add(index)
        indices.append(index)
    return indices


def sorted_neighbours(clusters: Sequence[Sequence[float]], space: PointSpace) -> Neighbours:
    """For each centroid, every other centroid as (distance, index), nearest first."""
    count = len(clusters)
    rows: Neighbours = [[] for _ in range(count)]
    for i in range(count):
        for j in range(i + 1, count):
            distance = space.distance(clusters[i], clusters[j])
            rows[i].append((distance, j))
            rows[j].append((distance, i))
    for row in rows:
        row.sort()
    return rows


def _populations(assignment: List[int], counts: np.ndarray, cluster_count: int) -> np.ndarray:
    return np.bincount(
        np.asarray(assignment, dtype=np.int64), weights=counts, minlength=cluster_count
    ).astype(np.int64)


def quantize_wsmeans(
    input_pixels: PixelsLike,
    max_colors: int,
    starting_clusters: Iterable[int] = (),
    point_space: Optional[PointSpace] = None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    return_mapping: bool = False,
    *,
    prune: bool = True,
    debug: bool = False,
) -> QuantizerResult:
    """
    Cluster opaque pixels into at most max_colors colours.

    Args:
      input_pixels      : packed ARGB pixels, or a {pixel: count} mapping
      max_colors        : upper bound on clusters (further bounded by distinct colours)
      starting_clusters : packed ARGB seeds; extras beyond the cluster count are ignored
      point_space       : PointSpace; LabPointSpace() when None
      max_iterations    : cap on assignment/update rounds
      return_mapping    : also map each distinct input pixel to its cluster colour
      prune             : use the triangle-inequality early exit (result is unchanged)
      debug             : log per-round progress

    Returns:
      QuantizerResult. Clusters that land on the same packed colour share one
      entry whose population is their sum.
    """
    space: PointSpace = point_space if point_space is not None else LabPointSpace()

    pixel_to_count = count_pixels(input_pixels)
    pixels = list(pixel_to_count.keys())
    point_count = len(pixels)
    cluster_count = min(max_colors, point_count)
    if cluster_count < 1:
        return QuantizerResult({})

    counts = np.fromiter(pixel_to_count.values(), dtype=np.int64, count=point_count)
    points_arr = points_from_pixels(space, pixels)
    points: List[List[float]] = points_arr.tolist()
    weighted = points_arr * counts[:, None].astype(np.float64)

    clusters: List[List[float]] = [
        [float(c) for c in space.from_pixel(int(argb))]
        for argb in list(starting_clusters)[:cluster_count]
    ]
    additional_needed = cluster_count - len(clusters)
    if additional_needed > 0:
        for index in sample_point_indices(point_count, additional_needed):
            clusters.append(list(points[index]))

    if debug:
        debug_log(
            f"[wsmeans] have {len(clusters)} starting clusters, {point_count} points"
        )

    cluster_indices = [i % cluster_count for i in range(point_count)]

    for iteration in range(max_iterations):
        if debug:
            empty = int(np.sum(_populations(cluster_indices, counts, cluster_count) == 0))
            debug_log(
                f"[wsmeans] starting iteration {iteration + 1}; "
                f"{empty} clusters are empty of {cluster_count}"
            )

        neighbours = sorted_neighbours(clusters, space)

        points_moved = 0
        for i, point in enumerate(points):
            previous_index = cluster_indices[i]
            previous_distance = space.distance(point, clusters[previous_index])
            minimum_distance = previous_distance
            limit = PRUNE_DISTANCE_FACTOR * previous_distance
            new_index = -1
            for centroid_distance, j in neighbours[previous_index]:
                if prune and centroid_distance >= limit:
                    break
                distance = space.distance(point, clusters[j])
                if distance < minimum_distance:
                    minimum_distance = distance
                    new_index = j
            if new_index != -1:
                points_moved += 1
                cluster_indices[i] = new_index

        if points_moved == 0 and iteration > 0:
            if debug:
                debug_log(f"[wsmeans] terminated after {iteration} k-means iterations")
            break

        if debug:
            debug_log(f"[wsmeans] iteration {iteration + 1} moved {points_moved}")

        assignment = np.asarray(cluster_indices, dtype=np.int64)
        populations = _populations(cluster_indices, counts, cluster_count)
        sums = np.stack(
            [
                np.bincount(assignment, weights=weighted[:, axis], minlength=cluster_count)
                for axis in range(3)
            ],
            axis=1,
        )
        for c in range(cluster_count):
            population = int(populations[c])
            if population == 0:
                clusters[c] = [0.0, 0.0, 0.0]
                continue
            clusters[c] = (sums[c] / population).tolist()

    populations = _populations(cluster_indices, counts, cluster_count)
    cluster_argbs: List[Optional[int]] = [None] * cluster_count
    color_to_count: ColourCounts = {}
    for c in range(cluster_count):
        population = int(populations[c])
        if population == 0:
            continue
        argb = space.to_pixel(clusters[c])
        cluster_argbs[c] = argb
        color_to_count[argb] = color_to_count.get(argb, 0) + population

    if debug:
        debug_log(
            "[wsmeans] "
            + key_value_pairs_to_string(
                [("Requested", cluster_count), ("Generated", len(color_to_count))]
            )
        )

    input_pixel_to_cluster_pixel: PixelMap = {}
    if return_mapping:
        started = time.perf_counter()
        for i, pixel in enumerate(pixels):
            input_pixel_to_cluster_pixel[pixel] = cluster_argbs[cluster_indices[i]]
        if debug:
            debug_log(
                "[wsmeans] input to cluster map took "
                + format_seconds_compact(time.perf_counter() - started)
            )

    return QuantizerResult(color_to_count, input_pixel_to_cluster_pixel)


__all__ = ["quantize_wsmeans", "sample_point_indices", "sorted_neighbours"]
