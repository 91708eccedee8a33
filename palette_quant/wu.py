# palette_quant/wu.py
from __future__ import annotations

"""
Wu's colour quantizer (greedy orthogonal bipartition of the RGB histogram).

Pixels are binned into a 33x33x33 histogram (5 bits per channel plus a zero
border). Cumulative moments turn any box's weight, channel sums and sum of
squares into 8 lookups, so the splitter can evaluate every cut plane of a box
in O(1) each. The box with the largest variance is split next until K boxes
exist or nothing can be split. Each non-empty box yields its mean colour.

Exports:
  histogram_index(r, g, b)
  WuHistogram
  quantize_wu(pixels, max_colors, *, debug=False) -> QuantizerResult
"""

from typing import Dict, List, Literal, Sequence, Tuple

import numpy as np

from .constants import INDEX_BITS, MAX_INDEX, SIDE_LENGTH, TOTAL_SIZE
from .core_types import (
    Box,
    ColourCounts,
    PixelsLike,
    QuantizerResult,
    argb_from_rgb,
    round_half_up,
)
from .pixel_counter import count_pixels
from .utils import debug_log, key_value_pairs_to_string

Direction = Literal["red", "green", "blue"]


def histogram_index(r, g, b):
    """Flat index of cell (r, g, b); works on ints and numpy int arrays."""
    return (r << (INDEX_BITS * 2)) + (r << (INDEX_BITS + 1)) + (g << INDEX_BITS) + r + g + b


class WuHistogram:
    """
    Histogram, cumulative moments and the box arena for one quantize call.

    Boxes live in a fixed-size list sized to the requested colour count and
    are always addressed by index, so a split never holds two live
    references into the list.
    """

    def __init__(self) -> None:
        self.weights = np.zeros(TOTAL_SIZE, dtype=np.int64)
        self.moments_r = np.zeros(TOTAL_SIZE, dtype=np.int64)
        self.moments_g = np.zeros(TOTAL_SIZE, dtype=np.int64)
        self.moments_b = np.zeros(TOTAL_SIZE, dtype=np.int64)
        self.moments = np.zeros(TOTAL_SIZE, dtype=np.float64)
        self.cubes: List[Box] = []
        # Plain-list mirrors for scalar lookups; Python ints cannot overflow
        # when squared in variance() / maximize().
        self._w: List[int] = []
        self._r: List[int] = []
        self._g: List[int] = []
        self._b: List[int] = []
        self._m2: List[float] = []

    # Histogram and moments

    def construct_histogram(self, counts: ColourCounts) -> None:
        """Accumulate weight and raw moments per reduced cell."""
        if not counts:
            return
        pixels = np.fromiter(counts.keys(), dtype=np.int64, count=len(counts))
        weight = np.fromiter(counts.values(), dtype=np.int64, count=len(counts))
        red = (pixels >> 16) & 255
        green = (pixels >> 8) & 255
        blue = pixels & 255

        shift = 8 - INDEX_BITS
        index = histogram_index(
            (red >> shift) + 1, (green >> shift) + 1, (blue >> shift) + 1
        )
        np.add.at(self.weights, index, weight)
        np.add.at(self.moments_r, index, red * weight)
        np.add.at(self.moments_g, index, green * weight)
        np.add.at(self.moments_b, index, blue * weight)
        np.add.at(
            self.moments,
            index,
            weight.astype(np.float64)
            * (red * red + green * green + blue * blue).astype(np.float64),
        )

    def compute_moments(self) -> None:
        """Turn per-cell sums into inclusive prefix sums over r, g, b (in place)."""
        shape = (SIDE_LENGTH, SIDE_LENGTH, SIDE_LENGTH)
        for table in (
            self.weights,
            self.moments_r,
            self.moments_g,
            self.moments_b,
            self.moments,
        ):
            cube = table.reshape(shape)
            cube[...] = cube.cumsum(axis=0).cumsum(axis=1).cumsum(axis=2)

        self._w = self.weights.tolist()
        self._r = self.moments_r.tolist()
        self._g = self.moments_g.tolist()
        self._b = self.moments_b.tolist()
        self._m2 = self.moments.tolist()

    # Box splitting

    def create_boxes(self, max_color_count: int) -> int:
        """
        Split boxes until max_color_count exist or no box has positive
        variance. Returns the number of boxes generated.
        """
        self.cubes = [Box() for _ in range(max_color_count)]
        self.cubes[0] = Box(0, MAX_INDEX, 0, MAX_INDEX, 0, MAX_INDEX)
        self.cubes[0].update_volume()

        volume_variance = [0.0] * max_color_count
        next_index = 0
        generated = max_color_count
        i = 1
        while i < max_color_count:
            if self.cut(next_index, i):
                volume_variance[next_index] = self._box_variance(next_index)
                volume_variance[i] = self._box_variance(i)
            else:
                volume_variance[next_index] = 0.0
                i -= 1

            # Strictly-greater scan: ties go to the lowest index.
            next_index = 0
            temp = volume_variance[0]
            for j in range(1, i + 1):
                if volume_variance[j] > temp:
                    temp = volume_variance[j]
                    next_index = j
            if temp <= 0.0:
                generated = i + 1
                break
            i += 1
        return generated

    def _box_variance(self, index: int) -> float:
        cube = self.cubes[index]
        return self.variance(cube) if cube.vol > 1 else 0.0

    def create_result(self, color_count: int) -> ColourCounts:
        """Mean colour and weight of each non-empty box among the first color_count."""
        colours: Dict[int, int] = {}
        for i in range(color_count):
            cube = self.cubes[i]
            weight = self.volume(cube, self._w)
            if weight <= 0:
                continue
            r = round_half_up(self.volume(cube, self._r) / weight)
            g = round_half_up(self.volume(cube, self._g) / weight)
            b = round_half_up(self.volume(cube, self._b) / weight)
            colour = argb_from_rgb(r, g, b)
            colours[colour] = colours.get(colour, 0) + weight
        return colours

    def variance(self, cube: Box) -> float:
        """Sum of squared deviations from the box mean, over all three channels."""
        weight = self.volume(cube, self._w)
        if weight <= 0:
            return 0.0
        dr = self.volume(cube, self._r)
        dg = self.volume(cube, self._g)
        db = self.volume(cube, self._b)
        xx = self.volume(cube, self._m2)
        hypotenuse = dr * dr + dg * dg + db * db
        return xx - hypotenuse / weight

    def cut(self, one_index: int, two_index: int) -> bool:
        """
        Split cubes[one_index] along its best plane; the upper part goes to
        cubes[two_index]. Returns False when the box cannot be split.
        """
        one = self.cubes[one_index]
        whole_r = self.volume(one, self._r)
        whole_g = self.volume(one, self._g)
        whole_b = self.volume(one, self._b)
        whole_w = self.volume(one, self._w)
        wholes = (whole_r, whole_g, whole_b, whole_w)

        cut_r, max_r = self.maximize(one, "red", one.r0 + 1, one.r1, *wholes)
        cut_g, max_g = self.maximize(one, "green", one.g0 + 1, one.g1, *wholes)
        cut_b, max_b = self.maximize(one, "blue", one.b0 + 1, one.b1, *wholes)

        direction: Direction
        if max_r >= max_g and max_r >= max_b:
            if cut_r < 0:
                return False
            direction = "red"
        elif max_g >= max_r and max_g >= max_b:
            direction = "green"
        else:
            direction = "blue"

        two = Box(r1=one.r1, g1=one.g1, b1=one.b1)
        if direction == "red":
            one.r1 = cut_r
            two.r0, two.g0, two.b0 = one.r1, one.g0, one.b0
        elif direction == "green":
            one.g1 = cut_g
            two.r0, two.g0, two.b0 = one.r0, one.g1, one.b0
        else:
            one.b1 = cut_b
            two.r0, two.g0, two.b0 = one.r0, one.g0, one.b1

        one.update_volume()
        two.update_volume()
        self.cubes[two_index] = two
        return True

    def maximize(
        self,
        cube: Box,
        direction: Direction,
        first: int,
        last: int,
        whole_r: int,
        whole_g: int,
        whole_b: int,
        whole_w: int,
    ) -> Tuple[int, float]:
        """
        Best cut position along one axis in [first, last).

        Returns (cut, score) where score is sum over both halves of
        |channel sums|^2 / weight; cut is -1 when no position leaves weight
        on both sides.
        """
        bottom_r = self.bottom(cube, direction, self._r)
        bottom_g = self.bottom(cube, direction, self._g)
        bottom_b = self.bottom(cube, direction, self._b)
        bottom_w = self.bottom(cube, direction, self._w)

        best = 0.0
        cut = -1
        for i in range(first, last):
            half_r = bottom_r + self.top(cube, direction, i, self._r)
            half_g = bottom_g + self.top(cube, direction, i, self._g)
            half_b = bottom_b + self.top(cube, direction, i, self._b)
            half_w = bottom_w + self.top(cube, direction, i, self._w)
            if half_w == 0:
                continue

            temp = (half_r * half_r + half_g * half_g + half_b * half_b) / half_w

            half_r = whole_r - half_r
            half_g = whole_g - half_g
            half_b = whole_b - half_b
            half_w = whole_w - half_w
            if half_w == 0:
                continue
            temp += (half_r * half_r + half_g * half_g + half_b * half_b) / half_w

            if temp > best:
                best = temp
                cut = i
        return cut, best

    # Inclusion-exclusion lookups

    @staticmethod
    def volume(cube: Box, moment: Sequence) -> int:
        """Sum of a cumulative table over the box."""
        return (
            moment[histogram_index(cube.r1, cube.g1, cube.b1)]
            - moment[histogram_index(cube.r1, cube.g1, cube.b0)]
            - moment[histogram_index(cube.r1, cube.g0, cube.b1)]
            + moment[histogram_index(cube.r1, cube.g0, cube.b0)]
            - moment[histogram_index(cube.r0, cube.g1, cube.b1)]
            + moment[histogram_index(cube.r0, cube.g1, cube.b0)]
            + moment[histogram_index(cube.r0, cube.g0, cube.b1)]
            - moment[histogram_index(cube.r0, cube.g0, cube.b0)]
        )

    @staticmethod
    def bottom(cube: Box, direction: Direction, moment: Sequence) -> int:
        """The part of volume() that does not depend on the cut position."""
        if direction == "red":
            return (
                -moment[histogram_index(cube.r0, cube.g1, cube.b1)]
                + moment[histogram_index(cube.r0, cube.g1, cube.b0)]
                + moment[histogram_index(cube.r0, cube.g0, cube.b1)]
                - moment[histogram_index(cube.r0, cube.g0, cube.b0)]
            )
        if direction == "green":
            return (
                -moment[histogram_index(cube.r1, cube.g0, cube.b1)]
                + moment[histogram_index(cube.r1, cube.g0, cube.b0)]
                + moment[histogram_index(cube.r0, cube.g0, cube.b1)]
                - moment[histogram_index(cube.r0, cube.g0, cube.b0)]
            )
        return (
            -moment[histogram_index(cube.r1, cube.g1, cube.b0)]
            + moment[histogram_index(cube.r1, cube.g0, cube.b0)]
            + moment[histogram_index(cube.r0, cube.g1, cube.b0)]
            - moment[histogram_index(cube.r0, cube.g0, cube.b0)]
        )

    @staticmethod
    def top(cube: Box, direction: Direction, position: int, moment: Sequence) -> int:
        """The part of volume() with the cut plane at position."""
        if direction == "red":
            return (
                moment[histogram_index(position, cube.g1, cube.b1)]
                - moment[histogram_index(position, cube.g1, cube.b0)]
                - moment[histogram_index(position, cube.g0, cube.b1)]
                + moment[histogram_index(position, cube.g0, cube.b0)]
            )
        if direction == "green":
            return (
                moment[histogram_index(cube.r1, position, cube.b1)]
                - moment[histogram_index(cube.r1, position, cube.b0)]
                - moment[histogram_index(cube.r0, position, cube.b1)]
                + moment[histogram_index(cube.r0, position, cube.b0)]
            )
        return (
            moment[histogram_index(cube.r1, cube.g1, position)]
            - moment[histogram_index(cube.r1, cube.g0, position)]
            - moment[histogram_index(cube.r0, cube.g1, position)]
            + moment[histogram_index(cube.r0, cube.g0, position)]
        )


def quantize_wu(
    pixels: PixelsLike, max_colors: int, *, debug: bool = False
) -> QuantizerResult:
    """
    Wu quantization of opaque pixels into at most max_colors colours.

    Counts are the box populations. Empty input or max_colors < 1 gives an
    empty result.
    """
    counts = count_pixels(pixels)
    if max_colors < 1 or not counts:
        return QuantizerResult({})

    hist = WuHistogram()
    hist.construct_histogram(counts)
    hist.compute_moments()
    generated = hist.create_boxes(max_colors)
    colours = hist.create_result(generated)

    if debug:
        debug_log(
            "[wu] "
            + key_value_pairs_to_string(
                [
                    ("Distinct", len(counts)),
                    ("Requested", max_colors),
                    ("Boxes", generated),
                    ("Colours", len(colours)),
                ]
            )
        )
    return QuantizerResult(colours)


__all__ = ["histogram_index", "WuHistogram", "quantize_wu"]
