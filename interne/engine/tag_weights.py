#!/usr/bin/env python3
"""
tag_weights.py
--------------
Tag cloud weights.

Counts are mapped onto [0, 1] on a natural-log scale, so a handful of
very common tags does not squash everything else to the minimum size.
The ratio then drives font size and an HSL colour that darkens as usage
grows.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from interne.engine.constants import (
    TAG_HUE_MAX,
    TAG_HUE_MIN,
    TAG_LIGHTNESS_MAX,
    TAG_LIGHTNESS_MIN,
    TAG_RATIO_FLAT,
    TAG_SATURATION_MAX,
    TAG_SATURATION_MIN,
    TAG_SIZE_MAX,
    TAG_SIZE_MIN,
)


@dataclass(frozen=True)
class TagWeight:
    """
    Rendering weight of one tag.

    Attributes:
        name: Tag name
        count: Number of the user's entries carrying the tag
        ratio: Position on the log scale, 0 for the rarest, 1 for the most used
        size: Font size in rem
        hue: HSL hue in degrees
        saturation: HSL saturation in percent
        lightness: HSL lightness in percent (lower for frequent tags)
    """

    name: str
    count: int
    ratio: float
    size: float
    hue: float
    saturation: float
    lightness: float

    @property
    def font_size(self) -> str:
        return f"{self.size:.2f}rem"

    @property
    def color(self) -> str:
        return f"hsl({self.hue:.0f}, {self.saturation:.0f}%, {self.lightness:.0f}%)"


def _lerp(low: float, high: float, ratio: float) -> float:
    return low + ratio * (high - low)


def compute_tag_weights(pairs: Iterable[Tuple[str, int]]) -> List[TagWeight]:
    """
    Weight every (name, count) pair; input order is preserved.

    Counts below 1 are treated as 1. When all counts are equal each tag
    gets the midpoint ratio.
    """
    tags = [(name, max(int(count), 1)) for name, count in pairs]
    if not tags:
        return []

    low = min(count for _, count in tags)
    high = max(count for _, count in tags)
    log_low = math.log(low)
    log_span = math.log(high) - log_low

    weights = []
    for name, count in tags:
        if low == high or log_span == 0:
            ratio = TAG_RATIO_FLAT
        else:
            ratio = (math.log(count) - log_low) / log_span
        weights.append(
            TagWeight(
                name=name,
                count=count,
                ratio=ratio,
                size=_lerp(TAG_SIZE_MIN, TAG_SIZE_MAX, ratio),
                hue=_lerp(TAG_HUE_MIN, TAG_HUE_MAX, ratio),
                saturation=_lerp(TAG_SATURATION_MIN, TAG_SATURATION_MAX, ratio),
                lightness=_lerp(TAG_LIGHTNESS_MAX, TAG_LIGHTNESS_MIN, ratio),
            )
        )
    return weights
