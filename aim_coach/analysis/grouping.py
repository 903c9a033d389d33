"""
Grouping Module
==============
Spatial shot grouping: centers of mass, dispersion and impact density bins.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import numpy as np

from ..data_pipeline.models import Attempt, Batch

DEFAULT_BIN_SIZE = 6.0


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}


@dataclass(frozen=True)
class Bin:
    """Impact density cell keyed by (bin_x, bin_y)."""
    bin_x: int
    bin_y: int
    count: int
    makes: int

    def to_dict(self) -> Dict[str, int]:
        return {
            'bin_x': self.bin_x,
            'bin_y': self.bin_y,
            'count': self.count,
            'makes': self.makes
        }


@dataclass(frozen=True)
class GroupingReport:
    """Grouping statistics for hits and misses plus density bins."""
    total: int
    hits: int
    misses: int
    hit_center: Point
    miss_center: Point
    tightness: float
    miss_tightness: float
    bin_size: float
    bins: List[Bin] = field(default_factory=list)
    hit_positions: List[Point] = field(default_factory=list)
    miss_positions: List[Point] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': self.total,
            'hits': self.hits,
            'misses': self.misses,
            'hit_center': self.hit_center.to_dict(),
            'miss_center': self.miss_center.to_dict(),
            'tightness': self.tightness,
            'miss_tightness': self.miss_tightness,
            'bin_size': self.bin_size,
            'bins': [b.to_dict() for b in self.bins],
            'hit_positions': [p.to_dict() for p in self.hit_positions],
            'miss_positions': [p.to_dict() for p in self.miss_positions]
        }


def _coordinates(attempts: Batch) -> np.ndarray:
    return np.array([(a.x, a.y) for a in attempts], dtype=float).reshape(-1, 2)


def _scaled_mean(values: np.ndarray) -> np.ndarray:
    # Stays finite for coordinates near the float limit
    return (values / len(values)).sum(axis=0)


def center_of_mass(attempts: Batch) -> Tuple[float, float]:
    """Mean x and y of the attempts; (0, 0) for an empty set."""
    if not attempts:
        return 0.0, 0.0
    center = _scaled_mean(_coordinates(attempts))
    return float(center[0]), float(center[1])


def tightness(attempts: Batch) -> float:
    """
    Mean Euclidean distance of the points to their own center of mass.

    Returns 0 for fewer than two points.
    """
    if len(attempts) < 2:
        return 0.0
    coords = _coordinates(attempts)
    offsets = coords - _scaled_mean(coords)
    return float(_scaled_mean(np.hypot(offsets[:, 0], offsets[:, 1])))



def bin_key(x: float, y: float, bin_size: float = DEFAULT_BIN_SIZE) -> Tuple[int, int]:
    """Grid cell for a point; halves round up."""
    return math.floor(x / bin_size + 0.5), math.floor(y / bin_size + 0.5)


def to_bins(attempts: Batch, bin_size: float = DEFAULT_BIN_SIZE) -> List[Bin]:
    """
    Aggregate impact density over the whole batch.

    Bins are returned sorted by key so the result does not depend on
    input order.
    """
    if bin_size <= 0:
        raise ValueError(f"Bin size must be positive, got {bin_size}")

    counts: Dict[Tuple[int, int], List[int]] = {}
    for attempt in attempts:
        cell = counts.setdefault(bin_key(attempt.x, attempt.y, bin_size), [0, 0])
        cell[0] += 1
        if attempt.hit:
            cell[1] += 1

    return [
        Bin(bin_x=bx, bin_y=by, count=count, makes=makes)
        for (bx, by), (count, makes) in sorted(counts.items())
    ]


def _rounded_point(x: float, y: float, precision: int) -> Point:
    return Point(round(x, precision), round(y, precision))


def _positions(attempts: List[Attempt]) -> List[Point]:
    return [Point(a.x, a.y) for a in attempts]


def analyze_grouping(
    attempts: Batch,
    bin_size: float = DEFAULT_BIN_SIZE,
    precision: int = 2
) -> GroupingReport:
    """
    Compute grouping statistics for a batch.

    Args:
        attempts: Batch of attempts
        bin_size: Grid cell size, in the coordinate unit
        precision: Decimal places of centers and tightness

    Returns:
        GroupingReport
    """
    hits = [a for a in attempts if a.hit]
    misses = [a for a in attempts if not a.hit]

    return GroupingReport(
        total=len(attempts),
        hits=len(hits),
        misses=len(misses),
        hit_center=_rounded_point(*center_of_mass(hits), precision),
        miss_center=_rounded_point(*center_of_mass(misses), precision),
        tightness=round(tightness(hits), precision),
        miss_tightness=round(tightness(misses), precision),
        bin_size=bin_size,
        bins=to_bins(attempts, bin_size),
        hit_positions=_positions(hits),
        miss_positions=_positions(misses)
    )
