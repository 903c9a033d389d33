"""
Metrics Module
=============
Aggregate accuracy and error statistics over a batch of attempts.
"""

import statistics
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Tuple

from ..data_pipeline.models import Batch


@dataclass(frozen=True)
class Metrics:
    """Aggregate snapshot of a batch. Values are rounded for display."""
    total: int = 0
    hits: int = 0
    accuracy: float = 0.0
    mean_radial_error: float = 0.0
    std_radial_error: float = 0.0
    mean_release_angle: float = 0.0
    std_release_angle: float = 0.0

    @property
    def misses(self) -> int:
        return self.total - self.hits

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def percentage(numerator: float, denominator: float) -> float:
    """Percentage with a zero denominator mapped to 0."""
    return (numerator / denominator) * 100 if denominator else 0.0


def mean_and_std(values: List[float]) -> Tuple[float, float]:
    """Mean and population standard deviation; (0, 0) for no values."""
    if not values:
        return 0.0, 0.0
    return statistics.mean(values), statistics.pstdev(values)


def compute_metrics(attempts: Batch, precision: int = 2) -> Metrics:
    """
    Compute aggregate metrics for a batch.

    Args:
        attempts: Batch of attempts
        precision: Decimal places of the returned values

    Returns:
        Metrics snapshot; all zeros for an empty batch
    """
    total = len(attempts)
    if total == 0:
        return Metrics()

    hits = sum(1 for a in attempts if a.hit)
    err_mean, err_std = mean_and_std([a.radial_error for a in attempts])
    angle_mean, angle_std = mean_and_std([a.release_angle for a in attempts])

    return Metrics(
        total=total,
        hits=hits,
        accuracy=round(percentage(hits, total), precision),
        mean_radial_error=round(err_mean, precision),
        std_radial_error=round(err_std, precision),
        mean_release_angle=round(angle_mean, precision),
        std_release_angle=round(angle_std, precision)
    )
