"""
Sample Data Module
=================
Synthetic free-throw sessions for demos and fallback rendering.
"""

import csv
from pathlib import Path
from typing import List, Optional

import numpy as np

from .models import Attempt, Batch

CSV_HEADER = ['t', 'hit', 'err', 'x', 'y', 'releaseDeg', 'speed']


def generate_sample_batch(
    count: int = 60,
    seed: Optional[int] = None,
    target_radius: float = 11.0
) -> List[Attempt]:
    """
    Generate a synthetic basketball free-throw session.

    Errors cluster tightly for the first half of the session, then drift
    wider with a flatter release angle to mimic fatigue.

    Args:
        count: Number of attempts
        seed: Random seed for reproducible sessions
        target_radius: Make radius; attempts landing inside it are hits

    Returns:
        List of attempts ordered by sequence
    """
    rng = np.random.default_rng(seed)
    midpoint = count // 2
    attempts = []

    for i in range(count):
        base = 6.0 if i < midpoint else 9.0
        angle_mean = 51.5 if i < midpoint else 49.5

        x, y = (rng.random(2) - 0.5) * base
        err = float(np.hypot(x, y))

        attempts.append(Attempt(
            id=f"a-{i}",
            sequence=i + 1,
            hit=err <= target_radius,
            x=round(float(x), 2),
            y=round(float(y), 2),
            radial_error=round(err, 2),
            release_angle=round(angle_mean + (rng.random() - 0.5) * 2.8, 2),
            speed=round(7 + (rng.random() - 0.5) * 0.6, 2)
        ))

    return attempts


def write_csv(attempts: Batch, filepath: Path) -> Path:
    """
    Write attempts in the delimited ingestion format.

    Args:
        attempts: Attempts to write
        filepath: Output path

    Returns:
        Path to written file
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, 'w', encoding='utf-8', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=CSV_HEADER)
        writer.writeheader()
        for attempt in attempts:
            writer.writerow(attempt.to_row())

    return filepath
