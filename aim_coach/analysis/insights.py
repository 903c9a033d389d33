"""
Insights Module
==============
Narrated coaching insights and the skill profile radar.
"""

from typing import Dict, List, Optional

from ..settings import SportProfile, Thresholds
from .metrics import Metrics

EXCELLENT_ACCURACY_PCT = 85.0
GREAT_PRECISION_ERROR = 4.0


def coaching_insights(
    metrics: Metrics,
    thresholds: Optional[Thresholds] = None,
    sport: Optional[SportProfile] = None
) -> List[str]:
    """
    Sentences an assistant can relay verbatim.

    Every number comes from the supplied metrics.
    """
    thresholds = thresholds or Thresholds()
    insights = []

    if metrics.accuracy < thresholds.accuracy_pct:
        insights.append(
            f"Your current accuracy is {metrics.accuracy}%. "
            "Focus on fundamental shooting mechanics."
        )
    elif metrics.accuracy > EXCELLENT_ACCURACY_PCT:
        insights.append(
            f"Excellent accuracy at {metrics.accuracy}%! Keep maintaining your form."
        )
    else:
        insights.append(
            f"Your accuracy is {metrics.accuracy}%, which is solid. "
            "There's room for improvement with focused practice."
        )

    if metrics.mean_radial_error > thresholds.mean_radial_error:
        insights.append(
            f"Mean radial error is {metrics.mean_radial_error}cm. "
            "Work on tightening your shot grouping."
        )
    elif metrics.total and metrics.mean_radial_error < GREAT_PRECISION_ERROR:
        insights.append(
            f"Great precision with {metrics.mean_radial_error}cm mean error!"
        )

    release_rule = sport.release_angle_rule if sport else True
    offset = abs(metrics.mean_release_angle - thresholds.target_release_angle)
    if release_rule and offset > thresholds.release_angle_tolerance:
        insights.append(
            f"Release angle is {metrics.mean_release_angle}°. "
            f"Target {thresholds.target_release_angle:g}° for optimal arc."
        )

    return insights


def skill_profile(
    metrics: Metrics,
    thresholds: Optional[Thresholds] = None,
    baseline: Optional[Dict[str, float]] = None
) -> List[Dict[str, float]]:
    """
    Radar chart axes scored 0-100.

    Consistency and Technique are derived from the metrics; the remaining
    axes are configured baselines.
    """
    thresholds = thresholds or Thresholds()
    baseline = baseline or {}

    consistency = max(0.0, 100 - metrics.std_radial_error * 4)
    technique = max(
        0.0,
        100 - abs(thresholds.target_release_angle - metrics.mean_release_angle) * 6
    )

    return [
        {'metric': 'Stability', 'value': baseline.get('stability', 70.0)},
        {'metric': 'Consistency', 'value': round(consistency, 2)},
        {'metric': 'Focus', 'value': baseline.get('focus', 72.0)},
        {'metric': 'Technique', 'value': round(technique, 2)},
        {'metric': 'Fatigue Res.', 'value': baseline.get('fatigue_resistance', 68.0)},
    ]
