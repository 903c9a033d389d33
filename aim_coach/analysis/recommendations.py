"""
Recommendations Module
=====================
Rule-based coaching recommendations and short-form cues.

Rules are evaluated in table order; the order defines display priority.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..settings import SportProfile, Thresholds
from .grouping import GroupingReport
from .metrics import Metrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recommendation:
    """A coaching recommendation with its exercise list."""
    priority: str
    category: str
    title: str
    description: str
    exercises: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'priority': self.priority,
            'category': self.category,
            'title': self.title,
            'description': self.description,
            'exercises': list(self.exercises)
        }


@dataclass(frozen=True)
class RuleContext:
    """Inputs a rule condition can look at."""
    metrics: Metrics
    grouping: Optional[GroupingReport]
    sport: SportProfile
    thresholds: Thresholds

    @property
    def tightness(self) -> float:
        return self.grouping.tightness if self.grouping else 0.0

    @property
    def release_angle_offset(self) -> float:
        return abs(self.metrics.mean_release_angle - self.thresholds.target_release_angle)

    def template_values(self) -> Dict[str, Any]:
        return {
            'accuracy': self.metrics.accuracy,
            'mean_radial_error': self.metrics.mean_radial_error,
            'std_radial_error': self.metrics.std_radial_error,
            'mean_release_angle': self.metrics.mean_release_angle,
            'target_release_angle': self.thresholds.target_release_angle,
            'tightness': self.tightness,
            'sport': self.sport.label
        }


@dataclass(frozen=True)
class RecommendationRule:
    """One row of the rule table."""
    category: str
    priority: str
    title: str
    description: str
    exercises: Tuple[str, ...]
    condition: Callable[[RuleContext], bool] = field(compare=False)

    def applies(self, context: RuleContext) -> bool:
        return bool(self.condition(context))

    def build(self, context: RuleContext) -> Recommendation:
        return Recommendation(
            priority=self.priority,
            category=self.category,
            title=self.title,
            description=self.description.format(**context.template_values()),
            exercises=self.exercises
        )


RULES: List[RecommendationRule] = [
    RecommendationRule(
        category='accuracy',
        priority='high',
        title='Improve Shot Accuracy',
        description=(
            'Accuracy is {accuracy}%. Focus on fundamental shooting mechanics '
            'and form consistency.'
        ),
        exercises=(
            'Practice slow, controlled shots with proper form',
            'Use video analysis to check shooting mechanics',
            'Work on follow-through and wrist snap'
        ),
        condition=lambda c: c.metrics.accuracy < c.thresholds.accuracy_pct
    ),
    RecommendationRule(
        category='precision',
        priority='high',
        title='Tighten Shot Grouping',
        description=(
            'Mean radial error is {mean_radial_error} cm. Reduce shot dispersion '
            'by improving stability and consistency.'
        ),
        exercises=(
            'Core stability exercises',
            'Wrist and forearm strengthening',
            'Balance and footwork drills'
        ),
        condition=lambda c: c.metrics.mean_radial_error > c.thresholds.mean_radial_error
    ),
    RecommendationRule(
        category='technique',
        priority='medium',
        title='Optimize Release Angle',
        description='Current angle: {mean_release_angle}°. Target: {target_release_angle:g}°.',
        exercises=(
            'Release angle practice with angle measurement',
            'Pause-and-hold drill at peak of shot',
            'Arc visualization exercises'
        ),
        condition=lambda c: (
            c.sport.release_angle_rule
            and c.release_angle_offset > c.thresholds.release_angle_tolerance
        )
    ),
    RecommendationRule(
        category='consistency',
        priority='medium',
        title='Improve Shot Consistency',
        description=(
            'Made shots spread {tightness} cm around their center. Work on '
            'reducing shot-to-shot variation.'
        ),
        exercises=(
            'Repetitive shooting drills',
            'Consistent pre-shot routine',
            'Mental focus and concentration exercises'
        ),
        condition=lambda c: c.tightness > c.thresholds.tightness
    ),
    RecommendationRule(
        category='sport-specific',
        priority='low',
        title='Basketball Shooting Form',
        description=(
            'Keep a repeatable arc toward a {target_release_angle:g}° release and '
            'finish every shot with a held follow-through.'
        ),
        exercises=(
            'One-hand form shooting close to the rim',
            'Free-throw routine with a fixed dribble count',
            'Shots at game speed after conditioning sprints'
        ),
        condition=lambda c: c.sport.name == 'basketball'
    ),
]

MAINTENANCE_RULE = RecommendationRule(
    category='maintenance',
    priority='low',
    title='Maintain Current Performance',
    description='Your shooting is performing well. Focus on maintaining consistency.',
    exercises=(
        'Regular practice to maintain form',
        'Add pressure situations to training',
        'Track progress over time'
    ),
    condition=lambda c: True
)


@dataclass(frozen=True)
class CueRule:
    text: str
    condition: Callable[[RuleContext], bool] = field(compare=False)


CUE_RULES: List[CueRule] = [
    CueRule(
        'Prioritize mechanics over volume: slow reps with form checks.',
        lambda c: c.metrics.accuracy < c.thresholds.accuracy_pct
    ),
    CueRule(
        'Tighten grouping: reduce excess motion with core + wrist stability drills.',
        lambda c: c.metrics.mean_radial_error > c.thresholds.mean_radial_error
    ),
    CueRule(
        'Converge release angle toward ~{target_release_angle:g}°; '
        'use pause-and-hold drill at peak.',
        lambda c: (
            c.sport.release_angle_rule
            and c.release_angle_offset > c.thresholds.release_angle_tolerance
        )
    ),
    CueRule(
        'Consistency work: 10x10 drill; log every shot and rest 60s between sets.',
        lambda c: c.metrics.std_radial_error > c.thresholds.cue_spread
    ),
]

MAINTENANCE_CUE = (
    'Maintain current plan. Add light pressure sets (timer/crowd noise) for robustness.'
)

PRACTICE_PLANS = [
    {
        'title': 'Daily Micro-Session (15min)',
        'items': [
            '5min movement prep: ankles, hips, T-spine',
            '6min technique: slow reps, camera from front + side',
            '4min constraints: smaller target or increased distance'
        ]
    },
    {
        'title': 'Consistency Block (2x/week)',
        'items': [
            '100-attempt protocol: split 5x20 with 2min rest',
            'Record release angle every 5 attempts',
            'Stop if technique drops >2 cues; resume after reset'
        ]
    }
]

PROGRESS_CHECKS = [
    'Accuracy trend ≥ +5% over last 3 sessions',
    'Mean radial error ↓ by ≥ 2 cm',
    'Release angle variance ≤ 2° (sport-dependent)'
]


class RecommendationEngine:
    """
    Evaluates the coaching rule table against metrics and grouping output.
    """

    def __init__(
        self,
        thresholds: Optional[Thresholds] = None,
        rules: Optional[List[RecommendationRule]] = None
    ):
        self.thresholds = thresholds or Thresholds()
        self.rules = list(RULES if rules is None else rules)

    def recommend(
        self,
        metrics: Metrics,
        grouping: Optional[GroupingReport],
        sport: SportProfile
    ) -> List[Recommendation]:
        """
        Produce the ordered recommendation list.

        Always returns at least one recommendation: the maintenance
        fallback fires when no other rule does.
        """
        context = RuleContext(metrics, grouping, sport, self.thresholds)

        if metrics.total == 0 and self.thresholds.skip_rules_on_empty:
            logger.debug("Empty batch, skipping recommendation rules")
            return [MAINTENANCE_RULE.build(context)]

        fired = [rule.build(context) for rule in self.rules if rule.applies(context)]
        if not fired:
            fired.append(MAINTENANCE_RULE.build(context))

        logger.debug(f"Recommendations fired: {[r.category for r in fired]}")
        return fired

    def cues(
        self,
        metrics: Metrics,
        sport: SportProfile,
        grouping: Optional[GroupingReport] = None
    ) -> List[str]:
        """Short-form coaching cues for the same inputs."""
        context = RuleContext(metrics, grouping, sport, self.thresholds)

        if metrics.total == 0 and self.thresholds.skip_rules_on_empty:
            return [MAINTENANCE_CUE]

        values = context.template_values()
        cues = [
            rule.text.format(**values)
            for rule in CUE_RULES
            if rule.condition(context)
        ]
        return cues or [MAINTENANCE_CUE]


def practice_plans() -> List[Dict[str, Any]]:
    return copy.deepcopy(PRACTICE_PLANS)


def progress_checks() -> List[str]:
    return list(PROGRESS_CHECKS)
