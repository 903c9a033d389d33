"""
Tests for recommendations, cues and insights.
"""

import pytest

from aim_coach.analysis.grouping import analyze_grouping
from aim_coach.analysis.insights import coaching_insights, skill_profile
from aim_coach.analysis.metrics import Metrics, compute_metrics
from aim_coach.analysis.recommendations import (
    MAINTENANCE_CUE,
    RULES,
    RecommendationEngine,
    practice_plans,
    progress_checks,
)
from aim_coach.data_pipeline.models import Attempt
from aim_coach.settings import AnalysisOptions, Thresholds


@pytest.fixture
def sports():
    """Default sport profiles."""
    return AnalysisOptions().sports


@pytest.fixture
def engine():
    """Engine with default thresholds."""
    return RecommendationEngine()


def metrics_for(accuracy=90.0, mre=3.0, std=1.0, angle=52.0, total=20):
    return Metrics(
        total=total,
        hits=round(total * accuracy / 100),
        accuracy=accuracy,
        mean_radial_error=mre,
        std_radial_error=std,
        mean_release_angle=angle,
        std_release_angle=0.5
    )


def spread_grouping():
    """Grouping whose made shots sit 10 units from their center."""
    attempts = [
        Attempt(id='a', sequence=1, hit=True, x=-10.0, y=0.0),
        Attempt(id='b', sequence=2, hit=True, x=10.0, y=0.0),
    ]
    return analyze_grouping(attempts)


class TestRecommendationEngine:
    """Tests for RecommendationEngine class."""

    def test_ten_attempt_session(self, engine, sports):
        """Test precision rule stays quiet at 6.5 against a threshold of 8."""
        attempts = [
            Attempt(id=str(i), sequence=i + 1, hit=i < 3, x=float(err), y=0.0,
                    radial_error=float(err), release_angle=52.0)
            for i, err in enumerate(range(2, 12))
        ]
        metrics = compute_metrics(attempts)
        grouping = analyze_grouping(attempts)

        basketball = engine.recommend(metrics, grouping, sports['basketball'])
        archery = engine.recommend(metrics, grouping, sports['archery'])

        assert [r.category for r in basketball] == ['accuracy', 'sport-specific']
        assert [r.category for r in archery] == ['accuracy']
        assert basketball[0].priority == 'high'
        assert '30.0%' in basketball[0].description

    def test_rule_order_and_priorities(self, engine, sports):
        """Test every rule fires in table order."""
        metrics = metrics_for(accuracy=50.0, mre=10.0, angle=45.0)
        recs = engine.recommend(metrics, spread_grouping(), sports['basketball'])

        assert [r.category for r in recs] == [
            'accuracy', 'precision', 'technique', 'consistency', 'sport-specific'
        ]
        assert [r.priority for r in recs] == ['high', 'high', 'medium', 'medium', 'low']

    def test_technique_description(self, engine, sports):
        """Test release angle template values."""
        metrics = metrics_for(angle=45.0)
        recs = engine.recommend(metrics, None, sports['basketball'])
        technique = next(r for r in recs if r.category == 'technique')
        assert technique.description == 'Current angle: 45.0°. Target: 52°.'
        assert len(technique.exercises) == 3

    def test_technique_only_for_basketball(self, engine, sports):
        """Test release angle rule is basketball specific."""
        metrics = metrics_for(angle=30.0)
        for name in ('archery', 'darts'):
            recs = engine.recommend(metrics, None, sports[name])
            assert 'technique' not in [r.category for r in recs]

    def test_angle_within_tolerance(self, engine, sports):
        """Test release angle exactly at tolerance does not fire."""
        recs = engine.recommend(metrics_for(angle=54.0), None, sports['basketball'])
        assert 'technique' not in [r.category for r in recs]

    def test_threshold_boundaries(self, engine, sports):
        """Test rules use strict comparisons."""
        metrics = metrics_for(accuracy=70.0, mre=8.0)
        recs = engine.recommend(metrics, None, sports['archery'])
        assert [r.category for r in recs] == ['maintenance']

    def test_maintenance_fallback(self, engine, sports):
        """Test fallback when no rule fires."""
        recs = engine.recommend(metrics_for(), None, sports['darts'])
        assert len(recs) == 1
        assert recs[0].category == 'maintenance'
        assert recs[0].priority == 'low'

    def test_no_maintenance_when_sport_rule_fires(self, engine, sports):
        """Test fallback is suppressed by the basketball rule."""
        recs = engine.recommend(metrics_for(), None, sports['basketball'])
        assert [r.category for r in recs] == ['sport-specific']

    def test_empty_batch_evaluates_rules(self, engine, sports):
        """Test zero metrics still go through the rule table."""
        basketball = engine.recommend(Metrics(), None, sports['basketball'])
        archery = engine.recommend(Metrics(), None, sports['archery'])

        assert [r.category for r in basketball] == ['accuracy', 'technique', 'sport-specific']
        assert [r.category for r in archery] == ['accuracy']

    def test_empty_batch_skip_rules(self, sports):
        """Test opt-in maintenance-only behaviour for empty batches."""
        engine = RecommendationEngine(Thresholds(skip_rules_on_empty=True))
        recs = engine.recommend(Metrics(), None, sports['basketball'])
        assert [r.category for r in recs] == ['maintenance']
        assert engine.cues(Metrics(), sports['basketball']) == [MAINTENANCE_CUE]

    def test_custom_thresholds(self, sports):
        """Test configured thresholds drive the rules."""
        engine = RecommendationEngine(Thresholds(accuracy_pct=95.0))
        recs = engine.recommend(metrics_for(accuracy=90.0), None, sports['darts'])
        assert recs[0].category == 'accuracy'

    def test_custom_rule_table(self, sports):
        """Test an empty rule table always yields the fallback."""
        engine = RecommendationEngine(rules=[])
        recs = engine.recommend(metrics_for(accuracy=10.0), None, sports['basketball'])
        assert [r.category for r in recs] == ['maintenance']

    def test_rule_table_is_total(self, engine, sports):
        """Test every input produces at least one recommendation."""
        for accuracy in (0.0, 50.0, 100.0):
            for mre in (0.0, 20.0):
                for sport in sports.values():
                    recs = engine.recommend(metrics_for(accuracy, mre), None, sport)
                    assert len(recs) >= 1

    def test_rules_do_not_mutate_input(self, engine, sports):
        """Test recommendation is side-effect free."""
        metrics = metrics_for(accuracy=40.0)
        before = metrics.to_dict()
        engine.recommend(metrics, None, sports['basketball'])
        assert metrics.to_dict() == before
        assert len(RULES) == 5

    def test_to_dict(self, engine, sports):
        """Test serialized recommendation shape."""
        rec = engine.recommend(metrics_for(), None, sports['darts'])[0]
        data = rec.to_dict()
        assert set(data) == {'priority', 'category', 'title', 'description', 'exercises'}
        assert isinstance(data['exercises'], list)


class TestCues:
    """Tests for short-form coaching cues."""

    def test_low_accuracy_cue(self, engine, sports):
        """Test mechanics cue for low accuracy."""
        cues = engine.cues(metrics_for(accuracy=40.0), sports['darts'])
        assert cues[0].startswith('Prioritize mechanics')

    def test_release_angle_cue(self, engine, sports):
        """Test release angle cue mentions the target."""
        cues = engine.cues(metrics_for(angle=47.0), sports['basketball'])
        assert any('~52°' in cue for cue in cues)

    def test_spread_cue(self, engine, sports):
        """Test consistency cue for wide radial error spread."""
        cues = engine.cues(metrics_for(std=7.5), sports['archery'])
        assert any(cue.startswith('Consistency work') for cue in cues)

    def test_maintenance_cue(self, engine, sports):
        """Test fallback cue."""
        assert engine.cues(metrics_for(), sports['basketball']) == [MAINTENANCE_CUE]


class TestInsights:
    """Tests for coaching insights."""

    def test_low_accuracy(self):
        """Test insight below the accuracy threshold."""
        insights = coaching_insights(metrics_for(accuracy=30.0))
        assert insights[0].startswith('Your current accuracy is 30.0%.')

    def test_excellent_accuracy_and_precision(self):
        """Test praise for high accuracy and low error."""
        insights = coaching_insights(metrics_for(accuracy=90.0, mre=3.0))
        assert insights[0] == 'Excellent accuracy at 90.0%! Keep maintaining your form.'
        assert insights[1] == 'Great precision with 3.0cm mean error!'

    def test_solid_accuracy(self):
        """Test middle band wording."""
        insights = coaching_insights(metrics_for(accuracy=75.0, mre=5.0))
        assert 'which is solid' in insights[0]
        assert len(insights) == 1

    def test_high_error(self):
        """Test insight for wide grouping."""
        insights = coaching_insights(metrics_for(mre=10.0))
        assert any('Mean radial error is 10.0cm' in i for i in insights)

    def test_release_angle_depends_on_sport(self, sports):
        """Test release angle insight only for basketball."""
        metrics = metrics_for(angle=45.0)
        basketball = coaching_insights(metrics, sport=sports['basketball'])
        archery = coaching_insights(metrics, sport=sports['archery'])

        assert any(i.startswith('Release angle is 45.0°') for i in basketball)
        assert not any(i.startswith('Release angle') for i in archery)

    def test_empty_metrics(self, sports):
        """Test empty batch does not claim great precision."""
        insights = coaching_insights(Metrics(), sport=sports['darts'])
        assert insights == ['Your current accuracy is 0.0%. Focus on fundamental shooting mechanics.']


class TestSkillProfile:
    """Tests for the radar skill profile."""

    def test_axes(self):
        """Test axis names and order."""
        profile = skill_profile(metrics_for())
        assert [axis['metric'] for axis in profile] == [
            'Stability', 'Consistency', 'Focus', 'Technique', 'Fatigue Res.'
        ]

    def test_derived_axes(self):
        """Test consistency and technique scores."""
        profile = {a['metric']: a['value'] for a in skill_profile(metrics_for(std=5.0, angle=50.0))}
        assert profile['Consistency'] == 80.0
        assert profile['Technique'] == 88.0

    def test_scores_floor_at_zero(self):
        """Test derived axes never go negative."""
        profile = {a['metric']: a['value'] for a in skill_profile(metrics_for(std=40.0, angle=10.0))}
        assert profile['Consistency'] == 0.0
        assert profile['Technique'] == 0.0

    def test_baseline_override(self):
        """Test configured baseline axes."""
        profile = skill_profile(metrics_for(), baseline={'focus': 90.0})
        assert profile[2] == {'metric': 'Focus', 'value': 90.0}
        assert profile[0]['value'] == 70.0


class TestPracticePlans:
    """Tests for static practice content."""

    def test_plans_are_copies(self):
        """Test callers cannot change the shared plans."""
        plans = practice_plans()
        plans[0]['items'].append('extra')
        assert 'extra' not in practice_plans()[0]['items']
        assert len(practice_plans()) == 2

    def test_progress_checks(self):
        """Test progress check list."""
        checks = progress_checks()
        assert len(checks) == 3
        assert checks[0].startswith('Accuracy trend')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
