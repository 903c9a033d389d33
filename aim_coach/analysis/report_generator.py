"""
Report Generator Module
======================
Single entry point that turns a batch of attempts into a coaching report,
plus the export message consumed by the chat assistant.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..data_pipeline.models import Batch
from ..data_pipeline.validator import PayloadValidator
from ..settings import AnalysisOptions
from .grouping import GroupingReport, analyze_grouping
from .insights import coaching_insights, skill_profile
from .metrics import Metrics, compute_metrics
from .recommendations import (
    Recommendation,
    RecommendationEngine,
    practice_plans,
    progress_checks,
)
from .trend import TrendPoint, clamp_window, rolling_accuracy

logger = logging.getLogger(__name__)

EXPORT_MESSAGE_TYPE = 'DASHBOARD_DATA_UPDATE'


@dataclass(frozen=True)
class Report:
    """Complete analysis of one batch."""
    metrics: Metrics
    trend: List[TrendPoint]
    grouping: GroupingReport
    recommendations: List[Recommendation]
    cues: List[str]
    generated_at: str
    sport: str
    window_size: int
    target_radius: float
    insights: List[str] = field(default_factory=list)
    skill_profile: List[Dict[str, float]] = field(default_factory=list)
    practice_plans: List[Dict[str, Any]] = field(default_factory=list)
    progress_checks: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'generated_at': self.generated_at,
            'sport': self.sport,
            'window_size': self.window_size,
            'target_radius': self.target_radius,
            'metrics': self.metrics.to_dict(),
            'trend': [p.to_dict() for p in self.trend],
            'grouping': self.grouping.to_dict(),
            'recommendations': [r.to_dict() for r in self.recommendations],
            'cues': list(self.cues),
            'insights': list(self.insights),
            'skill_profile': [dict(axis) for axis in self.skill_profile],
            'practice_plans': [dict(plan) for plan in self.practice_plans],
            'progress_checks': list(self.progress_checks)
        }


def analyze(
    attempts: Batch,
    options: Optional[AnalysisOptions] = None,
    sport: Optional[str] = None,
    window_size: Optional[int] = None
) -> Report:
    """
    Analyze a batch of attempts.

    Side-effect free; an empty batch yields a zero-valued report.

    Args:
        attempts: Chronologically ordered attempts
        options: Analysis options (defaults when omitted)
        sport: Override of options.sport
        window_size: Rolling window override, clamped to the configured range

    Returns:
        Report
    """
    options = options or AnalysisOptions()
    sport_name = sport or options.sport
    if sport_name != options.sport:
        options = _with_sport(options, sport_name)
    profile = options.sport_profile

    window = clamp_window(
        options.window_size if window_size is None else window_size,
        options.min_window,
        options.max_window,
        options.window_size
    )

    metrics = compute_metrics(attempts, options.precision)
    grouping = analyze_grouping(attempts, options.bin_size, options.precision)
    engine = RecommendationEngine(options.thresholds)

    report = Report(
        metrics=metrics,
        trend=rolling_accuracy(attempts, window, options.precision),
        grouping=grouping,
        recommendations=engine.recommend(metrics, grouping, profile),
        cues=engine.cues(metrics, profile, grouping),
        generated_at=datetime.now().isoformat(),
        sport=profile.name,
        window_size=window,
        target_radius=profile.target_radius,
        insights=coaching_insights(metrics, options.thresholds, profile),
        skill_profile=skill_profile(metrics, options.thresholds, options.skill_baseline),
        practice_plans=practice_plans(),
        progress_checks=progress_checks()
    )

    logger.debug(
        f"Analyzed {metrics.total} attempts: accuracy={metrics.accuracy}%, "
        f"{len(report.recommendations)} recommendations"
    )
    return report


def _with_sport(options: AnalysisOptions, sport: str) -> AnalysisOptions:
    """Copy of options with a different sport selected."""
    return replace(options, sport=sport)


def build_export(
    attempts: Batch,
    options: Optional[AnalysisOptions] = None,
    sport: Optional[str] = None
) -> Dict[str, Any]:
    """
    Build the export payload for the chat assistant.

    The assistant never computes statistics of its own; it only narrates
    the values in this payload.
    """
    options = options or AnalysisOptions()
    report = analyze(attempts, options, sport=sport, window_size=options.export_window_size)

    return {
        'summary': {
            'session_date': report.generated_at,
            'total_shots': report.metrics.total,
            'accuracy': report.metrics.accuracy,
            'mean_error': report.metrics.mean_radial_error,
            'sport': report.sport
        },
        'raw_data': [
            {
                'attempt': a.sequence,
                'hit': a.hit,
                'error': a.radial_error,
                'x': a.x,
                'y': a.y,
                'release_angle': a.release_angle,
                'speed': a.speed
            }
            for a in attempts
        ],
        'analysis': {
            'shot_grouping': report.grouping.to_dict(),
            'trends': [p.to_dict() for p in report.trend],
            'recommendations': [r.to_dict() for r in report.recommendations],
            'insights': list(report.insights)
        }
    }


def assistant_message(export: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap an export payload in the message envelope posted to the assistant."""
    return {'type': EXPORT_MESSAGE_TYPE, 'data': export}


class ReportGenerator:
    """
    Generates, validates and saves analysis reports.

    Wraps the analyze() facade with configured options, logging and
    JSON/Markdown output.
    """

    def __init__(
        self,
        options: Optional[AnalysisOptions] = None,
        output_dir: Optional[Path] = None,
        validator: Optional[PayloadValidator] = None,
        log_level: str = "INFO"
    ):
        """
        Initialize report generator.

        Args:
            options: Analysis options
            output_dir: Directory for saved reports
            validator: Payload validator (bundled schemas when omitted)
            log_level: Logging level
        """
        self.options = options or AnalysisOptions()
        self.output_dir = Path(output_dir) if output_dir else Path.cwd() / 'reports'
        self.validator = validator or PayloadValidator(log_level=log_level)

        # Setup logging
        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.setLevel(getattr(logging, log_level.upper()))

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            self.logger.addHandler(handler)

    def generate(
        self,
        attempts: Batch,
        sport: Optional[str] = None,
        window_size: Optional[int] = None
    ) -> Report:
        """
        Generate a report for a batch.

        Args:
            attempts: Batch of attempts
            sport: Sport override
            window_size: Rolling window override

        Returns:
            Report
        """
        if not attempts:
            self.logger.warning("Empty batch, generating zero-valued report")

        report = analyze(attempts, self.options, sport=sport, window_size=window_size)

        is_valid, errors = self.validator.validate(report.to_dict(), 'report')
        if not is_valid:
            for error in errors:
                self.logger.error(f"Report invalid: {error}")

        self.logger.info(
            f"Generated report for {report.metrics.total} attempts "
            f"({report.sport}, window={report.window_size})"
        )
        return report

    def export(
        self,
        attempts: Batch,
        sport: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Build and validate the assistant message for a batch.

        Returns:
            Message envelope with the export payload
        """
        export = build_export(attempts, self.options, sport=sport)

        is_valid, errors = self.validator.validate(export, 'export')
        if not is_valid:
            for error in errors:
                self.logger.error(f"Export payload invalid: {error}")

        return assistant_message(export)

    def save_report(
        self,
        report: Report,
        filename: Optional[str] = None,
        format: str = 'json'
    ) -> Path:
        """
        Save report to file.

        Args:
            report: Report to save
            filename: Optional filename without extension
            format: Output format ('json' or 'md')

        Returns:
            Path to saved file
        """
        if format not in ('json', 'md'):
            raise ValueError(f"Unsupported report format: {format}")

        self.output_dir.mkdir(parents=True, exist_ok=True)

        if filename is None:
            filename = f"report_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

        filepath = self.output_dir / f"{filename}.{format}"

        with open(filepath, 'w', encoding='utf-8') as f:
            if format == 'json':
                json.dump(report.to_dict(), f, indent=2, default=str)
            else:
                f.write(self.to_markdown(report))

        self.logger.info(f"Saved report: {filepath}")
        return filepath

    def to_markdown(self, report: Report) -> str:
        """Convert report to markdown format."""
        m = report.metrics
        g = report.grouping

        md = f"""# Aiming & Accuracy Report

**Generated:** {report.generated_at}
**Sport:** {report.sport.title()}
**Rolling window:** {report.window_size} attempts

---

## Session Metrics

- **Attempts:** {m.total}
- **Accuracy:** {m.accuracy:.1f}% ({m.hits} makes)
- **Mean Radial Error:** {m.mean_radial_error} cm (± {m.std_radial_error})
- **Release Angle:** {m.mean_release_angle}° ± {m.std_release_angle}

---

## Shot Grouping

- **Hits / Misses:** {g.hits} / {g.misses}
- **Hit Center:** ({g.hit_center.x}, {g.hit_center.y})
- **Tightness:** {g.tightness} cm
- **Occupied Bins:** {len(g.bins)} (bin size {g.bin_size:g})

"""
        if report.trend:
            last = report.trend[-1]
            md += f"Latest rolling accuracy: {last.rolling_accuracy:.1f}%\n\n"

        md += """---

## Key Focus

"""
        for cue in report.cues:
            md += f"- {cue}\n"

        md += """
---

## Recommendations

"""
        for rec in report.recommendations:
            md += f"### [{rec.priority.upper()}] {rec.title}\n\n"
            md += f"{rec.description}\n\n"
            if rec.exercises:
                md += "**Exercises:**\n"
                for exercise in rec.exercises:
                    md += f"- {exercise}\n"
                md += "\n"

        md += """---

## Practice Plans

"""
        for plan in report.practice_plans:
            md += f"### {plan['title']}\n\n"
            for item in plan['items']:
                md += f"- {item}\n"
            md += "\n"

        md += """---

## Progress Check

"""
        for check in report.progress_checks:
            md += f"- {check}\n"

        md += """
---

*Generated by Aim Coach*
"""
        return md
