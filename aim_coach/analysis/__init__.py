"""
Analysis Module
==============
Metrics, rolling trend, shot grouping, coaching rules and reports.
"""

from .grouping import GroupingReport, analyze_grouping, to_bins
from .metrics import Metrics, compute_metrics
from .recommendations import Recommendation, RecommendationEngine
from .report_generator import Report, ReportGenerator, analyze, build_export
from .trend import TrendPoint, rolling_accuracy

__all__ = [
    'GroupingReport',
    'Metrics',
    'Recommendation',
    'RecommendationEngine',
    'Report',
    'ReportGenerator',
    'TrendPoint',
    'analyze',
    'analyze_grouping',
    'build_export',
    'compute_metrics',
    'rolling_accuracy',
    'to_bins'
]
