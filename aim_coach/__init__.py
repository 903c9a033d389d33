"""
Aim Coach
=========

Shot accuracy analytics and coaching engine for aiming sports
(basketball shooting, archery, darts).

Components:
- data_pipeline: Attempt ingestion, sample data and payload validation
- analysis: Metrics, rolling trend, shot grouping, recommendations and reports
- main: Command-line front end
"""

__version__ = "1.0.0"
__author__ = "Aim Coach"

from pathlib import Path

# Package root directory
PACKAGE_ROOT = Path(__file__).parent

DEFAULT_CONFIG_DIR = PACKAGE_ROOT / "config"
DEFAULT_SCHEMA_DIR = PACKAGE_ROOT / "schemas"
