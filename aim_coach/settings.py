"""
Settings Module
==============
YAML-backed analysis configuration.
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from . import DEFAULT_CONFIG_DIR
from .exceptions import ConfigurationError


def _known_keys(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys the dataclass does not declare."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in (data or {}).items() if k in names}


@dataclass
class Thresholds:
    """Recommendation rule thresholds."""
    accuracy_pct: float = 70.0
    mean_radial_error: float = 8.0
    release_angle_tolerance: float = 2.0
    target_release_angle: float = 52.0
    tightness: float = 5.0
    cue_spread: float = 6.0
    skip_rules_on_empty: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Thresholds':
        return cls(**_known_keys(cls, data))


@dataclass
class SportProfile:
    """Per-sport presets."""
    name: str
    label: str = ""
    target_radius: float = 11.0
    release_angle_rule: bool = False

    @classmethod
    def from_dict(cls, name: str, data: Optional[Dict[str, Any]]) -> 'SportProfile':
        values = _known_keys(cls, data)
        values.pop('name', None)
        profile = cls(name=name, **values)
        if not profile.label:
            profile.label = name.title()
        return profile


def _default_sports() -> Dict[str, SportProfile]:
    return {
        'basketball': SportProfile('basketball', 'Basketball', 11.0, True),
        'archery': SportProfile('archery', 'Archery', 6.0, False),
        'darts': SportProfile('darts', 'Darts', 2.5, False),
    }


def _default_skill_baseline() -> Dict[str, float]:
    return {'stability': 70.0, 'focus': 72.0, 'fatigue_resistance': 68.0}


@dataclass
class AnalysisOptions:
    """
    Options for one analysis run.

    Loaded from settings.yaml and overridable per call.
    """
    sport: str = 'basketball'
    window_size: int = 10
    min_window: int = 3
    max_window: int = 30
    export_window_size: int = 10
    bin_size: float = 6.0
    precision: int = 2
    delimiter: str = ','
    sort_by_sequence: bool = False
    log_level: str = 'INFO'
    thresholds: Thresholds = field(default_factory=Thresholds)
    sports: Dict[str, SportProfile] = field(default_factory=_default_sports)
    skill_baseline: Dict[str, float] = field(default_factory=_default_skill_baseline)

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]]) -> 'AnalysisOptions':
        """Build options from the nested settings mapping."""
        config = config or {}
        analysis = config.get('analysis') or {}
        ingestion = config.get('ingestion') or {}

        options = cls(**_known_keys(cls, analysis))
        options.thresholds = Thresholds.from_dict(config.get('thresholds'))

        if 'delimiter' in ingestion:
            options.delimiter = str(ingestion['delimiter'])
        if 'sort_by_sequence' in ingestion:
            options.sort_by_sequence = bool(ingestion['sort_by_sequence'])

        sports = config.get('sports')
        if sports:
            options.sports = {
                name: SportProfile.from_dict(name, data)
                for name, data in sports.items()
            }

        baseline = config.get('skill_profile')
        if baseline:
            options.skill_baseline.update(
                {k: float(v) for k, v in baseline.items()}
            )

        options.log_level = str((config.get('logging') or {}).get('level', options.log_level))
        return options

    @property
    def sport_profile(self) -> SportProfile:
        """Profile for the selected sport."""
        try:
            return self.sports[self.sport]
        except KeyError:
            raise ConfigurationError(
                f"Unknown sport '{self.sport}'. Known: {', '.join(sorted(self.sports))}"
            ) from None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_settings(config_path: Optional[Path] = None) -> AnalysisOptions:
    """
    Load analysis options from a YAML file.

    Args:
        config_path: Path to settings file (defaults to the bundled settings.yaml)

    Returns:
        AnalysisOptions; built-in defaults when the file does not exist
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_DIR / "settings.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        return AnalysisOptions()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid settings file {config_path}: {e}") from e

    if config is not None and not isinstance(config, dict):
        raise ConfigurationError(f"Settings file {config_path} must contain a mapping")

    return AnalysisOptions.from_dict(config)
