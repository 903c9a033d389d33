"""
Main Orchestration Module
========================
Command-line front end for the aim coach analytics engine.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .analysis.report_generator import Report, ReportGenerator
from .data_pipeline.loader import AttemptLoader
from .data_pipeline.models import Attempt
from .data_pipeline.sample import generate_sample_batch, write_csv
from .data_pipeline.validator import PayloadValidator
from .exceptions import AimCoachError, EmptyBatchError
from .settings import AnalysisOptions, load_settings


class AimCoach:
    """
    Orchestrates ingestion, analysis and export.

    Holds no state between analyses; each call works on the batch it is given.
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        log_level: Optional[str] = None
    ):
        """
        Initialize the coach.

        Args:
            config_path: Path to settings file
            output_dir: Directory for saved reports
            log_level: Logging level (overrides the settings file)
        """
        self.options: AnalysisOptions = load_settings(config_path)
        if log_level:
            self.options.log_level = log_level

        self._setup_logging(self.options.log_level)

        self.output_dir = Path(output_dir) if output_dir else Path.cwd() / "reports"

        # Initialize components (lazy loading)
        self._loader: Optional[AttemptLoader] = None
        self._validator: Optional[PayloadValidator] = None
        self._report_generator: Optional[ReportGenerator] = None

        self.logger.debug("Aim Coach initialized")

    def _setup_logging(self, log_level: str):
        """Setup logging configuration."""
        self.logger = logging.getLogger("AimCoach")
        self.logger.setLevel(getattr(logging, log_level.upper()))

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            self.logger.addHandler(handler)

    @property
    def loader(self) -> AttemptLoader:
        """Get or create attempt loader."""
        if self._loader is None:
            self._loader = AttemptLoader(
                delimiter=self.options.delimiter,
                sort_by_sequence=self.options.sort_by_sequence,
                log_level=self.options.log_level
            )
        return self._loader

    @property
    def validator(self) -> PayloadValidator:
        """Get or create payload validator."""
        if self._validator is None:
            self._validator = PayloadValidator(log_level=self.options.log_level)
        return self._validator

    @property
    def report_generator(self) -> ReportGenerator:
        """Get or create report generator."""
        if self._report_generator is None:
            self._report_generator = ReportGenerator(
                options=self.options,
                output_dir=self.output_dir,
                validator=self.validator,
                log_level=self.options.log_level
            )
        return self._report_generator

    def load_attempts(
        self,
        filepath: Path,
        fallback_sample: bool = False
    ) -> List[Attempt]:
        """
        Load a batch from a CSV file.

        Args:
            filepath: Path to CSV file
            fallback_sample: Use the sample batch when the file has no valid rows

        Returns:
            List of attempts

        Raises:
            EmptyBatchError: If no valid rows and no fallback requested
        """
        try:
            attempts = self.loader.load_file(filepath)
        except EmptyBatchError:
            if not fallback_sample:
                raise
            self.logger.warning(f"No valid attempts in {filepath}, using sample data")
            attempts = self.sample_attempts()

        valid, invalid, errors = self.validator.validate_batch(
            [a.to_dict() for a in attempts], 'attempt'
        )
        for index, messages in errors:
            self.logger.warning(f"Attempt {index} failed validation: {'; '.join(messages)}")

        if invalid:
            self.logger.warning(
                f"{invalid} of {valid + invalid} attempts failed schema validation"
            )
        else:
            self.logger.debug(f"All {valid} attempts passed schema validation")

        return attempts

    def sample_attempts(
        self,
        count: int = 60,
        seed: Optional[int] = None
    ) -> List[Attempt]:
        """Generate a synthetic session for the selected sport."""
        return generate_sample_batch(
            count=count,
            seed=seed,
            target_radius=self.options.sport_profile.target_radius
        )

    def analyze_file(
        self,
        filepath: Path,
        sport: Optional[str] = None,
        window_size: Optional[int] = None,
        fallback_sample: bool = False
    ) -> Report:
        """
        Load and analyze a CSV file.

        Returns:
            Report
        """
        attempts = self.load_attempts(filepath, fallback_sample=fallback_sample)
        return self.report_generator.generate(attempts, sport=sport, window_size=window_size)

    def export_file(
        self,
        filepath: Path,
        sport: Optional[str] = None,
        fallback_sample: bool = False
    ) -> Dict[str, Any]:
        """
        Build the assistant message for a CSV file.

        Returns:
            Message envelope with the export payload
        """
        attempts = self.load_attempts(filepath, fallback_sample=fallback_sample)
        return self.report_generator.export(attempts, sport=sport)


def create_cli_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Aim Coach - Shot Accuracy Analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  aim-coach analyze session.csv                  Print a JSON report
  aim-coach analyze session.csv --format md      Print a Markdown report
  aim-coach analyze session.csv -o reports/      Save the report to a directory
  aim-coach export session.csv                   Print the assistant export message
  aim-coach sample --seed 7 -o sample.csv        Write a synthetic session

CSV schema: t,hit,err,x,y,releaseDeg,speed (hit accepts 1/true/yes)
        """
    )

    parser.add_argument(
        '--config', '-c',
        type=Path,
        help='Path to configuration file'
    )

    parser.add_argument(
        '--log-level', '-l',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='Logging level'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Analyze command
    analyze_parser = subparsers.add_parser(
        'analyze',
        help='Analyze a CSV session file'
    )
    analyze_parser.add_argument('file', type=Path, help='CSV file with attempts')
    analyze_parser.add_argument(
        '--sport',
        help='Sport preset (basketball, archery, darts)'
    )
    analyze_parser.add_argument(
        '--window', '-w',
        type=int,
        help='Rolling accuracy window (clamped to the configured range)'
    )
    analyze_parser.add_argument(
        '--format', '-f',
        choices=['json', 'md'],
        default='json',
        help='Output format (default: json)'
    )
    analyze_parser.add_argument(
        '--output', '-o',
        type=Path,
        help='Directory to save the report in'
    )
    analyze_parser.add_argument(
        '--fallback-sample',
        action='store_true',
        help='Analyze sample data when the file has no valid rows'
    )

    # Export command
    export_parser = subparsers.add_parser(
        'export',
        help='Build the assistant export message for a CSV file'
    )
    export_parser.add_argument('file', type=Path, help='CSV file with attempts')
    export_parser.add_argument('--sport', help='Sport preset')
    export_parser.add_argument(
        '--output', '-o',
        type=Path,
        help='File to write the message to'
    )
    export_parser.add_argument(
        '--fallback-sample',
        action='store_true',
        help='Export sample data when the file has no valid rows'
    )

    # Sample command
    sample_parser = subparsers.add_parser(
        'sample',
        help='Write a synthetic session as CSV'
    )
    sample_parser.add_argument(
        '--count', '-n',
        type=int,
        default=60,
        help='Number of attempts (default: 60)'
    )
    sample_parser.add_argument('--seed', type=int, help='Random seed')
    sample_parser.add_argument(
        '--output', '-o',
        type=Path,
        default=Path('sample_session.csv'),
        help='Output CSV path (default: sample_session.csv)'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_cli_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        coach = AimCoach(
            config_path=args.config,
            output_dir=args.output if args.command == 'analyze' else None,
            log_level=args.log_level
        )

        if args.command == 'analyze':
            report = coach.analyze_file(
                args.file,
                sport=args.sport,
                window_size=args.window,
                fallback_sample=args.fallback_sample
            )
            if args.output:
                filepath = coach.report_generator.save_report(report, format=args.format)
                print(f"Saved report: {filepath}")
            elif args.format == 'md':
                print(coach.report_generator.to_markdown(report))
            else:
                print(json.dumps(report.to_dict(), indent=2, default=str))

        elif args.command == 'export':
            message = coach.export_file(
                args.file,
                sport=args.sport,
                fallback_sample=args.fallback_sample
            )
            text = json.dumps(message, indent=2, default=str)
            if args.output:
                args.output.parent.mkdir(parents=True, exist_ok=True)
                args.output.write_text(text, encoding='utf-8')
                print(f"Saved export: {args.output}")
            else:
                print(text)

        elif args.command == 'sample':
            attempts = coach.sample_attempts(count=args.count, seed=args.seed)
            filepath = write_csv(attempts, args.output)
            print(f"Wrote {len(attempts)} attempts to {filepath}")

    except EmptyBatchError as e:
        print(f"Warning: {e}", file=sys.stderr)
        return 1

    except (AimCoachError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == '__main__':
    sys.exit(main())
