"""
Attempt Loader Module
====================
Parses delimited shot data into validated Attempt batches.
"""

import csv
import io
import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..exceptions import EmptyBatchError, MalformedRowError
from .models import Attempt, Number

TRUTHY_HIT_VALUES = {'1', 'true', 'yes'}

# Header names are matched case-insensitively; Attempt field names are
# accepted as aliases so in-memory records can use either spelling.
FIELD_ALIASES = {
    't': 't',
    'sequence': 't',
    'hit': 'hit',
    'err': 'err',
    'radial_error': 'err',
    'x': 'x',
    'y': 'y',
    'releasedeg': 'releasedeg',
    'release_angle': 'releasedeg',
    'speed': 'speed',
}


class AttemptLoader:
    """
    Loads shot attempts from delimited text, files or in-memory records.

    Expected header: t,hit,err,x,y,releaseDeg,speed
    """

    def __init__(
        self,
        delimiter: str = ",",
        sort_by_sequence: bool = False,
        log_level: str = "INFO"
    ):
        """
        Initialize attempt loader.

        Args:
            delimiter: Column delimiter of the input text
            sort_by_sequence: Stably re-order attempts by sequence after parsing
            log_level: Logging level
        """
        self.delimiter = delimiter
        self.sort_by_sequence = sort_by_sequence

        # Setup logging
        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.setLevel(getattr(logging, log_level.upper()))

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            self.logger.addHandler(handler)

    def load_file(self, filepath: Path) -> List[Attempt]:
        """
        Load attempts from a delimited text file.

        Args:
            filepath: Path to the CSV file

        Returns:
            List of attempts in file order
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"Attempt file not found: {filepath}")

        with open(filepath, 'r', encoding='utf-8-sig') as f:
            text = f.read()

        self.logger.info(f"Loading attempts from {filepath}")
        return self.parse_text(text)

    def parse_text(self, text: str) -> List[Attempt]:
        """
        Parse delimited text with a header row.

        Args:
            text: Raw delimited text

        Returns:
            List of attempts

        Raises:
            EmptyBatchError: If no valid rows remain
        """
        reader = csv.reader(io.StringIO(text.strip()), delimiter=self.delimiter)

        header: Optional[List[str]] = None
        records: List[Dict[str, str]] = []

        for cells in reader:
            cells = [c.strip() for c in cells]
            if not any(cells):
                continue

            if header is None:
                header = [c.lower() for c in cells]
                continue

            records.append({
                name: cells[idx] if idx < len(cells) else ''
                for idx, name in enumerate(header)
            })

        return self.from_records(records)

    def from_records(self, records: Iterable[Mapping[str, Any]]) -> List[Attempt]:
        """
        Build a batch from in-memory row mappings.

        Malformed rows are logged and dropped.

        Args:
            records: Mappings keyed by header names or Attempt field names

        Returns:
            List of attempts

        Raises:
            EmptyBatchError: If no valid rows remain
        """
        attempts = []
        dropped = 0

        for index, record in enumerate(records):
            try:
                attempts.append(self._parse_row(record, index))
            except MalformedRowError as e:
                dropped += 1
                self.logger.warning(f"Dropping malformed row: {e}")

        if not attempts:
            self.logger.warning(f"No valid attempts found ({dropped} rows dropped)")
            raise EmptyBatchError(
                "No valid rows detected. Expect headers: t,hit,err,x,y,releaseDeg,speed",
                dropped=dropped
            )

        if dropped:
            self.logger.info(f"Loaded {len(attempts)} attempts, dropped {dropped}")
        else:
            self.logger.info(f"Loaded {len(attempts)} attempts")

        return self._order(attempts)

    def _parse_row(self, record: Mapping[str, Any], index: int) -> Attempt:
        """Convert one raw row into an Attempt."""
        row = {}
        for key, value in record.items():
            name = FIELD_ALIASES.get(str(key).strip().lower())
            if name and name not in row:
                row[name] = value

        x = _parse_number(row.get('x'))
        y = _parse_number(row.get('y'))
        x = 0.0 if x is None else x
        y = 0.0 if y is None else y

        if not math.isfinite(x) or not math.isfinite(y):
            raise MalformedRowError(index + 1, "x and y must be finite numbers")

        err = _parse_number(row.get('err'))
        if err is None or not math.isfinite(err) or err < 0:
            err = math.hypot(x, y)

        return Attempt(
            id=f"u-{index}",
            sequence=_parse_sequence(row.get('t'), index),
            hit=_parse_hit(row.get('hit')),
            x=x,
            y=y,
            radial_error=err,
            release_angle=_finite_or_zero(_parse_number(row.get('releasedeg'))),
            speed=_finite_or_zero(_parse_number(row.get('speed')))
        )

    def _order(self, attempts: List[Attempt]) -> List[Attempt]:
        """Apply the configured ordering policy."""
        in_order = all(
            a.sequence <= b.sequence for a, b in zip(attempts, attempts[1:])
        )

        if in_order:
            return attempts

        if self.sort_by_sequence:
            self.logger.info("Sorting attempts by sequence")
            return sorted(attempts, key=lambda a: a.sequence)

        self.logger.warning(
            "Attempt sequence values are not in chronological order; "
            "keeping input order"
        )
        return attempts


def _parse_number(value: Any) -> Optional[float]:
    """
    Parse a numeric cell.

    Returns None for a missing or empty cell and NaN for unparseable text.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip()
    if not text:
        return None

    # Digit separators such as "1_000" are not valid cell values
    if '_' in text:
        return math.nan

    try:
        return float(text)
    except ValueError:
        return math.nan


def _finite_or_zero(value: Optional[float]) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return value


def _parse_sequence(value: Any, index: int) -> Number:
    number = _parse_number(value)
    if number is None or not math.isfinite(number):
        return index + 1
    return int(number) if number.is_integer() else number


def _parse_hit(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY_HIT_VALUES
