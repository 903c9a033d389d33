"""
Trend Module
===========
Rolling-window accuracy over the chronological batch.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterator, List

from ..data_pipeline.models import Batch, Number
from ..exceptions import InvalidWindowError
from .metrics import percentage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrendPoint:
    """Rolling accuracy at one attempt."""
    sequence: Number
    rolling_accuracy: float
    window_length: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def clamp_window(window_size: Any, min_window: int = 3, max_window: int = 30,
                 default: int = 10) -> int:
    """
    Clamp a requested window size into the accepted range.

    Non-numeric requests fall back to the default; infinite requests
    clamp to the nearest bound.
    """
    try:
        requested = int(window_size)
    except OverflowError:
        requested = max_window if window_size > 0 else min_window
        logger.warning(f"Window size {window_size!r} clamped to {requested}")
    except (TypeError, ValueError):
        logger.warning(f"Invalid window size {window_size!r}, using {default}")
        requested = default

    clamped = max(min_window, min(max_window, requested))
    if clamped != requested:
        logger.warning(
            f"Window size {requested} outside [{min_window}, {max_window}], "
            f"clamped to {clamped}"
        )
    return clamped


def iter_rolling_accuracy(
    attempts: Batch,
    window_size: int = 10,
    precision: int = 2
) -> Iterator[TrendPoint]:
    """
    Yield one TrendPoint per attempt.

    The window for index i covers [max(0, i - w + 1), i]. A window larger
    than the batch widens to the full prefix.

    Raises:
        InvalidWindowError: If window_size < 1
    """
    if window_size is None or window_size < 1:
        raise InvalidWindowError(window_size)

    # prefix[i] = hits among attempts[:i]
    prefix = [0]
    for attempt in attempts:
        prefix.append(prefix[-1] + (1 if attempt.hit else 0))

    for i, attempt in enumerate(attempts):
        start = max(0, i - window_size + 1)
        length = i - start + 1
        hits = prefix[i + 1] - prefix[start]
        yield TrendPoint(
            sequence=attempt.sequence,
            rolling_accuracy=round(percentage(hits, length), precision),
            window_length=length
        )


def rolling_accuracy(
    attempts: Batch,
    window_size: int = 10,
    precision: int = 2
) -> List[TrendPoint]:
    """Rolling accuracy sequence, same length as the batch."""
    return list(iter_rolling_accuracy(attempts, window_size, precision))
