"""
Attempt Model
============
Immutable shot attempt record.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union

Number = Union[int, float]


@dataclass(frozen=True)
class Attempt:
    """
    A single recorded shot attempt.

    x and y are the signed impact offset from the target center, in the same
    unit as radial_error. If radial_error is not supplied it is derived from
    the offset.
    """
    id: str
    sequence: Number
    hit: bool
    x: float
    y: float
    radial_error: Optional[float] = None
    release_angle: float = 0.0
    speed: float = 0.0

    def __post_init__(self):
        if self.radial_error is None:
            object.__setattr__(self, 'radial_error', math.hypot(self.x, self.y))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'sequence': self.sequence,
            'hit': self.hit,
            'radial_error': self.radial_error,
            'x': self.x,
            'y': self.y,
            'release_angle': self.release_angle,
            'speed': self.speed
        }

    def to_row(self) -> Dict[str, Any]:
        """Row in the delimited ingestion format (t,hit,err,x,y,releaseDeg,speed)."""
        return {
            't': self.sequence,
            'hit': 1 if self.hit else 0,
            'err': self.radial_error,
            'x': self.x,
            'y': self.y,
            'releaseDeg': self.release_angle,
            'speed': self.speed
        }


# A batch is an ordered, chronological sequence of attempts
Batch = Sequence[Attempt]
