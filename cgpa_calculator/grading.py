import logging
import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple, Union

import numpy as np

from cgpa_calculator.config import PERCENTAGE_FACTOR

logger = logging.getLogger(__name__)

# ------------------------
# Anna University grading table
# ------------------------
GRADE_POINTS = {
    "O": 10,
    "A+": 9,
    "A": 8,
    "B+": 7,
    "B": 6,
    "C": 5,
    "RA": 0,
    "SA": 0,
    "W": 0,
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def round_2dp_half_up(x) -> float:
    return float(Decimal(str(x)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def parse_credits(value) -> Optional[int]:
    """
    Parse a credits cell the way a browser number field's parseInt would.

    "4" -> 4, " 3" -> 3, "4.7" -> 4, "3abc" -> 3, "" / "abc" / None / NaN -> None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        if not math.isfinite(value):
            return None
        return int(value)
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


@dataclass(frozen=True)
class AverageResult:
    value: float = 0.0
    total_credits: int = 0
    counted: int = 0
    skipped_ids: Tuple[str, ...] = ()

    @property
    def formatted(self) -> str:
        return f"{self.value:.2f}"

    @property
    def is_zero(self) -> bool:
        return self.total_credits == 0

    def __str__(self) -> str:
        return self.formatted


ZERO_RESULT = AverageResult()


def weighted_mean(gc: np.ndarray) -> Tuple[float, int]:
    """
    gc: Nx2 object array of Python ints -> [points, credits]
    returns: (credit-weighted mean points rounded to 2dp, total credits)
    """
    if gc.size == 0:
        return 0.0, 0

    points = gc[:, 0]
    credits = gc[:, 1]
    total_credits = int(credits.sum())
    if total_credits == 0:
        return 0.0, 0

    mean = float(int(np.dot(points, credits)) / total_credits)
    return round_2dp_half_up(mean), total_credits


def compute_average(records: Iterable) -> AverageResult:
    """
    Fold subject records into a credit-weighted CGPA.

    Rows with an unknown grade or credits that do not parse as an integer are
    left out of the sum. They never raise; their ids are reported back in
    ``skipped_ids``. When no credits are counted the zero result ("0.00") is
    returned.
    """
    rows = []
    skipped = []
    for record in records:
        points = GRADE_POINTS.get(record.grade)
        credits = parse_credits(record.credits)
        if points is None or credits is None:
            logger.debug(
                "Skipping subject %s (grade=%r, credits=%r)",
                record.id, record.grade, record.credits,
            )
            skipped.append(record.id)
            continue
        rows.append((points, credits))

    # object dtype keeps exact Python ints; credits are unbounded
    gc = np.array(rows, dtype=object).reshape(-1, 2)
    mean, total_credits = weighted_mean(gc)
    if total_credits == 0:
        return AverageResult(counted=len(rows), skipped_ids=tuple(skipped))

    return AverageResult(
        value=mean,
        total_credits=total_credits,
        counted=len(rows),
        skipped_ids=tuple(skipped),
    )


def compute_percentage(average: Union[AverageResult, float, str, None]) -> str:
    """Anna University equivalent percentage: CGPA x 9.5, as "x.xx"."""
    if isinstance(average, AverageResult):
        average = average.formatted
    if not average:
        return "0.00"
    try:
        cgpa = Decimal(str(average).strip())
    except InvalidOperation:
        return "0.00"
    if not cgpa.is_finite():
        return "0.00"

    percentage = (cgpa * Decimal(str(PERCENTAGE_FACTOR))).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )
    return f"{percentage:.2f}"
