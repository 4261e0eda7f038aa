"""Course Projection — handicap index → course handicap / expected score.

Course Handicap = Handicap Index × (Slope Rating / 113) + (Course Rating - Par)
Expected Score  = Par + Course Handicap

differential 계산(× 113 / slope)의 역방향 스케일링.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from src.engine.handicap_config import DEFAULT_PAR, SLOPE_BASELINE
from src.engine.handicap_types import CourseProjection, InvalidRoundError


def calculate_course_handicap(
    handicap_index: Optional[float],
    course_rating: float,
    slope_rating: int,
    par: int = DEFAULT_PAR,
) -> CourseProjection:
    """코스/티 조합에 대한 course handicap + expected score.

    handicap_index가 None(공식 index 없음)이면 호출 자체가 잘못된 것이므로
    0으로 대체하지 않고 InvalidRoundError.
    """
    if handicap_index is None:
        raise InvalidRoundError("handicap_index is required (no official index yet?)")
    if not slope_rating or slope_rating <= 0:
        raise InvalidRoundError(f"slope_rating must be positive (got {slope_rating!r})")
    if course_rating is None:
        raise InvalidRoundError("course_rating is required")

    # differential과 같은 Decimal 계산 (.5 경계에서 float 오차 방지)
    raw = (
        Decimal(str(float(handicap_index))) * Decimal(int(slope_rating)) / SLOPE_BASELINE
        + (Decimal(str(float(course_rating))) - Decimal(int(par)))
    )
    course_handicap = int(raw.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return CourseProjection(
        course_handicap=course_handicap,
        expected_score=par + course_handicap,
    )


def calculate_expected_score(
    handicap_index: float,
    course_rating: float,
    slope_rating: int,
    par: int = DEFAULT_PAR,
) -> int:
    return calculate_course_handicap(handicap_index, course_rating, slope_rating, par).expected_score
