"""
Handicap Differential Calculator

핵심 공식:
  differential = round((score - course_rating - pcc) × 113 / slope_rating, 1)

  - pcc: Playing Conditions Calculation 보정 (기본 0)
  - 반올림: round-half-away-from-zero (핸디캡 표와 동일)
  - slope_rating ≤ 0 → InvalidRoundError (잘못된 숫자를 만들지 않음)
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from src.engine.handicap_config import SLOPE_BASELINE
from src.engine.handicap_types import Differential, InvalidRoundError, RoundRecord


def round_half_away(value: float, places: int = 1) -> float:
    """Round half away from zero (Python round()는 banker's rounding)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def calculate_differential(
    score: Optional[int],
    course_rating: Optional[float],
    slope_rating: Optional[int],
    pcc: float = 0.0,
) -> float:
    """라운드 1개의 handicap differential 계산.

    Args:
        score: 총 타수 (adjusted gross score)
        course_rating: 코스 레이팅
        slope_rating: 슬로프 레이팅 (> 0)
        pcc: Playing Conditions Calculation 보정

    Returns:
        소수점 1자리 differential

    Raises:
        InvalidRoundError: 입력 누락 또는 slope_rating ≤ 0
    """
    if score is None or course_rating is None or slope_rating is None:
        raise InvalidRoundError(
            f"score/course_rating/slope_rating required "
            f"(got {score!r}, {course_rating!r}, {slope_rating!r})"
        )
    if slope_rating <= 0:
        raise InvalidRoundError(f"slope_rating must be positive (got {slope_rating!r})")

    # Decimal로 계산해 float 오차로 .x5 경계가 흔들리지 않게 한다
    raw = (
        (Decimal(str(int(score))) - Decimal(str(float(course_rating))) - Decimal(str(float(pcc or 0.0))))
        * SLOPE_BASELINE
        / Decimal(int(slope_rating))
    )
    return float(raw.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def differential_from_round(record: RoundRecord) -> Differential:
    """RoundRecord → Differential."""
    value = calculate_differential(
        record.score,
        record.course_rating,
        record.slope_rating,
        record.playing_condition_adjustment,
    )
    return Differential(
        source_round_id=record.round_id,
        value=value,
        date_played=record.date_played,
        equipment_set_id=record.equipment_set_id,
        score=record.score,
        course_rating=record.course_rating,
        slope_rating=record.slope_rating,
    )
