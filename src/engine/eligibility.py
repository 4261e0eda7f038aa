"""Eligibility Filter — 핸디캡 계산에 사용할 수 있는 라운드인지 판정."""

import logging
from typing import Iterable, Optional

from src.engine.differential import differential_from_round
from src.engine.handicap_config import (
    DEFAULT_PAR,
    MAX_COURSE_RATING,
    MAX_SLOPE_RATING,
    MIN_COURSE_RATING,
    MIN_SLOPE_RATING,
    SCORE_OVER_PAR_LIMIT,
    SCORE_UNDER_PAR_LIMIT,
)
from src.engine.handicap_types import Differential, RoundRecord

logger = logging.getLogger(__name__)


def is_eligible(
    score: Optional[int],
    course_rating: Optional[float],
    slope_rating: Optional[int],
    par: int = DEFAULT_PAR,
    under_par_limit: int = SCORE_UNDER_PAR_LIMIT,
    over_par_limit: int = SCORE_OVER_PAR_LIMIT,
    slope_range: tuple[int, int] = (MIN_SLOPE_RATING, MAX_SLOPE_RATING),
    course_rating_range: tuple[float, float] = (MIN_COURSE_RATING, MAX_COURSE_RATING),
) -> bool:
    """라운드가 핸디캡 계산에 사용 가능한지 판정.

    - score / course_rating / slope_rating 모두 존재하고 0이 아님
    - score ∈ [par - 10, par + 50]  (기권, 입력 오류 제외)
    - slope_rating ∈ [55, 155]
    - course_rating ∈ [60, 80]
    """
    if not score or not course_rating or not slope_rating:
        return False
    if par is None:
        par = DEFAULT_PAR
    if score < par - under_par_limit or score > par + over_par_limit:
        return False
    if slope_rating < slope_range[0] or slope_rating > slope_range[1]:
        return False
    if course_rating < course_rating_range[0] or course_rating > course_rating_range[1]:
        return False
    return True


def is_round_eligible(record: RoundRecord, par: int = DEFAULT_PAR, **bounds) -> bool:
    return is_eligible(
        record.score,
        record.course_rating,
        record.slope_rating,
        record.par if record.par is not None else par,
        **bounds,
    )


def differentials_from_rounds(
    rounds: Iterable[RoundRecord],
    par: int = DEFAULT_PAR,
    **bounds,
) -> list[Differential]:
    """Eligibility 통과 라운드만 Differential로 변환.

    부적격 라운드는 에러가 아니라 조용히 제외 (건수만 warning 로그).
    """
    differentials = []
    skipped = []
    for record in rounds:
        if is_round_eligible(record, par, **bounds):
            differentials.append(differential_from_round(record))
        else:
            skipped.append(record.round_id)

    if skipped:
        logger.warning(f"  Skipped {len(skipped)} ineligible round(s): {skipped[:10]}")
    return differentials
