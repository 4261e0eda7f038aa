"""Handicap Engine Types.

RoundRecord → Differential → HandicapCalculationResult → HandicapIndex
CourseProjection은 요청 시 계산 (저장하지 않음).
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from src.engine.handicap_config import CALCULATION_METHOD

# === Constants ===

STATUS_COMPUTED = "computed"
STATUS_INSUFFICIENT_DATA = "insufficient_data"

SUBJECT_PLAYER = "player"
SUBJECT_EQUIPMENT_SET = "equipment_set"


class InvalidRoundError(ValueError):
    """라운드 입력값이 계산에 사용할 수 없는 경우 (예: slope ≤ 0)."""


@dataclass(frozen=True)
class RoundRecord:
    """라운드 기록 (round-entry 서브시스템 소유, 엔진은 읽기만)."""
    round_id: str
    player_id: str
    score: Optional[int]
    course_rating: Optional[float]
    slope_rating: Optional[int]
    date_played: date
    equipment_set_id: Optional[str] = None
    playing_condition_adjustment: float = 0.0
    par: Optional[int] = None


@dataclass(frozen=True)
class Differential:
    """라운드 1개의 handicap differential (DB 미저장, 매번 재계산)."""
    source_round_id: str
    value: float
    date_played: date
    equipment_set_id: Optional[str] = None
    score: Optional[int] = None
    course_rating: Optional[float] = None
    slope_rating: Optional[int] = None


@dataclass
class HandicapCalculationResult:
    """Index 계산 결과.

    status == STATUS_INSUFFICIENT_DATA 이면 handicap_index 0.0은 실제 index가 아니다.
    호출자는 is_official / index_or_none 으로 구분해야 한다.
    """
    handicap_index: float
    differentials_used: list[Differential]
    total_rounds: int
    effective_date: date
    status: str = STATUS_COMPUTED
    calculation_method: str = CALCULATION_METHOD

    @property
    def is_official(self) -> bool:
        return self.status == STATUS_COMPUTED

    @property
    def index_or_none(self) -> Optional[float]:
        return self.handicap_index if self.is_official else None

    @property
    def differentials_count(self) -> int:
        return len(self.differentials_used)


@dataclass
class HandicapIndex:
    """저장 대상 index (subject당 1개, 재계산 시 overwrite)."""
    subject_id: str
    subject_kind: str
    value: float
    effective_date: date
    rounds_considered: int
    method: str = CALCULATION_METHOD

    @classmethod
    def from_result(cls, subject_id: str, subject_kind: str,
                    result: HandicapCalculationResult) -> "HandicapIndex":
        return cls(
            subject_id=subject_id,
            subject_kind=subject_kind,
            value=result.handicap_index,
            effective_date=result.effective_date,
            rounds_considered=result.total_rounds,
            method=result.calculation_method,
        )


@dataclass(frozen=True)
class CourseProjection:
    """코스별 course handicap + expected score."""
    course_handicap: int
    expected_score: int

