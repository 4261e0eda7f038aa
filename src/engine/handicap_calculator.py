"""
WHS Handicap Index Aggregator

최근 20 라운드 window에서 best-N differential 평균 × 0.96.

Selection table (n = window 크기):
  n ≥ 20      → best 8
  5 ≤ n < 20  → best max(1, floor(n × 0.4))
  3 ≤ n < 5   → best 1
  n < 3       → 공식 index 없음 (STATUS_INSUFFICIENT_DATA)

Tie-break: differential 값이 같으면 최근 라운드 우선.

NOTE: 5~19 라운드 구간은 공식 WHS 표(n별 lookup)의 단순화 버전.
기존 시스템과 결과를 맞추기 위해 그대로 유지한다.
"""

import math
from datetime import date
from typing import Iterable, Optional

import numpy as np

from src.engine.differential import round_half_away
from src.engine.handicap_config import (
    INDEX_MULTIPLIER,
    MAX_DIFFERENTIALS_USED,
    MIN_HANDICAP_INDEX,
    MIN_ROUNDS_FOR_INDEX,
    PARTIAL_WINDOW_MIN_ROUNDS,
    PARTIAL_WINDOW_RATIO,
    WINDOW_SIZE,
)
from src.engine.handicap_types import (
    STATUS_COMPUTED,
    STATUS_INSUFFICIENT_DATA,
    Differential,
    HandicapCalculationResult,
)


def selection_count(n: int) -> int:
    """window 크기 n에 대해 평균에 사용할 best differential 수. n < 3이면 0."""
    if n >= WINDOW_SIZE:
        return MAX_DIFFERENTIALS_USED
    if n >= PARTIAL_WINDOW_MIN_ROUNDS:
        return max(1, math.floor(n * PARTIAL_WINDOW_RATIO))
    if n >= MIN_ROUNDS_FOR_INDEX:
        return 1
    return 0


def recent_window(differentials: Iterable[Differential], size: int = WINDOW_SIZE) -> list[Differential]:
    """date_played 내림차순 정렬 후 최근 size개.

    같은 날짜(36홀 등)는 source_round_id 내림차순으로 고정해 입력 순서와 무관하게 한다.
    """
    ordered = sorted(differentials, key=lambda d: (d.date_played, d.source_round_id), reverse=True)
    return ordered[:size]


def select_best(window: list[Differential], k: int) -> list[Differential]:
    """differential 오름차순, 동률이면 최근 라운드 우선으로 k개 선택."""
    ranked = sorted(window, key=lambda d: (d.value, -d.date_played.toordinal(), d.source_round_id))
    return ranked[:k]


def calculate_index(
    differentials: Iterable[Differential],
    as_of: Optional[date] = None,
) -> HandicapCalculationResult:
    """Differential 목록 → HandicapCalculationResult.

    Args:
        differentials: eligible differential (순서 무관, 내부에서 재정렬)
        as_of: effective_date (None이면 오늘)

    Returns:
        HandicapCalculationResult. 3 라운드 미만이면 handicap_index=0.0,
        status=STATUS_INSUFFICIENT_DATA.
    """
    effective_date = as_of or date.today()
    window = recent_window(differentials)
    n = len(window)
    k = selection_count(n)

    if k == 0:
        return HandicapCalculationResult(
            handicap_index=0.0,
            differentials_used=[],
            total_rounds=n,
            effective_date=effective_date,
            status=STATUS_INSUFFICIENT_DATA,
        )

    used = select_best(window, k)
    average = float(np.mean([d.value for d in used]))
    handicap_index = max(MIN_HANDICAP_INDEX, round_half_away(average * INDEX_MULTIPLIER, 1))

    return HandicapCalculationResult(
        handicap_index=handicap_index,
        differentials_used=used,
        total_rounds=n,
        effective_date=effective_date,
        status=STATUS_COMPUTED,
    )


def rounds_needed(total_rounds: int) -> int:
    """공식 index까지 필요한 추가 라운드 수."""
    return max(0, MIN_ROUNDS_FOR_INDEX - total_rounds)
