"""Handicap history 요약 (DataFrame 기반)."""

from typing import Iterable, Optional

import pandas as pd

from src.engine.handicap_types import Differential, HandicapCalculationResult

HISTORY_COLUMNS = [
    'round_id', 'date_played', 'equipment_set_id', 'score',
    'course_rating', 'slope_rating', 'differential', 'used',
]

TREND_UP = 'up'
TREND_DOWN = 'down'
TREND_STABLE = 'stable'


def build_history_frame(
    differentials: Iterable[Differential],
    result: Optional[HandicapCalculationResult] = None,
) -> pd.DataFrame:
    """Differential 목록 → DataFrame (최근 라운드 먼저).

    used: result.differentials_used에 포함된 라운드 여부.
    """
    used_ids = {d.source_round_id for d in result.differentials_used} if result else set()
    rows = [{
        'round_id': d.source_round_id,
        'date_played': d.date_played,
        'equipment_set_id': d.equipment_set_id,
        'score': d.score,
        'course_rating': d.course_rating,
        'slope_rating': d.slope_rating,
        'differential': d.value,
        'used': d.source_round_id in used_ids,
    } for d in differentials]

    df = pd.DataFrame(rows, columns=HISTORY_COLUMNS)
    if df.empty:
        return df
    return df.sort_values('date_played', ascending=False, kind='stable').reset_index(drop=True)


def recent_trend(history_df: pd.DataFrame) -> Optional[str]:
    """가장 최근 두 differential 비교. 낮아지면 'down' (개선)."""
    if len(history_df) < 2:
        return None
    current = history_df['differential'].iloc[0]
    previous = history_df['differential'].iloc[1]
    if current < previous:
        return TREND_DOWN
    if current > previous:
        return TREND_UP
    return TREND_STABLE


def summarize_history(
    differentials: Iterable[Differential],
    result: Optional[HandicapCalculationResult] = None,
) -> dict:
    """History 요약 통계.

    Returns:
        dict with total_rounds, average_score, average_differential,
        lowest_differential, recent_trend, rounds_used
    """
    df = build_history_frame(differentials, result)
    if df.empty:
        return {
            'total_rounds': 0,
            'average_score': None,
            'average_differential': None,
            'lowest_differential': None,
            'recent_trend': None,
            'rounds_used': 0,
        }

    scores = df['score'].dropna()
    return {
        'total_rounds': len(df),
        'average_score': round(float(scores.mean()), 1) if not scores.empty else None,
        'average_differential': round(float(df['differential'].mean()), 1),
        'lowest_differential': float(df['differential'].min()),
        'recent_trend': recent_trend(df),
        'rounds_used': int(df['used'].sum()),
    }


def format_handicap(value: Optional[float]) -> str:
    """표시용 문자열: None → 'N/A', 0 → 'Scratch', 음수 → '+x.x'."""
    if value is None:
        return 'N/A'
    if value == 0:
        return 'Scratch'
    if value < 0:
        return f"+{abs(value):.1f}"
    return f"{value:.1f}"
