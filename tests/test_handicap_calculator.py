"""WHS handicap index aggregator 테스트."""

from datetime import date, timedelta

import pytest
from src.engine.handicap_calculator import (
    calculate_index,
    recent_window,
    rounds_needed,
    select_best,
    selection_count,
)
from src.engine.handicap_config import INDEX_MULTIPLIER, MAX_DIFFERENTIALS_USED, WINDOW_SIZE
from src.engine.handicap_types import STATUS_COMPUTED, STATUS_INSUFFICIENT_DATA, Differential

AS_OF = date(2025, 7, 1)


def _diffs(values: list[float], start: date = date(2025, 6, 30)) -> list[Differential]:
    """values[0]이 가장 최근 라운드."""
    return [
        Differential(source_round_id=f'r-{i}', value=v, date_played=start - timedelta(days=i))
        for i, v in enumerate(values)
    ]


# === Config ===

def test_config_constants():
    assert INDEX_MULTIPLIER == 0.96
    assert WINDOW_SIZE == 20
    assert MAX_DIFFERENTIALS_USED == 8


# === Selection table ===

@pytest.mark.parametrize("n,k", [
    (0, 0), (1, 0), (2, 0),
    (3, 1), (4, 1),
    (5, 2), (9, 3), (10, 4), (19, 7),
    (20, 8), (25, 8),
])
def test_selection_count(n, k):
    assert selection_count(n) == k


@pytest.mark.parametrize("n,k", [(1, 0), (2, 0), (4, 1), (5, 2), (9, 3), (19, 7), (20, 8), (25, 8)])
def test_differentials_used_matches_table(n, k):
    """calculate_index의 differentials_used 수 = selection table."""
    result = calculate_index(_diffs([10.0 + i * 0.1 for i in range(n)]), as_of=AS_OF)
    assert len(result.differentials_used) == k
    assert result.total_rounds == min(n, WINDOW_SIZE)


# === Insufficient data ===

@pytest.mark.parametrize("n", [0, 1, 2])
def test_insufficient_data_flagged(n):
    """3 라운드 미만 → index 0.0 이지만 공식 index 아님."""
    result = calculate_index(_diffs([12.0] * n), as_of=AS_OF)
    assert result.status == STATUS_INSUFFICIENT_DATA
    assert result.is_official is False
    assert result.index_or_none is None
    assert result.handicap_index == 0.0
    assert result.differentials_used == []
    assert result.total_rounds == n


def test_scratch_index_distinguishable_from_no_index():
    """실제 0.0 index는 is_official=True."""
    result = calculate_index(_diffs([0.0, 0.0, 0.0]), as_of=AS_OF)
    assert result.status == STATUS_COMPUTED
    assert result.handicap_index == 0.0
    assert result.index_or_none == 0.0


# === Scenario ===

def test_twenty_round_scenario():
    """20 라운드 → best 8 평균 4.7875 × 0.96 = 4.596 → 4.6"""
    values = [5.2, 6.8, 4.1, 7.3, 5.9, 6.0, 4.8, 5.5, 6.2, 5.0,
              4.9, 7.0, 6.5, 5.3, 4.6, 5.8, 6.1, 4.4, 5.7, 6.3]
    result = calculate_index(_diffs(values), as_of=AS_OF)

    assert result.is_official
    assert sorted(d.value for d in result.differentials_used) == [4.1, 4.4, 4.6, 4.8, 4.9, 5.0, 5.2, 5.3]
    assert result.handicap_index == 4.6
    assert result.total_rounds == 20
    assert result.effective_date == AS_OF
    assert result.calculation_method == 'WHS'


def test_only_most_recent_twenty_considered():
    """오래된 라운드의 좋은 differential은 window 밖이면 무시."""
    values = [10.0] * 20 + [0.0] * 5  # 0.0은 가장 오래된 5 라운드
    result = calculate_index(_diffs(values), as_of=AS_OF)
    assert result.total_rounds == 20
    assert all(d.value == 10.0 for d in result.differentials_used)
    assert result.handicap_index == 9.6


def test_input_order_irrelevant():
    values = [12.3, 8.1, 15.0, 9.9, 11.2, 7.7, 13.4]
    diffs = _diffs(values)
    a = calculate_index(diffs, as_of=AS_OF)
    b = calculate_index(list(reversed(diffs)), as_of=AS_OF)
    assert a.handicap_index == b.handicap_index
    assert [d.source_round_id for d in a.differentials_used] == [d.source_round_id for d in b.differentials_used]


def test_same_date_window_cutoff_independent_of_input_order():
    """window 경계(20번째)에 같은 날짜 라운드 2개 → 입력 순서와 무관하게 같은 결과."""
    diffs = _diffs([10.0] * 19) + [
        Differential('same-a', 1.0, date(2025, 5, 1)),
        Differential('same-b', 30.0, date(2025, 5, 1)),
    ]
    forward = calculate_index(diffs, as_of=AS_OF)
    backward = calculate_index(list(reversed(diffs)), as_of=AS_OF)

    assert forward.handicap_index == backward.handicap_index == 9.6
    assert [d.source_round_id for d in forward.differentials_used] == \
        [d.source_round_id for d in backward.differentials_used]
    window_ids = {d.source_round_id for d in recent_window(diffs)}
    assert 'same-b' in window_ids
    assert 'same-a' not in window_ids


def test_three_rounds_uses_best_one():
    result = calculate_index(_diffs([15.0, 12.5, 18.0]), as_of=AS_OF)
    assert [d.value for d in result.differentials_used] == [12.5]
    assert result.handicap_index == 12.0  # 12.5 × 0.96


def test_nine_rounds_uses_best_three():
    values = [20.0, 14.0, 18.0, 11.0, 16.0, 13.0, 19.0, 17.0, 15.0]
    result = calculate_index(_diffs(values), as_of=AS_OF)
    assert [d.value for d in result.differentials_used] == [11.0, 13.0, 14.0]
    # mean 12.666.. × 0.96 = 12.16 → 12.2
    assert result.handicap_index == 12.2


# === Non-negativity ===

def test_index_never_negative():
    result = calculate_index(_diffs([-8.0, -6.5, -7.2, -9.1, -5.0]), as_of=AS_OF)
    assert result.is_official
    assert result.handicap_index == 0.0


def test_small_negative_rounds_to_zero_not_negative_zero():
    result = calculate_index(_diffs([-0.1, 5.0, 6.0]), as_of=AS_OF)
    assert result.handicap_index == 0.0
    assert str(result.handicap_index) == '0.0'


# === Tie-break ===

def test_tie_break_prefers_recent_round():
    """같은 differential이면 최근 라운드가 선택된다."""
    diffs = [
        Differential('old', 8.0, date(2025, 1, 10)),
        Differential('new', 8.0, date(2025, 6, 10)),
        Differential('mid', 12.0, date(2025, 3, 10)),
    ]
    result = calculate_index(diffs, as_of=AS_OF)
    assert [d.source_round_id for d in result.differentials_used] == ['new']


def test_select_best_orders_by_value_then_recency():
    window = [
        Differential('a', 5.0, date(2025, 1, 1)),
        Differential('b', 4.0, date(2025, 1, 2)),
        Differential('c', 5.0, date(2025, 1, 3)),
    ]
    assert [d.source_round_id for d in select_best(window, 3)] == ['b', 'c', 'a']


def test_recent_window_sorted_desc():
    window = recent_window(_diffs([1.0, 2.0, 3.0]), size=2)
    assert [d.source_round_id for d in window] == ['r-0', 'r-1']


# === rounds_needed ===

@pytest.mark.parametrize("total,needed", [(0, 3), (1, 2), (2, 1), (3, 0), (20, 0)])
def test_rounds_needed(total, needed):
    assert rounds_needed(total) == needed
