"""Handicap Update Orchestrator — 라운드 완료 후 handicap index 재계산.

Flow:
    1. store.fetch_recent_rounds (player 전체 또는 bag 단위)
    2. Eligibility filter → differential
    3. calculate_index (best-N of most recent 20)
    4. store.write_index (profiles 또는 bags, overwrite)

재계산은 전체 라운드 history에서 매번 새로 유도하므로 같은 subject에 대한
동시 실행은 last-write-wins로 수렴한다.
"""

import logging
from datetime import date
from typing import Optional

from src.engine.eligibility import differentials_from_rounds
from src.engine.handicap_calculator import calculate_index
from src.engine.handicap_history import summarize_history
from src.engine.handicap_settings import HandicapConfig
from src.engine.handicap_types import (
    SUBJECT_EQUIPMENT_SET,
    SUBJECT_PLAYER,
    Differential,
    HandicapCalculationResult,
    HandicapIndex,
)

logger = logging.getLogger(__name__)


class HandicapUpdater:
    """Handicap 재계산 + 저장.

    store는 fetch_recent_rounds / write_index / get_current_handicap /
    list_equipment_sets 를 제공하는 객체 (SupabaseHandicapStore 등).
    """

    def __init__(self, store, config: Optional[HandicapConfig] = None, today: Optional[date] = None):
        self.store = store
        self.config = config or HandicapConfig()
        self._today = today

    def _differentials(self, player_id: str, equipment_set_id: Optional[str],
                       limit: int) -> list[Differential]:
        rounds = self.store.fetch_recent_rounds(player_id, equipment_set_id, limit=limit)
        return differentials_from_rounds(
            rounds,
            par=self.config.default_par,
            **self.config.eligibility_kwargs(),
        )

    def calculate(self, player_id: str, equipment_set_id: Optional[str] = None) -> HandicapCalculationResult:
        """저장 없이 index만 계산."""
        limit = max(self.config.lookback_rounds, self.config.window_size)
        differentials = self._differentials(player_id, equipment_set_id, limit)
        return calculate_index(differentials, as_of=self._today)

    def calculate_and_update(
        self,
        player_id: str,
        equipment_set_id: Optional[str] = None,
    ) -> HandicapCalculationResult:
        """index 계산 후 subject record에 저장. 실패 시 예외 전파.

        공식 index가 없으면(3 라운드 미만) 저장하지 않는다 (0.0을 scratch로 오인 방지).
        """
        if equipment_set_id:
            subject_id, subject_kind = equipment_set_id, SUBJECT_EQUIPMENT_SET
        else:
            subject_id, subject_kind = player_id, SUBJECT_PLAYER

        result = self.calculate(player_id, equipment_set_id)

        if not result.is_official:
            logger.info(
                f"  {subject_kind} {subject_id}: {result.total_rounds} eligible round(s), "
                f"no official index yet"
            )
            return result

        index = HandicapIndex.from_result(subject_id, subject_kind, result)
        self.store.write_index(index)
        logger.info(
            f"  {subject_kind} {subject_id}: index {result.handicap_index} "
            f"(best {result.differentials_count} of {result.total_rounds})"
        )
        return result

    def update_handicap_after_round(
        self,
        player_id: str,
        equipment_set_id: Optional[str] = None,
        *,
        round_id: Optional[str] = None,
    ) -> dict:
        """라운드 완료 후 player 전체 + (있으면) bag index 갱신.

        Best-effort: 실패해도 예외를 던지지 않는다 (라운드 저장을 막지 않음).

        Returns:
            dict with status ('success' | 'partial' | 'failed'), results, errors
        """
        targets = [(SUBJECT_PLAYER, None)]
        if equipment_set_id:
            targets.append((SUBJECT_EQUIPMENT_SET, equipment_set_id))

        results: dict[str, HandicapCalculationResult] = {}
        errors: dict[str, str] = {}
        for subject_kind, set_id in targets:
            try:
                results[subject_kind] = self.calculate_and_update(player_id, set_id)
            except Exception as e:
                logger.exception(
                    f"Handicap update failed for player {player_id} ({subject_kind}) "
                    f"after round {round_id}: {e}"
                )
                errors[subject_kind] = str(e)

        if not errors:
            status = 'success'
            logger.info(f"Handicaps updated for player {player_id} after round {round_id}")
        elif results:
            status = 'partial'
        else:
            status = 'failed'

        return {
            'status': status,
            'player_id': player_id,
            'round_id': round_id,
            'results': results,
            'errors': errors,
        }

    def recalculate_equipment_sets(self, player_id: str) -> dict[str, HandicapCalculationResult]:
        """player의 모든 bag index 재계산 (3 라운드 미만 bag은 저장 생략)."""
        set_ids = self.store.list_equipment_sets(player_id)
        logger.info(f"Recalculating {len(set_ids)} equipment set(s) for player {player_id}")
        return {set_id: self.calculate_and_update(player_id, set_id) for set_id in set_ids}

    def get_current_handicap(self, player_id: str, equipment_set_id: Optional[str] = None) -> Optional[float]:
        if equipment_set_id:
            return self.store.get_current_handicap(equipment_set_id, SUBJECT_EQUIPMENT_SET)
        return self.store.get_current_handicap(player_id, SUBJECT_PLAYER)

    def get_handicap_history(
        self,
        player_id: str,
        equipment_set_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Differential]:
        """최근 라운드 differential history (최신순)."""
        differentials = self._differentials(player_id, equipment_set_id, limit or self.config.history_limit)
        return sorted(differentials, key=lambda d: d.date_played, reverse=True)

    def history_report(self, player_id: str, equipment_set_id: Optional[str] = None) -> dict:
        """history + 현재 계산 기준 요약."""
        history = self.get_handicap_history(player_id, equipment_set_id)
        result = calculate_index(history, as_of=self._today)
        summary = summarize_history(history, result)
        summary['handicap_index'] = result.index_or_none
        summary['stored_handicap'] = self.get_current_handicap(player_id, equipment_set_id)
        return summary
