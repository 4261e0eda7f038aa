"""Supabase collaborator store — 라운드 조회 / handicap index 저장.

Tables:
    rounds       (id, user_id, bag_id, total_score, round_date, course_tees → men_rating, men_slope)
                 rounds에 PCC 컬럼이 없으므로 playing_condition_adjustment는 항상 0.0
    profiles     (id, handicap, updated_at)      ← player index
    bags         (id, user_id, handicap, updated_at)  ← equipment set index
"""

import os
import logging
from datetime import date, datetime, timezone
from typing import Optional

from postgrest.exceptions import APIError
from supabase import create_client

from src.engine.handicap_config import MAX_HANDICAP_INDEX, MIN_HANDICAP_INDEX, WINDOW_SIZE
from src.engine.handicap_types import (
    SUBJECT_EQUIPMENT_SET,
    SUBJECT_PLAYER,
    HandicapIndex,
    RoundRecord,
)

logger = logging.getLogger(__name__)

ROUNDS_TABLE = 'rounds'
SUBJECT_TABLES = {
    SUBJECT_PLAYER: 'profiles',
    SUBJECT_EQUIPMENT_SET: 'bags',
}

ROUND_SELECT = (
    'id, user_id, total_score, round_date, bag_id, '
    'course_tees!inner (men_rating, men_slope)'
)


class HandicapStoreError(RuntimeError):
    """Supabase 조회/저장 실패."""


def get_supabase_client():
    url = os.environ['SUPABASE_URL']
    key = os.environ['SUPABASE_KEY']
    return create_client(url, key)


def _parse_round_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # timestamptz ISO string → date
    return date.fromisoformat(str(value)[:10])


def prepare_round_record(row: dict) -> RoundRecord:
    """rounds row (course_tees join 포함) → RoundRecord."""
    tees = row.get('course_tees') or {}
    # PostgREST가 1:1 join을 list로 줄 때도 있음
    if isinstance(tees, list):
        tees = tees[0] if tees else {}
    return RoundRecord(
        round_id=str(row['id']),
        player_id=str(row.get('user_id', '')),
        score=row.get('total_score'),
        course_rating=tees.get('men_rating'),
        slope_rating=tees.get('men_slope'),
        date_played=_parse_round_date(row['round_date']),
        equipment_set_id=row.get('bag_id'),
    )


def prepare_index_record(index: HandicapIndex) -> dict:
    """HandicapIndex → profiles/bags update payload. [0, 54.0] 범위로 clamp."""
    value = index.value
    clamped = max(MIN_HANDICAP_INDEX, min(MAX_HANDICAP_INDEX, value))
    if clamped != value:
        logger.warning(
            f"  Handicap {value} out of range for {index.subject_kind} {index.subject_id}, "
            f"clamped to {clamped}"
        )
    return {
        'handicap': clamped,
        'updated_at': datetime.now(timezone.utc).isoformat(),
    }


class SupabaseHandicapStore:
    """Orchestrator가 주입받는 persistence interface (Supabase 구현)."""

    def __init__(self, client=None):
        self.client = client if client is not None else get_supabase_client()

    def fetch_recent_rounds(
        self,
        player_id: str,
        equipment_set_id: Optional[str] = None,
        limit: int = WINDOW_SIZE,
    ) -> list[RoundRecord]:
        """완료된(total_score, rating, slope 존재) 최근 라운드 최대 limit개."""
        query = (
            self.client.table(ROUNDS_TABLE)
            .select(ROUND_SELECT)
            .eq('user_id', player_id)
            .not_.is_('total_score', 'null')
            .not_.is_('course_tees.men_rating', 'null')
            .not_.is_('course_tees.men_slope', 'null')
        )
        if equipment_set_id:
            query = query.eq('bag_id', equipment_set_id)

        try:
            response = query.order('round_date', desc=True).limit(limit).execute()
        except APIError as e:
            raise HandicapStoreError(f"Failed to fetch rounds for player {player_id}: {e}") from e

        rows = response.data or []
        return [prepare_round_record(row) for row in rows]

    def write_index(self, index: HandicapIndex) -> None:
        """subject의 handicap을 overwrite (last-write-wins)."""
        table = SUBJECT_TABLES.get(index.subject_kind)
        if table is None:
            raise ValueError(f"Unknown subject kind: {index.subject_kind!r}")

        record = prepare_index_record(index)
        try:
            self.client.table(table).update(record).eq('id', index.subject_id).execute()
        except APIError as e:
            raise HandicapStoreError(
                f"Failed to write handicap for {index.subject_kind} {index.subject_id}: {e}"
            ) from e
        logger.info(f"  {table}[{index.subject_id}] handicap = {record['handicap']}")

    def get_current_handicap(self, subject_id: str, subject_kind: str = SUBJECT_PLAYER) -> Optional[float]:
        """저장된 handicap 조회. record 또는 값이 없으면 None."""
        table = SUBJECT_TABLES.get(subject_kind)
        if table is None:
            raise ValueError(f"Unknown subject kind: {subject_kind!r}")

        try:
            response = self.client.table(table).select('handicap').eq('id', subject_id).limit(1).execute()
        except APIError as e:
            logger.warning(f"  Failed to read handicap for {subject_kind} {subject_id}: {e}")
            return None

        rows = response.data or []
        if not rows or rows[0].get('handicap') is None:
            return None
        return float(rows[0]['handicap'])

    def list_equipment_sets(self, player_id: str) -> list[str]:
        """player 소유 bag id 목록."""
        try:
            response = (
                self.client.table(SUBJECT_TABLES[SUBJECT_EQUIPMENT_SET])
                .select('id')
                .eq('user_id', player_id)
                .order('name')
                .execute()
            )
        except APIError as e:
            raise HandicapStoreError(f"Failed to list bags for player {player_id}: {e}") from e
        return [str(row['id']) for row in (response.data or [])]
