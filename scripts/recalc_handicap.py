"""Handicap 재계산 CLI.

Usage:
    python -m scripts.recalc_handicap --player <UUID>                   # player 전체 index
    python -m scripts.recalc_handicap --player <UUID> --bag <UUID>      # bag index
    python -m scripts.recalc_handicap --player <UUID> --all-bags        # 모든 bag 재계산
    python -m scripts.recalc_handicap --player <UUID> --history         # history 요약 (저장 없음)
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

# Setup
logging.basicConfig(level=logging.INFO, format='%(asctime)s %(message)s', datefmt='%H:%M:%S')
load_dotenv(os.path.join(os.path.dirname(__file__), '..', '.env'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.engine.handicap_history import format_handicap
from src.engine.handicap_settings import HandicapConfig
from src.etl.handicap_store import SupabaseHandicapStore
from src.pipeline.handicap_pipeline import HandicapUpdater


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='WHS Handicap Recalculation')
    parser.add_argument('--player', required=True, help='Player (profile) ID')
    parser.add_argument('--bag', help='Equipment set (bag) ID')
    parser.add_argument('--all-bags', action='store_true', help='Recalculate every bag of the player')
    parser.add_argument('--history', action='store_true', help='Print history summary only (no write)')
    parser.add_argument('--config', help='Path to handicap_config.yaml')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    config = HandicapConfig(args.config) if args.config else HandicapConfig()
    updater = HandicapUpdater(SupabaseHandicapStore(), config=config)

    print("\n" + "=" * 60)
    if args.history:
        summary = updater.history_report(args.player, args.bag)
        print(f"History: player {args.player}" + (f" / bag {args.bag}" if args.bag else ""))
        print(f"  Rounds: {summary['total_rounds']}")
        print(f"  Average score: {summary['average_score']}")
        print(f"  Average differential: {summary['average_differential']}")
        print(f"  Recent trend: {summary['recent_trend']}")
        print(f"  Calculated index: {format_handicap(summary['handicap_index'])}")
        print(f"  Stored index: {format_handicap(summary['stored_handicap'])}")
    elif args.all_bags:
        results = updater.recalculate_equipment_sets(args.player)
        print(f"Bags recalculated: {len(results)}")
        for bag_id, result in results.items():
            print(f"  {bag_id}: {format_handicap(result.index_or_none)} ({result.total_rounds} rounds)")
    else:
        result = updater.calculate_and_update(args.player, args.bag)
        print(f"Handicap index: {format_handicap(result.index_or_none)}")
        print(f"  Rounds considered: {result.total_rounds}")
        print(f"  Differentials used: {[d.value for d in result.differentials_used]}")
    print("=" * 60)


if __name__ == '__main__':
    main()
