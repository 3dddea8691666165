"""
Season calculation CLI

Usage:
    python -m app.cli spreads --season 2024
    python -m app.cli sos --season 2024 --classification fbs
    python -m app.cli all

Operations:
    spreads   Calculate game spreads and win probabilities, then validate
    validate  Report spread coverage and out-of-range values
    clear     Null the derived spread fields for a season
    sos       Recompute strength of schedule and rankings
    luck      Recompute luck analysis
    all       spreads -> sos -> luck
    status    Show the latest SOS and luck calculation status
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import AsyncSessionLocal
from app.services.calculation_tracking import CALCULATION_TYPES, get_calculation_status
from app.services.spread_service import GameSpreadService
from app.services.sos_service import SOSService
from app.services.luck_service import LuckService

logger = logging.getLogger(__name__)

OPERATIONS = ('spreads', 'validate', 'clear', 'sos', 'luck', 'all', 'status')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='College football season calculations')
    parser.add_argument('operation', choices=OPERATIONS, help='Calculation to run')
    parser.add_argument('--season', type=int, default=None,
                        help=f'Season year (default: {settings.CFB_SEASON_YEAR})')
    parser.add_argument('--classification', default=None,
                        help=f'Team classification (default: {settings.DEFAULT_CLASSIFICATION})')
    return parser


async def run_spreads(db: AsyncSession, season: int) -> None:
    service = GameSpreadService(db)
    summary = await service.calculate_game_spreads(season)

    print(f"Total games: {summary.total_games}")
    print(f"Processed: {summary.processed}")
    print(f"Skipped (missing ratings): {summary.skipped}")
    print()

    await run_validate(db, season)


async def run_validate(db: AsyncSession, season: int) -> None:
    report = await GameSpreadService(db).validate(season)

    print(f"Validation for {season}:")
    print(f"  Games: {report.total_games}")
    print(f"  With spreads: {report.games_with_spreads}")
    print(f"  With win probabilities: {report.games_with_probabilities}")
    if report.avg_abs_spread is not None:
        print(f"  Average |spread|: {report.avg_abs_spread:.2f}")
    if report.avg_home_win_probability is not None:
        print(f"  Average home win probability: {report.avg_home_win_probability:.4f}")

    if report.anomalies:
        print(f"  ⚠️  {len(report.anomalies)} anomalies:")
        for anomaly in report.anomalies:
            print(
                f"    Game {anomaly['game_id']}: {anomaly['home_team']} vs {anomaly['away_team']} "
                f"spread={anomaly['home_spread']} prob={anomaly['home_pregame_win_probability']}"
            )
    else:
        print("  ✅ No anomalies")


async def run_clear(db: AsyncSession, season: int) -> None:
    cleared = await GameSpreadService(db).clear(season)
    print(f"Cleared spread data for {cleared} games in {season}")


async def run_sos(db: AsyncSession, season: int, classification: str) -> None:
    summary = await SOSService(db).calculate_season(season, classification)
    print(f"✅ SOS calculated for {summary.team_count} {classification} teams in {season}")
    print(f"Skipped (unrated opponents): {summary.skipped_opponents}")


async def run_luck(db: AsyncSession, season: int, classification: str) -> None:
    summary = await LuckService(db).calculate_season(season, classification)
    print(f"✅ Luck calculated for {summary.team_count} {classification} teams in {season}")


async def run_status(db: AsyncSession, season: int) -> None:
    for calculation_type in CALCULATION_TYPES:
        status = await get_calculation_status(db, calculation_type, season)
        line = f"{calculation_type}: {status['status']}"
        if status['completed_at']:
            line += f" (completed {status['completed_at']}, {status['team_count']} teams)"
        elif status['started_at']:
            line += f" (started {status['started_at']})"
        print(line)
        if status['error_message']:
            print(f"  error: {status['error_message']}")


async def run_operation(db: AsyncSession, operation: str, season: int, classification: str) -> None:
    if operation == 'spreads':
        await run_spreads(db, season)
    elif operation == 'validate':
        await run_validate(db, season)
    elif operation == 'clear':
        await run_clear(db, season)
    elif operation == 'sos':
        await run_sos(db, season, classification)
    elif operation == 'luck':
        await run_luck(db, season, classification)
    elif operation == 'all':
        await run_spreads(db, season)
        print()
        await run_sos(db, season, classification)
        await run_luck(db, season, classification)
    elif operation == 'status':
        await run_status(db, season)
    else:
        raise ValueError(f"Unknown operation: {operation}")


async def main(argv: Optional[List[str]] = None) -> int:
    """Run one operation; returns the process exit code."""
    args = build_parser().parse_args(argv)
    season = args.season or settings.CFB_SEASON_YEAR
    classification = args.classification or settings.DEFAULT_CLASSIFICATION

    print("=" * 60)
    print(f"CFB {args.operation.upper()} - {season} ({classification})")
    print("=" * 60)
    print()

    try:
        async with AsyncSessionLocal() as db:
            await run_operation(db, args.operation, season, classification)
    except Exception as e:
        print()
        print(f"❌ ERROR: {str(e)}")
        print()
        logger.error(f"{args.operation} failed for {season}", exc_info=True)
        return 1

    print()
    print("✅ Done")
    return 0


def run():
    logging.basicConfig(level=logging.INFO)
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
