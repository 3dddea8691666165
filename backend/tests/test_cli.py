"""
Tests for the calculation CLI.
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select

from app import cli
from app.models import Game, LuckAnalysis, StrengthOfSchedule


async def seed_small_season(seed):
    seed.team("Alabama")
    seed.team("Georgia")
    seed.rating("Alabama", 20.0)
    seed.rating("Georgia", 18.0)
    seed.game("Alabama", "Georgia", week=1, home_points=24, away_points=20, home_postgame_win_probability=0.6)
    seed.game("Georgia", "Alabama", week=9, neutral_site=True)
    await seed.commit()


class TestRunOperation:

    @pytest.mark.asyncio
    async def test_all_runs_spreads_then_sos_then_luck(self, db, seed, capsys):
        await seed_small_season(seed)

        await cli.run_operation(db, "all", 2024, "fbs")

        games = (await db.execute(select(Game))).scalars().all()
        assert all(game.home_spread is not None for game in games)
        assert len((await db.execute(select(StrengthOfSchedule))).scalars().all()) == 2
        assert len((await db.execute(select(LuckAnalysis))).scalars().all()) == 2

        out = capsys.readouterr().out
        assert "Processed: 2" in out
        assert "No anomalies" in out
        assert "SOS calculated for 2 fbs teams" in out
        assert "Skipped (unrated opponents): 0" in out
        assert "Luck calculated for 2 fbs teams" in out

    @pytest.mark.asyncio
    async def test_clear(self, db, seed, capsys):
        await seed_small_season(seed)
        await cli.run_operation(db, "spreads", 2024, "fbs")

        await cli.run_operation(db, "clear", 2024, "fbs")

        assert "Cleared spread data for 2 games" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_status(self, db, capsys):
        await cli.run_operation(db, "status", 2024, "fbs")

        out = capsys.readouterr().out
        assert "sos: not_started" in out
        assert "luck: not_started" in out

    @pytest.mark.asyncio
    async def test_unknown_operation(self, db):
        with pytest.raises(ValueError):
            await cli.run_operation(db, "elo", 2024, "fbs")


class TestMain:

    @pytest.mark.asyncio
    async def test_success_exit_code(self):
        with patch("app.cli.run_operation", new=AsyncMock()) as run_operation:
            code = await cli.main(["sos", "--season", "2023", "--classification", "fcs"])

        assert code == 0
        _, operation, season, classification = run_operation.call_args.args
        assert (operation, season, classification) == ("sos", 2023, "fcs")

    @pytest.mark.asyncio
    async def test_defaults_from_settings(self):
        with patch("app.cli.run_operation", new=AsyncMock()) as run_operation:
            await cli.main(["luck"])

        _, _, season, classification = run_operation.call_args.args
        assert season == cli.settings.CFB_SEASON_YEAR
        assert classification == cli.settings.DEFAULT_CLASSIFICATION

    @pytest.mark.asyncio
    async def test_failure_exit_code(self, capsys):
        failing = AsyncMock(side_effect=RuntimeError("SOS calculation failed for 1 of 130 teams: Army"))
        with patch("app.cli.run_operation", new=failing):
            code = await cli.main(["sos"])

        assert code == 1
        assert "SOS calculation failed for 1 of 130 teams: Army" in capsys.readouterr().out

    def test_rejects_unknown_operation(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["elo"])
