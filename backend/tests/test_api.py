"""
Tests for the HTTP surface.
"""

from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.config import settings
from app.database import get_db
from app.main import app
from app.models import StrengthOfSchedule, LuckAnalysis
from app.services.calculation_tracking import CalculationTracker


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session
            await session.commit()

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class TestRoot:

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestSosLeaderboard:

    @pytest.mark.asyncio
    async def test_ordered_by_rank_with_unranked_last(self, client, db):
        db.add_all([
            StrengthOfSchedule(team_name="Georgia", season=2024, classification="fbs",
                               sos_overall=12.0, sos_rank=2, actual_wins=9, actual_losses=3),
            StrengthOfSchedule(team_name="Auburn", season=2024, classification="fbs",
                               sos_overall=15.5, sos_rank=1, sos_overall_regular=14.0, sos_rank_regular=1),
            StrengthOfSchedule(team_name="Unrated", season=2024, classification="fbs"),
            StrengthOfSchedule(team_name="Citadel", season=2024, classification="fcs",
                               sos_overall=1.0, sos_rank=1),
        ])
        await db.commit()

        response = await client.get("/api/leaderboards/strength-of-schedule/2024")

        assert response.status_code == 200
        body = response.json()
        assert body["filter"] == "all"
        assert body["classification"] == "fbs"
        assert body["total"] == 3
        assert [team["team_name"] for team in body["teams"]] == ["Auburn", "Georgia", "Unrated"]
        assert body["teams"][1]["actual_wins"] == 9
        assert body["teams"][2]["sos_rank"] is None

    @pytest.mark.asyncio
    async def test_filter_selects_column_group(self, client, db):
        db.add(StrengthOfSchedule(team_name="Auburn", season=2024, classification="fbs",
                                  sos_overall=15.5, sos_rank=1, sos_overall_regular=14.0, sos_rank_regular=1))
        await db.commit()

        response = await client.get("/api/leaderboards/strength-of-schedule/2024", params={"filter": "regular"})

        assert response.status_code == 200
        team = response.json()["teams"][0]
        assert team["sos_overall"] == 14.0
        assert team["sos_rank"] == 1

    @pytest.mark.asyncio
    async def test_serves_played_and_remaining_breakdowns(self, client, db):
        db.add(StrengthOfSchedule(
            team_name="Auburn", season=2024, classification="fbs", sos_overall=15.5, sos_rank=1,
            projected_wins_regular=7.5, projected_wins_played_regular=4.2, projected_wins_remaining_regular=3.3,
            top40_wins_played_regular=1, top40_games_played_regular=3,
            top40_wins_remaining_regular=0, top40_games_remaining_regular=2,
            coinflip_games_played_regular=2, coinflip_games_remaining_regular=1,
            sure_thing_games_played_regular=3, sure_thing_games_remaining_regular=0,
            longshot_games_played_regular=1, longshot_games_remaining_regular=2,
        ))
        await db.commit()

        response = await client.get("/api/leaderboards/strength-of-schedule/2024", params={"filter": "regular"})

        assert response.status_code == 200
        team = response.json()["teams"][0]
        assert team["projected_wins_played"] == 4.2
        assert team["projected_wins_remaining"] == 3.3
        assert team["top40_wins_played"] == 1
        assert team["top40_games_played"] == 3
        assert team["top40_wins_remaining"] == 0
        assert team["top40_games_remaining"] == 2
        assert team["coinflip_games_played"] == 2
        assert team["coinflip_games_remaining"] == 1
        assert team["sure_thing_games_played"] == 3
        assert team["sure_thing_games_remaining"] == 0
        assert team["longshot_games_played"] == 1
        assert team["longshot_games_remaining"] == 2

    @pytest.mark.asyncio
    async def test_unknown_filter(self, client):
        response = await client.get("/api/leaderboards/strength-of-schedule/2024", params={"filter": "bowls"})
        assert response.status_code == 400


class TestLuckLeaderboard:

    @pytest.mark.asyncio
    async def test_ordered_by_luck_and_filtered_by_conference(self, client, db):
        db.add_all([
            LuckAnalysis(team_name="Alabama", season=2024, conference="SEC", wins=10, losses=2,
                         expected_wins=6.0, expected_vs_actual=4.0),
            LuckAnalysis(team_name="Georgia", season=2024, conference="SEC", wins=7, losses=5,
                         expected_wins=6.0, expected_vs_actual=1.0),
            LuckAnalysis(team_name="Ohio State", season=2024, conference="Big Ten", wins=11, losses=1,
                         expected_wins=6.0, expected_vs_actual=5.0),
        ])
        await db.commit()

        response = await client.get("/api/leaderboards/luck/2024")
        assert [team["team_name"] for team in response.json()["teams"]] == ["Ohio State", "Alabama", "Georgia"]

        response = await client.get("/api/leaderboards/luck/2024", params={"conference": "SEC"})
        body = response.json()
        assert body["conference"] == "SEC"
        assert [team["team_name"] for team in body["teams"]] == ["Alabama", "Georgia"]
        assert body["teams"][0]["turnover_data_available"] is False
        assert body["teams"][0]["fumble_recovery_rate"] is None


class TestCalculationStatus:

    @pytest.mark.asyncio
    async def test_not_started(self, client):
        response = await client.get("/api/calculation-status/sos/2024")
        assert response.status_code == 200
        assert response.json()["status"] == "not_started"

    @pytest.mark.asyncio
    async def test_completed(self, client, db):
        async with CalculationTracker(db, "luck", 2024) as tracker:
            tracker.team_count = 133

        response = await client.get("/api/calculation-status/luck/2024")

        body = response.json()
        assert body["status"] == "completed"
        assert body["team_count"] == 133
        assert body["completed_at"] is not None

    @pytest.mark.asyncio
    async def test_unknown_type(self, client):
        response = await client.get("/api/calculation-status/elo/2024")
        assert response.status_code == 404


class TestAdmin:

    @pytest.mark.asyncio
    async def test_health_summary(self, client, db):
        async with CalculationTracker(db, "sos", 2024):
            pass

        response = await client.get("/api/admin/health/summary", params={"season": 2024})

        body = response.json()
        assert body["calculations"]["sos"]["status"] == "completed"
        assert body["calculations"]["luck"]["status"] == "not_started"
        assert body["health_score"] == "incomplete"

    @pytest.mark.asyncio
    async def test_recalculate(self, client):
        with patch("app.api.admin.subprocess.Popen") as popen:
            popen.return_value.pid = 4321

            denied = await client.post(
                "/api/admin/actions/recalculate",
                json={"password": "wrong", "operation": "sos"}
            )
            assert denied.status_code == 401

            invalid = await client.post(
                "/api/admin/actions/recalculate",
                json={"password": settings.ADMIN_PASSWORD, "operation": "drop-tables"}
            )
            assert invalid.status_code == 400

            accepted = await client.post(
                "/api/admin/actions/recalculate",
                json={"password": settings.ADMIN_PASSWORD, "operation": "sos", "season": 2023}
            )

        assert accepted.status_code == 200
        assert accepted.json()["process_id"] == 4321
        assert accepted.json()["season"] == 2023

        cmd = popen.call_args.args[0]
        assert cmd[1:] == ["-m", "app.cli", "sos", "--season", "2023"]
        assert popen.call_count == 1
