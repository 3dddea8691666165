"""
Shared fixtures: an in-memory SQLite database per test and a small seeder
for teams, games, ratings and turnover stats.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base  # noqa: E402
from app.models import Team, Game, GameStats, TeamPowerRating  # noqa: E402

SEASON = 2024
SEASON_START = datetime(2024, 8, 31, 19, 0, tzinfo=timezone.utc)


class Seeder:
    """Adds rows to the test session; call flush() (or commit) before querying."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def team(self, school, conference="SEC", classification="fbs"):
        team = Team(school=school, conference=conference, classification=classification)
        self.db.add(team)
        return team

    def rating(self, team_name, power_rating, season=SEASON):
        rating = TeamPowerRating(team_name=team_name, season=season, power_rating=power_rating)
        self.db.add(rating)
        return rating

    def game(
        self,
        home_team,
        away_team,
        week=1,
        season=SEASON,
        season_type="regular",
        neutral_site=False,
        conference_game=False,
        home_points=None,
        away_points=None,
        home_win_probability=None,
        home_postgame_win_probability=None,
    ):
        completed = home_points is not None and away_points is not None
        game = Game(
            season=season,
            week=week,
            season_type=season_type,
            start_date=SEASON_START + timedelta(weeks=week - 1),
            neutral_site=neutral_site,
            conference_game=conference_game,
            completed=completed,
            home_team=home_team,
            away_team=away_team,
            home_points=home_points,
            away_points=away_points,
        )
        if home_win_probability is not None:
            game.home_pregame_win_probability = home_win_probability
            game.away_pregame_win_probability = 1 - home_win_probability
        if home_postgame_win_probability is not None:
            game.home_postgame_win_probability = home_postgame_win_probability
            game.away_postgame_win_probability = 1 - home_postgame_win_probability
        self.db.add(game)
        return game

    def game_stats(self, game, team, fumbles_lost=0, interceptions=0, fumbles_recovered=0):
        stats = GameStats(
            game_id=game.id,
            team=team,
            fumbles_lost=fumbles_lost,
            fumbles_recovered=fumbles_recovered,
            interceptions=interceptions,
        )
        self.db.add(stats)
        return stats

    async def flush(self):
        await self.db.flush()

    async def commit(self):
        await self.db.commit()


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seed(db):
    return Seeder(db)
