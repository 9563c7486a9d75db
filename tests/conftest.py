"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

import pytest

from nutribuddy.config import Settings
from nutribuddy.containers import AppContainer
from nutribuddy.domain.daily_log import DailyLog
from nutribuddy.domain.profile import Goals, GoalSource, StoredGoals
from nutribuddy.services.daily_log import DailyLogRepository, DailyLogService
from nutribuddy.services.goals import GoalsRepository, GoalsService


@dataclass
class InMemoryGoalsRepository(GoalsRepository):
    """In-memory goals repository for tests."""

    goals: dict[UUID, StoredGoals] = field(default_factory=dict)

    def get_goals(self, user_id: UUID) -> StoredGoals | None:
        return self.goals.get(user_id)

    def save_goals(self, user_id: UUID, goals: Goals, source: GoalSource) -> None:
        self.goals[user_id] = StoredGoals(goals=goals, source=source)


@dataclass
class InMemoryDailyLogRepository(DailyLogRepository):
    """In-memory daily log repository for tests."""

    logs: dict[UUID, DailyLog] = field(default_factory=dict)
    saves: int = 0

    def get_log(self, user_id: UUID) -> DailyLog | None:
        return self.logs.get(user_id)

    def save_log(self, user_id: UUID, log: DailyLog) -> None:
        self.saves += 1
        self.logs[user_id] = log


@dataclass
class FakeClock:
    """Settable clock for rollover tests."""

    now: datetime = field(
        default_factory=lambda: datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sample_goals() -> Goals:
    return Goals(kcal=2000, protein_g=150, carbs_g=200, fat_g=56)


@pytest.fixture
def container(settings: Settings, clock: FakeClock) -> AppContainer:
    return AppContainer(
        settings=settings,
        goals_service=GoalsService(InMemoryGoalsRepository()),
        daily_log_service=DailyLogService(InMemoryDailyLogRepository(), clock=clock),
    )
