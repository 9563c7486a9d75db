"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from nutribuddy.adapters.supabase_daily_log_repository import (
    SupabaseDailyLogRepository,
)
from nutribuddy.adapters.supabase_goals_repository import SupabaseGoalsRepository
from nutribuddy.config import Settings
from nutribuddy.services.daily_log import DailyLogService
from nutribuddy.services.goals import GoalsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    goals_service: GoalsService
    daily_log_service: DailyLogService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    return AppContainer(
        settings=resolved_settings,
        goals_service=GoalsService(SupabaseGoalsRepository(supabase_client)),
        daily_log_service=DailyLogService(SupabaseDailyLogRepository(supabase_client)),
    )
