"""Supabase repository for the daily log."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutribuddy.domain.daily_log import DailyLog
from nutribuddy.services.daily_log import DailyLogRepository


@dataclass
class SupabaseDailyLogRepository(DailyLogRepository):
    """Supabase implementation keeping one running log row per user."""

    client: Client

    def get_log(self, user_id: UUID) -> DailyLog | None:
        """Return the stored log row, whatever day it belongs to."""
        response = (
            self.client.table("daily_logs")
            .select("date_key, kcal, protein_g, carbs_g, fat_g")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def save_log(self, user_id: UUID, log: DailyLog) -> None:
        """Overwrite the user's log row."""
        self.client.table("daily_logs").upsert(
            {
                "user_id": str(user_id),
                "date_key": log.date_key,
                "kcal": log.kcal,
                "protein_g": log.protein_g,
                "carbs_g": log.carbs_g,
                "fat_g": log.fat_g,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()


def _parse_row(row: dict[str, object]) -> DailyLog:
    return DailyLog(
        date_key=str(row.get("date_key") or ""),
        kcal=int(row.get("kcal") or 0),
        protein_g=int(row.get("protein_g") or 0),
        carbs_g=int(row.get("carbs_g") or 0),
        fat_g=int(row.get("fat_g") or 0),
    )
