"""Supabase repository for nutrition goals."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutribuddy.domain.profile import Goals, GoalSource, StoredGoals
from nutribuddy.services.goals import GoalsRepository


@dataclass
class SupabaseGoalsRepository(GoalsRepository):
    """Supabase implementation for goals storage."""

    client: Client

    def get_goals(self, user_id: UUID) -> StoredGoals | None:
        """Return the stored goals for a user."""
        response = (
            self.client.table("nutrition_goals")
            .select("kcal, protein_g, carbs_g, fat_g, source")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return StoredGoals(
            goals=Goals(
                kcal=int(row.get("kcal") or 0),
                protein_g=int(row.get("protein_g") or 0),
                carbs_g=int(row.get("carbs_g") or 0),
                fat_g=int(row.get("fat_g") or 0),
            ),
            source=GoalSource(row.get("source") or GoalSource.OVERRIDE),
        )

    def save_goals(self, user_id: UUID, goals: Goals, source: GoalSource) -> None:
        """Insert or replace the goals for a user."""
        self.client.table("nutrition_goals").upsert(
            {
                "user_id": str(user_id),
                "kcal": goals.kcal,
                "protein_g": goals.protein_g,
                "carbs_g": goals.carbs_g,
                "fat_g": goals.fat_g,
                "source": source.value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()
