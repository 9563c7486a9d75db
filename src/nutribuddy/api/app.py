"""FastAPI application factory."""

import logging
from dataclasses import asdict
from uuid import UUID

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from nutribuddy.api.models import (
    ExtractRequest,
    GoalsPayload,
    LogEntryRequest,
    ProfilePayload,
)
from nutribuddy.app_logging import configure_logging
from nutribuddy.containers import AppContainer
from nutribuddy.domain.daily_log import DailyLog
from nutribuddy.domain.profile import StoredGoals
from nutribuddy.services.daily_log import InvalidTimezoneError, compute_progress
from nutribuddy.services.extraction import extract_nutrients
from nutribuddy.services.goals import profile_metrics
from nutribuddy.services.meals import suggested_meals


def profile_from_query(
    weight_kg: float | None = None,
    height_cm: float | None = None,
    age: float | None = None,
    activity_level: str | None = None,
) -> ProfilePayload:
    """Build a profile from optional query parameters."""
    return ProfilePayload(
        weight_kg=weight_kg,
        height_cm=height_cm,
        age=age,
        activity_level=activity_level,
    )


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.exception_handler(InvalidTimezoneError)
    async def invalid_timezone(
        request: Request, exc: InvalidTimezoneError
    ) -> JSONResponse:
        logger.warning("Rejected request: %s", exc)
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/profile/metrics")
    async def metrics(profile: ProfilePayload) -> dict[str, object]:
        """Return BMI, BMR, TDEE and estimated goals for a profile."""
        return asdict(profile_metrics(profile.to_domain()))

    @app.get("/users/{user_id}/goals")
    async def get_goals(
        user_id: UUID,
        request: Request,
        profile: ProfilePayload = Depends(profile_from_query),
    ) -> dict[str, object]:
        """Return stored goals, or an estimate when none are stored."""
        state_container: AppContainer = request.app.state.container
        stored = state_container.goals_service.get_goals(user_id, profile.to_domain())
        return _goals_response(stored)

    @app.put("/users/{user_id}/goals")
    async def override_goals(
        user_id: UUID, goals: GoalsPayload, request: Request
    ) -> dict[str, object]:
        """Store goals supplied by the user."""
        state_container: AppContainer = request.app.state.container
        stored = state_container.goals_service.override_goals(
            user_id, goals.to_domain()
        )
        return _goals_response(stored)

    @app.post("/users/{user_id}/goals/estimate")
    async def reestimate_goals(
        user_id: UUID, profile: ProfilePayload, request: Request
    ) -> dict[str, object]:
        """Replace stored goals with an estimate from the profile."""
        state_container: AppContainer = request.app.state.container
        stored = state_container.goals_service.reestimate_goals(
            user_id, profile.to_domain()
        )
        return _goals_response(stored)

    @app.post("/extract")
    async def extract(payload: ExtractRequest) -> dict[str, object]:
        """Extract a nutrient record from text without logging it."""
        record = extract_nutrients(payload.text, payload.goals.to_domain())
        if record is None:
            return {"status": "nothing_to_log", "record": None}
        return {"status": "ok", "record": asdict(record)}

    @app.get("/users/{user_id}/log")
    async def get_log(
        user_id: UUID,
        request: Request,
        timezone: str | None = None,
        profile: ProfilePayload = Depends(profile_from_query),
    ) -> dict[str, object]:
        """Return today's log with progress toward the user's goals.

        Without stored goals, progress is measured against goals estimated
        from the profile query parameters.
        """
        state_container: AppContainer = request.app.state.container
        log = state_container.daily_log_service.get_today(
            user_id, timezone or state_container.settings.default_timezone
        )
        stored = state_container.goals_service.get_goals(user_id, profile.to_domain())
        return _log_response(log, stored)

    @app.post("/users/{user_id}/log/entries")
    async def add_entry(
        user_id: UUID,
        entry: LogEntryRequest,
        request: Request,
        timezone: str | None = None,
    ) -> dict[str, object]:
        """Add free text or a structured record to today's log."""
        state_container: AppContainer = request.app.state.container
        timezone_name = timezone or state_container.settings.default_timezone
        profile = entry.profile or ProfilePayload()
        stored = state_container.goals_service.get_goals(user_id, profile.to_domain())
        service = state_container.daily_log_service

        if entry.record is not None:
            record = entry.record.to_domain()
            log = service.log_record(user_id, record, timezone_name)
            return {"status": "ok", "record": asdict(record)} | _log_response(
                log, stored
            )

        outcome = service.log_text(
            user_id, entry.text or "", stored.goals, timezone_name
        )
        if outcome.nothing_to_log:
            return {"status": "nothing_to_log", "record": None} | _log_response(
                outcome.log, stored
            )
        return {"status": "ok", "record": asdict(outcome.record)} | _log_response(
            outcome.log, stored
        )

    @app.post("/users/{user_id}/log/reset")
    async def reset_log(
        user_id: UUID, request: Request, timezone: str | None = None
    ) -> dict[str, object]:
        """Clear today's log."""
        state_container: AppContainer = request.app.state.container
        log = state_container.daily_log_service.reset(
            user_id, timezone or state_container.settings.default_timezone
        )
        return {"log": asdict(log)}

    @app.get("/meals/suggested")
    async def meals() -> dict[str, object]:
        """Return quick-add meals with their composer text."""
        return {
            "meals": [
                asdict(meal) | {"text": meal.as_text()} for meal in suggested_meals()
            ]
        }

    return app


def _goals_response(stored: StoredGoals) -> dict[str, object]:
    return asdict(stored.goals) | {"source": stored.source.value}


def _log_response(log: DailyLog, stored: StoredGoals) -> dict[str, object]:
    return {
        "log": asdict(log),
        "goals": _goals_response(stored),
        "progress": asdict(compute_progress(log, stored.goals)),
    }
