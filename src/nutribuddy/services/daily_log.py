"""Daily log aggregation with day rollover."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from nutribuddy.domain.daily_log import DailyLog, DailyProgress
from nutribuddy.domain.nutrition import NutrientRecord
from nutribuddy.domain.profile import Goals
from nutribuddy.services.extraction import extract_nutrients
from nutribuddy.services.goals import round_half_up

_logger = logging.getLogger(__name__)


class InvalidTimezoneError(ValueError):
    """Raised when a timezone name cannot be resolved."""


def reset_log(today: str) -> DailyLog:
    """Return an empty log for the given day."""
    return DailyLog(date_key=today)


def current_log(stored: DailyLog | None, today: str) -> DailyLog:
    """Return the stored log if it belongs to today, else an empty one."""
    if stored is None or stored.date_key != today:
        return reset_log(today)
    return stored


def add_to_log(current: DailyLog, record: NutrientRecord, today: str) -> DailyLog:
    """Add a record to the running totals, starting over on a new day."""
    base = current_log(current, today)
    return DailyLog(
        date_key=today,
        kcal=max(0, round_half_up(base.kcal + record.kcal)),
        protein_g=max(0, round_half_up(base.protein_g + record.protein_g)),
        carbs_g=max(0, round_half_up(base.carbs_g + record.carbs_g)),
        fat_g=max(0, round_half_up(base.fat_g + record.fat_g)),
    )


def compute_progress(log: DailyLog, goals: Goals) -> DailyProgress:
    """Return how far the day's totals are toward the goals."""
    kcal_ratio = _ratio(log.kcal, goals.kcal)
    return DailyProgress(
        kcal_ratio=kcal_ratio,
        protein_ratio=_ratio(log.protein_g, goals.protein_g),
        carbs_ratio=_ratio(log.carbs_g, goals.carbs_g),
        fat_ratio=_ratio(log.fat_g, goals.fat_g),
        kcal_percent=round_half_up(log.kcal / (goals.kcal or 1) * 100),
    )


def _ratio(value: float, target: float) -> float:
    return min(max(value / (target or 1), 0.0), 1.0)


def resolve_timezone(timezone_name: str) -> ZoneInfo:
    """Return the ZoneInfo for an IANA name."""
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimezoneError(f"Unknown timezone: {timezone_name}") from exc


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class DailyLogRepository(Protocol):
    """Persistence interface for the daily log."""

    def get_log(self, user_id: UUID) -> DailyLog | None:
        """Return the last stored log for a user."""

    def save_log(self, user_id: UUID, log: DailyLog) -> None:
        """Persist the log for a user."""


@dataclass(frozen=True)
class LogOutcome:
    """Result of logging a piece of text."""

    log: DailyLog
    record: NutrientRecord | None

    @property
    def nothing_to_log(self) -> bool:
        return self.record is None


@dataclass
class DailyLogService:
    """Service that keeps a user's daily log in the repository."""

    repository: DailyLogRepository
    clock: Callable[[], datetime] = field(default=_utcnow)

    def today_key(self, timezone_name: str) -> str:
        """Return today's date in the timezone as YYYY-MM-DD."""
        tz = resolve_timezone(timezone_name)
        return self.clock().astimezone(tz).date().isoformat()

    def get_today(self, user_id: UUID, timezone_name: str) -> DailyLog:
        """Return today's log, rolling over a stale one."""
        today = self.today_key(timezone_name)
        stored = self.repository.get_log(user_id)
        if stored is not None and stored.date_key != today:
            _logger.info(
                "Daily log rollover: user_id=%s from=%s to=%s",
                user_id,
                stored.date_key,
                today,
            )
        return current_log(stored, today)

    def log_record(
        self, user_id: UUID, record: NutrientRecord, timezone_name: str
    ) -> DailyLog:
        """Add a structured record to today's log and persist it."""
        today = self.today_key(timezone_name)
        stored = self.repository.get_log(user_id)
        updated = add_to_log(stored or reset_log(today), record, today)
        self.repository.save_log(user_id, updated)
        _logger.info(
            "Logged entry: user_id=%s day=%s kcal=%s total_kcal=%s",
            user_id,
            today,
            record.kcal,
            updated.kcal,
        )
        return updated

    def log_text(
        self, user_id: UUID, text: str, goals: Goals, timezone_name: str
    ) -> LogOutcome:
        """Extract nutrients from text and add them to today's log."""
        record = extract_nutrients(text, goals)
        if record is None:
            _logger.info("Nothing to log: user_id=%s", user_id)
            return LogOutcome(log=self.get_today(user_id, timezone_name), record=None)
        log = self.log_record(user_id, record, timezone_name)
        return LogOutcome(log=log, record=record)

    def reset(self, user_id: UUID, timezone_name: str) -> DailyLog:
        """Clear today's totals."""
        empty = reset_log(self.today_key(timezone_name))
        self.repository.save_log(user_id, empty)
        _logger.info("Daily log reset: user_id=%s day=%s", user_id, empty.date_key)
        return empty
