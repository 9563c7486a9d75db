"""Pydantic request and response models for the HTTP API."""

from pydantic import BaseModel, Field, model_validator

from nutribuddy.domain.nutrition import NutrientRecord
from nutribuddy.domain.profile import ActivityLevel, Goals, UserProfile
from nutribuddy.services.goals import DEFAULT_AGE


class ProfilePayload(BaseModel):
    """User profile as sent by the settings form."""

    weight_kg: float | None = None
    height_cm: float | None = None
    age: float | None = None
    activity_level: str | None = None

    def to_domain(self) -> UserProfile:
        return UserProfile(
            weight_kg=self.weight_kg,
            height_cm=self.height_cm,
            age=self.age or DEFAULT_AGE,
            activity_level=ActivityLevel.parse(self.activity_level),
        )


class GoalsPayload(BaseModel):
    """Daily goals supplied by the user."""

    kcal: int = Field(gt=0)
    protein_g: int = Field(ge=0)
    carbs_g: int = Field(ge=0)
    fat_g: int = Field(ge=0)

    def to_domain(self) -> Goals:
        return Goals(
            kcal=self.kcal,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
        )


class NutrientPayload(BaseModel):
    """Structured nutrient quantities for one item."""

    kcal: int = Field(ge=0)
    protein_g: int = Field(default=0, ge=0)
    carbs_g: int = Field(default=0, ge=0)
    fat_g: int = Field(default=0, ge=0)

    def to_domain(self) -> NutrientRecord:
        return NutrientRecord(
            kcal=self.kcal,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
        )


class ExtractRequest(BaseModel):
    """Text to extract nutrients from, with the goals used for inference."""

    text: str
    goals: GoalsPayload


class LogEntryRequest(BaseModel):
    """Entry to add to today's log: free text or a structured record."""

    text: str | None = None
    record: NutrientPayload | None = None
    profile: ProfilePayload | None = None

    @model_validator(mode="after")
    def _require_text_or_record(self) -> "LogEntryRequest":
        if self.text is None and self.record is None:
            raise ValueError("Either text or record is required")
        return self
