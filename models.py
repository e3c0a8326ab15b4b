from __future__ import annotations
import datetime
import uuid
from enum import Enum
from typing import List

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)


class WorkoutType(str, Enum):
    """Fixed workout categories."""

    UPPER = "Upper"
    LOWER = "Lower"
    PUSH = "Push"
    PULL = "Pull"
    LEGS = "Legs"


class SetEntry(BaseModel):
    """One logged set. Replaced, never edited in place."""

    model_config = ConfigDict(frozen=True)

    weight: float = Field(ge=0, multiple_of=0.5)
    reps: int = Field(ge=1)

    @classmethod
    def is_valid(cls, weight: float, reps: int) -> bool:
        """Return True if ``weight`` and ``reps`` form a loggable set."""
        try:
            cls(weight=weight, reps=reps)
        except ValidationError:
            return False
        return True


class ExerciseRecord(BaseModel):
    """A named exercise and the sets logged for it in one session."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str = Field(min_length=1)
    sets: List[SetEntry] = Field(default_factory=list)

    @property
    def total_sets(self) -> int:
        return len(self.sets)

    @property
    def max_weight(self) -> float:
        return max((s.weight for s in self.sets), default=0.0)


class WorkoutSession(BaseModel):
    """A committed workout."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    type: WorkoutType
    exercises: List[ExerciseRecord] = Field(min_length=1)
    date: datetime.datetime

    @field_validator("date")
    @classmethod
    def _as_utc(cls, value: datetime.datetime) -> datetime.datetime:
        # Stored dates without an offset are taken as UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc)

    @model_validator(mode="after")
    def _unique_names(self) -> "WorkoutSession":
        names = [ex.name for ex in self.exercises]
        if len(names) != len(set(names)):
            raise ValueError("exercise names must be unique within a session")
        return self

    @property
    def total_sets(self) -> int:
        return sum(ex.total_sets for ex in self.exercises)

    @property
    def max_weight(self) -> float:
        return max((ex.max_weight for ex in self.exercises), default=0.0)

    def exercise(self, name: str) -> ExerciseRecord | None:
        for ex in self.exercises:
            if ex.name == name:
                return ex
        return None

    def summary(self) -> dict:
        return {
            "id": str(self.id),
            "type": self.type.value,
            "date": self.date.isoformat(),
            "exercises": len(self.exercises),
            "total_sets": self.total_sets,
            "max_weight": self.max_weight,
        }
