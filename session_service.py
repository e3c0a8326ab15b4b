from __future__ import annotations
import datetime
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Iterable, List, Optional

from models import ExerciseRecord, SetEntry, WorkoutSession, WorkoutType
from tools import MathTools

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime.datetime]


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class SessionState(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    COMMITTED = "committed"
    DISCARDED = "discarded"


class SessionStateError(ValueError):
    """Raised when a draft operation is not allowed in the current state."""


class _ExerciseListEditor(ABC):
    """Shared set-list editing for live and edit drafts."""

    def __init__(self) -> None:
        self.exercises: List[ExerciseRecord] = []

    @abstractmethod
    def _check_editable(self) -> None:
        """Raise SessionStateError if the exercise list may not change."""

    def exercise_names(self) -> List[str]:
        return [ex.name for ex in self.exercises]

    def add_exercise(self, name: str) -> bool:
        self._check_editable()
        cleaned = name.strip()
        if not cleaned or cleaned in self.exercise_names():
            return False
        self.exercises.append(ExerciseRecord(name=cleaned))
        return True

    def add_set(self, exercise_index: int, weight: float, reps: int) -> SetEntry:
        self._check_editable()
        record = self._record(exercise_index)
        entry = SetEntry(weight=weight, reps=reps)
        self._replace_sets(exercise_index, record.sets + [entry])
        return entry

    def previous_set(self, exercise_index: int) -> Optional[SetEntry]:
        record = self._record(exercise_index)
        return record.sets[-1] if record.sets else None

    def quick_add_weights(
        self,
        exercise_index: int,
        span: float | None = None,
        step: float | None = None,
    ) -> List[float]:
        """Suggest weights around the previous set of ``exercise_index``."""
        previous = self.previous_set(exercise_index)
        if previous is None:
            return []
        return MathTools.quick_add_weights(previous.weight, span, step)

    def _record(self, exercise_index: int) -> ExerciseRecord:
        if exercise_index < 0 or exercise_index >= len(self.exercises):
            raise IndexError(f"no exercise at index {exercise_index}")
        return self.exercises[exercise_index]

    def _replace_sets(self, exercise_index: int, sets: List[SetEntry]) -> None:
        record = self._record(exercise_index)
        self.exercises[exercise_index] = record.model_copy(update={"sets": sets})

    def to_dict(self) -> dict:
        return {
            "exercises": [
                ex.model_dump(mode="json") for ex in self.exercises
            ],
        }


class WorkoutDraft(_ExerciseListEditor):
    """A workout being planned and then logged.

    ``PLANNING`` collects exercise names, ``start`` turns them into empty
    records, and ``finish`` ends the draft in ``COMMITTED`` or ``DISCARDED``.
    """

    def __init__(self, workout_type: WorkoutType, clock: Clock = utc_now) -> None:
        super().__init__()
        self.workout_type = WorkoutType(workout_type)
        self.state = SessionState.PLANNING
        self.selected: List[str] = []
        self._clock = clock

    @classmethod
    def build(
        cls,
        workout_type: WorkoutType,
        exercise_names: Iterable[str],
        clock: Clock = utc_now,
    ) -> "WorkoutDraft":
        """Create a draft for ``exercise_names`` and move it to ``ACTIVE``."""
        draft = cls(workout_type, clock)
        for name in exercise_names:
            draft.select_exercise(name)
        draft.start()
        return draft

    def _require(self, state: SessionState) -> None:
        if self.state != state:
            raise SessionStateError(
                f"draft is {self.state.value}, expected {state.value}"
            )

    def _check_editable(self) -> None:
        self._require(SessionState.ACTIVE)

    @property
    def is_terminal(self) -> bool:
        return self.state in (SessionState.COMMITTED, SessionState.DISCARDED)

    def change_type(self, workout_type: WorkoutType) -> None:
        self._require(SessionState.PLANNING)
        self.workout_type = WorkoutType(workout_type)

    def select_exercise(self, name: str) -> bool:
        self._require(SessionState.PLANNING)
        cleaned = name.strip()
        if not cleaned or cleaned in self.selected:
            return False
        self.selected.append(cleaned)
        return True

    def deselect_exercise(self, name: str) -> bool:
        self._require(SessionState.PLANNING)
        cleaned = name.strip()
        if cleaned not in self.selected:
            return False
        self.selected.remove(cleaned)
        return True

    def start(self) -> None:
        self._require(SessionState.PLANNING)
        if not self.selected:
            raise SessionStateError("select at least one exercise to start")
        self.exercises = [ExerciseRecord(name=n) for n in self.selected]
        self.state = SessionState.ACTIVE

    def finish(self, save: bool) -> Optional[WorkoutSession]:
        """End the draft, returning the session to persist if there is one.

        Exercises without sets are dropped. Saving a draft with no logged sets
        yields None and ends in ``DISCARDED``.
        """
        self._require(SessionState.ACTIVE)
        session = None
        if save:
            logged = [ex for ex in self.exercises if ex.sets]
            if logged:
                session = WorkoutSession(
                    type=self.workout_type,
                    exercises=[ex.model_copy(deep=True) for ex in logged],
                    date=self._clock(),
                )
        if session is not None:
            self.state = SessionState.COMMITTED
        else:
            self.state = SessionState.DISCARDED
        self.exercises = []
        self.selected = []
        logger.debug("draft finished: %s", self.state.value)
        return session

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(
            {
                "type": self.workout_type.value,
                "state": self.state.value,
                "selected": list(self.selected),
            }
        )
        return data


class EditDraft(_ExerciseListEditor):
    """Editable copy of a committed session's exercises."""

    def __init__(self, session: WorkoutSession) -> None:
        super().__init__()
        self.original = session
        self.exercises = [ex.model_copy(deep=True) for ex in session.exercises]
        self.closed = False

    @property
    def session_id(self):
        return self.original.id

    def _check_editable(self) -> None:
        if self.closed:
            raise SessionStateError("edit draft is closed")

    def remove_exercise(self, exercise_index: int) -> ExerciseRecord:
        self._check_editable()
        self._record(exercise_index)
        return self.exercises.pop(exercise_index)

    def update_set(
        self, exercise_index: int, set_index: int, weight: float, reps: int
    ) -> SetEntry:
        self._check_editable()
        record = self._record(exercise_index)
        if set_index < 0 or set_index >= len(record.sets):
            raise IndexError(f"no set at index {set_index}")
        entry = SetEntry(weight=weight, reps=reps)
        sets = list(record.sets)
        sets[set_index] = entry
        self._replace_sets(exercise_index, sets)
        return entry

    def remove_set(self, exercise_index: int, set_index: int) -> SetEntry:
        self._check_editable()
        record = self._record(exercise_index)
        if set_index < 0 or set_index >= len(record.sets):
            raise IndexError(f"no set at index {set_index}")
        sets = list(record.sets)
        removed = sets.pop(set_index)
        self._replace_sets(exercise_index, sets)
        return removed

    def save(self) -> WorkoutSession:
        """Build the replacement session; original id, type and date are kept."""
        self._check_editable()
        if not self.exercises:
            raise ValueError("a workout needs at least one exercise")
        session = WorkoutSession(
            id=self.original.id,
            type=self.original.type,
            exercises=[ex.model_copy(deep=True) for ex in self.exercises],
            date=self.original.date,
        )
        self.closed = True
        return session

    def cancel(self) -> None:
        self.closed = True
        self.exercises = []

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(
            {
                "id": str(self.original.id),
                "type": self.original.type.value,
                "date": self.original.date.isoformat(),
            }
        )
        return data
