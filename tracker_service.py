from __future__ import annotations
import datetime
import logging
import uuid
from typing import Dict, Iterable, List, Optional

from db import (
    CustomExerciseRepository,
    ErrorHook,
    KeyValueStore,
    SessionRepository,
)
from exercise_catalog import ExerciseCatalog
from models import SetEntry, WorkoutSession, WorkoutType
from session_service import Clock, EditDraft, SessionStateError, WorkoutDraft, utc_now
from settings_schema import SettingsSchema
from stats_service import StatisticsService

logger = logging.getLogger(__name__)


class TrackerService:
    """Owns the session list and custom registry and writes them through on change."""

    def __init__(
        self,
        store: KeyValueStore,
        settings: SettingsSchema | None = None,
        *,
        clock: Clock = utc_now,
        on_error: ErrorHook | None = None,
    ) -> None:
        self.settings = settings or SettingsSchema()
        self.session_repo = SessionRepository(store, on_error)
        self.catalog = ExerciseCatalog(CustomExerciseRepository(store, on_error))
        self.statistics = StatisticsService(self.list_sessions, today=self._today)
        self._clock = clock
        self._sessions: List[WorkoutSession] = self.session_repo.load()
        self.draft: Optional[WorkoutDraft] = None
        self.edit_draft: Optional[EditDraft] = None

    @staticmethod
    def _as_id(session_id: uuid.UUID | str) -> uuid.UUID:
        if isinstance(session_id, uuid.UUID):
            return session_id
        try:
            return uuid.UUID(str(session_id))
        except ValueError:
            raise KeyError(session_id)

    def _index_of(self, session_id: uuid.UUID | str) -> int:
        sid = self._as_id(session_id)
        for idx, session in enumerate(self._sessions):
            if session.id == sid:
                return idx
        raise KeyError(str(session_id))

    def _today(self) -> datetime.date:
        return self._clock().astimezone(datetime.timezone.utc).date()

    def _persist(self) -> None:
        self.session_repo.save(self._sessions)

    # sessions

    def list_sessions(self) -> List[WorkoutSession]:
        """Copies of the committed sessions; changes go through ``save_edit``."""
        return [s.model_copy(deep=True) for s in self._sessions]

    def get_session(self, session_id: uuid.UUID | str) -> WorkoutSession:
        return self._sessions[self._index_of(session_id)].model_copy(deep=True)

    def delete_session(self, session_id: uuid.UUID | str) -> WorkoutSession:
        removed = self._sessions.pop(self._index_of(session_id))
        self._persist()
        logger.info("deleted workout %s", removed.id)
        return removed

    # live drafts

    def _require_draft(self) -> WorkoutDraft:
        if self.draft is None:
            raise SessionStateError("no workout in progress")
        return self.draft

    def create_draft(
        self, workout_type: WorkoutType | str, exercise_names: Iterable[str]
    ) -> WorkoutDraft:
        if self.draft is not None:
            raise SessionStateError("a workout is already in progress")
        self.draft = WorkoutDraft.build(WorkoutType(workout_type), exercise_names, self._clock)
        return self.draft

    def add_exercise_to_draft(self, name: str) -> bool:
        return self._require_draft().add_exercise(name)

    def add_set_to_draft(self, exercise_index: int, weight: float, reps: int) -> SetEntry:
        return self._require_draft().add_set(exercise_index, weight, reps)

    def quick_add_weights(self, exercise_index: int) -> List[float]:
        return self._require_draft().quick_add_weights(
            exercise_index,
            self.settings.quick_add_range,
            self.settings.quick_add_step,
        )

    def commit_draft(self, save: bool) -> Optional[WorkoutSession]:
        draft = self._require_draft()
        session = draft.finish(save)
        self.draft = None
        if session is not None:
            self._sessions.append(session.model_copy(deep=True))
            self._persist()
            logger.info("committed %s workout %s", session.type.value, session.id)
        return session

    # editing committed sessions

    def edit_session(self, session_id: uuid.UUID | str) -> EditDraft:
        self.edit_draft = EditDraft(self.get_session(session_id))
        return self.edit_draft

    def save_edit(self, draft: EditDraft | None = None) -> WorkoutSession:
        draft = draft or self.edit_draft
        if draft is None:
            raise SessionStateError("no workout is being edited")
        idx = self._index_of(draft.session_id)
        updated = draft.save()
        self._sessions[idx] = updated.model_copy(deep=True)
        self._persist()
        if draft is self.edit_draft:
            self.edit_draft = None
        logger.info("updated workout %s", updated.id)
        return updated

    def cancel_edit(self) -> None:
        if self.edit_draft is not None:
            self.edit_draft.cancel()
        self.edit_draft = None

    # catalog

    def available_exercises(
        self, workout_type: WorkoutType | str, excluding: Iterable[str] = ()
    ) -> List[str]:
        return self.catalog.available(WorkoutType(workout_type), excluding)

    def add_custom_exercise(self, workout_type: WorkoutType | str, name: str) -> bool:
        return self.catalog.add_custom(WorkoutType(workout_type), name)

    def remove_custom_exercise(self, workout_type: WorkoutType | str, name: str) -> bool:
        return self.catalog.remove_custom(WorkoutType(workout_type), name)

    def custom_exercises(self) -> Dict[str, List[str]]:
        return self.catalog.custom()

    # progress

    def progression_for(self, exercise_name: str) -> List[Dict[str, object]]:
        return self.statistics.progression(exercise_name)

    def progression_summary(self, exercise_name: str) -> Dict[str, object]:
        return self.statistics.progression_summary(exercise_name)

    def overview(self) -> Dict[str, float | int]:
        return self.statistics.overview()

    def recent_sessions(self) -> List[WorkoutSession]:
        return self.statistics.recent(self.settings.recent_limit)
