from typing import List

from fastapi import APIRouter, FastAPI, HTTPException, Query

from config import YamlConfig
from db import ErrorHook, open_store
from models import WorkoutType
from session_service import SessionStateError
from tracker_service import TrackerService


class GymAPI:
    """Provides REST endpoints for the workout tracker."""

    def __init__(
        self,
        db_path: str | None = None,
        yaml_path: str = "settings.yaml",
        *,
        tracker: TrackerService | None = None,
        on_error: ErrorHook | None = None,
    ) -> None:
        self.config = YamlConfig(yaml_path)
        self.settings = self.config.settings()
        self.db_path = db_path or self.settings.db_path
        if tracker is None:
            tracker = TrackerService(
                open_store(self.db_path), self.settings, on_error=on_error
            )
        self.tracker = tracker
        self.app = FastAPI(
            title="Gym Tracker API",
            description="REST API for logging workouts and tracking progress",
        )
        self._setup_routes()

    @staticmethod
    def _http_error(e: Exception) -> HTTPException:
        if isinstance(e, SessionStateError):
            return HTTPException(status_code=409, detail=str(e))
        if isinstance(e, (KeyError, IndexError)):
            detail = e.args[0] if e.args else "not found"
            return HTTPException(status_code=404, detail=str(detail))
        return HTTPException(status_code=400, detail=str(e))

    def _workout_type(self, value: str) -> WorkoutType:
        try:
            return WorkoutType(value)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"unknown workout type: {value}")

    def _setup_routes(self) -> None:
        workouts_router = APIRouter(prefix="/workouts", tags=["Workouts"])
        draft_router = APIRouter(prefix="/draft", tags=["Draft"])
        edit_router = APIRouter(prefix="/edit", tags=["Edit"])
        custom_router = APIRouter(prefix="/custom_exercises", tags=["Custom Exercises"])
        stats_router = APIRouter(prefix="/stats", tags=["Statistics"])
        tracker = self.tracker
        statistics = tracker.statistics

        @self.app.get("/health")
        def health():
            return {"status": "ok"}

        @self.app.get("/workout_types")
        def list_workout_types():
            return [t.value for t in WorkoutType]

        @self.app.get("/exercises/available")
        def available_exercises(
            workout_type: str, exclude: List[str] = Query(default=[])
        ):
            return tracker.available_exercises(self._workout_type(workout_type), exclude)

        @workouts_router.get("")
        def list_workouts(newest_first: bool = False):
            sessions = statistics.history() if newest_first else tracker.list_sessions()
            return [s.summary() for s in sessions]

        @workouts_router.get("/recent")
        def recent_workouts():
            return [s.summary() for s in tracker.recent_sessions()]

        @workouts_router.get("/{workout_id}")
        def get_workout(workout_id: str):
            try:
                return statistics.session_detail(tracker.get_session(workout_id))
            except KeyError as e:
                raise self._http_error(e)

        @workouts_router.delete("/{workout_id}")
        def delete_workout(workout_id: str):
            try:
                tracker.delete_session(workout_id)
            except KeyError as e:
                raise self._http_error(e)
            return {"status": "deleted"}

        @workouts_router.post("/{workout_id}/edit")
        def edit_workout(workout_id: str):
            try:
                return tracker.edit_session(workout_id).to_dict()
            except KeyError as e:
                raise self._http_error(e)

        @draft_router.post("")
        def create_draft(workout_type: str, exercises: List[str] = Query(...)):
            names = [n for n in exercises if n.strip()]
            try:
                draft = tracker.create_draft(self._workout_type(workout_type), names)
            except ValueError as e:
                raise self._http_error(e)
            return draft.to_dict()

        @draft_router.get("")
        def get_draft():
            if tracker.draft is None:
                raise HTTPException(status_code=404, detail="no workout in progress")
            return tracker.draft.to_dict()

        @draft_router.post("/exercises")
        def add_draft_exercise(name: str):
            try:
                added = tracker.add_exercise_to_draft(name)
            except ValueError as e:
                raise self._http_error(e)
            return {"status": "added" if added else "unchanged"}

        @draft_router.post("/exercises/{index}/sets")
        def add_draft_set(index: int, weight: float, reps: int):
            try:
                entry = tracker.add_set_to_draft(index, weight, reps)
            except (ValueError, IndexError) as e:
                raise self._http_error(e)
            return entry.model_dump()

        @draft_router.get("/exercises/{index}/quick_weights")
        def draft_quick_weights(index: int):
            try:
                return tracker.quick_add_weights(index)
            except (ValueError, IndexError) as e:
                raise self._http_error(e)

        @draft_router.post("/finish")
        def finish_draft(save: bool = True):
            try:
                session = tracker.commit_draft(save)
            except ValueError as e:
                raise self._http_error(e)
            if session is None:
                return {"status": "discarded", "id": None}
            return {"status": "saved", "id": str(session.id)}

        def _edit_draft():
            if tracker.edit_draft is None:
                raise HTTPException(status_code=404, detail="no workout is being edited")
            return tracker.edit_draft

        @edit_router.get("")
        def get_edit():
            return _edit_draft().to_dict()

        @edit_router.post("/exercises")
        def add_edit_exercise(name: str):
            added = _edit_draft().add_exercise(name)
            return {"status": "added" if added else "unchanged"}

        @edit_router.delete("/exercises/{index}")
        def delete_edit_exercise(index: int):
            try:
                _edit_draft().remove_exercise(index)
            except IndexError as e:
                raise self._http_error(e)
            return {"status": "deleted"}

        @edit_router.post("/exercises/{index}/sets")
        def add_edit_set(index: int, weight: float, reps: int):
            try:
                entry = _edit_draft().add_set(index, weight, reps)
            except (ValueError, IndexError) as e:
                raise self._http_error(e)
            return entry.model_dump()

        @edit_router.put("/exercises/{index}/sets/{set_index}")
        def update_edit_set(index: int, set_index: int, weight: float, reps: int):
            try:
                entry = _edit_draft().update_set(index, set_index, weight, reps)
            except (ValueError, IndexError) as e:
                raise self._http_error(e)
            return entry.model_dump()

        @edit_router.delete("/exercises/{index}/sets/{set_index}")
        def delete_edit_set(index: int, set_index: int):
            try:
                _edit_draft().remove_set(index, set_index)
            except IndexError as e:
                raise self._http_error(e)
            return {"status": "deleted"}

        @edit_router.post("/save")
        def save_edit():
            draft = _edit_draft()
            try:
                session = tracker.save_edit(draft)
            except (ValueError, KeyError) as e:
                raise self._http_error(e)
            return statistics.session_detail(session)

        @edit_router.post("/cancel")
        def cancel_edit():
            tracker.cancel_edit()
            return {"status": "cancelled"}

        @custom_router.get("")
        def list_custom_exercises():
            return tracker.custom_exercises()

        @custom_router.post("")
        def add_custom_exercise(workout_type: str, name: str):
            added = tracker.add_custom_exercise(self._workout_type(workout_type), name)
            return {"status": "added" if added else "unchanged"}

        @custom_router.delete("/{workout_type}/{name}")
        def delete_custom_exercise(workout_type: str, name: str):
            removed = tracker.remove_custom_exercise(self._workout_type(workout_type), name)
            if not removed:
                raise HTTPException(status_code=404, detail="not found")
            return {"status": "deleted"}

        @stats_router.get("/overview")
        def stats_overview():
            return tracker.overview()

        @stats_router.get("/exercises")
        def stats_exercises():
            return statistics.exercise_names()

        @stats_router.get("/progression")
        def stats_progression(exercise: str):
            return tracker.progression_summary(exercise)

        self.app.include_router(workouts_router)
        self.app.include_router(draft_router)
        self.app.include_router(edit_router)
        self.app.include_router(custom_router)
        self.app.include_router(stats_router)


def create_app(db_path: str | None = None, yaml_path: str = "settings.yaml") -> FastAPI:
    return GymAPI(db_path=db_path, yaml_path=yaml_path).app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app())
