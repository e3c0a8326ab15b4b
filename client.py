import requests
from typing import Iterable, Optional


class BuilderClient:
    """Simple REST client for the workout tracker API."""

    def __init__(self, base_url: str = "http://localhost:8000", session=None) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def _get(self, path: str, **params):
        resp = self.session.get(f"{self.base_url}{path}", params=params or None)
        resp.raise_for_status()
        return resp.json()

    def _post(self, path: str, **params):
        resp = self.session.post(f"{self.base_url}{path}", params=params or None)
        resp.raise_for_status()
        return resp.json()

    def list_workouts(self, newest_first: bool = False):
        return self._get("/workouts", newest_first=newest_first)

    def get_workout(self, workout_id: str) -> dict:
        return self._get(f"/workouts/{workout_id}")

    def delete_workout(self, workout_id: str) -> None:
        resp = self.session.delete(f"{self.base_url}/workouts/{workout_id}")
        resp.raise_for_status()

    def available_exercises(self, workout_type: str, exclude: Iterable[str] = ()):
        return self._get(
            "/exercises/available", workout_type=workout_type, exclude=list(exclude)
        )

    def start_workout(self, workout_type: str, exercises: Iterable[str]) -> dict:
        return self._post(
            "/draft", workout_type=workout_type, exercises=list(exercises)
        )

    def add_exercise(self, name: str) -> bool:
        return self._post("/draft/exercises", name=name)["status"] == "added"

    def add_set(self, exercise_index: int, weight: float, reps: int) -> dict:
        return self._post(
            f"/draft/exercises/{exercise_index}/sets", weight=weight, reps=reps
        )

    def finish_workout(self, save: bool = True) -> Optional[str]:
        return self._post("/draft/finish", save=save)["id"]

    def add_custom_exercise(self, workout_type: str, name: str) -> bool:
        resp = self._post("/custom_exercises", workout_type=workout_type, name=name)
        return resp["status"] == "added"

    def progression(self, exercise: str) -> dict:
        return self._get("/stats/progression", exercise=exercise)
