from __future__ import annotations
import datetime
from typing import Callable, Dict, List, Sequence

from models import WorkoutSession
from tools import MathTools

SessionSource = Callable[[], Sequence[WorkoutSession]]


def utc_today() -> datetime.date:
    return datetime.datetime.now(datetime.timezone.utc).date()


class StatisticsService:
    """Compute workout statistics from the committed session list."""

    def __init__(
        self,
        sessions: SessionSource,
        today: Callable[[], datetime.date] | None = None,
    ) -> None:
        self._sessions = sessions
        self._today = today or utc_today

    def history(self) -> List[WorkoutSession]:
        """Sessions ordered newest first."""
        return sorted(self._sessions(), key=lambda s: s.date, reverse=True)

    def recent(self, limit: int = 3) -> List[WorkoutSession]:
        return self.history()[:limit]

    def exercise_names(self) -> List[str]:
        names = {ex.name for s in self._sessions() for ex in s.exercises}
        return sorted(names)

    def progression(self, exercise: str) -> List[Dict[str, object]]:
        """Return the heaviest set per session for ``exercise``, oldest first.

        Sessions where that heaviest set is 0 are skipped.
        """
        points: List[Dict[str, object]] = []
        for session in sorted(self._sessions(), key=lambda s: s.date):
            record = session.exercise(exercise)
            if record is None:
                continue
            if record.max_weight > 0:
                points.append({"date": session.date, "weight": record.max_weight})
        return points

    @staticmethod
    def improvement(weights: Sequence[float]) -> float:
        """Best weight minus the first one, never negative."""
        if not weights:
            return 0.0
        return max(max(weights) - weights[0], 0.0)

    def progression_summary(self, exercise: str) -> Dict[str, object]:
        points = self.progression(exercise)
        weights = [float(p["weight"]) for p in points]
        if not weights:
            return {
                "exercise": exercise,
                "points": [],
                "max_weight": None,
                "improvement": None,
                "sessions": 0,
                "started": None,
                "label": None,
            }
        gain = self.improvement(weights)
        if len(weights) == 1:
            label = "First time"
        elif gain > 0:
            label = f"+{gain:g}"
        else:
            label = "No change"
        return {
            "exercise": exercise,
            "points": [
                {"date": p["date"].isoformat(), "weight": p["weight"]} for p in points
            ],
            "max_weight": max(weights),
            "improvement": gain,
            "sessions": len(weights),
            "started": points[0]["date"].isoformat(),
            "label": label,
        }

    def _week_start(self) -> datetime.date:
        today = self._today()
        return today - datetime.timedelta(days=today.weekday())

    def overview(self) -> Dict[str, float | int]:
        sessions = list(self._sessions())
        week_start = self._week_start()
        this_week = [
            s
            for s in sessions
            if s.date.astimezone(datetime.timezone.utc).date() >= week_start
        ]
        volume = MathTools.volume(
            (entry.weight, entry.reps)
            for s in sessions
            for ex in s.exercises
            for entry in ex.sets
        )
        return {
            "workouts": len(sessions),
            "workouts_this_week": len(this_week),
            "total_sets": sum(s.total_sets for s in sessions),
            "total_volume": volume,
            "max_weight": max((s.max_weight for s in sessions), default=0.0),
        }

    @staticmethod
    def session_detail(session: WorkoutSession) -> Dict[str, object]:
        data = session.model_dump(mode="json")
        data["total_sets"] = session.total_sets
        data["max_weight"] = session.max_weight
        return data
