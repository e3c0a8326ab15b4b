from __future__ import annotations
import logging
from typing import Dict, Iterable, List

from db import CustomExerciseRepository
from models import WorkoutType

logger = logging.getLogger(__name__)

BUILT_IN_EXERCISES: Dict[WorkoutType, tuple[str, ...]] = {
    WorkoutType.UPPER: (
        "Bench Press",
        "Pull ups",
        "Shoulder Press",
        "Preacher Curl",
        "Dips",
    ),
    WorkoutType.LOWER: (
        "Squats",
        "Hamstring Curls",
        "Leg Extension",
        "Calf Raises",
        "Freak Machines",
        "Decline Crunch",
    ),
    WorkoutType.PUSH: (
        "Dips",
        "Shoulder Press",
        "Slight Incline DB Press",
        "Tricep Pushdown",
        "Overhead Press",
        "Chest Fly",
        "Lateral Raises",
    ),
    WorkoutType.PULL: (
        "Preacher Curl",
        "Rows",
        "Pull ups",
        "Hammer Curl",
        "Forearm Curls",
        "Reverse Curls",
    ),
    WorkoutType.LEGS: (
        "Squats",
        "Hamstring Curls",
        "Leg Extension",
        "Calf Raises",
        "Freak Machines",
        "Ab Machine",
    ),
}


def available_exercises(
    workout_type: WorkoutType,
    registry: Dict[WorkoutType, List[str]],
    already_chosen: Iterable[str] = (),
) -> List[str]:
    """Return built-ins then custom names for ``workout_type``, minus ``already_chosen``."""
    seen = set(already_chosen)
    names = []
    for name in list(BUILT_IN_EXERCISES[workout_type]) + list(registry.get(workout_type, [])):
        if name in seen:
            continue
        seen.add(name)
        names.append(name)
    return names


def clean_registry(
    registry: Dict[WorkoutType, List[str]]
) -> Dict[WorkoutType, List[str]]:
    """Return ``registry`` with names trimmed, blanks, built-ins and repeats dropped."""
    cleaned: Dict[WorkoutType, List[str]] = {}
    for workout_type, names in registry.items():
        for name in names:
            add_custom_exercise(workout_type, name, cleaned)
    return cleaned


def add_custom_exercise(
    workout_type: WorkoutType, name: str, registry: Dict[WorkoutType, List[str]]
) -> bool:
    """Append the trimmed ``name`` to ``registry[workout_type]``.

    Returns False without touching the registry when the name is blank or
    already offered for that type, built-in or custom.
    """
    cleaned = name.strip()
    if not cleaned or cleaned in BUILT_IN_EXERCISES[workout_type]:
        return False
    current = registry.get(workout_type, [])
    if cleaned in current:
        return False
    registry[workout_type] = current + [cleaned]
    return True


def remove_custom_exercise(
    workout_type: WorkoutType, name: str, registry: Dict[WorkoutType, List[str]]
) -> bool:
    current = registry.get(workout_type, [])
    cleaned = name.strip()
    if cleaned not in current:
        return False
    current.remove(cleaned)
    if not current:
        registry.pop(workout_type, None)
    return True


class ExerciseCatalog:
    """Built-in exercises plus the persisted custom registry."""

    def __init__(self, repo: CustomExerciseRepository) -> None:
        self.repo = repo
        loaded = repo.load()
        self.registry: Dict[WorkoutType, List[str]] = clean_registry(loaded)
        if self.registry != loaded:
            logger.warning("dropped invalid or repeated custom exercises on load")

    def available(self, workout_type: WorkoutType, excluding: Iterable[str] = ()) -> List[str]:
        return available_exercises(workout_type, self.registry, excluding)

    def custom(self, workout_type: WorkoutType | None = None) -> Dict[str, List[str]] | List[str]:
        if workout_type is not None:
            return list(self.registry.get(workout_type, []))
        return {t.value: list(names) for t, names in self.registry.items()}

    def add_custom(self, workout_type: WorkoutType, name: str) -> bool:
        added = add_custom_exercise(workout_type, name, self.registry)
        if added:
            logger.info("custom exercise added: %s/%s", workout_type.value, name.strip())
            self.repo.save(self.registry)
        return added

    def remove_custom(self, workout_type: WorkoutType, name: str) -> bool:
        removed = remove_custom_exercise(workout_type, name, self.registry)
        if removed:
            logger.info("custom exercise removed: %s/%s", workout_type.value, name.strip())
            self.repo.save(self.registry)
        return removed
