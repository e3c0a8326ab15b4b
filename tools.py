from typing import Iterable, List, Tuple


class MathTools:
    """Provides small numeric helpers for set logging."""

    QUICK_ADD_RANGE: float = 20.0
    QUICK_ADD_STEP: float = 5.0

    @staticmethod
    def volume(sets: Iterable[Tuple[float, int]]) -> float:
        """Compute training volume as the sum of weight times reps."""
        vol = 0.0
        for weight, reps in sets:
            vol += weight * reps
        return vol

    @classmethod
    def quick_add_weights(
        cls,
        previous: float,
        span: float | None = None,
        step: float | None = None,
    ) -> List[float]:
        """Return weights from ``previous - span`` to ``previous + span`` in ``step`` increments.

        Negative weights are left out. ``previous`` itself is always included.
        """
        span = cls.QUICK_ADD_RANGE if span is None else span
        step = cls.QUICK_ADD_STEP if step is None else step
        if step <= 0:
            raise ValueError("step must be positive")
        if span < 0:
            raise ValueError("span must be non-negative")
        count = int(span // step)
        weights = [previous + i * step for i in range(-count, count + 1)]
        return [float(w) for w in weights if w >= 0]


class WeightConverter:
    """Utility for converting between kg and lb."""

    KG_TO_LB = 2.20462

    @staticmethod
    def kg_to_lb(kg: float) -> float:
        return round(kg * WeightConverter.KG_TO_LB, 2)

    @staticmethod
    def lb_to_kg(lb: float) -> float:
        return round(lb / WeightConverter.KG_TO_LB, 2)
