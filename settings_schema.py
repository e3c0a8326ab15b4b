from typing import Literal

from pydantic import BaseModel, Field, ValidationError


class SettingsSchema(BaseModel):
    db_path: str = "workout.db"
    weight_unit: Literal["lbs", "kg"] = "lbs"
    quick_add_range: float = Field(default=20.0, ge=0)
    quick_add_step: float = Field(default=5.0, gt=0)
    recent_limit: int = Field(default=3, ge=1)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"


def validate_settings(data: dict) -> SettingsSchema:
    try:
        return SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
