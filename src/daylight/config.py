"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DAYLIGHT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Daylight Planner API"
    api_prefix: str = "/api"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    suggestion_limit: int = Field(default=10, ge=1, description="Suggestions returned by the plan endpoint.")

    exact_solver_max_stops: int = Field(
        default=8,
        ge=1,
        le=10,
        description="Largest stop count solved by exhaustive permutation search.",
    )
    annealing_initial_temperature: float = Field(default=1.0, gt=0.0)
    annealing_cooling_rate: float = Field(default=0.9995, gt=0.0, lt=1.0)
    annealing_max_iterations: int = Field(default=20_000, ge=1)
    annealing_min_temperature: float = Field(default=1e-6, gt=0.0)
    annealing_time_limit_seconds: Optional[float] = Field(
        default=None,
        gt=0.0,
        description="Wall-clock budget for one annealing run; best-so-far is returned when it expires.",
    )

    travel_speed_kmh: float = Field(
        default=54.0,
        gt=0.0,
        description="Constant speed used to turn great-circle distance into travel time.",
    )
    time_window_mode: Literal["soft", "strict"] = Field(default="soft")
    time_window_penalty_per_hour: float = Field(default=1.0, ge=0.0)
    infeasible_penalty: float = Field(
        default=100.0,
        ge=0.0,
        description="Flat objective penalty per violated window in strict mode.",
    )

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
