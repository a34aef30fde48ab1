"""Configuration classes for the scheduling engine."""

from pydantic import BaseModel, Field

# Float below this many days counts as zero
DEFAULT_CRITICAL_EPSILON_DAYS = 0.01


class SchedulingConfig(BaseModel):
    """Configuration for critical-path analysis."""

    # Tolerance used to classify a task as critical (|total float| < epsilon)
    critical_epsilon_days: float = Field(default=DEFAULT_CRITICAL_EPSILON_DAYS, ge=0.0)

    # Reject task sets larger than this before any pass runs (None = unlimited)
    max_tasks: int | None = Field(default=None, ge=1)

    # Log a warning for tasks whose nominal window already violates a dependency
    warn_on_violated_windows: bool = True
