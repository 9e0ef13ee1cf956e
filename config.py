"""Configuration for the exercise engine.

These configuration models allow callers to tune grading, session and
persistence behavior. Every field has a default matching the production
app, so ``EngineConfig()`` is a complete configuration.
"""

from pathlib import Path

from pydantic import BaseModel, Field


class GradingConfig(BaseModel):
    """Configuration for answer grading."""

    # Role-play passes when strictly more than this share of steps is right
    role_play_pass_ratio: float = Field(default=0.5, ge=0.0, le=1.0)


class SessionConfig(BaseModel):
    """Configuration for the session controller."""

    # The third skip of the same question marks it incorrect
    max_skips: int = Field(default=3, ge=1)


class PersistenceConfig(BaseModel):
    """Configuration for snapshot storage."""

    key_prefix: str = "exercise"
    default_context: str = "default"


class PassPolicyConfig(BaseModel):
    """Pass thresholds used by callers deciding pass/fail."""

    default_threshold: float = Field(default=80.0, ge=0.0, le=100.0)
    zone_thresholds: dict[int, float] = Field(
        default_factory=lambda: {1: 65.0, 2: 70.0, 3: 75.0, 4: 80.0, 5: 85.0}
    )


class EngineConfig(BaseModel):
    """Master configuration for the engine."""

    grading: GradingConfig = Field(default_factory=GradingConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    pass_policy: PassPolicyConfig = Field(default_factory=PassPolicyConfig)


def load_config(path: Path | None = None) -> EngineConfig:
    """Load configuration from a JSON file, or defaults when no path given.

    Args:
        path: Path to a JSON document shaped like EngineConfig. Missing
            sections fall back to their defaults.

    Returns:
        The validated configuration.

    Raises:
        pydantic.ValidationError: If the document does not match the schema.
        OSError: If the file cannot be read.
    """
    if path is None:
        return EngineConfig()
    return EngineConfig.model_validate_json(path.read_text(encoding="utf-8"))
