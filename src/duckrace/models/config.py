"""Race configuration."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from duckrace.exceptions import InvalidConfigError
from duckrace.models.skills import Range, SkillConfig, SkillKind


class RaceConfig(BaseModel):
    """Parameters of a race. Injected into the simulator and echoed in the result."""

    model_config = ConfigDict(frozen=True)

    distance: float = Field(default=4000.0, gt=0, description="Race distance in meters")
    base_speed: float = Field(
        default=100.0,
        gt=0,
        description="Speed of every racer in meters per second before effects",
    )
    time_step: int = Field(default=100, gt=0, description="Simulation step in milliseconds")
    max_duration: int = Field(
        default=60_000,
        gt=0,
        description="Hard ceiling on simulated time in milliseconds",
    )
    snapshot_interval: int = Field(
        default=500,
        gt=0,
        description="Milliseconds of simulated time between progress snapshots",
    )

    # Skill attempt pacing (seconds)
    initial_cooldown: Range = Field(
        default=Range(min=2.0, max=4.0),
        description="Cooldown every skill starts the race with",
    )
    initial_attempt_delay: Range = Field(
        default=Range(min=2.0, max=4.0),
        description="Delay before a racer first tries to use a skill",
    )
    attempt_interval: Range = Field(
        default=Range(min=5.0, max=8.0),
        description="Delay before the next attempt after a skill was used",
    )
    retry_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Delay before the next attempt when no skill was available",
    )

    enabled_skills: tuple[SkillKind, ...] = Field(
        default=tuple(SkillKind),
        description="Skills racers may choose from (empty disables skills)",
    )
    skills: SkillConfig = Field(default_factory=SkillConfig)

    @field_validator("enabled_skills")
    @classmethod
    def _canonical_skill_order(cls, value: tuple[SkillKind, ...]) -> tuple[SkillKind, ...]:
        # Declaration order keeps random skill choice reproducible across processes
        return tuple(kind for kind in SkillKind if kind in value)

    @property
    def step_seconds(self) -> float:
        """Step size in seconds."""
        return self.time_step / 1000

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RaceConfig":
        """Build a config from plain data (JSON file, CLI overrides, ...).

        Args:
            data: Field values; missing fields keep their defaults

        Returns:
            Validated RaceConfig

        Raises:
            InvalidConfigError: If any value is rejected
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidConfigError(f"Invalid race configuration: {e}") from e

    def without_skills(self) -> "RaceConfig":
        """Copy of this config with every skill disabled."""
        return self.model_copy(update={"enabled_skills": ()})


DEFAULT_RACE_CONFIG = RaceConfig()
