"""Participant model supplied by the roster manager."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Participant(BaseModel):
    """A race entrant. Immutable for the duration of a race."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique participant identifier")
    name: str | None = Field(
        default=None,
        description="Display name (a 'Duck N' fallback is generated when missing)",
    )
    avatar: str | None = Field(
        default=None,
        description="Opaque avatar reference (URL, data URI, ...)",
    )
    color: str | None = Field(
        default=None,
        description="Opaque display color (e.g. '#ffcc00')",
    )

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("participant id must not be blank")
        return value

    def display_name(self, index: int) -> str:
        """Name shown for this participant at roster ``index`` (0-based)."""
        if self.name and self.name.strip():
            return self.name
        return f"Duck {index + 1}"
