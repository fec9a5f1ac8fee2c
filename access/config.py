"""Access and trial configuration."""

from pydantic import BaseModel, Field


class AccessConfig(BaseModel):
    """
    Trial settings.

    Whole days, because the trial countdown is shown to users in days.
    """

    trial_days: int = Field(
        default=7,
        description="Length of the free trial that starts at signup",
        ge=1,
        le=90,
    )
