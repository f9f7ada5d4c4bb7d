"""
Color Schemas.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mynotes.core.utils import normalize_hex


class ColorRead(BaseModel):
    """Palette entry snapshot."""

    id: int = Field(ge=1)
    hex: str = Field(description="#RRGGBB")
    name: str = ""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("hex")
    @classmethod
    def _normalize_hex(cls, value: str) -> str:
        return normalize_hex(value)
