"""
Preference Models

Only one UI setting is persisted: where the floating "add record" button
was last dropped. It is stored as a small JSON blob.
"""

from pydantic import BaseModel, Field


class ButtonPosition(BaseModel):
    """Screen coordinate of the floating add button."""

    x: float = Field(..., description="Horizontal position")
    y: float = Field(..., description="Vertical position")

    def to_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "ButtonPosition":
        """
        Decode a stored blob.

        Raises:
            pydantic.ValidationError: If the blob is not a valid coordinate
        """
        return cls.model_validate_json(data)
