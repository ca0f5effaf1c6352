"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF views) and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
- ``ImageUploadDTO``: an uploaded image, already read into memory.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


def _required_text(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Field must not be empty.")
    return v.strip()


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    ``title``, ``category`` and ``condition`` are required and trimmed.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    category: str
    condition: str
    description: str = ""

    @field_validator("title", "category", "condition")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        return _required_text(v)


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional — only supplied fields will be updated.
    Status and owner are deliberately absent.
    """

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    condition: Optional[str] = None

    @field_validator("title", "category", "condition")
    @classmethod
    def must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _required_text(v)


class ImageUploadDTO(BaseModel):
    """An uploaded image file."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content: bytes
    content_type: str = ""

    @property
    def extension(self) -> str:
        """Lower-cased text after the last dot, ``""`` when there is none."""
        if "." not in self.filename:
            return ""
        return self.filename.rsplit(".", 1)[1].lower()

    @property
    def is_empty(self) -> bool:
        return not self.content

