"""Transaction category definitions."""

from __future__ import annotations

from typing import Optional

from sqlmodel import SQLModel


class Category(SQLModel):
    """Category a transaction can be assigned to."""

    id: int
    name: str
    name_pl: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name
