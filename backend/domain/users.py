from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    id: int
    name: str
    email: str

    @classmethod
    def from_row(cls, row) -> "User":
        return cls(id=row["id"], name=row["name"], email=row["email"])


class CreateUser(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)


class UpdateUser(BaseModel):
    """Absent or null fields keep the stored value."""

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=1)
