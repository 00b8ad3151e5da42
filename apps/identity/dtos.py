"""DTOs for Identity app."""
from dataclasses import dataclass
from uuid import UUID
from typing import Optional

from ninja import Schema
from pydantic import Field


@dataclass(frozen=True)
class UserDTO:
    id: UUID
    username: str
    email: str
    phone: str
    is_active: bool


class UserCreate(Schema):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None


class UserOut(Schema):
    id: UUID
    username: str
    email: str
    phone: str
    is_active: bool
