from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from ninja import Schema
from ninja.orm import create_schema
from pydantic import Field

from .models import Company

CompanyOut = create_schema(Company, fields=['id', 'name', 'join_code', 'created_by', 'created_at'])


@dataclass(frozen=True)
class CompanyMemberDTO:
    user_id: UUID
    username: str
    email: str
    is_admin: bool
    is_blocked: bool
    is_creator: bool
    joined_at: datetime


class CompanyIn(Schema):
    name: str = Field(..., max_length=255)


class JoinCompanyIn(Schema):
    join_code: Optional[str] = None


class CompanyMemberOut(Schema):
    user_id: UUID
    username: str
    email: str
    is_admin: bool
    is_blocked: bool
    is_creator: bool
    joined_at: datetime


class CompanyMemberUpdate(Schema):
    is_admin: Optional[bool] = None
    is_blocked: Optional[bool] = None


class JoinCodeOut(Schema):
    join_code: str
