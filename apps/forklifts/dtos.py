from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from ninja import Schema


class ForkliftIn(Schema):
    company_id: Optional[UUID] = None
    customer: str = ""
    brand: str = ""
    model_type: str = ""
    serial_number: Optional[str] = ""
    engine_specs: Optional[str] = ""
    transmission: Optional[str] = ""
    tire_specs: Optional[str] = ""
    service_notes: Optional[str] = ""
    last_service_date: Optional[date] = None
    next_service_date: Optional[date] = None
    service_hours: Optional[int] = None
    filters_500h: Optional[str] = ""
    lubricants_500h: Optional[str] = ""
    documents_500h: Optional[List[str]] = None
    filters_1000h: Optional[str] = ""
    lubricants_1000h: Optional[str] = ""
    documents_1000h: Optional[List[str]] = None
    filters_1500h: Optional[str] = ""
    lubricants_1500h: Optional[str] = ""
    documents_1500h: Optional[List[str]] = None
    filters_2000h: Optional[str] = ""
    lubricants_2000h: Optional[str] = ""
    documents_2000h: Optional[List[str]] = None


class ForkliftPatch(Schema):
    """Partial update; only fields present in the request body change."""
    company_id: Optional[UUID] = None
    customer: Optional[str] = None
    brand: Optional[str] = None
    model_type: Optional[str] = None
    serial_number: Optional[str] = None
    engine_specs: Optional[str] = None
    transmission: Optional[str] = None
    tire_specs: Optional[str] = None
    service_notes: Optional[str] = None
    last_service_date: Optional[date] = None
    next_service_date: Optional[date] = None
    service_hours: Optional[int] = None
    filters_500h: Optional[str] = None
    lubricants_500h: Optional[str] = None
    documents_500h: Optional[List[str]] = None
    filters_1000h: Optional[str] = None
    lubricants_1000h: Optional[str] = None
    documents_1000h: Optional[List[str]] = None
    filters_1500h: Optional[str] = None
    lubricants_1500h: Optional[str] = None
    documents_1500h: Optional[List[str]] = None
    filters_2000h: Optional[str] = None
    lubricants_2000h: Optional[str] = None
    documents_2000h: Optional[List[str]] = None


class ForkliftOut(Schema):
    id: UUID
    company_id: UUID
    user_id: UUID
    customer: str
    brand: str
    model_type: str
    serial_number: str
    engine_specs: str
    transmission: str
    tire_specs: str
    service_notes: str
    last_service_date: Optional[date] = None
    next_service_date: Optional[date] = None
    service_hours: Optional[int] = None
    filters_500h: str
    lubricants_500h: str
    documents_500h: List[str]
    filters_1000h: str
    lubricants_1000h: str
    documents_1000h: List[str]
    filters_1500h: str
    lubricants_1500h: str
    documents_1500h: List[str]
    filters_2000h: str
    lubricants_2000h: str
    documents_2000h: List[str]
    days_until_service: Optional[int] = None
    service_status: str
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def resolve_days_until_service(obj):
        return obj.days_until_service()

    @staticmethod
    def resolve_service_status(obj):
        return str(obj.service_status())


class CustomerGroupOut(Schema):
    customer: str
    count: int
    forklifts: List[ForkliftOut]
