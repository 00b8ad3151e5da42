from uuid import UUID
from datetime import datetime
from typing import Optional, Any
from ninja import Schema


class AuditLogOut(Schema):
    id: UUID
    company_id: UUID
    action: str
    target_type: str
    target_id: UUID
    target_label: str
    performed_by_name: Optional[str] = None
    performed_at: datetime
    context: Any
