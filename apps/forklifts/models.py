import uuid
from datetime import date
from typing import List, Optional

from django.conf import settings
from django.db import models
from django.utils import timezone

SERVICE_INTERVALS = (500, 1000, 1500, 2000)
DUE_SOON_DAYS = 7


class ServiceStatus(models.TextChoices):
    OVERDUE = 'OVERDUE', 'Overdue'
    DUE_SOON = 'DUE_SOON', 'Due Soon'
    SCHEDULED = 'SCHEDULED', 'Scheduled'
    UNKNOWN = 'UNKNOWN', 'Unknown'


class Forklift(models.Model):
    """
    A maintained forklift. Belongs to a company; `user` is the member who
    created the record and the only one allowed to delete it.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    company = models.ForeignKey(
        'companies.Company',
        on_delete=models.CASCADE,
        related_name='forklifts',
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='forklifts',
    )

    customer = models.TextField(db_index=True)
    brand = models.TextField()
    model_type = models.TextField()
    serial_number = models.TextField(blank=True)
    engine_specs = models.TextField(blank=True)
    transmission = models.TextField(blank=True)
    tire_specs = models.TextField(blank=True)
    service_notes = models.TextField(blank=True)

    last_service_date = models.DateField(null=True, blank=True)
    next_service_date = models.DateField(null=True, blank=True)
    service_hours = models.PositiveIntegerField(null=True, blank=True)

    # Service intervals: filters/lubricants are free text, documents are
    # lists of base64 data URLs
    filters_500h = models.TextField(blank=True)
    lubricants_500h = models.TextField(blank=True)
    documents_500h = models.JSONField(default=list, blank=True)
    filters_1000h = models.TextField(blank=True)
    lubricants_1000h = models.TextField(blank=True)
    documents_1000h = models.JSONField(default=list, blank=True)
    filters_1500h = models.TextField(blank=True)
    lubricants_1500h = models.TextField(blank=True)
    documents_1500h = models.JSONField(default=list, blank=True)
    filters_2000h = models.TextField(blank=True)
    lubricants_2000h = models.TextField(blank=True)
    documents_2000h = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['customer', 'brand', 'model_type']
        indexes = [
            models.Index(fields=['company', 'customer'], name='forklift_company_customer_idx'),
        ]

    def __str__(self):
        return f"{self.brand} - {self.model_type} ({self.customer})"

    @property
    def label(self) -> str:
        return f"{self.brand} {self.model_type}"

    def days_until_service(self, today: Optional[date] = None) -> Optional[int]:
        if self.next_service_date is None:
            return None
        today = today or timezone.localdate()
        return (self.next_service_date - today).days

    def service_status(self, today: Optional[date] = None) -> str:
        days = self.days_until_service(today)
        if days is None:
            return ServiceStatus.UNKNOWN
        if days < 0:
            return ServiceStatus.OVERDUE
        if days < DUE_SOON_DAYS:
            return ServiceStatus.DUE_SOON
        return ServiceStatus.SCHEDULED

    def documents_for(self, hours: int) -> List[str]:
        if hours not in SERVICE_INTERVALS:
            raise ValueError(f"Unknown service interval: {hours}h")
        return getattr(self, f'documents_{hours}h') or []

    def service_intervals(self) -> List[dict]:
        """Interval groups in ascending order, empty groups included."""
        return [
            {
                'hours': hours,
                'filters': getattr(self, f'filters_{hours}h'),
                'lubricants': getattr(self, f'lubricants_{hours}h'),
                'documents': self.documents_for(hours),
            }
            for hours in SERVICE_INTERVALS
        ]
