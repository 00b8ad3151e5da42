from django.contrib import admin
from .models import Forklift


@admin.register(Forklift)
class ForkliftAdmin(admin.ModelAdmin):
    list_display = ['customer', 'brand', 'model_type', 'serial_number', 'company', 'next_service_date']
    list_filter = ['company', 'brand']
    search_fields = ['customer', 'brand', 'model_type', 'serial_number']
    readonly_fields = ['created_at', 'updated_at']
