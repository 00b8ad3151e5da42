from django.contrib import admin
from .models import Company, Membership


class MembershipInline(admin.TabularInline):
    model = Membership
    extra = 0
    fields = ['user', 'is_admin', 'is_blocked', 'joined_at']
    readonly_fields = ['joined_at']


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ['name', 'join_code', 'created_by', 'created_at']
    search_fields = ['name', 'join_code']
    readonly_fields = ['join_code', 'created_at']
    inlines = [MembershipInline]
