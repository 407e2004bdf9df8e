"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for core models: Organization
             (Tenant) and StaffAssignment.
-------------------------------------------------------------------------
"""
from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from apps.core.models import Organization, StaffAssignment


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    """Admin configuration for Organization model."""

    list_display = ['name', 'currency_code', 'staff_count', 'is_active']
    list_filter = ['is_active', 'currency_code']
    search_fields = ['name']
    ordering = ['name']

    def staff_count(self, obj: Organization) -> int:
        """Count operators assigned to this church."""
        return obj.staff.count()
    staff_count.short_description = _('Staff')


@admin.register(StaffAssignment)
class StaffAssignmentAdmin(admin.ModelAdmin):
    list_display = ['user', 'organization', 'created_at']
    list_filter = ['organization']
    search_fields = ['user__username', 'organization__name']
    autocomplete_fields = ['organization']
