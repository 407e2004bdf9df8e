"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for budgets.
-------------------------------------------------------------------------
"""
from django.contrib import admin
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.budgeting.models import Budget


@admin.register(Budget)
class BudgetAdmin(admin.ModelAdmin):
    """Admin configuration for Budget model."""

    list_display = ['name', 'organization', 'allocation', 'start_date', 'end_date', 'window']
    list_filter = ['organization']
    search_fields = ['name', 'description']
    date_hierarchy = 'start_date'
    readonly_fields = ['created_by', 'updated_by', 'created_at', 'updated_at']

    def window(self, obj: Budget) -> str:
        return obj.window_status(timezone.localdate())
    window.short_description = _('Window')

    def save_model(self, request, obj, form, change):
        obj.save_with_user(request.user)
