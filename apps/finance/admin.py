"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for ledger categories and
             committed transactions. Transactions are read-only here;
             they are written through bulk entry only.
-------------------------------------------------------------------------
"""
from django.contrib import admin

from apps.finance.models import Category, FinancialTransaction


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Admin configuration for Category model."""

    list_display = ['code', 'name', 'kind', 'organization', 'is_active']
    list_filter = ['kind', 'is_active', 'organization']
    search_fields = ['code', 'name']
    ordering = ['kind', 'code']


@admin.register(FinancialTransaction)
class FinancialTransactionAdmin(admin.ModelAdmin):
    """Admin configuration for FinancialTransaction model."""

    list_display = ['date', 'kind', 'amount', 'category', 'member', 'budget', 'batch_id', 'created_by']
    list_filter = ['kind', 'organization', 'date']
    search_fields = ['description', 'batch_id', 'member__last_name', 'budget__name']
    date_hierarchy = 'date'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
