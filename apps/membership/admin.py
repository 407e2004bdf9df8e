"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for church members.
-------------------------------------------------------------------------
"""
from django.contrib import admin

from apps.membership.models import Member


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    """Admin configuration for Member model."""

    list_display = ['display_name', 'envelope_number', 'organization', 'is_active']
    list_filter = ['organization', 'is_active']
    search_fields = ['first_name', 'last_name', 'envelope_number']
    ordering = ['last_name', 'first_name']
