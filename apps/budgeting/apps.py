"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: App configuration for the budgeting module.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class BudgetingConfig(AppConfig):
    """
    Configuration class for the budgeting application.

    This app manages:
    - Budget envelopes with an allocation and an active window
    - Budget usage (used, remaining, percentage) for list and detail views
    - Capacity checks for expense batches
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.budgeting'
    verbose_name = 'Budgeting Module'
