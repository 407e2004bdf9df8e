"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: App configuration for bulk entry.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class BulkEntryConfig(AppConfig):
    """
    Configuration class for the bulk entry application.

    One engine serves the income-only, expense-only and mixed entry
    screens; the transaction kind selects the counterparty and category
    rules that apply.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.bulk_entry'
    verbose_name = 'Bulk Financial Entry'
