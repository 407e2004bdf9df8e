"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: App configuration for the membership module.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class MembershipConfig(AppConfig):
    """
    Configuration class for the membership application.

    Members are the counterparties of income entries (tithes, offerings)
    and are matched either by id or by their envelope number.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.membership'
    verbose_name = 'Membership'
