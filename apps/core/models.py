"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Tenant models. Organization is the church that owns all
             members, budgets and ledger rows; StaffAssignment links an
             operator account to the church they work in.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.formatting import format_currency
from apps.core.mixins import TimeStampedMixin


class Organization(TimeStampedMixin):
    """
    Tenant model representing a church.

    All transactional data (members, budgets, ledger rows) is scoped to an
    Organization. Amounts carry no currency of their own; they are in the
    church's currency and rendered with currency_symbol.

    Attributes:
        name: Church display name.
        currency_code: ISO 4217 code of the church's currency.
        currency_symbol: Symbol used when rendering amounts.
        is_active: Whether the church account is operational.
    """

    name = models.CharField(
        max_length=150,
        verbose_name=_('Organization Name')
    )
    currency_code = models.CharField(
        max_length=3,
        default='USD',
        verbose_name=_('Currency Code')
    )
    currency_symbol = models.CharField(
        max_length=5,
        default='$',
        verbose_name=_('Currency Symbol')
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Is Active')
    )

    class Meta:
        verbose_name = _('Organization')
        verbose_name_plural = _('Organizations')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name

    def format_amount(self, amount: Decimal) -> str:
        """Render an amount in this church's currency."""
        return format_currency(amount, self.currency_symbol)


class StaffAssignment(TimeStampedMixin):
    """
    Links an operator's user account to the church they administer.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='staff_assignment',
        verbose_name=_('User')
    )
    organization = models.ForeignKey(
        Organization,
        on_delete=models.PROTECT,
        related_name='staff',
        verbose_name=_('Organization')
    )

    class Meta:
        verbose_name = _('Staff Assignment')
        verbose_name_plural = _('Staff Assignments')

    def __str__(self) -> str:
        return f"{self.user} @ {self.organization}"
