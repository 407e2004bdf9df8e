"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Database models for the budgeting module. A Budget is an
             allocation envelope that expense entries are charged to.
-------------------------------------------------------------------------
"""
from datetime import date
from decimal import Decimal
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import AuditLogMixin, TenantAwareMixin


class BudgetWindowStatus(models.TextChoices):
    """
    Where a budget's active window sits relative to a given day.
    """
    ACTIVE = 'active', _('Active')
    UPCOMING = 'upcoming', _('Upcoming')
    EXPIRED = 'expired', _('Expired')

    @classmethod
    def for_window(cls, start_date: date, end_date: date, day: date) -> str:
        """Classify a start/end window relative to a day."""
        if day < start_date:
            return cls.UPCOMING
        if day > end_date:
            return cls.EXPIRED
        return cls.ACTIVE


class Budget(AuditLogMixin, TenantAwareMixin):
    """
    Allocation envelope against which expenses are checked.

    The used amount is never stored. It is the sum of committed expense
    transactions tagged with this budget and is recomputed whenever a
    snapshot is requested (see apps.finance.gateway).

    Attributes:
        name: Display name (e.g., "Youth Ministry 2026").
        description: Optional notes.
        allocation: Fixed ceiling amount.
        start_date: First day expenses may be charged.
        end_date: Last day expenses may be charged.
    """

    name = models.CharField(
        max_length=150,
        verbose_name=_('Budget Name')
    )
    description = models.TextField(
        blank=True,
        verbose_name=_('Description')
    )
    allocation = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name=_('Allocation')
    )
    start_date = models.DateField(
        verbose_name=_('Start Date')
    )
    end_date = models.DateField(
        verbose_name=_('End Date')
    )

    class Meta:
        verbose_name = _('Budget')
        verbose_name_plural = _('Budgets')
        ordering = ['name']
        indexes = [
            models.Index(fields=['organization', 'start_date', 'end_date'], name='budget_org_window_idx'),
        ]

    def __str__(self) -> str:
        return self.name

    def clean(self) -> None:
        """Validate that the window does not end before it starts."""
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({
                'end_date': _('End date cannot be before start date.')
            })

    def is_active_on(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def window_status(self, day: date) -> str:
        """
        Classify the budget window relative to a day.

        Returns:
            One of BudgetWindowStatus values.
        """
        return BudgetWindowStatus.for_window(self.start_date, self.end_date, day)
