"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Member model. Only the fields the finance core reads are
             modelled here; profile screens live elsewhere.
-------------------------------------------------------------------------
"""
from django.core.validators import RegexValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import TenantAwareMixin, TimeStampedMixin


envelope_number_validator = RegexValidator(
    regex=r'^\d+$',
    message=_('Envelope number must contain only digits.')
)


class Member(TenantAwareMixin, TimeStampedMixin):
    """
    A church member who can be credited with income.

    Attributes:
        first_name: Given name.
        last_name: Family name.
        envelope_number: Offering envelope code. Expected to be unique per
            church, but not enforced by the database; bulk entry refuses to
            guess when two members share one.
        is_active: Inactive members cannot receive new entries.
    """

    first_name = models.CharField(
        max_length=100,
        verbose_name=_('First Name')
    )
    last_name = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_('Last Name')
    )
    envelope_number = models.CharField(
        max_length=20,
        blank=True,
        db_index=True,
        validators=[envelope_number_validator],
        verbose_name=_('Envelope Number')
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Is Active')
    )

    class Meta:
        verbose_name = _('Member')
        verbose_name_plural = _('Members')
        ordering = ['first_name', 'last_name']

    def __str__(self) -> str:
        return self.display_name

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
