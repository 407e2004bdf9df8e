"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Reusable model mixins for timestamps, audit user stamps
             and church (tenant) scoping.
-------------------------------------------------------------------------
"""
from typing import Optional, TYPE_CHECKING
from django.db import models
from django.conf import settings

if TYPE_CHECKING:
    from apps.core.models import Organization


class TimeStampedMixin(models.Model):
    """
    Abstract mixin that adds created_at and updated_at timestamps.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At"
    )

    class Meta:
        abstract = True


class AuditLogMixin(TimeStampedMixin):
    """
    Abstract mixin that records which user created or last modified a row.

    Ledger rows written by a bulk commit all carry the acting user in
    created_by, which is the audit trail for the batch.
    """

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="%(class)s_created",
        null=True,
        blank=True,
        verbose_name="Created By"
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="%(class)s_updated",
        null=True,
        blank=True,
        verbose_name="Updated By"
    )

    class Meta:
        abstract = True

    def save_with_user(self, user: Optional[object] = None, *args, **kwargs) -> None:
        """
        Save the model while setting the audit user fields.

        Args:
            user: The user performing the save operation.
        """
        if user is not None:
            if self.pk is None:
                self.created_by = user
            self.updated_by = user
        self.save(*args, **kwargs)


class TenantAwareMixin(models.Model):
    """
    Abstract mixin for multi-tenancy support.

    Every member, budget, category and ledger row belongs to exactly one
    church. Queries made on behalf of an operator must go through
    get_tenant_filtered_queryset so data never leaks across churches.
    """

    organization = models.ForeignKey(
        'core.Organization',
        on_delete=models.PROTECT,
        related_name="%(class)s_records",
        verbose_name="Organization"
    )

    class Meta:
        abstract = True

    def is_owned_by(self, org: 'Organization') -> bool:
        return self.organization_id == org.id

    @classmethod
    def get_tenant_filtered_queryset(cls, organization: 'Organization'):
        """
        Get a queryset filtered by organization.

        Args:
            organization: The church whose records are requested.

        Returns:
            Filtered queryset.
        """
        return cls.objects.filter(organization=organization)
