"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Middleware for multi-tenancy. Injects the current
             operator's church into the request.
-------------------------------------------------------------------------
"""
from typing import Optional
from django.http import HttpRequest, HttpResponse
from django.utils.deprecation import MiddlewareMixin


class TenantMiddleware(MiddlewareMixin):
    """
    Middleware to inject tenant context.

    Sets `request.organization` from the authenticated user's staff
    assignment. Anonymous users and users without an assignment get None;
    views that touch the ledger must refuse to work without a church.

    Usage:
        Add to MIDDLEWARE in settings.py AFTER AuthenticationMiddleware:
        'apps.core.middleware.TenantMiddleware',
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        request.organization = None

        if hasattr(request, 'user') and request.user.is_authenticated:
            assignment = getattr(request.user, 'staff_assignment', None)
            if assignment is not None:
                request.organization = assignment.organization

        return None
