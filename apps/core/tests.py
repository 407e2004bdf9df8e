"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the core module - exceptions, money
             formatting and tenant middleware.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory, SimpleTestCase, TestCase

from apps.core.exceptions import (
    RowError, RowFormatException, StructuralImportException,
)
from apps.core.formatting import format_currency, round_money
from apps.core.middleware import TenantMiddleware
from apps.core.models import Organization, StaffAssignment
from apps.membership.models import Member


User = get_user_model()


class ExceptionTests(SimpleTestCase):
    """Tests for ledger exceptions."""

    def test_row_errors_are_joined(self) -> None:
        """Test that a row-indexed exception reports every row."""
        exc = RowFormatException([
            RowError(row=2, message='Invalid amount in row 2: x', field='amount', value='x'),
            RowError(row=5, message='Invalid date format in row 5: y', field='date', value='y'),
        ])

        self.assertEqual(exc.message, 'Invalid amount in row 2: x; Invalid date format in row 5: y')
        self.assertEqual(exc.rows, [2, 5])
        data = exc.to_dict()
        self.assertEqual(data['error_code'], 'ERR_ROW_FORMAT')
        self.assertEqual(data['details']['errors'][1]['field'], 'date')

    def test_structural_exception_details(self) -> None:
        exc = StructuralImportException('Missing required columns: date', missing_columns=['date'])
        self.assertEqual(exc.to_dict()['details'], {'missing_columns': ['date']})

    def test_default_message(self) -> None:
        self.assertEqual(str(StructuralImportException()), 'The import file is not in the expected format.')


class FormattingTests(SimpleTestCase):

    def test_round_half_up(self) -> None:
        self.assertEqual(round_money('2.345'), Decimal('2.35'))
        self.assertEqual(round_money(None), Decimal('0.00'))

    def test_format_currency(self) -> None:
        self.assertEqual(format_currency(Decimal('1234.5')), '$1,234.50')
        self.assertEqual(format_currency(Decimal('10'), '€'), '€10.00')


class TenantTests(TestCase):
    """Tests for tenant scoping."""

    def setUp(self) -> None:
        self.org = Organization.objects.create(name='First Baptist')
        self.other = Organization.objects.create(name='Second Baptist')
        self.user = User.objects.create_user(username='clerk', password='testpass123')
        StaffAssignment.objects.create(user=self.user, organization=self.org)
        self.factory = RequestFactory()

    def test_middleware_sets_organization(self) -> None:
        request = self.factory.get('/')
        request.user = self.user
        TenantMiddleware(lambda r: None).process_request(request)
        self.assertEqual(request.organization, self.org)

    def test_middleware_without_assignment(self) -> None:
        request = self.factory.get('/')
        request.user = User.objects.create_user(username='guest', password='testpass123')
        TenantMiddleware(lambda r: None).process_request(request)
        self.assertIsNone(request.organization)

        request.user = AnonymousUser()
        TenantMiddleware(lambda r: None).process_request(request)
        self.assertIsNone(request.organization)

    def test_tenant_filtered_queryset(self) -> None:
        mine = Member.objects.create(organization=self.org, first_name='Ruth')
        Member.objects.create(organization=self.other, first_name='Naomi')

        self.assertEqual(list(Member.get_tenant_filtered_queryset(self.org)), [mine])
        self.assertTrue(mine.is_owned_by(self.org))
        self.assertEqual(self.org.format_amount(Decimal('5')), '$5.00')
