"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Centralized logging for bulk entry and ledger operations.
-------------------------------------------------------------------------
"""
import logging
from decimal import Decimal

logger = logging.getLogger('apps.finance')


def _username(user) -> str:
    return getattr(user, 'username', None) or 'system'


class LedgerLogger:
    """Centralized logging for bulk entry operations"""

    @staticmethod
    def log_import_parsed(organization, user, kind: str, row_count: int, source: str = ''):
        """Log a successfully parsed import file"""
        logger.info(
            f"Import parsed: {row_count} {kind} rows | "
            f"Source: {source or 'payload'} | "
            f"Organization: {organization.name} | "
            f"By: {_username(user)}",
            extra={
                'organization_id': organization.pk,
                'user_id': getattr(user, 'pk', None),
                'kind': kind,
                'row_count': row_count,
            }
        )

    @staticmethod
    def log_import_rejected(organization, user, kind: str, error):
        """Log an import file that failed to parse"""
        logger.warning(
            f"Import rejected: {error.error_code} | "
            f"{error.message} | "
            f"Organization: {organization.name} | "
            f"By: {_username(user)}",
            extra={
                'organization_id': organization.pk,
                'user_id': getattr(user, 'pk', None),
                'kind': kind,
                'error_code': error.error_code,
            }
        )

    @staticmethod
    def log_batch_rejected(organization, user, kind: str, row_count: int, error):
        """Log a batch that failed resolution or validation"""
        logger.warning(
            f"Batch rejected: {error.error_code} | "
            f"{row_count} {kind} rows | "
            f"{error.message} | "
            f"Organization: {organization.name} | "
            f"By: {_username(user)}",
            extra={
                'organization_id': organization.pk,
                'user_id': getattr(user, 'pk', None),
                'kind': kind,
                'row_count': row_count,
                'error_code': error.error_code,
            }
        )

    @staticmethod
    def log_batch_committed(organization, user, kind: str, batch_id, row_count: int, total: Decimal):
        """Log a committed batch with full context"""
        logger.info(
            f"Batch committed: {batch_id} | "
            f"{row_count} {kind} rows | "
            f"Total: {organization.format_amount(total)} | "
            f"Organization: {organization.name} | "
            f"By: {_username(user)}",
            extra={
                'organization_id': organization.pk,
                'user_id': getattr(user, 'pk', None),
                'kind': kind,
                'batch_id': str(batch_id),
                'row_count': row_count,
                'amount': str(total),
            }
        )

    @staticmethod
    def log_commit_failed(organization, user, kind: str, row_count: int, error):
        """Log a batch insert rejected by the database"""
        logger.error(
            f"Batch commit failed: {row_count} {kind} rows | "
            f"{error.message} | "
            f"Organization: {organization.name} | "
            f"By: {_username(user)}",
            extra={
                'organization_id': organization.pk,
                'user_id': getattr(user, 'pk', None),
                'kind': kind,
                'row_count': row_count,
            }
        )
