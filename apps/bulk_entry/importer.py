"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Tabular import parser. Turns a CSV text or an .xlsx
             workbook into TransactionDrafts. The import is fail-fast:
             the first bad row rejects the whole file.
-------------------------------------------------------------------------
"""
import csv
import io
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, Iterator, List, Sequence, Tuple

from django.conf import settings
from openpyxl import load_workbook

from apps.bulk_entry.drafts import TransactionDraft
from apps.bulk_entry.normalizers import normalize_amount, normalize_date, normalize_lookup_code
from apps.bulk_entry.results import RowResult
from apps.core.exceptions import RowFormatException, StructuralImportException
from apps.finance.models import TransactionKind


REQUIRED_COLUMNS = {
    TransactionKind.INCOME: ('amount', 'category', 'date'),
    TransactionKind.EXPENSE: ('budget_id', 'amount', 'category', 'date'),
}

# Income files need at least one of these
INCOME_COUNTERPARTY_COLUMNS = ('member_id', 'envelope_number')

SUPPORTED_EXTENSIONS = ('.csv', '.xlsx')


def validate_header(columns: Sequence[str], kind: str) -> None:
    """
    Check that the header row carries every column the kind needs.

    Args:
        columns: Lower-cased, trimmed header cells.
        kind: income or expense.

    Raises:
        StructuralImportException: Naming the missing columns.
    """
    kind = TransactionKind(kind)
    missing = [column for column in REQUIRED_COLUMNS[kind] if column not in columns]
    if missing:
        raise StructuralImportException(
            f"Missing required columns: {', '.join(missing)}",
            missing_columns=missing
        )

    if kind == TransactionKind.INCOME and not any(c in columns for c in INCOME_COUNTERPARTY_COLUMNS):
        raise StructuralImportException(
            "Either member_id or envelope_number column must be present",
            missing_columns=list(INCOME_COUNTERPARTY_COLUMNS)
        )


def parse_record(record: Dict[str, str], kind: str, row: int) -> RowResult:
    """
    Normalize one data row into a draft.

    Args:
        record: Column name to trimmed cell text.
        kind: income or expense.
        row: Physical row number in the file (header is row 1).

    Returns:
        RowResult holding a TransactionDraft, or the row's first error.
    """
    amount = normalize_amount(record.get('amount', ''), row)
    if not amount.ok:
        return amount

    day = normalize_date(record.get('date', ''), row)
    if not day.ok:
        return day

    category = record.get('category', '')
    if not category:
        return RowResult.failure(row, f"Missing category in row {row}", field='category')

    lookup_code = ''
    if kind == TransactionKind.EXPENSE:
        counterparty = record.get('budget_id', '')
        if not counterparty:
            return RowResult.failure(row, f"Missing budget_id in row {row}", field='budget_id')
    else:
        lookup = normalize_lookup_code(record.get('envelope_number', ''), row)
        if not lookup.ok:
            return lookup
        lookup_code = lookup.value
        counterparty = record.get('member_id', '')
        if not counterparty and not lookup_code:
            return RowResult.failure(
                row,
                f"Either member_id or envelope_number must be provided in row {row}",
                field='member_id'
            )

    return RowResult.success(row, TransactionDraft(
        kind=kind,
        amount=amount.value,
        category_ref=category,
        counterparty_ref=counterparty,
        date=day.value,
        description=record.get('description', ''),
        secondary_lookup=lookup_code,
    ))


def _is_blank_row(values: Sequence[Any]) -> bool:
    return all(not str(value or '').strip() for value in values)


def parse_import_rows(rows: Iterable[Sequence[Any]], kind: str) -> List[TransactionDraft]:
    """
    Parse a header row followed by data rows, one row per file line.

    Args:
        rows: Row cell sequences; the first one is the header.
        kind: income or expense.

    Returns:
        One draft per data row, in file order.
    """
    return parse_numbered_rows(enumerate(rows, start=1), kind)


def parse_numbered_rows(numbered: Iterable[Tuple[int, Sequence[Any]]], kind: str) -> List[TransactionDraft]:
    """
    Parse (line number, cells) pairs, the first pair being the header.

    Blank rows are skipped but still counted, so the row numbers in error
    messages match what the operator sees in an editor or spreadsheet.

    Args:
        numbered: Physical line number of each record with its cells.
        kind: income or expense.

    Returns:
        One draft per data row, in file order.

    Raises:
        StructuralImportException: Empty file, bad header or too many rows.
        RowFormatException: The first row that fails normalization.
    """
    kind = TransactionKind(kind)
    iterator = iter(numbered)
    _, header = next(iterator, (1, None))
    if header is None or _is_blank_row(header):
        raise StructuralImportException("The import file is empty.")

    columns = [str(cell or '').strip().lower() for cell in header]
    validate_header(columns, kind)

    max_rows = getattr(settings, 'BULK_IMPORT_MAX_ROWS', 1000)
    drafts: List[TransactionDraft] = []

    for row_number, values in iterator:
        if _is_blank_row(values):
            continue
        if len(drafts) >= max_rows:
            raise StructuralImportException(
                f"The import file has more than {max_rows} rows. Split it into smaller files."
            )

        cells = [str(value if value is not None else '').strip() for value in values]
        record = dict(zip(columns, cells))
        result = parse_record(record, kind, row_number)
        if not result.ok:
            raise RowFormatException([result.error])
        drafts.append(result.value)

    return drafts


def _csv_records(reader) -> Iterator[Tuple[int, List[str]]]:
    """Pair each CSV record with the file line it starts on."""
    line = 1
    for values in reader:
        yield line, values
        # A quoted cell may span several lines
        line = reader.line_num + 1


def parse_import_payload(text: str, kind: str) -> List[TransactionDraft]:
    """
    Parse delimited text (CSV with a header row).

    Args:
        text: File content. A leading byte-order mark is ignored.
        kind: income or expense.

    Returns:
        Drafts in file order.
    """
    reader = csv.reader(io.StringIO(text.lstrip('\ufeff')))
    return parse_numbered_rows(_csv_records(reader), kind)


def _cell_text(value: Any) -> str:
    """Render a spreadsheet cell the way it would appear in a CSV export."""
    if value is None:
        return ''
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(Decimal(str(value)))
    return str(value)


def parse_import_workbook(file_obj, kind: str) -> List[TransactionDraft]:
    """
    Parse the first sheet of an .xlsx workbook.

    Args:
        file_obj: Binary file-like object.
        kind: income or expense.

    Returns:
        Drafts in sheet order.
    """
    try:
        workbook = load_workbook(file_obj, read_only=True, data_only=True)
    except Exception as exc:
        raise StructuralImportException(f"Could not read spreadsheet: {exc}") from exc

    try:
        sheet = workbook.worksheets[0]
        rows = [
            [_cell_text(value) for value in row]
            for row in sheet.iter_rows(values_only=True)
        ]
    finally:
        workbook.close()

    return parse_import_rows(rows, kind)


def parse_import_file(uploaded_file, kind: str) -> List[TransactionDraft]:
    """
    Parse an uploaded .csv or .xlsx file.

    Args:
        uploaded_file: Django UploadedFile or File opened in binary mode.
        kind: income or expense.

    Returns:
        Drafts in file order.

    Raises:
        StructuralImportException: Unsupported type or undecodable text,
            in addition to the parse errors.
    """
    name = (getattr(uploaded_file, 'name', '') or '').lower()

    if name.endswith('.xlsx'):
        return parse_import_workbook(uploaded_file, kind)

    if name.endswith('.csv'):
        content = uploaded_file.read()
        if isinstance(content, bytes):
            try:
                content = content.decode('utf-8-sig')
            except UnicodeDecodeError as exc:
                raise StructuralImportException("The import file must be UTF-8 encoded.") from exc
        return parse_import_payload(content, kind)

    raise StructuralImportException(
        f"Unsupported file type. Upload one of: {', '.join(SUPPORTED_EXTENSIONS)}"
    )
