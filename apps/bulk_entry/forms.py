"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Forms for the bulk entry module: file upload for import.
-------------------------------------------------------------------------
"""
from django import forms
from django.core.exceptions import ValidationError

from apps.bulk_entry.importer import SUPPORTED_EXTENSIONS
from apps.finance.models import TransactionKind

MAX_UPLOAD_SIZE = 5 * 1024 * 1024  # 5 MB


class BulkImportForm(forms.Form):
    """
    Form for uploading income or expense entries via CSV or Excel.
    """
    kind = forms.ChoiceField(
        choices=TransactionKind.choices,
        widget=forms.Select(attrs={
            'class': 'form-select',
            'required': True
        }),
        help_text='Select whether the file holds income or expense entries'
    )

    import_file = forms.FileField(
        widget=forms.FileInput(attrs={
            'class': 'form-control',
            'accept': ','.join(SUPPORTED_EXTENSIONS),
            'required': True
        }),
        help_text='Upload CSV or Excel file with a header row'
    )

    def clean_import_file(self):
        import_file = self.cleaned_data['import_file']
        name = (import_file.name or '').lower()
        if not name.endswith(SUPPORTED_EXTENSIONS):
            raise ValidationError(
                f"Unsupported file type. Upload one of: {', '.join(SUPPORTED_EXTENSIONS)}"
            )
        if import_file.size > MAX_UPLOAD_SIZE:
            raise ValidationError('File size cannot exceed 5 MB.')
        return import_file
