from typing import NamedTuple

from django import forms
from django.core.exceptions import ValidationError

from core.validators import TemplateStructureValidator
from dashboard.review import ReviewAction


class ValidationResult(NamedTuple):
    valid: bool
    field_errors: dict
    cleaned_data: dict


class TemplateForm(forms.Form):
    code = forms.CharField(
        max_length=50,
        error_messages={'required': 'Template code is required'},
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. 1.1.3'}),
    )
    name = forms.CharField(
        max_length=255,
        error_messages={'required': 'Template name is required'},
        widget=forms.TextInput(attrs={'class': 'form-control'}),
    )
    board = forms.CharField(
        max_length=50,
        error_messages={'required': 'Board is required'},
        widget=forms.TextInput(attrs={'class': 'form-control', 'list': 'board-options'}),
    )
    metadata = forms.JSONField(
        required=False,
        error_messages={'invalid': 'Metadata must be valid JSON'},
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 12}),
    )

    def __init__(self, *args, boards=None, editing=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.board_codes = [board['code'] for board in boards] if boards is not None else None
        if editing:
            # The template code names the record being edited
            self.fields['code'].disabled = True

    def clean_board(self):
        board = self.cleaned_data['board']
        if self.board_codes is not None and board not in self.board_codes:
            raise ValidationError('Select a valid board')
        return board

    def clean_metadata(self):
        metadata = self.cleaned_data.get('metadata')
        if metadata is None:
            return []
        TemplateStructureValidator.validate_structure(metadata)
        return metadata

    def validation_result(self):
        valid = self.is_valid()
        field_errors = {field: list(errors) for field, errors in self.errors.items()}
        return ValidationResult(valid, field_errors, self.cleaned_data if valid else {})


def validate_template_input(data, boards=None):
    """Check template form input without contacting the API."""
    return TemplateForm(data, boards=boards).validation_result()


class ReviewActionForm(forms.Form):
    action = forms.ChoiceField(choices=[
        (ReviewAction.APPROVE, 'Approve'),
        (ReviewAction.REJECT, 'Reject'),
    ])
    reason = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
    )
