# core/validators.py
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from core.constants import ColumnType


class TemplateStructureValidator:
    """Validates the section/column structure carried in a template's metadata"""

    @staticmethod
    def validate_list(metadata):
        if not isinstance(metadata, list):
            raise ValidationError(_("Template metadata must be a list of sections"))

    @staticmethod
    def validate_structure(metadata):
        TemplateStructureValidator.validate_list(metadata)

        for section_index, section in enumerate(metadata):
            TemplateStructureValidator._validate_section(section, section_index)

    @staticmethod
    def _validate_section(section, section_index):
        if not isinstance(section, dict):
            raise ValidationError(_("Section %(index)s: must be an object") % {'index': section_index})

        required_keys = ('headers', 'columns')
        missing = [key for key in required_keys if key not in section]
        if missing:
            raise ValidationError(
                _("Section %(index)s: missing required keys %(keys)s")
                % {'index': section_index, 'keys': ', '.join(missing)}
            )

        if not isinstance(section['headers'], list):
            raise ValidationError(_("Section %(index)s: headers must be a list") % {'index': section_index})

        if not isinstance(section['columns'], list):
            raise ValidationError(_("Section %(index)s: columns must be a list") % {'index': section_index})

        for column in section['columns']:
            TemplateStructureValidator._validate_column(column, section_index)

    @staticmethod
    def _validate_column(column, section_index):
        if not isinstance(column, dict) or not all(key in column for key in ('name', 'type')):
            raise ValidationError(
                _("Section %(index)s: every column needs a name and a type") % {'index': section_index}
            )

        if column['type'] not in ColumnType.values:
            raise ValidationError(
                _("Section %(index)s: invalid column type %(type)s")
                % {'index': section_index, 'type': column['type']}
            )

        if column['type'] == ColumnType.GROUP:
            nested = column.get('columns')
            if not isinstance(nested, list) or not nested:
                raise ValidationError(
                    _("Section %(index)s: group column %(name)s must have nested columns")
                    % {'index': section_index, 'name': column['name']}
                )
            for nested_column in nested:
                TemplateStructureValidator._validate_column(nested_column, section_index)
