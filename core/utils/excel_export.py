# core/utils/excel_export.py
import io
import logging
from datetime import datetime

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from core.utils.excel_styles import ExcelStyles
from core.utils.template_structure import build_sections

logger = logging.getLogger(__name__)


class SubmissionExporter:
    """Writes one submission's rows into a workbook laid out by template section"""

    def __init__(self, submission, template=None):
        self.submission = submission
        self.template = template
        self.wb = Workbook()
        self.ws = self.wb.active
        self.ws.title = str(submission['template_code'])[:31]
        self.current_row = 1

        self.header_style = ExcelStyles.get_header_style()
        self.subheader_style = ExcelStyles.get_subheader_style()
        self.data_style = ExcelStyles.get_data_style()
        self.title_style = ExcelStyles.get_title_style()

    @property
    def filename(self):
        year = self.submission.get('academic_year_name') or 'export'
        return f"{self.submission['template_code']}_{year}.xlsx"

    def _write_title_info(self):
        title_info = [
            f"Template: {self.submission.get('template_name', '')}",
            f"Code: {self.submission['template_code']}",
            f"Department: {self.submission.get('department_name', '')}",
            f"Academic Year: {self.submission.get('academic_year_name', '')}",
            f"Status: {self.submission['status']}",
            f"Generated on: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        ]

        status_line = 4
        for index, info in enumerate(title_info):
            cell = self.ws.cell(row=self.current_row, column=1, value=info)
            if index == status_line:
                ExcelStyles.apply_styles(cell, ExcelStyles.get_status_style(self.submission['status']))
            else:
                ExcelStyles.apply_styles(cell, self.title_style)
            self.current_row += 1

        self.current_row += 1

    def _write_section(self, section):
        total_columns = max(len(section['columns']), 1)

        for header in section['headers'] or [section['title']]:
            if total_columns > 1:
                self.ws.merge_cells(
                    f'A{self.current_row}:{get_column_letter(total_columns)}{self.current_row}'
                )
            cell = self.ws.cell(row=self.current_row, column=1, value=header)
            ExcelStyles.apply_styles(cell, self.header_style)
            self.current_row += 1

        for col_index, column in enumerate(section['columns'], start=1):
            cell = self.ws.cell(row=self.current_row, column=col_index, value=column['display_name'])
            ExcelStyles.apply_styles(cell, self.subheader_style)
            self.ws.column_dimensions[get_column_letter(col_index)].width = max(
                self.ws.column_dimensions[get_column_letter(col_index)].width or 0,
                min(len(str(column['display_name'])) + 4, 50),
            )
        self.current_row += 1

        if not section['rows']:
            self.ws.cell(row=self.current_row, column=1, value='No data available')
            self.current_row += 1

        for row in section['rows']:
            for col_index, value in enumerate(row, start=1):
                cell = self.ws.cell(row=self.current_row, column=col_index, value=self._cell_value(value))
                ExcelStyles.apply_styles(cell, self.data_style)
            self.current_row += 1

        self.current_row += 1

    @staticmethod
    def _cell_value(value):
        if isinstance(value, (list, dict)):
            return str(value)
        return value

    def export(self):
        metadata = self.template['metadata'] if self.template else []
        sections = build_sections(metadata, self.submission.get('data_rows', []))

        self._write_title_info()
        for section in sections:
            self._write_section(section)

        output = io.BytesIO()
        self.wb.save(output)
        logger.info(
            f"Exported submission {self.submission['id']} ({len(sections)} sections) to {self.filename}"
        )
        return output.getvalue()
