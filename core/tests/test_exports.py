# core/tests/test_exports.py
import io

from openpyxl import load_workbook

from conftest import TEMPLATE_1_1, make_submission
from core.tests.test_data import course_rows, generate_programme_data, value_added_rows
from core.utils.excel_export import SubmissionExporter


def load_sheet(content):
    return load_workbook(io.BytesIO(content)).active


class TestExcelExport:
    def test_export_template_1_1(self):
        rows = []
        for row_number in range(1, 6):
            prog_code, prog_name = generate_programme_data()
            rows.append({
                'section_index': 0,
                'row_number': row_number,
                'data': {'programme_code': prog_code, 'programme_name': prog_name},
            })
        submission = make_submission('7', data_rows=rows)

        ws = load_sheet(SubmissionExporter(submission, TEMPLATE_1_1).export())

        # Six title lines and a blank row precede the first section
        assert ws['A1'].value == f"Template: {TEMPLATE_1_1['name']}"
        assert ws['A5'].value == "Status: submitted"
        assert ws['A5'].fill.start_color.rgb.endswith("FFEB9C")
        assert ws['A8'].value == "1.1. Number of programmes offered during the year"
        assert ws['A9'].value == "Programme Code"
        assert ws['B9'].value == "Programme Name"
        assert ws['A10'].value == rows[0]['data']['programme_code']
        assert ws['B14'].value == rows[4]['data']['programme_name']

    def test_export_flattens_group_columns(self, template_1_1_3):
        submission = make_submission(
            '8',
            template_code='1.1.3',
            data_rows=course_rows(3) + value_added_rows(2),
        )

        ws = load_sheet(SubmissionExporter(submission, template_1_1_3).export())
        values = [cell.value for row in ws.iter_rows() for cell in row if cell.value is not None]

        assert "1.2.2 Value added courses" in values
        assert "Course - Name" in values
        assert "Course - Code" in values
        assert "Value Added Course 2" in values

    def test_export_without_template_uses_row_keys(self):
        submission = make_submission('9')

        ws = load_sheet(SubmissionExporter(submission).export())

        assert ws['A8'].value == "Section 1"
        assert ws['A9'].value == "programme_code"
        assert ws['A10'].value == "BCS"

    def test_export_no_data(self):
        submission = make_submission('10', data_rows=[])

        ws = load_sheet(SubmissionExporter(submission, TEMPLATE_1_1).export())

        assert ws['A10'].value == "No data available"

    def test_filename(self):
        exporter = SubmissionExporter(make_submission('11'), TEMPLATE_1_1)
        assert exporter.filename == "1.1_2023-2024.xlsx"
