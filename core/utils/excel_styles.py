# core/utils/excel_styles.py
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

THIN_BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin')
)


# Fill colour per submission status
STATUS_FILLS = {
    'draft': "EDEDED",
    'submitted': "FFEB9C",
    'approved': "C6EFCE",
    'rejected': "FFC7CE",
}


class ExcelStyles:
    @staticmethod
    def get_header_style():
        return {
            'font': Font(bold=True, size=12),
            'fill': PatternFill(start_color="CCE5FF", end_color="CCE5FF", fill_type="solid"),
            'alignment': Alignment(wrap_text=True, vertical='center')
        }

    @staticmethod
    def get_subheader_style():
        return {
            'font': Font(bold=True, size=11),
            'fill': PatternFill(start_color="E6F3FF", end_color="E6F3FF", fill_type="solid"),
            'border': THIN_BORDER,
            'alignment': Alignment(wrap_text=True, horizontal='center')
        }

    @staticmethod
    def get_data_style():
        return {
            'font': Font(size=10),
            'border': THIN_BORDER,
            'alignment': Alignment(wrap_text=True, vertical='top')
        }

    @staticmethod
    def get_title_style():
        return {
            'font': Font(bold=True, size=14),
        }

    @staticmethod
    def get_status_style(status):
        color = STATUS_FILLS.get(str(status), "FFFFFF")
        return {
            'font': Font(bold=True, size=11),
            'fill': PatternFill(start_color=color, end_color=color, fill_type="solid"),
        }

    @staticmethod
    def apply_styles(cell, styles):
        for key, value in styles.items():
            setattr(cell, key, value)
