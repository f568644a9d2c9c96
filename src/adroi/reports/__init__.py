"""
Report outputs

1. Campaign report PDF (WeasyPrint)
2. Campaign workbook (pandas + openpyxl)
"""

from .excel_report import generate_excel_report
from .pdf_generator import build_report_html, generate_campaign_pdf, get_pdf_filename

__all__ = [
    'generate_campaign_pdf',
    'build_report_html',
    'get_pdf_filename',
    'generate_excel_report',
]
