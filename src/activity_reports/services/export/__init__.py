"""Export services."""

from .csv_report import csv_filename, read_csv, save_csv, to_csv
from .pdf_report import build_report_document, pdf_filename, save_pdf, to_pdf

__all__ = [
    "build_report_document",
    "csv_filename",
    "pdf_filename",
    "read_csv",
    "save_csv",
    "save_pdf",
    "to_csv",
    "to_pdf",
]
