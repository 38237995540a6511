"""Report renderers for finnexus (CSV and PDF)."""

from finnexus.export.csv_export import export_transactions_csv, write_transactions_csv
from finnexus.export.pdf_export import build_pdf_report

__all__ = ["export_transactions_csv", "write_transactions_csv", "build_pdf_report"]
