"""PDF financial report built with reportlab."""

from datetime import datetime
from typing import BinaryIO, Iterable, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from finnexus.domain.entities import CategoryTotal, FinancialSummary, Transaction
from finnexus.utils.amount_parser import format_currency, format_percent
from finnexus.utils.date_parser import format_local_date

PRIMARY = colors.HexColor("#4f46e5")
TABLE_HEADERS = [
    "Date",
    "Description",
    "Category",
    "Amount",
    "Pending",
    "Status",
    "Employee",
    "Commission",
    "Comm. Payment",
]

# (label, background, border) per summary card
CARD_COLORS = {
    "income": (colors.HexColor("#f0fdf4"), colors.HexColor("#16a34a")),
    "expense": (colors.HexColor("#fff1f2"), colors.HexColor("#e11d48")),
    "commissions": (colors.HexColor("#fff7ed"), colors.HexColor("#ea580c")),
    "gross": (colors.HexColor("#eef2ff"), PRIMARY),
    "tax": (colors.HexColor("#fefce8"), colors.HexColor("#ca8a04")),
    "net": (colors.HexColor("#ecfdf5"), colors.HexColor("#059669")),
}


def _numbered_canvas(footer_label: str):
    """Return a canvas class that prints 'Page i of N' on every page."""

    class NumberedCanvas(canvas.Canvas):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self._saved_page_states = []

        def showPage(self):
            self._saved_page_states.append(dict(self.__dict__))
            self._startPage()

        def save(self):
            total = len(self._saved_page_states)
            for state in self._saved_page_states:
                self.__dict__.update(state)
                self._draw_footer(total)
                super().showPage()
            super().save()

        def _draw_footer(self, total: int) -> None:
            width, _ = self._pagesize
            self.setFont("Helvetica", 8)
            self.setFillColor(colors.grey)
            self.drawCentredString(
                width / 2, 15, f"Page {self._pageNumber} of {total} - {footer_label}"
            )

    return NumberedCanvas


def summary_cards(summary: FinancialSummary) -> list[tuple[str, str, str]]:
    """Return (key, label, value) for each summary card."""
    return [
        ("income", "Total Income", format_currency(summary.total_income)),
        ("expense", "Operating Expense", format_currency(summary.operational_expense)),
        ("commissions", "Commissions", format_currency(summary.total_commissions)),
        ("gross", "Gross Result", format_currency(summary.gross_profit)),
        (
            "tax",
            f"Estimated Tax ({format_percent(summary.tax_rate)})",
            format_currency(summary.tax_liability_estimate),
        ),
        ("net", "Net Result", format_currency(summary.net_profit)),
    ]


def _cards_table(summary: FinancialSummary, styles) -> Table:
    label_style = ParagraphStyle("card_label", parent=styles["Normal"], fontSize=8)
    value_style = ParagraphStyle(
        "card_value", parent=styles["Normal"], fontSize=12, fontName="Helvetica-Bold"
    )

    cells = []
    style_commands = [
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("LEFTPADDING", (0, 0), (-1, -1), 8),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
    ]
    for index, (key, label, value) in enumerate(summary_cards(summary)):
        background, border = CARD_COLORS[key]
        col, row = index % 3, index // 3
        cells.append((row, col, [Paragraph(escape(label), label_style), Paragraph(value, value_style)]))
        style_commands.append(("BACKGROUND", (col, row), (col, row), background))
        style_commands.append(("BOX", (col, row), (col, row), 1, border))

    grid = [[None] * 3 for _ in range(2)]
    for row, col, content in cells:
        grid[row][col] = content

    table = Table(grid, colWidths=[250, 250, 250], hAlign="LEFT")
    table.setStyle(TableStyle(style_commands))
    return table


def _category_table(expenses: Sequence[CategoryTotal]) -> Table:
    rows = [["Category", "Amount"]]
    for item in expenses:
        rows.append([item.category.value, format_currency(item.total)])
    table = Table(rows, colWidths=[300, 120], hAlign="LEFT")
    table.setStyle(
        TableStyle(
            [
                ("GRID", (0, 0), (-1, -1), 0.35, colors.grey),
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f0f0f0")),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
            ]
        )
    )
    return table


def transaction_table_rows(transactions: Iterable[Transaction], cell_style) -> list[list]:
    """Build the transaction table body, header row first."""
    rows: list[list] = [TABLE_HEADERS]
    for txn in transactions:
        rows.append(
            [
                format_local_date(txn.date),
                Paragraph(escape(txn.description), cell_style),
                txn.category.value,
                format_currency(txn.amount),
                format_currency(txn.pending_amount) if txn.pending_amount is not None else "-",
                txn.status.value,
                txn.employee_name or "-",
                format_currency(txn.commission_amount) if txn.commission_amount is not None else "-",
                format_local_date(txn.commission_payment_date) if txn.commission_payment_date else "-",
            ]
        )
    return rows


def _transactions_table(transactions: Iterable[Transaction], styles) -> Table:
    cell_style = ParagraphStyle("cell", parent=styles["Normal"], fontSize=7, leading=9)
    rows = transaction_table_rows(transactions, cell_style)
    table = Table(
        rows,
        colWidths=[55, 190, 80, 75, 70, 60, 85, 70, 65],
        repeatRows=1,
        hAlign="LEFT",
    )
    table.setStyle(
        TableStyle(
            [
                ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
                ("BACKGROUND", (0, 0), (-1, 0), PRIMARY),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 7),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f9fafb")]),
                ("ALIGN", (3, 1), (4, -1), "RIGHT"),
                ("ALIGN", (7, 1), (7, -1), "RIGHT"),
                ("TEXTCOLOR", (4, 1), (4, -1), colors.HexColor("#e11d48")),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ]
        )
    )
    return table


def build_pdf_report(
    buffer: BinaryIO,
    summary: FinancialSummary,
    transactions: Sequence[Transaction],
    expenses_by_category: Sequence[CategoryTotal] = (),
    company_name: str = "FinNexus Enterprise",
    generated_at: Optional[datetime] = None,
) -> None:
    """Render the financial report into a binary buffer.

    The summary must come from the same aggregation the dashboard uses, so
    the PDF figures always match what the user saw on screen.

    Args:
        buffer: Writable binary stream (file or BytesIO)
        summary: All-time FinancialSummary
        transactions: Transactions for the detail table
        expenses_by_category: Optional expense breakdown
        company_name: Name printed in the header and footer
        generated_at: Timestamp printed in the header (defaults to now)
    """
    if generated_at is None:
        generated_at = datetime.now()

    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        rightMargin=26,
        leftMargin=26,
        topMargin=26,
        bottomMargin=30,
        title=f"{company_name} - Financial Report",
    )
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("title", parent=styles["Title"], alignment=0, fontSize=18, textColor=PRIMARY)
    hdr = ParagraphStyle("hdr", parent=styles["Heading2"], alignment=0, fontSize=12)
    normal = styles["Normal"]

    story = [
        Paragraph(escape(company_name), title_style),
        Paragraph("Analytical Financial Report", normal),
        Paragraph(f"Generated at: {generated_at.strftime('%d/%m/%Y %H:%M')}", normal),
        Spacer(1, 12),
        Paragraph("Executive Summary", hdr),
        _cards_table(summary, styles),
        Spacer(1, 12),
    ]

    if expenses_by_category:
        story.append(Paragraph("Expenses by Category", hdr))
        story.append(_category_table(expenses_by_category))
        story.append(Spacer(1, 12))

    story.append(Paragraph("Transaction Details", hdr))
    if transactions:
        story.append(_transactions_table(transactions, styles))
    else:
        story.append(Paragraph("No transactions recorded.", normal))

    doc.build(story, canvasmaker=_numbered_canvas(company_name))
