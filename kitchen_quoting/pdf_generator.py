"""
PDF Quote Generator.

Renders a saved quote (configuration + pricing snapshot) as a paginated
document. Uses fpdf2 (pure Python, no system dependencies).

Layout:
1. First page: title, quote number, customer block, quote details block
2. Items table: 15 rows on the first page, 25 on every page after
3. Last page: summary, TOTAL, additional pricing levels, generated-on footer
"""

from datetime import datetime
from typing import List

from fpdf import FPDF

ITEMS_FIRST_PAGE = 15
ITEMS_PER_PAGE = 25
MAX_NAME_LENGTH = 40

ITEM_COLUMNS = [("Item Name", 110), ("Measurement", 40), ("Price", 40)]

DISCLAIMER = "This is a computer-generated document. Prices are subject to change without notice."


def _fmt(amount) -> str:
    """Format a number as $X,XXX.XX"""
    try:
        return f"${float(amount):,.2f}"
    except (ValueError, TypeError):
        return "$0.00"


def _pct(rate) -> str:
    """0.05 -> '5%', 0.125 -> '12.5%'"""
    try:
        return f"{float(rate) * 100:g}%"
    except (ValueError, TypeError):
        return "0%"


def _safe(text: str) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        str(text)
        .replace("\u2022", "-")    # bullet
        .replace("\u2014", " - ")  # em dash
        .replace("\u2013", "-")    # en dash
        .replace("\u201c", '"')    # left double quote
        .replace("\u201d", '"')    # right double quote
        .replace("\u2018", "'")    # left single quote
        .replace("\u2019", "'")    # right single quote
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


def truncate_name(name: str) -> str:
    if len(name) > MAX_NAME_LENGTH:
        return name[:MAX_NAME_LENGTH - 3] + "..."
    return name


def paginate_items(items: list, first_page: int = ITEMS_FIRST_PAGE,
                   per_page: int = ITEMS_PER_PAGE) -> List[list]:
    """
    Split items into pages. Always returns at least one page so an empty
    quote still gets a header and summary.
    """
    pages = [items[:first_page]]
    remaining = items[first_page:]
    while remaining:
        pages.append(remaining[:per_page])
        remaining = remaining[per_page:]
    return pages


def _format_date(value) -> str:
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except (ValueError, TypeError):
        dt = datetime.utcnow()
    return dt.strftime("%B %d, %Y")


class QuotePDF(FPDF):
    """Custom PDF class for kitchen quote documents."""

    def __init__(self, company_name="", company_info=""):
        super().__init__()
        self.company_name = company_name
        self.company_info = company_info
        self.set_auto_page_break(auto=True, margin=20)

    def header(self):
        pass  # First-page header is drawn by generate_quote_pdf

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="C")

    def section_header(self, title):
        """Render a section header bar."""
        self.set_font("Helvetica", "B", 11)
        self.set_fill_color(45, 55, 72)
        self.set_text_color(255, 255, 255)
        self.cell(0, 8, f"  {title}", fill=True, new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(0, 0, 0)
        self.ln(2)

    def table_header(self, cols):
        """Render a table header row. cols: [(label, width), ...]"""
        self.set_font("Helvetica", "B", 8)
        self.set_fill_color(240, 240, 240)
        for label, width in cols:
            align = "R" if label == "Price" else "L"
            self.cell(width, 6, label, border="B", fill=True, align=align)
        self.ln()

    def table_row(self, values, widths):
        self.set_font("Helvetica", "", 8)
        for i, (val, width) in enumerate(zip(values, widths)):
            align = "R" if i == len(widths) - 1 else "L"
            self.cell(width, 5.5, _safe(val), align=align)
        self.ln()

    def info_block(self, title, lines):
        self.set_font("Helvetica", "B", 10)
        self.cell(0, 6, title, new_x="LMARGIN", new_y="NEXT")
        self.set_font("Helvetica", "", 9)
        for line in lines:
            self.cell(0, 5, _safe(line), new_x="LMARGIN", new_y="NEXT")
        self.ln(3)

    def summary_row(self, label, amount, bold=False):
        self.set_font("Helvetica", "B" if bold else "", 10 if bold else 9)
        self.cell(150, 6, label, align="R", border="T" if bold else 0)
        self.cell(40, 6, _fmt(amount), align="R", border="T" if bold else 0)
        self.ln()


def generate_quote_pdf(quote: dict, company_profile: dict = None) -> bytes:
    """
    Generate a PDF quote document.

    Args:
        quote: saved quote dict (quote_number, customer fields, created_at, pricing)
        company_profile: company_name / company_email / company_phone

    Returns:
        PDF bytes
    """
    company_profile = company_profile or {}
    company_name = company_profile.get("company_name") or "Kitchen Calculator"
    info_parts = [p for p in [company_profile.get("company_phone"), company_profile.get("company_email")] if p]

    pricing = quote.get("pricing") or {}
    items = pricing.get("items") or []
    contingency_rate = pricing.get("contingency_rate", 0)
    tariff_rate = pricing.get("tariff_rate", 0)
    quote_number = quote.get("quote_number") or f"Q-{quote.get('id', '?')}"
    date_str = _format_date(quote.get("created_at"))

    pdf = QuotePDF(company_name=company_name, company_info=" | ".join(info_parts))
    pdf.alias_nb_pages()
    widths = [c[1] for c in ITEM_COLUMNS]

    pages = paginate_items(items)
    for page_index, page_items in enumerate(pages):
        is_first = page_index == 0
        is_last = page_index == len(pages) - 1
        pdf.add_page()

        if is_first:
            pdf.set_font("Helvetica", "B", 18)
            pdf.cell(0, 10, _safe(company_name), new_x="LMARGIN", new_y="NEXT")
            if pdf.company_info:
                pdf.set_font("Helvetica", "", 9)
                pdf.set_text_color(100, 100, 100)
                pdf.cell(0, 5, _safe(pdf.company_info), new_x="LMARGIN", new_y="NEXT")
                pdf.set_text_color(0, 0, 0)
            pdf.ln(2)
            pdf.set_font("Helvetica", "B", 14)
            pdf.cell(0, 8, "Kitchen Calculation Quote", new_x="LMARGIN", new_y="NEXT")
            pdf.set_font("Helvetica", "", 10)
            pdf.cell(0, 5, f"Quote {_safe(quote_number)}", new_x="LMARGIN", new_y="NEXT")
            pdf.ln(4)

            customer_lines = [
                f"Name: {quote.get('customer_name', '')}",
                f"Email: {quote.get('customer_email', '')}",
            ]
            if quote.get("customer_phone"):
                customer_lines.append(f"Phone: {quote['customer_phone']}")
            pdf.info_block("Customer Information", customer_lines)
            pdf.info_block("Quote Details", [
                f"Quote ID: {quote_number}",
                f"Date: {date_str}",
                f"Total: {_fmt(pricing.get('total', 0))}",
            ])

        pdf.section_header("Items" if is_first else "Items (continued)")
        pdf.table_header(ITEM_COLUMNS)
        for item in page_items:
            pdf.table_row([
                truncate_name(item.get("name", "")),
                item.get("measurement") or "-",
                _fmt(item.get("price", 0)),
            ], widths)

        if is_last:
            pdf.ln(4)
            pdf.section_header("Summary")
            pdf.summary_row("Subtotal", pricing.get("subtotal", 0))
            pdf.summary_row(f"Contingency ({_pct(contingency_rate)})", pricing.get("buffer", 0))
            pdf.summary_row(f"Tariff ({_pct(tariff_rate)})", pricing.get("tariff", 0))
            pdf.summary_row("TOTAL", pricing.get("total", 0), bold=True)
            pdf.ln(4)

            pdf.section_header("Additional Pricing Levels")
            pdf.set_font("Helvetica", "", 9)
            pdf.cell(0, 5, (
                f"Trade (40%): {_fmt(pricing.get('trade_price', 0))}    "
                f"Retail 1 (100%): {_fmt(pricing.get('retail_price_1', 0))}    "
                f"Retail 2 (150%): {_fmt(pricing.get('retail_price_2', 0))}"
            ), new_x="LMARGIN", new_y="NEXT")
            pdf.ln(6)

            generated = datetime.utcnow().strftime("%B %d, %Y")
            pdf.set_font("Helvetica", "I", 7)
            pdf.set_text_color(120, 120, 120)
            pdf.multi_cell(0, 4, f"Generated on {generated} | {DISCLAIMER}")
            pdf.set_text_color(0, 0, 0)

    # fpdf2 returns a bytearray
    return bytes(pdf.output())
