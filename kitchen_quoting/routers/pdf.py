"""
PDF download endpoint.

GET /api/quotes/{quote_id}/pdf: download the quote document.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..pdf_generator import generate_quote_pdf
from .quotes import _quote_to_dict, get_quote_or_404

router = APIRouter(prefix="/quotes", tags=["pdf"])


@router.get("/{quote_id}/pdf")
def download_pdf(quote_id: int, db: Session = Depends(get_db)):
    """
    Generate and download a PDF quote document.

    Returns: application/pdf
    """
    quote = _quote_to_dict(get_quote_or_404(quote_id, db))
    company_profile = {
        "company_name": settings.COMPANY_NAME,
        "company_email": settings.COMPANY_EMAIL,
        "company_phone": settings.COMPANY_PHONE,
    }
    pdf_bytes = generate_quote_pdf(quote, company_profile)

    filename = f"Quote-{quote['quote_number']}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
        },
    )
