from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
import logging
from .. import models, schemas
from ..calculators.catalog import DependencyCycleError
from ..catalog_loader import load_catalog
from ..config import settings
from ..database import get_db
from ..pricing_engine import PricingEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotes", tags=["quotes"])


def format_quote_number(quote_id: int) -> str:
    return f"{settings.QUOTE_NUMBER_PREFIX}-{str(quote_id).zfill(4)}"


def get_quote_or_404(quote_id: int, db: Session) -> models.Quote:
    quote = db.query(models.Quote).filter(models.Quote.id == quote_id).first()
    if not quote:
        raise HTTPException(status_code=404, detail="Quote not found")
    return quote


# --- Endpoints ---

@router.post("/", response_model=schemas.Quote)
def create_quote(quote: schemas.QuoteCreate, db: Session = Depends(get_db)):
    """
    Save a quote. Pricing is recomputed here from the current catalog, so the
    stored summary always matches the stored configuration.
    """
    engine = PricingEngine(load_catalog(db), quote.rates)
    try:
        pricing = engine.price_configuration(quote.config)
        configuration = engine.resolve_configuration(quote.config)
    except DependencyCycleError as e:
        raise HTTPException(status_code=400, detail=str(e))

    db_quote = models.Quote(
        customer_name=quote.customer_name.strip(),
        customer_email=quote.customer_email.strip(),
        customer_phone=quote.customer_phone,
        configuration=configuration.model_dump(mode="json"),
        pricing=pricing.model_dump(mode="json"),
    )
    db.add(db_quote)
    db.commit()
    db.refresh(db_quote)
    logger.info("Saved quote %s for %s (total %.2f)",
                format_quote_number(db_quote.id), db_quote.customer_name, pricing.total)
    return _quote_to_dict(db_quote)


@router.get("/", response_model=List[schemas.Quote])
def list_quotes(skip: int = 0, limit: int = 50, db: Session = Depends(get_db)):
    quotes = db.query(models.Quote).order_by(
        models.Quote.created_at.desc(), models.Quote.id.desc()
    ).offset(skip).limit(limit).all()
    return [_quote_to_dict(q) for q in quotes]


@router.get("/{quote_id}", response_model=schemas.Quote)
def get_quote(quote_id: int, db: Session = Depends(get_db)):
    return _quote_to_dict(get_quote_or_404(quote_id, db))


@router.delete("/{quote_id}")
def delete_quote(quote_id: int, db: Session = Depends(get_db)):
    quote = get_quote_or_404(quote_id, db)
    db.delete(quote)
    db.commit()
    logger.info("Deleted quote %s", format_quote_number(quote_id))
    return {"ok": True}


def _quote_to_dict(q: models.Quote) -> dict:
    return {
        "id": q.id,
        "quote_number": format_quote_number(q.id),
        "customer_name": q.customer_name,
        "customer_email": q.customer_email,
        "customer_phone": q.customer_phone,
        "created_at": q.created_at.isoformat() if q.created_at else None,
        "configuration": q.configuration or {},
        "pricing": q.pricing or {},
    }
