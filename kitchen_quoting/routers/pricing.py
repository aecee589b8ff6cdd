from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging
from .. import schemas
from ..calculators.catalog import DependencyCycleError
from ..catalog_loader import load_catalog
from ..database import get_db
from ..pricing_engine import PricingEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("/calculate", response_model=schemas.PricingSummary)
def calculate(request: schemas.CalculateRequest, db: Session = Depends(get_db)):
    """
    Price a calculator configuration against the current catalog.

    Nothing is stored. Unknown catalog rows price at zero and are left out of
    the item list; a cycle in the addon dependency table is a 400.
    """
    engine = PricingEngine(load_catalog(db), request.rates)
    try:
        summary = engine.price_configuration(request.config)
    except DependencyCycleError as e:
        logger.error("Pricing failed: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    logger.info("Priced configuration: %d items, total %.2f", len(summary.items), summary.total)
    return summary
