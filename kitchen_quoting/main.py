from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .database import engine, Base, SessionLocal
from .routers import catalog, pricing, quotes, pdf

logger = logging.getLogger("kitchen_quoting")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Kitchen Quoting App",
    description="Kitchen cabinet, surface and addon pricing calculator",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(pricing.router, prefix="/api")
app.include_router(catalog.router, prefix="/api")
app.include_router(quotes.router, prefix="/api")
app.include_router(pdf.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "kitchen-quoting-app"}


@app.on_event("startup")
def auto_seed():
    """Auto-seed the default price list on first run."""
    db = SessionLocal()
    try:
        seeded = catalog.seed_default_catalog(db)
        logger.info("Startup seed complete: %s", seeded)
    finally:
        db.close()
