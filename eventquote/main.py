from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from .config import settings
from .database import engine, Base
from .routers import quotes, events, inventory, accounting

logger = logging.getLogger("eventquote")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Event Quote Desk",
    description="Quote wizard pricing and event/inventory/accounting manager for %s" % settings.COMPANY_NAME,
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
app.include_router(quotes.router, prefix="/api")
app.include_router(events.router, prefix="/api")
app.include_router(inventory.router, prefix="/api")
app.include_router(accounting.router, prefix="/api")

# Serve the single-page front ends if they were built next to the API
frontend_path = os.path.join(os.path.dirname(__file__), "..", "frontend")
if os.path.exists(frontend_path):
    assets_path = os.path.join(frontend_path, "assets")
    if os.path.exists(assets_path):
        app.mount("/assets", StaticFiles(directory=assets_path), name="assets")

    @app.get("/")
    def serve_frontend():
        return FileResponse(os.path.join(frontend_path, "index.html"))


@app.get("/health")
def health():
    return {"status": "ok", "app": "event-quote-desk"}


@app.on_event("startup")
def log_pricing_policy():
    """Record which price-list policies this process is running with."""
    logger.info(
        "Pricing: currency=%s base_hours=%d rounding=%s custom_total=%s",
        settings.CURRENCY, settings.BASE_DURATION_HOURS,
        settings.ACCESSORY_ROUNDING.value, settings.CUSTOM_TOTAL_POLICY.value,
    )
