from fastapi import APIRouter, Depends

from .. import schemas
from ..config import price_list_from_settings
from ..pricing.engine import QuotationEngine

router = APIRouter(prefix="/quotes", tags=["quotes"])

# One engine per process; it holds no state beyond its immutable price list
_engine = QuotationEngine(price_list_from_settings())


def get_engine() -> QuotationEngine:
    return _engine


@router.get("/catalog")
def get_catalog(guests: int = None, engine: QuotationEngine = Depends(get_engine)):
    """Packages plus every add-on priced for the given guest count."""
    price_list = engine.price_list
    return {
        "currency": price_list.currency,
        "base_duration_hours": price_list.base_duration_hours,
        "min_guests": price_list.min_guests,
        "max_guests": price_list.max_guests,
        "packages": [package.model_dump() for package in price_list.packages],
        "extras": engine.extras.resolve_all(guests),
    }


@router.post("/calculate", response_model=schemas.QuoteResult)
def calculate_quote(request: schemas.QuoteRequest, engine: QuotationEngine = Depends(get_engine)):
    """Price a quote. Never fails on half-filled input: missing values price at 0."""
    return engine.quote(
        request.package_id,
        request.start_time,
        request.end_time,
        request.guest_count,
        request.selected_extras,
        manual_total=request.manual_total,
        makeup_override=request.makeup_override,
        start_meridiem=request.start_meridiem,
        end_meridiem=request.end_meridiem,
    )
