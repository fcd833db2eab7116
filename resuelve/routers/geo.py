"""
Geo and Exchange Rate Router

Region eligibility and the current USD -> Bs rate.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from resuelve.services.currency import LOCAL_CURRENCY, CurrencyService
from resuelve.services.geofence import CORO_COORDS, MAX_DISTANCE_KM, Coordinates, check_region

from .deps import get_currency_service_dep

router = APIRouter(tags=["geo"])


@router.get("/geo/check")
async def check_location(lat: Optional[float] = None, lng: Optional[float] = None):
    """Missing coordinates are reported as unknown and allowed."""
    if (lat is None) != (lng is None):
        raise HTTPException(status_code=400, detail="lat and lng must be given together")

    location = Coordinates(lat=lat, lng=lng) if lat is not None else None
    result = check_region(location)
    return {
        **result.to_dict(),
        "center": {"lat": CORO_COORDS.lat, "lng": CORO_COORDS.lng},
        "radius_km": MAX_DISTANCE_KM,
    }


@router.get("/exchange-rate")
async def get_exchange_rate(currency: CurrencyService = Depends(get_currency_service_dep)):
    rate = await currency.get_exchange_rate()
    return {"base": "USD", "currency": LOCAL_CURRENCY, "rate": rate}
