"""Geocoding proxy endpoints used by the map picker."""
from fastapi import APIRouter, Depends, HTTPException, Query

from vetconnect.dependencies.auth import get_current_user
from vetconnect.dependencies.rate_limit import rate_limit
from vetconnect.dependencies.services import get_geocoder
from vetconnect.schemas.clinic import GeocodeResult, ReverseGeocodeResponse
from vetconnect.services.geocoding_service import GeocodingService

router = APIRouter(prefix="/geocoding", tags=["geocoding"])


@router.get("/reverse", response_model=ReverseGeocodeResponse)
async def reverse(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    current_user=Depends(get_current_user),
    geocoder: GeocodingService = Depends(get_geocoder),
    _: None = Depends(rate_limit),
):
    address = await geocoder.reverse_geocode(lat, lng)
    return ReverseGeocodeResponse(latitude=lat, longitude=lng, address=address)


@router.get("/search", response_model=GeocodeResult)
async def search(
    q: str = Query(..., min_length=1),
    current_user=Depends(get_current_user),
    geocoder: GeocodingService = Depends(get_geocoder),
    _: None = Depends(rate_limit),
):
    result = await geocoder.forward_geocode(q)
    if result is None:
        raise HTTPException(status_code=404, detail="Location not found. Please try a different search term.")
    return result
