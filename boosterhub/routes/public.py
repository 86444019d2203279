"""
Public Endpoints
Club data and payment QR codes for the payment pages
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from boosterhub.dependencies import get_club_store, get_payment_settings_service
from boosterhub.exceptions import NotFoundError
from boosterhub.schemas.club import BoosterClubResponse, ClubListResponse, ClubSummary
from boosterhub.services.club_store import ClubStore
from boosterhub.services.payment_settings_service import PaymentSettingsService

router = APIRouter()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate, private",
    "Pragma": "no-cache",
    "Expires": "0",
}


def parse_club_id(value: Optional[str], param: str) -> UUID:
    """Required club id from the query string; malformed ids cannot match a club"""
    if value is None or not value.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Missing required parameter: {param}"
        )
    try:
        return UUID(value.strip())
    except ValueError:
        raise NotFoundError()


@router.get("/booster-clubs", response_model=BoosterClubResponse)
async def get_booster_club(
    id: Optional[str] = Query(default=None),
    store: ClubStore = Depends(get_club_store),
):
    """Get an active club by ID"""
    club = await store.get_active(parse_club_id(id, "id"))
    if not club:
        raise NotFoundError()
    return BoosterClubResponse(**club)


@router.get("/booster-clubs/{name}", response_model=BoosterClubResponse)
async def get_booster_club_by_name(name: str, store: ClubStore = Depends(get_club_store)):
    club = await store.get_active_by_name(name)
    if not club:
        raise NotFoundError()
    return BoosterClubResponse(**club)


@router.get("/clubs", response_model=ClubListResponse)
async def list_clubs(store: ClubStore = Depends(get_club_store)):
    """List all active clubs in display order"""
    clubs = await store.list_active()
    return {
        "total": len(clubs),
        "clubs": [ClubSummary(**club) for club in clubs]
    }


@router.get("/qr-code")
async def get_qr_code(
    clubId: Optional[str] = Query(default=None),
    service: PaymentSettingsService = Depends(get_payment_settings_service),
):
    """
    Zelle QR code for a club as PNG

    Rendered on every request; responses must never be cached since the
    club's Zelle link can change at any time.
    """
    png = await service.generate_qr(parse_club_id(clubId, "clubId"))
    return Response(content=png, media_type="image/png", headers=NO_CACHE_HEADERS)
