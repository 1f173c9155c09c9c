"""Locale reference data routes"""

from fastapi import APIRouter, Depends

from ..database.locale import locale_db
from ..errors import not_found
from ..security.public_key import require_public_key

router = APIRouter(prefix="/v1/services/locale", tags=["Locale"], dependencies=[Depends(require_public_key)])


@router.get("/countries")
async def list_countries():
    """All countries the store ships to"""
    return {"countries": locale_db.list_countries()}


@router.get("/{country_code}/subdivisions")
async def list_subdivisions(country_code: str):
    """Subdivisions of a country"""
    subdivisions = locale_db.list_subdivisions(country_code)
    if subdivisions is None:
        raise not_found("Country")
    return {"subdivisions": subdivisions}
