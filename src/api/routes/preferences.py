"""Settings and category endpoints."""

import sqlite3

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_db, verify_api_key
from api.models.responses import CategoryPayload, ErrorCodes, SettingsPayload
from core.database import load_categories, load_settings, save_categories, save_settings
from models.events import CategoryConfig

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])


@router.get("/settings", response_model=SettingsPayload)
async def read_settings(conn: sqlite3.Connection = Depends(get_db)):
    return SettingsPayload.from_settings(load_settings(conn))


@router.put("/settings", response_model=SettingsPayload)
async def update_settings(payload: SettingsPayload, conn: sqlite3.Connection = Depends(get_db)):
    settings = payload.to_settings()
    save_settings(conn, settings)
    return SettingsPayload.from_settings(settings)


@router.get("/categories", response_model=list[CategoryPayload])
async def read_categories(conn: sqlite3.Connection = Depends(get_db)):
    settings = load_settings(conn)
    return [CategoryPayload(**category) for category in load_categories(conn, settings.language)]


@router.put("/categories", response_model=list[CategoryPayload])
async def update_categories(payload: list[CategoryPayload], conn: sqlite3.Connection = Depends(get_db)):
    """Replace the category list; order is kept as display order."""
    ids = [category.id for category in payload]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Duplicate category ids",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": duplicates,
            },
        )

    save_categories(conn, [CategoryConfig(**category.model_dump()) for category in payload])
    return payload
