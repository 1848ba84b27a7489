from __future__ import annotations

from typing import Iterable

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from mediabuy.api.routes.records import read_upload
from mediabuy.db.session import get_db
from mediabuy.schemas.overview import CapPublic, CapsResponse
from mediabuy.services.caps import (
    CapEntry,
    cap_status,
    load_caps,
    parse_cap_rows,
    replace_caps,
)
from mediabuy.services.ingestion import read_sheet

router = APIRouter(prefix="/caps", tags=["caps"])

CAP_SHEET_NAME = "Network Payment Schedule"


def _caps_response(entries: Iterable[CapEntry]) -> CapsResponse:
    return CapsResponse(
        items=[
            CapPublic(
                network=entry.network,
                offer=entry.offer,
                daily_cap=entry.daily_cap,
                status=cap_status(entry.daily_cap),
            )
            for entry in entries
        ]
    )


@router.get("", response_model=CapsResponse)
def list_caps(db: Session = Depends(get_db)) -> CapsResponse:
    return _caps_response(load_caps(db))


@router.post("/upload", response_model=CapsResponse, status_code=status.HTTP_201_CREATED)
async def upload_caps(
    file: UploadFile = File(...),
    sheet: str = Form(default=CAP_SHEET_NAME),
    db: Session = Depends(get_db),
) -> CapsResponse:
    filename = file.filename or ""
    content = await read_upload(file, "caps")
    try:
        rows = read_sheet(filename, content, sheet)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    entries = parse_cap_rows(rows)
    replace_caps(db, entries)
    return _caps_response(entries)
