from __future__ import annotations

import logging
from pathlib import Path
from uuid import uuid4

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from sqlalchemy.orm import Session

from mediabuy.api.deps import Filters, Store, Window
from mediabuy.core.config import get_settings
from mediabuy.db.session import get_db
from mediabuy.schemas.records import (
    IngestionReportPublic,
    RecordPublic,
    RecordsResponse,
    RefreshResponse,
)
from mediabuy.services.export import export_filename, export_records_csv
from mediabuy.services.ingestion import (
    fetch_batch,
    parse_sheet_rows,
    read_sheet,
    replace_records,
)
from mediabuy.services.views import window_records

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/records", tags=["records"])

ALLOWED_EXTENSIONS = {".csv", ".xlsx"}
CHUNK_SIZE = 1024 * 1024


async def read_upload(file: UploadFile, subdir: str) -> bytes:
    """Read an uploaded sheet in chunks and keep a copy under ``upload_dir``."""
    filename = file.filename or ""
    extension = Path(filename).suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV or XLSX files are supported.",
        )

    settings = get_settings()
    target_dir = Path(settings.upload_dir) / subdir
    target_dir.mkdir(parents=True, exist_ok=True)
    stored_path = target_dir / f"{uuid4().hex}{extension}"

    chunks: list[bytes] = []
    total_size = 0
    try:
        with stored_path.open("wb") as target:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                total_size += len(chunk)
                if total_size > settings.max_upload_size:
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail="File exceeds the maximum upload size.",
                    )
                target.write(chunk)
                chunks.append(chunk)
    except HTTPException:
        stored_path.unlink(missing_ok=True)
        raise
    finally:
        await file.close()

    logger.info("Stored upload %s as %s (%s bytes)", filename, stored_path, total_size)
    return b"".join(chunks)


@router.post(
    "/upload",
    response_model=IngestionReportPublic,
    status_code=status.HTTP_201_CREATED,
)
async def upload_records(
    store: Store,
    file: UploadFile = File(...),
    sheet: str | None = Form(default=None),
    db: Session = Depends(get_db),
) -> IngestionReportPublic:
    filename = file.filename or ""
    content = await read_upload(file, "records")
    try:
        rows = read_sheet(filename, content, sheet)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    report = parse_sheet_rows(rows)
    if not report.records:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The sheet contains no valid rows.",
        )

    replace_records(db, report.records)
    batch = store.replace(report.records, source="upload")
    return IngestionReportPublic(
        filename=filename,
        total_rows=report.total_rows,
        accepted_rows=report.accepted_rows,
        dropped_rows=report.dropped_rows,
        dropped=report.dropped,
        generation=batch.generation,
        anchor_date=batch.anchor,
    )


@router.post("/refresh", response_model=RefreshResponse)
def refresh_records(store: Store, db: Session = Depends(get_db)) -> RefreshResponse:
    batch = store.refresh(lambda: fetch_batch(db))
    return RefreshResponse(
        generation=batch.generation,
        records=len(batch),
        anchor_date=batch.anchor,
    )


@router.get("", response_model=RecordsResponse)
def list_records(store: Store, window: Window, filters: Filters) -> RecordsResponse:
    batch = store.current
    _, records = window_records(batch, window.window, window.start, filters)
    return RecordsResponse(
        anchor_date=batch.anchor,
        total=len(records),
        items=[RecordPublic.model_validate(record) for record in records],
    )


@router.get("/export")
def export_records(store: Store, window: Window, filters: Filters) -> Response:
    interval, records = window_records(store.current, window.window, window.start, filters)
    if interval is None:
        filename = export_filename("none", "none")
    else:
        filename = export_filename(interval.start.isoformat(), interval.end.isoformat())
    return Response(
        content=export_records_csv(records),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
