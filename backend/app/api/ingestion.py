"""Ingestion trigger: object-store notifications that a new CSV is ready."""
import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from ..core.exceptions import WardServiceError
from ..models.base import get_db
from ..services import ingestion

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ingestion"])


@router.post("/", response_class=PlainTextResponse)
def ingest_notification(
    payload: Optional[Any] = Body(default=None),
    db: Session = Depends(get_db),
):
    """
    Ingest the CSV named by a storage notification.
    Body is ``{"bucket", "name"}`` or a Pub/Sub envelope carrying it base64-encoded.
    Failures return the raw error message; the caller is a machine, not a person.
    """
    try:
        bucket, name = ingestion.decode_trigger(payload)
    except WardServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    try:
        result = ingestion.ingest_object(db, bucket, name)
    except WardServiceError as exc:
        logger.error("Ingestion of %s/%s failed: %s", bucket, name, exc.message)
        raise HTTPException(status_code=500, detail=exc.message)
    except Exception as exc:
        logger.exception("Ingestion of %s/%s failed", bucket, name)
        raise HTTPException(status_code=500, detail=str(exc))

    logger.info(
        "Processed %s: %d records, table=%s, rows written=%d",
        name, result.records_parsed,
        result.entity.value if result.entity else None, result.rows_written,
    )
    return PlainTextResponse(f"Processed file: {name}")
