"""
CSV ingestion orchestrator.

Triggered when a CSV lands in object storage: fetch it, parse it, decide which
table it feeds, and upsert every row in one transaction.
"""
import base64
import binascii
import csv
import io
import json
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.exceptions import ValidationError
from .object_store import ObjectStore, object_store
from .schema_classifier import EntityKind, classify
from .upsert_executor import upsert_records

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    bucket: str
    name: str
    records_parsed: int
    entity: Optional[EntityKind]
    rows_written: int = 0


def decode_trigger(payload: Optional[dict]) -> Tuple[str, str]:
    """Extract (bucket, name) from a storage notification.

    Accepts the bare object metadata ``{"bucket", "name"}`` or a Pub/Sub push
    envelope whose ``message.data`` is that JSON, base64-encoded.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    message = payload.get("message")
    if isinstance(message, dict) and message.get("data"):
        try:
            decoded = base64.b64decode(message["data"], validate=True).decode("utf-8")
            payload = json.loads(decoded)
        except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
            raise ValidationError(f"Could not decode message data: {exc}") from exc
        if not isinstance(payload, dict):
            raise ValidationError("Decoded message data must be a JSON object")

    bucket = payload.get("bucket")
    name = payload.get("name")
    if not bucket or not name:
        raise ValidationError("Missing bucket or filename")
    return bucket, name


def parse_csv(content: bytes) -> List[Dict[str, Optional[str]]]:
    """Parse CSV bytes into header-keyed records.

    Headers and values are trimmed, a UTF-8 BOM is ignored, and rows with no
    non-blank value are skipped. Short rows keep every header key with ``None``;
    a row with more cells than the header raises ValidationError, rejecting
    the whole file.
    """
    text = content.decode("utf-8-sig")
    reader = csv.reader(io.StringIO(text))
    header: Optional[List[str]] = None
    records: List[Dict[str, Optional[str]]] = []

    for row in reader:
        if not any(cell.strip() for cell in row):
            continue
        if header is None:
            header = [cell.strip() for cell in row]
            continue
        values = [cell.strip() for cell in row]
        if len(values) > len(header):
            raise ValidationError(
                f"Invalid record length on line {reader.line_num}: "
                f"expected {len(header)} fields, got {len(values)}"
            )
        record: Dict[str, Optional[str]] = {}
        for index, column in enumerate(header):
            record[column] = values[index] if index < len(values) else None
        records.append(record)

    return records


def ingest_csv(db: Session, name: str, content: bytes, bucket: str = "") -> IngestionResult:
    """Classify already-downloaded CSV content and upsert it."""
    records = parse_csv(content)
    logger.info("Processing %d records from %s", len(records), name)

    kind = classify(records)
    result = IngestionResult(bucket=bucket, name=name, records_parsed=len(records), entity=kind)
    if kind is None:
        logger.warning("No known table matches the columns of %s; nothing written", name)
        return result

    logger.info("Classified %s as %s", name, kind.value)
    result.rows_written = upsert_records(db, kind, records)
    return result


def ingest_object(
    db: Session,
    bucket: str,
    name: str,
    store: Optional[ObjectStore] = None,
) -> IngestionResult:
    """Fetch ``bucket/name`` from object storage and ingest it.

    Raises UpstreamFetchError when the download fails and StoreError when any
    row fails (the file is then rolled back completely). Nothing is retried.
    """
    content = (store or object_store).download(bucket, name)
    return ingest_csv(db, name, content, bucket=bucket)
