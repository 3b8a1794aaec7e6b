"""Stage 5: Publish — persist the generated scrapbook.

Local storage is authoritative:
  data/scrapbooks/<year>.html  written via a temp file + atomic replace, so a
  failed run never leaves a half-written file and never touches the previous
  good copy. Any OSError is fatal (WriteFailed).

S3 is a best-effort mirror:
  s3://<bucket>/scrapbooks/<year>.html  with year / timestamp metadata.
  Any failure is logged as a warning and the run still succeeds. Skipped
  entirely when no bucket is configured.

Finally the scrapbook_files row for the year is upserted. The record is
bookkeeping only: a database error is rolled back and logged as a warning,
because the authoritative local file has already been replaced by then.
"""
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from errors import PublishWarning, WriteFailed
from models.records import ScrapbookFile
from settings import Settings

logger = logging.getLogger(__name__)

_S3_PREFIX = "scrapbooks"


class PublishedScrapbook(BaseModel):
    year: int
    filename: str
    url: str  # path the web application serves the file under
    created: datetime


def run(
    settings: Settings,
    year: int,
    html: str,
    session: Session | None = None,
    s3_client: Any = None,
    now: datetime | None = None,
) -> Path:
    """Write ``html`` for ``year``, mirror it to S3, record it; return the local path."""
    now = now or datetime.now(timezone.utc)
    filename = f"{year}.html"
    local_path = settings.output_dir / filename
    body = html.encode("utf-8")

    write_local(local_path, body)
    logger.info("Stage 5 complete → %s", local_path)

    s3_key = f"{_S3_PREFIX}/{filename}"
    s3_url = None
    if settings.mirror_enabled and s3_client is not None:
        try:
            s3_url = mirror_to_s3(s3_client, settings, s3_key, body, year, now)
        except PublishWarning as warning:
            logger.warning("%s (non-critical, local copy kept)", warning)
    else:
        logger.info("  S3 mirror disabled — no bucket or client configured")

    if session is not None:
        try:
            _record_scrapbook_file(
                session, year, filename, local_path, len(body), s3_key, s3_url, now,
            )
        except SQLAlchemyError as exc:
            session.rollback()
            logger.warning(
                "Could not record %s in scrapbook_files: %s (non-critical, local copy kept)",
                filename, exc,
            )

    return local_path


# ---------------------------------------------------------------------------
# Local write
# ---------------------------------------------------------------------------

def write_local(path: Path, body: bytes) -> None:
    """Atomically replace ``path`` with ``body``. Raises WriteFailed on any OSError."""
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "wb") as fh:
            fh.write(body)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise WriteFailed(path, str(exc)) from exc


# ---------------------------------------------------------------------------
# S3 mirror
# ---------------------------------------------------------------------------

def mirror_to_s3(
    s3_client: Any,
    settings: Settings,
    key: str,
    body: bytes,
    year: int,
    now: datetime,
) -> str:
    """Upload ``body`` under ``key``; return its public URL.

    Every failure is re-raised as PublishWarning for the caller to log.
    """
    bucket = settings.s3_bucket_name
    try:
        s3_client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType="text/html",
            Metadata={
                "scrapbook-year": str(year),
                "generated-at": now.isoformat(),
                "content-type": "scrapbook",
            },
        )
    except Exception as exc:
        raise PublishWarning(key, str(exc)) from exc

    url = f"https://{bucket}.s3.{settings.aws_region}.amazonaws.com/{key}"
    logger.info("  Mirrored to %s", url)
    return url


def make_s3_client(settings: Settings):
    """Create a boto3 S3 client for the configured region, or None when mirroring is off."""
    if not settings.mirror_enabled:
        return None
    import boto3  # lazy: only needed when a bucket is configured
    return boto3.client("s3", region_name=settings.aws_region)


# ---------------------------------------------------------------------------
# Generation record
# ---------------------------------------------------------------------------

def _record_scrapbook_file(
    session: Session,
    year: int,
    filename: str,
    local_path: Path,
    file_size: int,
    s3_key: str,
    s3_url: str | None,
    now: datetime,
) -> None:
    record = session.scalars(
        select(ScrapbookFile).where(ScrapbookFile.year == year)
    ).one_or_none()
    if record is None:
        record = ScrapbookFile(year=year, generated_at=now)
        session.add(record)

    record.filename = filename
    record.local_path = str(local_path)
    record.s3_url = s3_url
    record.s3_key = s3_key
    record.status = "generated"
    record.file_size = file_size
    record.generated_at = now
    record.updated_at = now
    session.commit()
    logger.debug("Recorded %r", record)


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

def list_scrapbooks(settings: Settings) -> list[PublishedScrapbook]:
    """Return the generated ``<year>.html`` files, newest first."""
    if not settings.output_dir.exists():
        return []

    found: list[PublishedScrapbook] = []
    for path in settings.output_dir.glob("*.html"):
        if not path.stem.isdigit():
            continue
        found.append(PublishedScrapbook(
            year=int(path.stem),
            filename=path.name,
            url=f"/scrapbooks/{path.name}",
            created=datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc),
        ))
    return sorted(found, key=lambda s: (s.created, s.year), reverse=True)
