# Copyright (c) 2026 Mohammed Hassan. All rights reserved.
# Proprietary and confidential. Unauthorized copying, modification, distribution, or use is prohibited.

import os
import re
import mimetypes
import logging
from datetime import datetime, timezone
from typing import Callable

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.orm import Session

from ..config import settings
from ..logging_setup import log_event
from ..models import HeritageSite, SiteMedia
from ..schemas import OperationResult

logger = logging.getLogger(__name__)

class StorageError(Exception):
    pass

def public_prefix() -> str:
    return f"/storage/v1/object/public/{settings.storage_bucket}/"

def local_bucket_dir() -> str:
    return os.path.join(settings.uploads_dir, settings.storage_bucket)

def _get_s3_client():
    if not settings.s3_access_key or not settings.s3_secret_key:
        return None
    return boto3.client(
        "s3",
        aws_access_key_id=settings.s3_access_key,
        aws_secret_access_key=settings.s3_secret_key,
        region_name=settings.s3_region,
        endpoint_url=settings.s3_endpoint_url,
    )

def validate_file_size(file_name: str, size: int):
    if size > settings.max_upload_bytes:
        size_mb = size / (1024 * 1024)
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise StorageError(f'File "{file_name}" is {size_mb:.2f}MB. Maximum allowed size is {limit_mb}MB.')

def sanitize_file_name(file_name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9.-]", "_", file_name or "file")

def build_storage_path(folder: str, file_name: str, now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(datetime.now(timezone.utc).timestamp() * 1000)
    name = f"{now_ms}_{sanitize_file_name(file_name)}"
    folder = (folder or "").strip("/")
    return f"{folder}/{name}" if folder else name

def public_url_for(path: str) -> str:
    return f"{settings.public_base_url.rstrip('/')}{public_prefix()}{path}"

def extract_path_from_url(url: str) -> str | None:
    if not url:
        return None
    idx = url.find(public_prefix())
    if idx == -1:
        return None
    return url[idx + len(public_prefix()):].split("?")[0] or None

def _local_path(path: str) -> str:
    base = os.path.abspath(local_bucket_dir())
    full = os.path.abspath(os.path.join(base, path))
    if not full.startswith(base + os.sep):
        raise StorageError(f"Invalid storage path: {path}")
    return full

def upload_file(file_name: str, data: bytes, folder: str, content_type: str | None = None) -> dict:
    validate_file_size(file_name, len(data))
    path = build_storage_path(folder, file_name)
    content_type = content_type or mimetypes.guess_type(file_name)[0] or "application/octet-stream"

    s3 = _get_s3_client()
    if s3:
        try:
            s3.put_object(Bucket=settings.storage_bucket, Key=path, Body=data, ContentType=content_type)
        except (BotoCoreError, ClientError) as e:
            log_event("storage_upload_fail", level="error", path=path, error=str(e))
            raise StorageError(f"Upload failed: {e}") from e
    else:
        full = _local_path(path)
        os.makedirs(os.path.dirname(full), exist_ok=True)
        with open(full, "wb") as f:
            f.write(data)

    log_event("storage_upload", path=path, size=len(data))
    return {"url": public_url_for(path), "path": path, "file_name": file_name, "size": len(data)}

def upload_files(files: list[tuple[str, bytes]], folder: str, on_progress: Callable[[int, int], None] | None = None) -> list[dict]:
    uploaded = []
    total = len(files)
    for i, (file_name, data) in enumerate(files):
        uploaded.append(upload_file(file_name, data, folder))
        if on_progress:
            on_progress(i + 1, total)
    return uploaded

def delete_file(url: str):
    path = extract_path_from_url(url)
    if not path:
        raise StorageError(f"Not a storage URL: {url}")

    s3 = _get_s3_client()
    if s3:
        try:
            s3.delete_object(Bucket=settings.storage_bucket, Key=path)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Delete failed: {e}") from e
    else:
        full = _local_path(path)
        if os.path.exists(full):
            os.remove(full)
    log_event("storage_delete", path=path)

def delete_files(urls: list[str]) -> list[str]:
    """Deletes what it can and returns the URLs that failed."""
    failed = []
    for url in urls:
        try:
            delete_file(url)
        except StorageError as e:
            logger.warning(f"Could not delete {url}: {e}")
            failed.append(url)
    return failed

def add_site_media(db: Session, site_id: int, media_type: str, url: str, position: int = 0, is_primary: bool = False) -> SiteMedia:
    site = db.query(HeritageSite).filter(HeritageSite.site_id == site_id).first()
    if not site:
        raise StorageError(f"Site with ID {site_id} not found in database. Please save the site first before uploading media.")

    media = SiteMedia(site_id=site_id, media_type=media_type, storage_url=url, position=position, is_primary=is_primary)
    db.add(media)
    db.commit()
    db.refresh(media)
    return media

def delete_media_item(db: Session, media_id: int, url: str | None = None) -> OperationResult:
    media = db.query(SiteMedia).filter(SiteMedia.media_id == media_id).first()
    if not media:
        return OperationResult(success=False, error="Media item not found")

    try:
        delete_file(url or media.storage_url)
    except StorageError as e:
        logger.warning(f"Storage delete failed for media {media_id}: {e}")

    db.delete(media)
    db.commit()
    return OperationResult(success=True)
