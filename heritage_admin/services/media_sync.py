import base64
import binascii
import logging
from dataclasses import dataclass, field
from sqlalchemy.orm import Session

from ..logging_setup import log_event
from ..schemas import MediaItemIn
from .storage import StorageError, upload_file, delete_files

logger = logging.getLogger(__name__)

@dataclass
class MediaChanges:
    """Storage side effects of one save, settled once the transaction is decided."""
    uploaded: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)

    def commit(self) -> list[str]:
        """Deletes files whose rows were removed. Returns the URLs that could not be deleted."""
        failed = delete_files(self.removed)
        self.removed = []
        self.uploaded = []
        return failed

    def rollback(self) -> list[str]:
        """Deletes files uploaded during the failed save; removed rows come back so their files stay."""
        failed = delete_files(self.uploaded)
        self.removed = []
        self.uploaded = []
        return failed

def _decode(item: MediaItemIn) -> bytes:
    data = item.file_data or ""
    if "," in data and data.startswith("data:"):
        data = data.split(",", 1)[1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise StorageError(f"Invalid file data for {item.file_name or 'upload'}") from e

def sync_media(
    db: Session,
    model,
    owner_column: str,
    owner_id: int,
    items: list[MediaItemIn],
    folder: str,
    changes: MediaChanges,
    media_type: str | None = None,
    primary_first: bool = False,
    url_column: str = "media_url",
) -> list:
    """
    Makes the stored media rows of one listing match `items`.

    Rows missing from `items` are deleted, items that carry file data are
    uploaded first, rows are matched by id and then by URL so re-saving never
    duplicates. Saved rows are numbered 0..n-1 in list order. Stored files are
    not touched here: uploads and removed URLs are recorded on `changes` and
    the caller settles them after commit or rollback.
    """
    query = db.query(model).filter(getattr(model, owner_column) == owner_id)
    if media_type:
        query = query.filter(model.media_type == media_type)
    existing = {row.media_id: row for row in query.all()}

    by_url = {getattr(row, url_column): row for row in existing.values()}
    keep_ids = {item.media_id for item in items if item.media_id}
    keep_urls = {item.media_url for item in items if item.media_url and not item.file_data}
    removed = 0
    for media_id, row in existing.items():
        if media_id in keep_ids or getattr(row, url_column) in keep_urls:
            continue
        changes.removed.append(getattr(row, url_column))
        db.delete(row)
        removed += 1

    saved = []
    for idx, item in enumerate(items):
        url = item.media_url
        if item.file_data:
            uploaded = upload_file(item.file_name or f"media_{idx}", _decode(item), folder)
            url = uploaded["url"]
            changes.uploaded.append(url)
        if not url or url.startswith("blob:"):
            continue

        position = len(saved)
        values = {
            url_column: url,
            "position": position,
            "is_primary": position == 0 if primary_first else bool(item.is_primary),
        }
        if item.media_type or media_type:
            values["media_type"] = item.media_type or media_type
        if item.alt_text is not None and hasattr(model, "alt_text"):
            values["alt_text"] = item.alt_text

        row = existing.get(item.media_id) if item.media_id else None
        if row is None:
            row = by_url.get(url)
        if row is None:
            row = model(**{owner_column: owner_id})
            db.add(row)
            by_url[url] = row
        for key, value in values.items():
            setattr(row, key, value)
        saved.append(row)

    db.flush()
    log_event("media_sync", table=model.__tablename__, owner_id=owner_id, saved=len(saved), removed=removed)
    return saved
