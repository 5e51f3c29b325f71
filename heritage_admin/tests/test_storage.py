import os
import pytest
from unittest.mock import MagicMock, patch

from heritage_admin.models import HeritageSite, SiteMedia
from heritage_admin.services import storage

def test_size_limit_message():
    with pytest.raises(storage.StorageError) as exc:
        storage.validate_file_size("fort.mp4", 60 * 1024 * 1024)
    assert str(exc.value) == 'File "fort.mp4" is 60.00MB. Maximum allowed size is 50MB.'

def test_size_at_limit_is_accepted():
    storage.validate_file_size("fort.jpg", 50 * 1024 * 1024)

def test_storage_path_is_timestamped_and_sanitised():
    assert storage.build_storage_path("hotels/4", "my photo (1).jpg", now_ms=1700000000000) == "hotels/4/1700000000000_my_photo__1_.jpg"
    assert storage.build_storage_path("", "a.png", now_ms=5) == "5_a.png"

def test_extract_path_from_url():
    url = "https://xyz.supabase.co/storage/v1/object/public/heritage/hotels/4/1_a.jpg"
    assert storage.extract_path_from_url(url) == "hotels/4/1_a.jpg"
    assert storage.extract_path_from_url("https://cdn.example.com/a.jpg") is None
    assert storage.extract_path_from_url("") is None

def test_local_upload_and_delete(uploads):
    result = storage.upload_file("gate.jpg", b"jpeg-bytes", "sites/1")

    assert result["url"].startswith("http://testserver/storage/v1/object/public/heritage/sites/1/")
    local = os.path.join(str(uploads), "heritage", result["path"])
    with open(local, "rb") as f:
        assert f.read() == b"jpeg-bytes"

    storage.delete_file(result["url"])
    assert not os.path.exists(local)

def test_upload_files_reports_progress(uploads):
    progress = []
    storage.upload_files([("a.jpg", b"a"), ("b.jpg", b"b")], "x", on_progress=lambda done, total: progress.append((done, total)))
    assert progress == [(1, 2), (2, 2)]

def test_s3_backend(uploads):
    s3 = MagicMock()
    with patch("heritage_admin.services.storage._get_s3_client", return_value=s3):
        result = storage.upload_file("a.png", b"png", "hotels/2")
        storage.delete_file(result["url"])

    put = s3.put_object.call_args.kwargs
    assert put["Bucket"] == "heritage"
    assert put["Key"] == result["path"]
    assert put["ContentType"] == "image/png"
    s3.delete_object.assert_called_once_with(Bucket="heritage", Key=result["path"])

def test_delete_files_collects_failures():
    failed = storage.delete_files(["https://elsewhere.example.com/a.jpg"])
    assert failed == ["https://elsewhere.example.com/a.jpg"]

def test_add_site_media_requires_saved_site(db):
    with pytest.raises(storage.StorageError) as exc:
        storage.add_site_media(db, 99, "image", "http://x/a.jpg")
    assert "Site with ID 99 not found" in str(exc.value)

def test_add_and_delete_site_media(db):
    site = HeritageSite(name_default="Amber Fort")
    db.add(site)
    db.commit()

    media = storage.add_site_media(db, site.site_id, "image", "http://testserver/storage/v1/object/public/heritage/sites/1/a.jpg", position=2, is_primary=True)
    assert media.position == 2

    # storage failure only warns; the row is still removed
    with patch("heritage_admin.services.storage.delete_file", side_effect=storage.StorageError("gone")):
        result = storage.delete_media_item(db, media.media_id)
    assert result.success
    assert db.query(SiteMedia).count() == 0

def test_delete_missing_media_item(db):
    result = storage.delete_media_item(db, 12345)
    assert not result.success
