import base64
from unittest.mock import patch

from heritage_admin.models import Hotel, HotelMedia
from heritage_admin.schemas import MediaItemIn
from heritage_admin.services.media_sync import MediaChanges, sync_media

BASE = "http://testserver/storage/v1/object/public/heritage/hotels/1/"

def _seed(db):
    hotel = Hotel(hotel_name="Lake Palace")
    db.add(hotel)
    db.flush()
    rows = [
        HotelMedia(hotel_id=hotel.hotel_id, media_type="gallery", media_url=BASE + "keep.jpg", position=0),
        HotelMedia(hotel_id=hotel.hotel_id, media_type="gallery", media_url=BASE + "byurl.jpg", position=1),
        HotelMedia(hotel_id=hotel.hotel_id, media_type="gallery", media_url=BASE + "drop.jpg", position=2),
        HotelMedia(hotel_id=hotel.hotel_id, media_type="hero", media_url=BASE + "hero.jpg", position=0),
    ]
    db.add_all(rows)
    db.commit()
    return hotel, rows

def test_sync_deletes_updates_and_inserts(db):
    hotel, rows = _seed(db)
    keep, byurl, drop, hero = rows
    items = [
        MediaItemIn(media_url=BASE + "new.jpg"),
        MediaItemIn(media_id=keep.media_id, media_url=keep.media_url, alt_text="Courtyard"),
        MediaItemIn(media_url="blob:http://localhost/preview"),
        MediaItemIn(media_url=byurl.media_url),
        MediaItemIn(media_url=None),
    ]
    changes = MediaChanges()
    with patch("heritage_admin.services.media_sync.delete_files") as delete_files:
        saved = sync_media(db, HotelMedia, "hotel_id", hotel.hotel_id, items, "hotels/1", changes, media_type="gallery")
        db.commit()
        # files are only recorded while the transaction is open
        delete_files.assert_not_called()

    assert changes.removed == [BASE + "drop.jpg"]
    assert changes.uploaded == []
    gallery = db.query(HotelMedia).filter(HotelMedia.media_type == "gallery").order_by(HotelMedia.position).all()
    assert [m.media_url for m in gallery] == [BASE + "new.jpg", BASE + "keep.jpg", BASE + "byurl.jpg"]
    # skipped items do not leave gaps
    assert [m.position for m in gallery] == [0, 1, 2]
    assert gallery[1].alt_text == "Courtyard"
    assert gallery[2].media_id == byurl.media_id
    assert len(saved) == 3
    # other media types are untouched
    assert db.query(HotelMedia).filter(HotelMedia.media_type == "hero").one().media_url == hero.media_url

def test_resync_does_not_duplicate(db):
    hotel, _ = _seed(db)
    items = [MediaItemIn(media_url=BASE + "keep.jpg"), MediaItemIn(media_url=BASE + "byurl.jpg")]
    sync_media(db, HotelMedia, "hotel_id", hotel.hotel_id, items, "hotels/1", MediaChanges(), media_type="gallery")
    sync_media(db, HotelMedia, "hotel_id", hotel.hotel_id, items, "hotels/1", MediaChanges(), media_type="gallery")
    db.commit()
    assert db.query(HotelMedia).filter(HotelMedia.media_type == "gallery").count() == 2

def test_file_items_are_uploaded_and_first_is_primary(db):
    hotel, _ = _seed(db)
    data = base64.b64encode(b"image-bytes").decode()
    items = [
        MediaItemIn(file_name="front.jpg", file_data=f"data:image/jpeg;base64,{data}"),
        MediaItemIn(media_url=BASE + "hero.jpg"),
    ]
    uploaded = {"url": BASE + "999_front.jpg", "path": "hotels/1/999_front.jpg", "file_name": "front.jpg", "size": 11}
    changes = MediaChanges()
    with patch("heritage_admin.services.media_sync.upload_file", return_value=uploaded) as upload:
        sync_media(db, HotelMedia, "hotel_id", hotel.hotel_id, items, "hotels/1", changes, media_type="hero", primary_first=True)
        db.commit()

    assert upload.call_args.args == ("front.jpg", b"image-bytes", "hotels/1")
    assert changes.uploaded == [BASE + "999_front.jpg"]
    heroes = db.query(HotelMedia).filter(HotelMedia.media_type == "hero").order_by(HotelMedia.position).all()
    assert [h.media_url for h in heroes] == [BASE + "999_front.jpg", BASE + "hero.jpg"]
    assert [h.is_primary for h in heroes] == [True, False]

def test_primary_goes_to_first_saved_item(db):
    hotel, _ = _seed(db)
    items = [
        MediaItemIn(media_url="blob:http://localhost/preview"),
        MediaItemIn(media_url=None),
        MediaItemIn(media_url=BASE + "h2.jpg"),
        MediaItemIn(media_url=BASE + "hero.jpg"),
    ]
    sync_media(db, HotelMedia, "hotel_id", hotel.hotel_id, items, "hotels/1", MediaChanges(), media_type="hero", primary_first=True)
    db.commit()

    heroes = db.query(HotelMedia).filter(HotelMedia.media_type == "hero").order_by(HotelMedia.position).all()
    assert [(h.media_url, h.position, h.is_primary) for h in heroes] == [
        (BASE + "h2.jpg", 0, True),
        (BASE + "hero.jpg", 1, False),
    ]

def test_changes_settle_by_outcome():
    changes = MediaChanges(uploaded=[BASE + "new.jpg"], removed=[BASE + "old.jpg"])
    with patch("heritage_admin.services.media_sync.delete_files", return_value=[]) as delete_files:
        assert changes.commit() == []
    delete_files.assert_called_once_with([BASE + "old.jpg"])
    assert changes.uploaded == [] and changes.removed == []

    changes = MediaChanges(uploaded=[BASE + "new.jpg"], removed=[BASE + "old.jpg"])
    with patch("heritage_admin.services.media_sync.delete_files", return_value=[]) as delete_files:
        changes.rollback()
    delete_files.assert_called_once_with([BASE + "new.jpg"])
