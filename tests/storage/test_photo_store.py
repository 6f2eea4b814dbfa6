from datetime import datetime

from src.geo_attendance.geo_attendance.storage.photo_store import LocalPhotoStore


def test_local_store_writes_under_user_directory(tmp_path):
    store = LocalPhotoStore(tmp_path)
    ref = store.save(user_id=7, kind="check_in", payload=b"\xff\xd8data", taken_at=datetime(2026, 3, 2, 9, 0, 5))

    assert ref.startswith("7/check_in_20260302090005")
    assert (tmp_path / ref).read_bytes() == b"\xff\xd8data"


def test_kind_is_sanitized(tmp_path):
    store = LocalPhotoStore(tmp_path)
    ref = store.save(user_id=7, kind="../../etc/passwd", payload=b"x", taken_at=datetime(2026, 3, 2, 9, 0))

    assert ".." not in ref
    assert (tmp_path / ref).exists()


def test_delete_removes_stored_photo(tmp_path):
    store = LocalPhotoStore(tmp_path)
    ref = store.save(user_id=7, kind="check_out", payload=b"x", taken_at=datetime(2026, 3, 2, 17, 0))

    store.delete(ref)
    store.delete(ref)

    assert not (tmp_path / ref).exists()
