from datetime import datetime, timezone

import pytest

from s3filetree.summary import ObjectSummary


MODIFIED = datetime(2021, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestFromListing:
    def test_fields(self):
        entry = {
            "Key": "87982fbbd3/a.xml",
            "Size": 42,
            "ETag": '"9b2cf535f27731c974343645a3985328"',
            "LastModified": MODIFIED,
            "StorageClass": "STANDARD",
        }
        summary = ObjectSummary.from_listing("uc", entry)
        assert summary == ObjectSummary(
            bucket_name="uc",
            key="87982fbbd3/a.xml",
            size=42,
            etag="9b2cf535f27731c974343645a3985328",
            last_modified=MODIFIED,
        )

    def test_key_override(self):
        summary = ObjectSummary.from_listing("uc", {"Key": "ns/a"}, key="a")
        assert summary.key == "a"

    def test_missing_optional_fields(self):
        summary = ObjectSummary.from_listing("uc", {"Key": "a"})
        assert summary.size == 0
        assert summary.etag is None
        assert summary.last_modified is None

    def test_frozen(self):
        summary = ObjectSummary(bucket_name="uc", key="a")
        with pytest.raises(AttributeError):
            summary.key = "b"


class TestToDict:
    def test_to_dict(self):
        summary = ObjectSummary("uc", "a", 1, "abc", MODIFIED)
        assert summary.to_dict() == {
            "bucket_name": "uc",
            "key": "a",
            "size": 1,
            "etag": "abc",
            "last_modified": "2021-06-01T12:00:00+00:00",
        }

    def test_to_dict_without_timestamp(self):
        assert ObjectSummary("uc", "a").to_dict()["last_modified"] is None
