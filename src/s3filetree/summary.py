from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ObjectSummary:
    """Metadata for one stored object, without its content."""

    bucket_name: str
    key: str
    size: int = 0
    etag: str = None
    last_modified: datetime = None

    @classmethod
    def from_listing(cls, bucket_name, entry, key=None):
        """Build a summary from a ``Contents`` entry of ``list_objects_v2``.

        ``key`` overrides ``entry["Key"]``, e.g. after stripping a prefix.
        """
        etag = entry.get("ETag")
        if etag is not None:
            etag = etag.strip('"')
        return cls(
            bucket_name=bucket_name,
            key=entry["Key"] if key is None else key,
            size=entry.get("Size", 0),
            etag=etag,
            last_modified=entry.get("LastModified"),
        )

    def to_dict(self):
        return {
            "bucket_name": self.bucket_name,
            "key": self.key,
            "size": self.size,
            "etag": self.etag,
            "last_modified": (
                self.last_modified.isoformat() if self.last_modified else None
            ),
        }
