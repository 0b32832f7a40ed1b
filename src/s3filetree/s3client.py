from botocore.config import Config
from botocore.exceptions import ClientError
from s3filetree.interfaces import IS3Client
from s3filetree.summary import ObjectSummary
from urllib.parse import quote
from zope.interface import implementer

import boto3
import contextlib
import logging
import os
import re
import tempfile


logger = logging.getLogger(__name__)

# DeleteObjects accepts at most this many keys per request
DELETE_BATCH_SIZE = 1000
MAX_KEYS = 1000


class S3OperationError(Exception):
    """Wraps boto3 ClientError to avoid leaking AWS infrastructure details."""


@implementer(IS3Client)
class S3Client:
    """Thin boto3 wrapper for S3-compatible object storage.

    All keys passed in and handed out are logical keys, relative to the
    configured prefix.
    """

    def __init__(
        self,
        bucket_name,
        prefix="",
        endpoint_url=None,
        region_name=None,
        aws_access_key_id=None,
        aws_secret_access_key=None,
        use_ssl=True,
        addressing_style="auto",
        connect_timeout=60,
        read_timeout=60,
        max_keys=MAX_KEYS,
    ):
        self.bucket_name = bucket_name
        self._prefix = prefix.rstrip("/") if prefix else ""

        if self._prefix:
            if not re.fullmatch(r"[a-zA-Z0-9._/-]*", self._prefix):
                raise ValueError(
                    f"s3-prefix contains invalid characters: {self._prefix!r}. "
                    "Only alphanumeric characters, dots, hyphens, underscores, "
                    "and slashes are allowed."
                )
            if ".." in self._prefix:
                raise ValueError(f"s3-prefix must not contain '..': {self._prefix!r}")

        if not 1 <= max_keys <= MAX_KEYS:
            raise ValueError(f"max_keys must be between 1 and {MAX_KEYS}, got {max_keys}")
        self.max_keys = max_keys

        config = Config(
            s3={"addressing_style": addressing_style},
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
        )

        kwargs = {"config": config}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        if region_name:
            kwargs["region_name"] = region_name
        # Without explicit credentials boto3 falls back to its default
        # chain (environment, shared profile, instance role).
        if aws_access_key_id:
            kwargs["aws_access_key_id"] = aws_access_key_id
        if aws_secret_access_key:
            kwargs["aws_secret_access_key"] = aws_secret_access_key
        kwargs["use_ssl"] = use_ssl
        if not use_ssl:
            logger.warning(
                "S3 SSL is disabled, data and credentials are transmitted in cleartext"
            )

        self._client = boto3.client("s3", **kwargs)

    def __repr__(self):
        return f"<S3Client bucket={self.bucket_name!r} prefix={self._prefix!r}>"

    def _full_key(self, s3_key):
        if s3_key.startswith("/"):
            s3_key = s3_key[1:]
        if self._prefix:
            return f"{self._prefix}/{s3_key}"
        return s3_key

    def _logical_key(self, full_key):
        namespace = f"{self._prefix}/" if self._prefix else ""
        if namespace and full_key.startswith(namespace):
            return full_key[len(namespace) :]
        return full_key

    def _wrap_client_error(self, e, operation, s3_key):
        """Wrap ClientError in a generic error, logging the original at DEBUG."""
        logger.debug("S3 %s failed for key=%s: %s", operation, s3_key, e)
        raise S3OperationError(
            f"S3 {operation} failed for key={s3_key}: "
            f"{e.response['Error'].get('Code', 'Unknown')}"
        ) from e

    @staticmethod
    def _extra_args(metadata, content_type):
        extra_args = {}
        if metadata:
            extra_args["Metadata"] = dict(metadata)
        if content_type:
            extra_args["ContentType"] = content_type
        return extra_args or None

    def upload_file(self, local_path, s3_key, metadata=None, content_type=None):
        full_key = self._full_key(s3_key)
        logger.debug("Uploading %s to key=%s", local_path, s3_key)
        try:
            self._client.upload_file(
                local_path,
                self.bucket_name,
                full_key,
                ExtraArgs=self._extra_args(metadata, content_type),
            )
        except ClientError as e:
            self._wrap_client_error(e, "upload", s3_key)

    def upload_fileobj(self, fileobj, s3_key, metadata=None, content_type=None):
        full_key = self._full_key(s3_key)
        logger.debug("Uploading stream to key=%s", s3_key)
        try:
            self._client.upload_fileobj(
                fileobj,
                self.bucket_name,
                full_key,
                ExtraArgs=self._extra_args(metadata, content_type),
            )
        except ClientError as e:
            self._wrap_client_error(e, "upload", s3_key)

    def download_file(self, s3_key, local_path):
        full_key = self._full_key(s3_key)
        target_dir = os.path.dirname(local_path) or "."
        os.makedirs(target_dir, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=target_dir, suffix=".download.tmp")
        try:
            os.close(fd)
            try:
                self._client.download_file(self.bucket_name, full_key, tmp_path)
            except ClientError as e:
                self._wrap_client_error(e, "download", s3_key)
            os.replace(tmp_path, local_path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
            raise

    def upload_directory(self, local_dir, key_prefix, metadata=None):
        """Upload every file below local_dir, keyed by its relative path.

        Returns the uploaded keys in walk order.
        """
        key_prefix = key_prefix.strip("/")
        uploaded = []
        for dirpath, dirnames, filenames in os.walk(local_dir):
            dirnames.sort()
            for fn in sorted(filenames):
                local_path = os.path.join(dirpath, fn)
                rel = os.path.relpath(local_path, local_dir).replace(os.sep, "/")
                s3_key = f"{key_prefix}/{rel}" if key_prefix else rel
                self.upload_file(local_path, s3_key, metadata=metadata)
                uploaded.append(s3_key)
        logger.debug("Uploaded %d files from %s", len(uploaded), local_dir)
        return uploaded

    def download_directory(self, key_prefix, local_dir):
        """Download every object under key_prefix to local_dir/<key>.

        Directory markers (keys ending in "/") are skipped. Returns the
        local paths written.
        """
        root = os.path.abspath(local_dir)
        written = []
        for summary in self.list_objects(key_prefix):
            if summary.key.endswith("/"):
                continue
            local_path = os.path.abspath(os.path.join(root, *summary.key.split("/")))
            if not local_path.startswith(root + os.sep):
                logger.warning("Skipping key=%s outside of %s", summary.key, root)
                continue
            self.download_file(summary.key, local_path)
            written.append(local_path)
        logger.debug("Downloaded %d objects to %s", len(written), root)
        return written

    def delete_object(self, s3_key):
        full_key = self._full_key(s3_key)
        logger.debug("Deleting key=%s", s3_key)
        try:
            self._client.delete_object(Bucket=self.bucket_name, Key=full_key)
        except ClientError as e:
            self._wrap_client_error(e, "delete", s3_key)

    def delete_objects(self, s3_keys):
        """Batch delete, returning the logical keys S3 refused to delete."""
        keys = list(s3_keys)
        failed = []
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            batch = keys[start : start + DELETE_BATCH_SIZE]
            try:
                response = self._client.delete_objects(
                    Bucket=self.bucket_name,
                    Delete={
                        "Objects": [{"Key": self._full_key(k)} for k in batch],
                        "Quiet": True,
                    },
                )
            except ClientError as e:
                self._wrap_client_error(e, "delete", f"{len(batch)} keys")
            for error in response.get("Errors", []):
                logger.debug(
                    "S3 delete failed for key=%s: %s", error["Key"], error.get("Code")
                )
                failed.append(self._logical_key(error["Key"]))
        return failed

    def delete_prefix(self, prefix):
        keys = [summary.key for summary in self.list_objects(prefix)]
        failed = self.delete_objects(keys)
        return len(keys) - len(failed)

    def head_object(self, s3_key):
        full_key = self._full_key(s3_key)
        try:
            return self._client.head_object(Bucket=self.bucket_name, Key=full_key)
        except ClientError as e:
            if e.response["Error"]["Code"] in ("404", "NoSuchKey"):
                return None
            self._wrap_client_error(e, "head", s3_key)

    def list_objects(self, prefix=""):
        if prefix:
            full_prefix = self._full_key(prefix)
        else:
            # "ns/" rather than "ns" so a sibling prefix like "ns2" stays out
            full_prefix = f"{self._prefix}/" if self._prefix else ""
        paginator = self._client.get_paginator("list_objects_v2")
        logger.debug("Listing bucket=%s prefix=%s", self.bucket_name, full_prefix)
        try:
            for page in paginator.paginate(
                Bucket=self.bucket_name,
                Prefix=full_prefix,
                PaginationConfig={"PageSize": self.max_keys},
            ):
                for obj in page.get("Contents", []):
                    # Strip the prefix so callers see logical keys
                    yield ObjectSummary.from_listing(
                        self.bucket_name, obj, key=self._logical_key(obj["Key"])
                    )
        except ClientError as e:
            self._wrap_client_error(e, "list", prefix)

    def copy_object(
        self,
        source_key,
        destination_key,
        source_bucket=None,
        destination_bucket=None,
    ):
        """Managed server-side copy; keys in foreign buckets are used as-is."""
        if source_bucket is None or source_bucket == self.bucket_name:
            source_bucket, source_full = self.bucket_name, self._full_key(source_key)
        else:
            source_full = source_key
        if destination_bucket is None or destination_bucket == self.bucket_name:
            destination_bucket = self.bucket_name
            destination_full = self._full_key(destination_key)
        else:
            destination_full = destination_key
        logger.debug(
            "Copying %s/%s to %s/%s",
            source_bucket,
            source_full,
            destination_bucket,
            destination_full,
        )
        try:
            self._client.copy(
                {"Bucket": source_bucket, "Key": source_full},
                destination_bucket,
                destination_full,
            )
        except ClientError as e:
            self._wrap_client_error(e, "copy", source_key)

    def get_url(self, s3_key):
        endpoint = self._client.meta.endpoint_url.rstrip("/")
        return f"{endpoint}/{self.bucket_name}/{quote(self._full_key(s3_key))}"
