from s3filetree.interfaces import IS3FileManager
from s3filetree.tree import build_tree
from zope.interface import implementer

import logging


logger = logging.getLogger(__name__)


@implementer(IS3FileManager)
class S3FileManager:
    """Folder-style view of a bucket for display in a tree widget.

    Every tree is built fresh from a listing and owned by the caller.
    """

    def __init__(self, s3_client):
        self._s3_client = s3_client

    def __repr__(self):
        return f"<S3FileManager for {self._s3_client!r}>"

    @property
    def s3_client(self):
        return self._s3_client

    def build_tree(self, summaries):
        return build_tree(summaries)

    def get_file_tree(self):
        logger.debug("Building file tree for bucket=%s", self._s3_client.bucket_name)
        return build_tree(self._s3_client.list_objects(""))

    def get_user_files(self, path):
        prefix = path + "/"
        logger.debug(
            "Building file tree for bucket=%s prefix=%s",
            self._s3_client.bucket_name,
            prefix,
        )
        return build_tree(self._s3_client.list_objects(prefix))

    def find_node(self, label):
        return self.get_file_tree().find_node(label)

    def upload_file(self, s3_key, local_path, metadata=None):
        self._s3_client.upload_file(local_path, s3_key, metadata=metadata)

    def upload_fileobj(self, s3_key, fileobj, metadata=None):
        self._s3_client.upload_fileobj(fileobj, s3_key, metadata=metadata)

    def delete_file(self, s3_key):
        logger.debug("Deleting key %s", s3_key)
        self._s3_client.delete_object(s3_key)

    def get_object_url(self, s3_key):
        return self._s3_client.get_url(s3_key)
