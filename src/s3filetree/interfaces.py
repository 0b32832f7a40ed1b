from zope.interface import Attribute
from zope.interface import Interface


class IS3Client(Interface):
    """Abstraction over S3-compatible object storage."""

    bucket_name = Attribute("Name of the bucket all keys refer to.")

    def upload_file(local_path, s3_key, metadata=None, content_type=None):
        """Upload a local file to S3."""

    def upload_fileobj(fileobj, s3_key, metadata=None, content_type=None):
        """Upload a readable binary file object to S3."""

    def download_file(s3_key, local_path):
        """Download an S3 object to a local file (atomic via temp+rename)."""

    def upload_directory(local_dir, key_prefix, metadata=None):
        """Upload a local directory tree below key_prefix; return the keys."""

    def download_directory(key_prefix, local_dir):
        """Download all objects under key_prefix into local_dir; return paths."""

    def delete_object(s3_key):
        """Delete an S3 object."""

    def delete_objects(s3_keys):
        """Delete many objects; return the keys that failed."""

    def delete_prefix(prefix):
        """Delete every object under prefix; return the number deleted."""

    def head_object(s3_key):
        """Return metadata dict for an S3 object, or None if not found."""

    def list_objects(prefix=""):
        """Yield an ObjectSummary for each object matching the prefix."""

    def copy_object(source_key, destination_key):
        """Server-side copy of one object."""

    def get_url(s3_key):
        """Return the unsigned URL of an object."""


class IS3FileNode(Interface):
    """A directory or file node in a tree built from flat S3 keys."""

    label = Attribute("Path segment this node stands for.")
    object_summary = Attribute("ObjectSummary for file nodes, else None.")
    nodes = Attribute("Children in first-seen order.")

    def get(label):
        """Return the child with that label or None."""

    def get_or_create(label):
        """Return the child with that label, creating it if missing."""

    def find_node(label):
        """Depth-first lookup of the first descendant with that label."""

    def to_dict():
        """Return a JSON-friendly nested dict."""


class IS3FileManager(Interface):
    """Hierarchical file view on top of an IS3Client."""

    def get_file_tree():
        """Return the tree of every object in the bucket."""

    def get_user_files(path):
        """Return the tree of objects below path/."""

    def build_tree(summaries):
        """Return the tree for an already listed sequence of summaries."""

    def upload_file(s3_key, local_path, metadata=None):
        """Upload a local file."""

    def delete_file(s3_key):
        """Delete one object."""

    def get_object_url(s3_key):
        """Return the URL of one object."""
