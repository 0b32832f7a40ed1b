from s3filetree.key import parse_key
from s3filetree.key import S3Key
from s3filetree.manager import S3FileManager
from s3filetree.s3client import S3Client
from s3filetree.s3client import S3OperationError
from s3filetree.summary import ObjectSummary
from s3filetree.tree import build_tree
from s3filetree.tree import find_node
from s3filetree.tree import S3FileNode


__all__ = [
    "ObjectSummary",
    "S3Client",
    "S3FileManager",
    "S3FileNode",
    "S3Key",
    "S3OperationError",
    "build_tree",
    "find_node",
    "parse_key",
]
