import io
import os
import ZConfig


SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schema.xml")

_schema = None


class S3FileManagerFactory:
    """ZConfig datatype for the <s3filetree> section."""

    def __init__(self, config):
        self.config = config
        self.name = config.getSectionName()

    def open(self):
        from s3filetree.manager import S3FileManager
        from s3filetree.s3client import S3Client

        config = self.config
        s3_client = S3Client(
            bucket_name=config.bucket_name,
            prefix=config.s3_prefix,
            endpoint_url=config.s3_endpoint_url,
            region_name=config.s3_region,
            aws_access_key_id=config.s3_access_key,
            aws_secret_access_key=config.s3_secret_key,
            use_ssl=config.s3_use_ssl,
            addressing_style=config.s3_addressing_style,
            connect_timeout=config.s3_connect_timeout,
            read_timeout=config.s3_read_timeout,
            max_keys=config.s3_max_keys,
        )
        return S3FileManager(s3_client)


def addressing_style(value):
    value = value.lower()
    if value not in ("auto", "path", "virtual"):
        raise ValueError(
            f"s3-addressing-style must be auto, path or virtual, got {value!r}"
        )
    return value


def load_schema():
    global _schema
    if _schema is None:
        with open(SCHEMA_PATH) as f:
            _schema = ZConfig.loadSchemaFile(f)
    return _schema


def manager_from_file(path_or_file):
    """Load a configuration and return the opened S3FileManager."""
    schema = load_schema()
    if isinstance(path_or_file, str):
        with open(path_or_file) as f:
            config, _handler = ZConfig.loadConfigFile(schema, f)
    else:
        config, _handler = ZConfig.loadConfigFile(schema, path_or_file)
    return config.s3filetree.open()


def manager_from_string(text):
    return manager_from_file(io.StringIO(text))
