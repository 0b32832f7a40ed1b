from dataclasses import dataclass


SEPARATOR = "/"


@dataclass(frozen=True)
class S3Key:
    """A raw object key split into path segments.

    Splitting is a plain ``str.split``: consecutive separators yield empty
    segments and a trailing separator yields an empty file name.
    """

    raw_key: str
    segments: tuple

    @property
    def intermediate_path(self):
        return self.segments[:-1]

    @property
    def file_name(self):
        return self.segments[-1]

    @property
    def extension(self):
        """Text after the last dot of the file name, None without a dot."""
        name = self.file_name
        pos = name.rfind(".")
        if pos == -1:
            return None
        return name[pos + 1 :]


def parse_key(raw_key):
    if not isinstance(raw_key, str):
        raise TypeError(f"S3 key must be a str, got {type(raw_key).__name__}")
    return S3Key(raw_key=raw_key, segments=tuple(raw_key.split(SEPARATOR)))
