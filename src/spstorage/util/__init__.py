from .paths import basename, parent_remote_path, to_remote_path
from .time import now_timestamp, parse_rfc3339, to_timestamp

__all__ = [
    "to_remote_path",
    "parent_remote_path",
    "basename",
    "now_timestamp",
    "parse_rfc3339",
    "to_timestamp",
]
