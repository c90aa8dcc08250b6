"""Translation of storage-relative paths to server-relative URLs."""

from __future__ import annotations


def to_remote_path(document_library: str, path: str) -> str:
    """
    Build the server-relative URL of ``path`` inside ``document_library``.

    A trailing ``.`` segment is cut off together with its slash, so
    ``"sub/."`` becomes ``/<library>/sub`` and ``"."`` becomes ``/<library>``.
    No other dot-segment handling is done.
    """
    path = path.strip("/")
    remote_path = "/" + document_library
    if path != "":
        remote_path += "/" + path

    if remote_path.split("/")[-1] == ".":
        remote_path = remote_path[:-2]

    return remote_path


def parent_remote_path(remote_path: str) -> str:
    """Return the parent of a server-relative URL ("" for the top level)."""
    head, _, _ = remote_path.rstrip("/").rpartition("/")
    return head


def basename(remote_path: str) -> str:
    return remote_path.rstrip("/").rpartition("/")[2]
