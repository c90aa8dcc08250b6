"""Property names requested from the SharePoint REST API."""

from __future__ import annotations

PROPERTY_NAME: str = "Name"
PROPERTY_SIZE: str = "Length"
PROPERTY_MTIME: str = "TimeLastModified"
PROPERTY_URL: str = "ServerRelativeUrl"
PROPERTY_LIST_ITEM: str = "ListItemAllFields"

# Folders carry no Length.
FILE_PROPERTIES: tuple[str, ...] = (
    PROPERTY_NAME,
    PROPERTY_URL,
    PROPERTY_SIZE,
    PROPERTY_MTIME,
)
FOLDER_PROPERTIES: tuple[str, ...] = (
    PROPERTY_NAME,
    PROPERTY_URL,
    PROPERTY_MTIME,
)

# Listing folders also pulls the list item, which tells hidden system folders apart.
FOLDER_LISTING_PROPERTIES: tuple[str, ...] = FOLDER_PROPERTIES + (PROPERTY_LIST_ITEM,)
