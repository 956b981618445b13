"""Data models for album items and content references."""
from dimagram.models.album import AlbumItem, ContentRef, StoreKind, normalize_id

__all__ = [
    "AlbumItem",
    "ContentRef",
    "StoreKind",
    "normalize_id",
]
