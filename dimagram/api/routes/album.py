"""Album queue read/replace and archive read (JSON arrays)."""
from typing import Any, List

from fastapi import APIRouter, Body, Depends, HTTPException

from dimagram.api.state import AppState, get_state
from dimagram.core.errors import SerializationError, ValidationError
from dimagram.models.album import AlbumItem, StoreKind

router = APIRouter()


def _items_to_list(items: List[AlbumItem]) -> list:
    return [item.to_dict() for item in items]


@router.get("/album")
def get_album(state: AppState = Depends(get_state)):
    """Return the queue, front first."""
    return _items_to_list(state.store.read(StoreKind.QUEUE))


@router.post("/album")
def save_album(
    body: Any = Body(...),
    state: AppState = Depends(get_state),
):
    """Replace the whole queue with the posted array (album editor save)."""
    if not isinstance(body, list):
        raise HTTPException(status_code=400, detail="album must be a JSON array")
    try:
        items = [AlbumItem.from_dict(entry) for entry in body]
        state.store.replace_queue(items)
    except (SerializationError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "ok"}


@router.get("/archive")
def get_archive(state: AppState = Depends(get_state)):
    """Return the archive, oldest published first."""
    return _items_to_list(state.store.read(StoreKind.ARCHIVE))
