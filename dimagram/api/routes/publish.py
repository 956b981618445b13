"""Publish and unpublish triggers."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from dimagram.api.state import AppState, get_state
from dimagram.core.errors import DimagramError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/publish")
def publish(state: AppState = Depends(get_state)):
    """Publish the first queued item. CDN-only failures still succeed."""
    try:
        report = state.publisher.publish()
    except DimagramError as e:
        logger.error("Publish failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    return {"status": "ok", "message": "Successfully published", **report.to_dict()}


@router.post("/unpublish")
def unpublish(state: AppState = Depends(get_state)):
    """Return the most recently published item to the queue front."""
    try:
        report = state.publisher.unpublish()
    except DimagramError as e:
        logger.error("Unpublish failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    return {"status": "ok", "message": "Successfully unpublished", **report.to_dict()}
