"""Media upload: store one file under its content address."""
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from dimagram.api.state import AppState, get_state
from dimagram.core.errors import DimagramError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload")
def upload(
    file: UploadFile = File(...),
    state: AppState = Depends(get_state),
):
    """Ingest the uploaded file and return its CDN URL."""
    try:
        ref = state.ingestor.ingest(file.file, file.filename)
    except DimagramError as e:
        logger.error("Upload failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        file.file.close()
    return {"url": ref.url}
