# pageimages/routers/admin.py
# Responsibility: Render callback endpoint and blacklist administration.

from functools import lru_cache
from typing import List, Optional, Set

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from pageimages.blacklist.cache import BlacklistCache, get_blacklist_cache
from pageimages.blacklist.sources import BlacklistConfigurationError
from pageimages.indexer.indexer import PageImageIndexer
from pageimages.indexer.usage_recorder import RawPlacement

router = APIRouter(
    prefix="/admin",
    tags=["Admin"]
)

# --- Pydantic Models ---
class Placement(BaseModel):
    image_id: str
    width: Optional[int] = None
    height: Optional[int] = None
    layout_hints: Set[str] = set()
    full_width: int = 0
    full_height: int = 0

class RenderRequest(BaseModel):
    namespace: int
    placements: List[Placement] = []

class RenderResponse(BaseModel):
    page_id: int
    page_image: Optional[str] = None
    candidates: int

class BlacklistResponse(BaseModel):
    count: int
    entries: List[str]

# --- Dependency Injection ---
@lru_cache()
def get_indexer() -> PageImageIndexer:
    """Provider for PageImageIndexer."""
    return PageImageIndexer()

# --- Endpoints ---
@router.post("/pages/{page_id}/images", response_model=RenderResponse)
def render_page_images_endpoint(
    page_id: int,
    req: RenderRequest,
    indexer: PageImageIndexer = Depends(get_indexer)
):
    """
    Receives the image placements found while rendering a page, then selects
    and stores the page's representative image.
    """
    state = indexer.start(page_id, req.namespace)
    placements = [RawPlacement(**p.model_dump()) for p in req.placements]
    candidates = indexer.record_all(placements, state)

    try:
        image = indexer.finalize(state)
    except BlacklistConfigurationError as e:
        print(f"[Admin] Blacklist misconfigured: {e}")
        raise HTTPException(status_code=500, detail="Image blacklist is misconfigured")

    return RenderResponse(page_id=page_id, page_image=image, candidates=candidates)

@router.get("/blacklist", response_model=BlacklistResponse)
def get_blacklist_endpoint(
    cache: BlacklistCache = Depends(get_blacklist_cache)
):
    """
    Returns the blacklist currently in effect for this process.
    """
    try:
        entries = cache.get_blacklist()
    except BlacklistConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return BlacklistResponse(count=len(entries), entries=sorted(entries))

@router.delete("/blacklist")
def purge_blacklist_endpoint(
    cache: BlacklistCache = Depends(get_blacklist_cache)
):
    """
    Drops the cached blacklist so the next lookup rebuilds it from its sources.
    """
    cache.purge()
    return {"status": "ok"}
