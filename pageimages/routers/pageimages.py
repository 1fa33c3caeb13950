# pageimages/routers/pageimages.py
# Responsibility: Handles page image query endpoints. Validates input and formats output.

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from pageimages.config.settings import settings
from pageimages.services.page_image_service import (
    DEFAULT_PROPS,
    PageImageService,
    PageImagesQueryError,
    get_page_image_service,
)

router = APIRouter(
    prefix="/pageimages",
    tags=["PageImages"]
)

# --- Pydantic Models ---
class ThumbnailInfo(BaseModel):
    source: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    original: Optional[str] = None

class PageImageItem(BaseModel):
    thumbnail: Optional[ThumbnailInfo] = None
    pageimage: Optional[str] = None

class ContinueInfo(BaseModel):
    continue_: int = Field(alias="continue")

class PageImagesResponse(BaseModel):
    pages: Dict[int, PageImageItem]
    continue_: Optional[ContinueInfo] = Field(None, alias="continue")

class PageFileResponse(BaseModel):
    name: str
    width: int
    height: int
    url: str


def _split_multi(values: List[str]) -> List[str]:
    """Accepts both repeated parameters and 'a|b' style lists."""
    items: List[str] = []
    for value in values:
        items.extend(part.strip() for part in value.split("|") if part.strip())
    return items


# --- Endpoints ---
@router.get("", response_model=PageImagesResponse, response_model_exclude_none=True)
def page_images_endpoint(
    pageids: List[int] = Query([], description="Page ids"),
    titles: List[str] = Query([], description="Page titles"),
    prop: List[str] = Query(list(DEFAULT_PROPS), description="Any of thumbnail, name, original"),
    thumbsize: int = Query(settings.API.DEFAULT_THUMBSIZE, ge=1, description="Maximum thumbnail dimension"),
    limit: int = Query(settings.API.DEFAULT_LIMIT, ge=1, le=settings.API.MAX_LIMIT, description="Pages per batch"),
    continue_from: Optional[int] = Query(None, alias="continue", description="Value returned by the previous query"),
    service: PageImageService = Depends(get_page_image_service)
):
    """
    Returns thumbnail, original URL and/or file name of the image associated with each page.
    """
    try:
        data = service.query(
            page_ids=pageids,
            titles=_split_multi(titles),
            props=_split_multi(prop),
            thumbsize=thumbsize,
            limit=limit,
            continue_from=continue_from
        )
    except PageImagesQueryError as e:
        raise HTTPException(status_code=400, detail={"code": e.code, "info": e.info})

    cont = None
    if data["continue"] is not None:
        cont = ContinueInfo(**{"continue": data["continue"]})

    return PageImagesResponse(
        pages={pid: PageImageItem(**values) for pid, values in data["pages"].items()},
        **{"continue": cont}
    )


@router.get("/page/{page_id}", response_model=PageFileResponse)
def page_image_file_endpoint(
    page_id: int,
    service: PageImageService = Depends(get_page_image_service)
):
    """
    Returns the file chosen as a page's representative image.
    """
    file = service.get_page_image(page_id)
    if file is None:
        raise HTTPException(status_code=404, detail="Page has no image")
    return PageFileResponse(name=file.name, width=file.width, height=file.height, url=file.url)
