# pageimages/services/page_image_service.py
# Responsibility: Answers page image queries (thumbnail / original / name) for batches of pages, with paging.

from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pageimages.config.settings import settings
from pageimages.services.file_store import FileInfo, FileStore
from pageimages.services.repository import PageImageRepository
from pageimages.services.titles import NS_FILE, parse_title

ALLOWED_PROPS = ("thumbnail", "name", "original")
DEFAULT_PROPS = ("thumbnail", "name")


class PageImagesQueryError(Exception):
    """A user-facing problem with the query parameters."""

    def __init__(self, code: str, info: str):
        super().__init__(info)
        self.code = code
        self.info = info


class PageImageService:
    """
    Main service class for page image lookups.
    """

    def __init__(self, repository: Optional[PageImageRepository] = None, files: Optional[FileStore] = None):
        self.repository = repository or PageImageRepository()
        self.files = files or FileStore(self.repository)

    def query(
        self,
        page_ids: Iterable[int] = (),
        titles: Iterable[str] = (),
        props: Iterable[str] = DEFAULT_PROPS,
        thumbsize: Optional[int] = None,
        limit: Optional[int] = None,
        continue_from: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Returns image data for a batch of pages.

        Args:
            page_ids (Iterable[int]): Requested page ids, in order.
            titles (Iterable[str]): Requested page titles, in order.
            props (Iterable[str]): Any of 'thumbnail', 'name', 'original'.
            thumbsize (int, optional): Maximum thumbnail dimension.
            limit (int, optional): Number of pages per batch.
            continue_from (int, optional): 'continue' value returned by the previous batch.

        Returns:
            Dict[str, Any]: {"pages": {page_id: values}, "continue": Optional[int]}

        Raises:
            PageImagesQueryError: No or unknown props, or an invalid continue value.
        """
        prop_set = set(props)
        if not prop_set:
            raise PageImagesQueryError("noprop", "No properties selected")
        unknown = prop_set - set(ALLOWED_PROPS)
        if unknown:
            raise PageImagesQueryError("badprop", f"Unrecognized properties: {', '.join(sorted(unknown))}")

        size = thumbsize if thumbsize is not None else settings.API.DEFAULT_THUMBSIZE
        limit = max(1, limit if limit is not None else settings.API.DEFAULT_LIMIT)

        result: Dict[str, Any] = {"pages": {}, "continue": None}
        candidates = self._resolve_candidates(page_ids, titles)
        if not candidates:
            return result

        # 1. Paging
        ids = list(candidates)
        offset = 0
        if continue_from is not None:
            if continue_from not in candidates:
                raise PageImagesQueryError(
                    "badcontinue",
                    "Invalid continue param. You should pass the original value returned by the previous query"
                )
            offset = ids.index(continue_from)
        batch = ids[offset:offset + limit]
        if offset + limit < len(ids):
            result["continue"] = ids[offset + limit]

        # 2. File pages stand for themselves; other pages use their stored property
        regular = [pid for pid in batch if candidates[pid][0] != NS_FILE]
        stored = self.repository.get_page_images(regular) if regular else {}
        names: Dict[int, str] = {}
        for pid in batch:
            namespace, title = candidates[pid]
            if namespace == NS_FILE:
                names[pid] = title
            elif pid in stored:
                names[pid] = stored[pid]

        # 3. File metadata only when URLs are needed
        files: Dict[str, FileInfo] = {}
        if names and prop_set & {"thumbnail", "original"}:
            files = self.files.find_files(names.values())

        for pid, name in names.items():
            result["pages"][pid] = self._result_values(prop_set, name, files.get(name), size)
        return result

    def _resolve_candidates(self, page_ids: Iterable[int], titles: Iterable[str]) -> Dict[int, Tuple[int, str]]:
        """
        Ordered page id -> (namespace, title). Missing titles in the File
        namespace get negative ids so files without a description page still resolve.
        """
        candidates: Dict[int, Tuple[int, str]] = {}

        requested_ids = list(dict.fromkeys(page_ids))
        if requested_ids:
            pages = self.repository.get_pages(requested_ids)
            for pid in requested_ids:
                if pid in pages:
                    candidates[pid] = (pages[pid]["namespace"], pages[pid]["title"])

        parsed: List[Tuple[int, str]] = []
        for text in titles:
            item = parse_title(text)
            if item is not None and item not in parsed:
                parsed.append(item)
        if parsed:
            existing = self.repository.find_page_ids(parsed)
            missing_id = 0
            for item in parsed:
                if item in existing:
                    candidates.setdefault(existing[item], item)
                elif item[0] == NS_FILE:
                    missing_id -= 1
                    candidates[missing_id] = item

        return candidates

    def _result_values(self, props: set, name: str, file: Optional[FileInfo], size: int) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        if file is not None:
            if "thumbnail" in props:
                thumb = file.transform(size)
                if thumb:
                    values["thumbnail"] = dict(thumb)
            if "original" in props:
                values.setdefault("thumbnail", {})["original"] = file.url
        if "name" in props:
            values["pageimage"] = name
        return values

    def get_page_image(self, page_id: int) -> Optional[FileInfo]:
        """Returns the file stored as a page's representative image."""
        name = self.repository.get_page_image(page_id)
        if not name:
            return None
        return self.files.find_file(name)

    def expand_search_results(self, results: Dict[int, Dict[str, Any]]) -> Dict[int, Dict[str, Any]]:
        """
        Adds an 'image' entry (thumbnail data or None) to each search result,
        keyed by page id. No-op unless EXPAND_OPENSEARCH is enabled.
        """
        if not settings.PAGEIMAGES.EXPAND_OPENSEARCH or not results:
            return results

        data = self.query(page_ids=list(results), props=["thumbnail"], limit=len(results))
        for pid, item in results.items():
            item["image"] = data["pages"].get(pid, {}).get("thumbnail")
        return results


@lru_cache()
def get_page_image_service() -> PageImageService:
    """Dependency injection provider for PageImageService."""
    return PageImageService()
