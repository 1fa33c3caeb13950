# pageimages/indexer/usage_recorder.py
# Responsibility: Collects image placements reported during a page render, with estimated display widths.

from typing import Iterable, List, Optional, Set, TypedDict

from pageimages.config.settings import settings


# -------------------------------
# Constants
# -------------------------------
THUMBNAIL_HINTS = {"thumbnail", "thumb", "framed", "frameless"}


# -------------------------------
# TypedDicts
# -------------------------------
class RawPlacement(TypedDict, total=False):
    image_id: str
    width: Optional[int]
    height: Optional[int]
    layout_hints: Set[str]
    full_width: int
    full_height: int


class ImageUsageRecord(TypedDict):
    image_id: str
    declared_width: Optional[int]
    declared_height: Optional[int]
    layout_hints: Set[str]
    full_width: int
    full_height: int
    ordinal: int


# -------------------------------
# Render state
# -------------------------------
class DocumentImageState:
    """
    Per-render accumulator of image usages for one page.
    Owned by a single render; consumed exactly once at finalization.
    """

    def __init__(self, page_id: int, namespace: int):
        self.page_id = page_id
        self.namespace = namespace
        self.records: List[ImageUsageRecord] = []
        self._eligible: Optional[bool] = None
        self._consumed = False

    def is_eligible(self, namespaces: Iterable[int]) -> bool:
        # Checked once per render
        if self._eligible is None:
            self._eligible = self.namespace in set(namespaces)
        return self._eligible

    def consume(self) -> List[ImageUsageRecord]:
        if self._consumed:
            raise RuntimeError(f"Image state for page {self.page_id} was already consumed")
        self._consumed = True
        return list(self.records)

    def __len__(self) -> int:
        return len(self.records)


# -------------------------------
# Recorder
# -------------------------------
class UsageRecorder:
    """
    Receives placement callbacks from the renderer and appends scoring records
    to the page's DocumentImageState.
    """

    def __init__(
        self,
        eligible_namespaces: Optional[Iterable[int]] = None,
        default_thumb_size: Optional[int] = None
    ):
        conf = settings.PAGEIMAGES
        self.eligible_namespaces = set(
            conf.ELIGIBLE_NAMESPACES if eligible_namespaces is None else eligible_namespaces
        )
        if default_thumb_size is None:
            default_thumb_size = conf.THUMB_LIMITS[conf.DEFAULT_THUMBSIZE_INDEX]
        self.default_thumb_size = default_thumb_size

    def record(self, placement: RawPlacement, state: DocumentImageState) -> Optional[ImageUsageRecord]:
        """
        Records one resolved image placement.

        Args:
            placement (RawPlacement): Placement parameters reported by the renderer.
            state (DocumentImageState): Accumulator of the page being rendered.

        Returns:
            Optional[ImageUsageRecord]: The appended record, or None if the page's
            namespace is not eligible.
        """
        if not state.is_eligible(self.eligible_namespaces):
            return None

        hints = set(placement.get("layout_hints") or ())
        full_width = int(placement.get("full_width") or 0)
        full_height = int(placement.get("full_height") or 0)
        height = placement.get("height")

        record = ImageUsageRecord(
            image_id=placement["image_id"],
            declared_width=self.estimate_width(placement.get("width"), height, hints, full_width, full_height),
            declared_height=height,
            layout_hints=hints,
            full_width=full_width,
            full_height=full_height,
            ordinal=len(state.records),
        )
        state.records.append(record)
        return record

    def estimate_width(
        self,
        width: Optional[int],
        height: Optional[int],
        hints: Set[str],
        full_width: int,
        full_height: int
    ) -> int:
        """
        Approximates the displayed width. The editor's intent matters more than
        the exact layout, so this does not follow the renderer's sizing precisely.
        """
        # 1. Explicit width
        if width is not None:
            return int(width)
        # 2. Explicit height, scaled by the file's aspect ratio
        if height is not None and full_height > 0:
            return full_width * int(height) // full_height
        # 3. Thumbnail-style layouts use the default thumbnail size
        if hints & THUMBNAIL_HINTS:
            return self.default_thumb_size
        # 4. Full size
        return full_width
