# pageimages/indexer/indexer.py
# Responsibility: Finalizes a page render: selects the representative image and stores it as a page property.

from typing import Iterable, Optional

from pageimages.blacklist.cache import BlacklistCache, get_blacklist_cache
from pageimages.indexer.image_selector import ImageSelector
from pageimages.indexer.scorer import CandidateScorer
from pageimages.indexer.usage_recorder import DocumentImageState, RawPlacement, UsageRecorder
from pageimages.services.repository import PageImageRepository


class PageImageIndexer:
    """
    Coordinates usage recording, selection and persistence for rendered pages.
    """

    def __init__(
        self,
        recorder: Optional[UsageRecorder] = None,
        selector: Optional[ImageSelector] = None,
        blacklist: Optional[BlacklistCache] = None,
        repository: Optional[PageImageRepository] = None
    ):
        self.recorder = recorder or UsageRecorder()
        self.selector = selector or ImageSelector(CandidateScorer.from_settings())
        self.blacklist = blacklist or get_blacklist_cache()
        self.repository = repository or PageImageRepository()

    def start(self, page_id: int, namespace: int) -> DocumentImageState:
        return DocumentImageState(page_id, namespace)

    def record_all(self, placements: Iterable[RawPlacement], state: DocumentImageState) -> int:
        for placement in placements:
            self.recorder.record(placement, state)
        return len(state)

    def finalize(self, state: DocumentImageState) -> Optional[str]:
        """
        Selects the page image for a finished render and persists it.

        Pages outside the eligible namespaces are left untouched. For eligible
        pages the property is replaced, or removed if no image qualifies.

        Args:
            state (DocumentImageState): The render's accumulated usages.

        Returns:
            Optional[str]: The chosen file key, or None.
        """
        records = state.consume()
        if not state.is_eligible(self.recorder.eligible_namespaces):
            return None

        image = None
        if records:
            image = self.selector.select_best_image(records, self.blacklist.get_blacklist())

        try:
            if image:
                self.repository.set_page_image(state.page_id, image)
            else:
                self.repository.clear_page_image(state.page_id)
        except Exception as e:
            print(f"[Indexer] Failed to store page image for page {state.page_id}: {e}")
            raise

        return image
