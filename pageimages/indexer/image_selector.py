# pageimages/indexer/image_selector.py
# Responsibility: Determines the 'best' representative image for a page from its usage records.

from typing import AbstractSet, Dict, Iterable, Optional

from pageimages.indexer.scorer import CandidateScorer
from pageimages.indexer.usage_recorder import ImageUsageRecord


class ImageSelector:
    """
    Encapsulates logic for selecting a page's representative image.
    """

    def __init__(self, scorer: CandidateScorer):
        self.scorer = scorer

    def best_scores(self, records: Iterable[ImageUsageRecord]) -> Dict[str, int]:
        """
        Best score per image, keyed in first-seen order. An image used several
        times keeps the score of its best usage.
        """
        scores: Dict[str, int] = {}
        for record in sorted(records, key=lambda r: r["ordinal"]):
            image_id = record["image_id"]
            scores[image_id] = max(scores.get(image_id, -1), self.scorer.score(record))
        return scores

    def select_best_image(
        self,
        records: Iterable[ImageUsageRecord],
        blacklist: Optional[AbstractSet[str]] = None
    ) -> Optional[str]:
        """
        Selects the best image based on heuristics.

        Args:
            records (Iterable[ImageUsageRecord]): Usages observed while rendering the page.
            blacklist (AbstractSet[str], optional): Overrides the scorer's blacklist snapshot.

        Returns:
            Optional[str]: The image id of the selected image, or None if no image scored above zero.
        """
        selector = self if blacklist is None else ImageSelector(self.scorer.with_blacklist(blacklist))
        scores = selector.best_scores(records)

        # Ties keep the image that appeared first on the page
        best_id: Optional[str] = None
        for image_id, score in scores.items():
            if best_id is None or score > scores[best_id]:
                best_id = image_id

        if best_id is not None and scores[best_id] > 0:
            return best_id
        return None
