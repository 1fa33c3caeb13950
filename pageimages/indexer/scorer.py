# pageimages/indexer/scorer.py
# Responsibility: Scores a single image usage from its width, position and aspect ratio.

from typing import AbstractSet, Dict, Iterable, Mapping, Optional, Union

from pageimages.config.settings import settings
from pageimages.indexer.score_table import ScoreTable, lookup
from pageimages.indexer.usage_recorder import ImageUsageRecord

BLACKLISTED_SCORE = -1000


def _position_mapping(position: Union[Mapping[int, int], Iterable[int]]) -> Dict[int, int]:
    if isinstance(position, Mapping):
        return {int(k): int(v) for k, v in position.items()}
    return dict(enumerate(int(v) for v in position))


class CandidateScorer:
    """
    Pure scoring heuristics. The higher the score the better; anything <= 0
    must never be chosen as the page image.
    """

    def __init__(
        self,
        width_table: ScoreTable,
        position_scores: Union[Mapping[int, int], Iterable[int]],
        ratio_table: ScoreTable,
        blacklist: Optional[AbstractSet[str]] = None
    ):
        self.width_table = width_table
        self.position_scores = _position_mapping(position_scores)
        self.ratio_table = ratio_table
        self.blacklist = frozenset(blacklist or ())

    @classmethod
    def from_settings(cls, blacklist: Optional[AbstractSet[str]] = None) -> "CandidateScorer":
        conf = settings.PAGEIMAGES
        return cls(
            ScoreTable(conf.WIDTH_SCORES),
            conf.POSITION_SCORES,
            ScoreTable(conf.RATIO_SCORES),
            blacklist
        )

    def with_blacklist(self, blacklist: AbstractSet[str]) -> "CandidateScorer":
        return CandidateScorer(self.width_table, self.position_scores, self.ratio_table, blacklist)

    def score(self, usage: ImageUsageRecord) -> int:
        # 1. Displayed width
        score = lookup(usage["declared_width"] or 0, self.width_table)

        # 2. Position on the page
        score += self.position_scores.get(usage["ordinal"], 0)

        # 3. Aspect ratio, in tenths
        ratio = int(self.ratio(usage) * 10)
        score += lookup(ratio, self.ratio_table)

        # 4. Blacklist veto
        if usage["image_id"] in self.blacklist:
            score = BLACKLISTED_SCORE

        return score

    @staticmethod
    def ratio(usage: ImageUsageRecord) -> float:
        """Width/height of the full image, or 0 when either dimension is unknown."""
        width, height = usage["full_width"], usage["full_height"]
        if not width or not height:
            return 0
        return width / height
