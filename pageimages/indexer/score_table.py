# pageimages/indexer/score_table.py
# Responsibility: Maps a continuous metric (width, aspect ratio) to a discrete score band.

from typing import Iterable, List, Tuple, Union

Number = Union[int, float]


class ScoreTable:
    """
    Ordered (boundary, score) bands. Each boundary is the inclusive upper limit
    of its band; pairs are kept sorted ascending by boundary.
    """

    def __init__(self, pairs: Iterable[Tuple[Number, int]]):
        self.pairs: List[Tuple[Number, int]] = sorted(
            ((boundary, int(score)) for boundary, score in pairs),
            key=lambda pair: pair[0]
        )

    def __len__(self) -> int:
        return len(self.pairs)

    def __repr__(self) -> str:
        return f"ScoreTable({self.pairs!r})"


def lookup(value: Number, table: ScoreTable) -> int:
    """
    Least-upper-bound bucket lookup.

    Returns the score of the first band whose boundary is >= value. A value above
    every boundary falls into the last band; an empty table scores 0.

    Args:
        value (int | float): The metric to classify.
        table (ScoreTable): Bands to classify against.

    Returns:
        int: The band score.
    """
    last_score = 0
    for boundary, score in table.pairs:
        if value <= boundary:
            return score
        last_score = score
    return last_score
