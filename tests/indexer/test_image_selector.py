from pageimages.indexer.image_selector import ImageSelector
from pageimages.indexer.score_table import ScoreTable
from pageimages.indexer.scorer import CandidateScorer
from pageimages.indexer.usage_recorder import ImageUsageRecord

WIDTH = ScoreTable([(100, 5), (250, 10), (float("inf"), 15)])
RATIO = ScoreTable([(10, 5), (20, 2)])


def usage(image_id, width, ordinal, full_width, full_height):
    return ImageUsageRecord(
        image_id=image_id,
        declared_width=width,
        declared_height=None,
        layout_hints=set(),
        full_width=full_width,
        full_height=full_height,
        ordinal=ordinal,
    )


EXAMPLE = [
    usage("A", 120, 0, 120, 80),
    usage("B", 300, 1, 300, 300),
]


def test_example_selects_highest_score():
    selector = ImageSelector(CandidateScorer(WIDTH, {0: 10, 1: 0}, RATIO))

    # A = 22, B = 20
    assert selector.best_scores(EXAMPLE) == {"A": 22, "B": 20}
    assert selector.select_best_image(EXAMPLE) == "A"


def test_blacklist_forces_next_best():
    selector = ImageSelector(CandidateScorer(WIDTH, {0: 0, 1: 10}, RATIO))

    # A = 12, B = 30
    assert selector.select_best_image(EXAMPLE) == "B"
    assert selector.select_best_image(EXAMPLE, blacklist={"B"}) == "A"


def test_selection_is_deterministic():
    selector = ImageSelector(CandidateScorer(WIDTH, {0: 10, 1: 0}, RATIO))
    first = selector.select_best_image(list(EXAMPLE))
    second = selector.select_best_image(list(EXAMPLE))
    assert first == second == "A"


def test_tie_keeps_first_seen_image():
    selector = ImageSelector(CandidateScorer(WIDTH, {}, RATIO))

    records = [usage("A", 300, 0, 300, 300), usage("B", 300, 1, 300, 300)]
    assert selector.select_best_image(records) == "A"

    records = [usage("B", 300, 0, 300, 300), usage("A", 300, 1, 300, 300)]
    assert selector.select_best_image(records) == "B"


def test_repeated_image_keeps_best_usage():
    scorer = CandidateScorer(ScoreTable([(100, -100), (float("inf"), 10)]), {}, ScoreTable([]))
    selector = ImageSelector(scorer)

    records = [
        usage("X", 50, 0, 50, 50),
        usage("Y", 300, 1, 300, 300),
        usage("X", 500, 2, 500, 500),
    ]

    assert selector.best_scores(records) == {"X": 10, "Y": 10}
    # X was seen first, so it wins the tie
    assert selector.select_best_image(records) == "X"


def test_no_positive_score_selects_nothing():
    selector = ImageSelector(CandidateScorer(ScoreTable([(float("inf"), -5)]), {}, ScoreTable([])))

    assert selector.select_best_image([usage("A", 300, 0, 300, 300)]) is None
    assert selector.select_best_image([]) is None


def test_everything_blacklisted_selects_nothing():
    selector = ImageSelector(CandidateScorer(WIDTH, {0: 10, 1: 0}, RATIO))
    assert selector.select_best_image(EXAMPLE, blacklist={"A", "B"}) is None
