from pageimages.indexer.score_table import ScoreTable, lookup


def test_lookup_uses_inclusive_upper_boundaries():
    table = ScoreTable([(100, 5), (250, 10), (float("inf"), 15)])

    assert lookup(0, table) == 5
    assert lookup(100, table) == 5
    assert lookup(101, table) == 10
    assert lookup(250, table) == 10
    assert lookup(10000, table) == 15


def test_lookup_above_all_boundaries_uses_last_band():
    table = ScoreTable([(10, 5), (20, 2)])
    assert lookup(21, table) == 2
    assert lookup(500, table) == 2


def test_lookup_empty_table_scores_zero():
    assert lookup(42, ScoreTable([])) == 0


def test_pairs_are_sorted_by_boundary():
    table = ScoreTable([(601, 0), (119, -100), (600, 5), (400, 10)])

    assert [b for b, _ in table.pairs] == [119, 400, 600, 601]
    assert lookup(120, table) == 10


def test_lookup_is_monotonic_for_ordered_table():
    table = ScoreTable([(100, 1), (200, 2), (300, 3)])
    scores = [lookup(v, table) for v in range(0, 400, 7)]
    assert scores == sorted(scores)
