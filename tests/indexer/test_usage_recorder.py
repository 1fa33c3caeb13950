import pytest

from pageimages.indexer.usage_recorder import DocumentImageState, RawPlacement, UsageRecorder


def placement(**kwargs):
    base = dict(image_id="Foo.jpg", full_width=400, full_height=200, layout_hints=set())
    base.update(kwargs)
    return RawPlacement(**base)


def test_width_estimation_precedence():
    recorder = UsageRecorder(eligible_namespaces=[0], default_thumb_size=220)
    state = DocumentImageState(page_id=1, namespace=0)

    # 1. Explicit width wins over everything
    assert recorder.record(placement(width=150, height=10, layout_hints={"thumb"}), state)["declared_width"] == 150
    # 2. Height scaled by the file's aspect ratio
    assert recorder.record(placement(height=100), state)["declared_width"] == 200
    # 3. Thumbnail-like layouts
    for hint in ("thumbnail", "thumb", "framed", "frameless"):
        assert recorder.record(placement(layout_hints={hint}), state)["declared_width"] == 220
    # 4. Full size
    assert recorder.record(placement(), state)["declared_width"] == 400


def test_height_hint_ignored_without_file_height():
    recorder = UsageRecorder(eligible_namespaces=[0], default_thumb_size=220)
    state = DocumentImageState(page_id=1, namespace=0)

    record = recorder.record(placement(height=100, full_height=0), state)
    assert record["declared_width"] == 400
    assert record["declared_height"] == 100

    record = recorder.record(placement(height=100, full_height=0, layout_hints={"thumb"}), state)
    assert record["declared_width"] == 220


def test_ordinals_follow_placement_order():
    recorder = UsageRecorder(eligible_namespaces=[0])
    state = DocumentImageState(page_id=1, namespace=0)

    for name in ("A.jpg", "B.jpg", "A.jpg"):
        recorder.record(placement(image_id=name), state)

    assert [(r["image_id"], r["ordinal"]) for r in state.records] == [
        ("A.jpg", 0), ("B.jpg", 1), ("A.jpg", 2)
    ]


def test_default_thumb_size_from_settings():
    recorder = UsageRecorder()
    assert recorder.default_thumb_size == 300


def test_ineligible_namespace_is_not_recorded():
    recorder = UsageRecorder(eligible_namespaces=[0])
    state = DocumentImageState(page_id=1, namespace=2)

    assert recorder.record(placement(), state) is None
    assert len(state) == 0


def test_eligibility_is_memoized_per_render():
    state = DocumentImageState(page_id=1, namespace=0)
    assert state.is_eligible([0]) is True
    # A later check with other namespaces does not change the answer
    assert state.is_eligible([14]) is True


def test_state_is_consumed_once():
    recorder = UsageRecorder(eligible_namespaces=[0])
    state = DocumentImageState(page_id=1, namespace=0)
    recorder.record(placement(), state)

    records = state.consume()
    assert len(records) == 1

    with pytest.raises(RuntimeError):
        state.consume()
