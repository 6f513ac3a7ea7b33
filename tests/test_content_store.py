import pytest

from markup_engine.document import ContentStore, TextRange, split_lines


def test_get_content_round_trips() -> None:
    store = ContentStore()
    assert store.commit("hello\nworld") is True
    assert store.get_content() == "hello\nworld"
    assert store.version == 1


def test_commit_identical_text_is_a_noop() -> None:
    store = ContentStore("same")
    assert store.commit("same") is False
    assert store.version == 0


def test_inserted_text_at_zero_prepends() -> None:
    store = ContentStore("bc")
    assert store.inserted_text(0, "a") == "abc"
    assert store.inserted_text(1, "X") == "bXc"
    assert store.inserted_text(2, "!") == "bc!"
    # candidates never mutate the buffer
    assert store.get_content() == "bc"


def test_inserted_text_rejects_negative_offset() -> None:
    with pytest.raises(ValueError):
        ContentStore("bc").inserted_text(-1, "a")


def test_replaced_text_swaps_the_span() -> None:
    store = ContentStore("abc")
    assert store.replaced_text(TextRange(1, 2), "Z") == "aZc"
    assert store.replaced_text((0, 3), "") == ""
    assert store.replaced_text({"start": 0, "end": 1}, "xy") == "xybc"


def test_empty_range_is_ignored() -> None:
    store = ContentStore("abc")
    assert store.replaced_text(TextRange(1, 1), "Z") == "abc"
    assert store.get_content_at_range(TextRange(2, 2)) == ""


def test_get_content_at_range() -> None:
    store = ContentStore("hello world")
    assert store.get_content_at_range((6, 11)) == "world"


@pytest.mark.parametrize("start,end", [(-1, 2), (3, 1)])
def test_text_range_validation(start: int, end: int) -> None:
    with pytest.raises(ValueError):
        TextRange(start, end)


def test_text_range_relations() -> None:
    outer = TextRange(0, 10)
    assert outer.contains(TextRange(2, 5))
    assert not outer.contains(TextRange(5, 11))
    assert outer.overlaps(TextRange(9, 12))
    assert not outer.overlaps(TextRange(10, 12))
    assert len(TextRange(3, 7)) == 4


def test_split_lines_prepends_sentinel_with_absolute_offsets() -> None:
    lines = split_lines("ab\n\ncde")
    assert [(line.idx, line.content, line.start) for line in lines] == [
        (0, "", 0),
        (1, "ab", 0),
        (2, "", 3),
        (3, "cde", 4),
    ]
    assert lines[0].is_sentinel
    assert lines[3].end == 7
