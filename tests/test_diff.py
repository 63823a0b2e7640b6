"""Tests for the positional line diff"""

from promptura.versioning.diff import positional_diff


def as_tuples(changes):
    return [(c.type, c.content, c.line_number) for c in changes]


def test_single_changed_line():
    assert as_tuples(positional_diff("a\nb\nc", "a\nx\nc")) == [
        ("unchanged", "a", 1),
        ("removed", "b", 2),
        ("added", "x", 2),
        ("unchanged", "c", 3),
    ]


def test_identical_content_is_all_unchanged():
    changes = positional_diff("one\ntwo\n\nthree", "one\ntwo\n\nthree")
    assert {c.type for c in changes} == {"unchanged"}
    assert [c.line_number for c in changes] == [1, 2, 3, 4]


def test_lines_only_on_one_side():
    assert as_tuples(positional_diff("a", "a\nb\nc")) == [
        ("unchanged", "a", 1),
        ("added", "b", 2),
        ("added", "c", 3),
    ]
    assert as_tuples(positional_diff("a\nb", "a")) == [
        ("unchanged", "a", 1),
        ("removed", "b", 2),
    ]


def test_alignment_is_positional_not_lcs():
    """An inserted line shifts every following line"""
    assert as_tuples(positional_diff("a\nb", "x\na\nb")) == [
        ("removed", "a", 1),
        ("added", "x", 1),
        ("removed", "b", 2),
        ("added", "a", 2),
        ("added", "b", 3),
    ]


def test_blank_line_against_text_counts_as_one_sided():
    assert as_tuples(positional_diff("a\n\nc", "a\nb\nc")) == [
        ("unchanged", "a", 1),
        ("added", "b", 2),
        ("unchanged", "c", 3),
    ]


def test_swapping_sides_swaps_labels():
    a = "intro\nbody\nfooter\nextra"
    b = "intro\nBODY\nfooter"
    forward = positional_diff(a, b)
    backward = positional_diff(b, a)

    swap = {"added": "removed", "removed": "added", "unchanged": "unchanged"}
    assert sorted((c.line_number, swap[c.type], c.content) for c in forward) == sorted(
        (c.line_number, c.type, c.content) for c in backward
    )
    assert {c.line_number for c in forward} == {c.line_number for c in backward}
