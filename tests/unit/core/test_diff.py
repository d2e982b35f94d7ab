"""Unit tests for core/utils/diff.py"""

from issueblog.core.utils.diff import unified_diff


def test_unified_diff_identical_is_empty():
    assert unified_diff("a\nb\n", "a\nb\n") == []


def test_unified_diff_labels_and_changes():
    lines = unified_diff("a\nb\n", "a\nc\n", "v1", "v2")
    assert lines[0] == "--- v1\n"
    assert lines[1] == "+++ v2\n"
    assert "-b\n" in lines
    assert "+c\n" in lines
