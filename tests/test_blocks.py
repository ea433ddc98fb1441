"""Pure line-level behaviour of the locator and the insert/remove engines."""

import pytest

from machine_setup.lib.blocks import TitleRule, insert_block, locate, remove_block


def test_locate_missing_title() -> None:
    s = locate(["a", "b"], "# T")
    assert not s.found
    assert s.occurrences == 0


def test_locate_section_runs_to_next_title() -> None:
    lines = ["x", "# T", "a", "b", "# U", "c"]
    s = locate(lines, "# T")
    assert s.title_index == 1
    assert (s.start, s.end) == (2, 4)


def test_locate_section_runs_to_eof() -> None:
    s = locate(["# T", "a", "b"], "# T")
    assert (s.start, s.end) == (1, 3)


def test_locate_ini_header_ends_section() -> None:
    s = locate(["[core]", "a = 1", "[user]", "b = 2"], "[core]")
    assert s.end == 2


def test_locate_first_match_and_count() -> None:
    s = locate(["# T", "a", "# T", "b"], "# T")
    assert s.title_index == 0
    assert s.occurrences == 2
    assert s.end == 2


def test_title_need_not_match_rule() -> None:
    s = locate(["export A=1", "a", "# next"], "export A=1")
    assert (s.start, s.end) == (1, 2)


def test_custom_rule_treats_comments_as_content() -> None:
    rule = TitleRule(r"\[")
    s = locate(["[core]", "# comment", "a = 1", "[user]"], "[core]", rule)
    assert s.end == 3


def test_insert_absent_title_appends_block() -> None:
    r = insert_block(["X"], "# T", ["a", "b"])
    assert r.lines == ["X", "# T", "a", "b"]
    assert r.added == ["# T", "a", "b"]
    assert r.changed


def test_insert_into_empty() -> None:
    r = insert_block([], "# T", ["a", "b"])
    assert r.lines == ["# T", "a", "b"]


def test_insert_missing_lines_at_section_end() -> None:
    lines = ["# A", "a1", "# B", "b1"]
    r = insert_block(lines, "# A", ["a2", "a3"])
    assert r.lines == ["# A", "a1", "a2", "a3", "# B", "b1"]
    assert r.added == ["a2", "a3"]


def test_insert_skips_present_lines() -> None:
    lines = ["# A", "a2", "other", "# B"]
    r = insert_block(lines, "# A", ["a1", "a2", "a3"])
    assert r.lines == ["# A", "a2", "other", "a1", "a3", "# B"]


def test_insert_does_not_look_outside_section() -> None:
    lines = ["# A", "# B", "x"]
    r = insert_block(lines, "# A", ["x"])
    assert r.lines == ["# A", "x", "# B", "x"]


def test_insert_duplicate_arguments_added_once() -> None:
    r = insert_block(["# T"], "# T", ["a", "a"])
    assert r.lines == ["# T", "a"]


def test_insert_everything_present_is_unchanged() -> None:
    lines = ["# T", "a", "b"]
    r = insert_block(lines, "# T", ["b", "a"])
    assert r.lines == lines
    assert not r.changed


def test_remove_absent_title_is_noop() -> None:
    lines = ["# U", "a"]
    r = remove_block(lines, "# T", ["a"])
    assert r.lines == lines
    assert not r.changed


def test_remove_only_inside_section() -> None:
    lines = ["a", "# T", "a", "b", "# U", "a"]
    r = remove_block(lines, "# T", ["a"])
    assert r.lines == ["a", "# T", "b", "# U", "a"]


def test_remove_last_content_before_title_drops_title() -> None:
    r = remove_block(["# T1", "c1", "# T2", "c2"], "# T1", ["c1"])
    assert r.lines == ["# T2", "c2"]
    assert r.removed == ["# T1", "c1"]


def test_remove_last_content_at_eof_drops_title() -> None:
    r = remove_block(["X", "# T", "a"], "# T", ["a"])
    assert r.lines == ["X"]


def test_remove_keeps_title_with_unrelated_content() -> None:
    r = remove_block(["# T", "a", "b", "z"], "# T", ["a", "b"])
    assert r.lines == ["# T", "z"]


def test_remove_bare_title() -> None:
    r = remove_block(["Initial content", "# Title 1", "# Title 2", "c"], "# Title 1", [])
    assert r.lines == ["Initial content", "# Title 2", "c"]


def test_remove_bare_title_with_content_is_kept() -> None:
    lines = ["# T", "a"]
    r = remove_block(lines, "# T", [])
    assert r.lines == lines
    assert not r.changed


@pytest.mark.parametrize(
    "args, expected",
    [
        (["a"], ["# T", "a", "b"]),
        (["a", "a"], ["# T", "b"]),
    ],
)
def test_remove_one_line_per_argument(args: list, expected: list) -> None:
    r = remove_block(["# T", "a", "a", "b"], "# T", args)
    assert r.lines == expected


def test_remove_preserves_order_of_survivors() -> None:
    r = remove_block(["# T", "z1", "a", "z2", "b", "z3"], "# T", ["b", "a"])
    assert r.lines == ["# T", "z1", "z2", "z3"]


FILES = [
    [],
    ["X"],
    ["# Other", "o1", "o2"],
    ["export PATH=/bin", "", "[core]", "editor = vim"],
    ["# T0", "# T9", "tail"],
]


@pytest.mark.parametrize("lines", FILES)
def test_insert_is_idempotent(lines: list) -> None:
    once = insert_block(lines, "# T", ["a", "b"]).lines
    twice = insert_block(once, "# T", ["a", "b"])
    assert twice.lines == once
    assert not twice.changed


@pytest.mark.parametrize("lines", FILES)
def test_insert_then_remove_restores(lines: list) -> None:
    inserted = insert_block(lines, "# T", ["a", "b"]).lines
    assert remove_block(inserted, "# T", ["a", "b"]).lines == lines


def test_insert_into_existing_section_then_remove_restores() -> None:
    lines = ["# T", "keep", "# U", "u"]
    inserted = insert_block(lines, "# T", ["a"]).lines
    assert inserted == ["# T", "keep", "a", "# U", "u"]
    assert remove_block(inserted, "# T", ["a"]).lines == lines


def test_engines_do_not_mutate_input() -> None:
    lines = ["# T", "a"]
    insert_block(lines, "# T", ["b"])
    remove_block(lines, "# T", ["a"])
    assert lines == ["# T", "a"]


def test_remove_absent_lines_keeps_empty_title() -> None:
    lines = ["X", "# T"]
    r = remove_block(lines, "# T", ["not-there"])
    assert r.lines == lines
    assert not r.changed


def test_content_line_matching_rule_stays_in_section() -> None:
    lines = ["# T", "# managed by setup", "a", "# U", "u"]
    s = locate(lines, "# T", content=["# managed by setup", "a"])
    assert (s.start, s.end) == (1, 3)
    assert locate(lines, "# T").end == 1


TITLE_LIKE_CONTENT = [
    ["# managed by setup", "a"],
    ["a", "[alias]", "b"],
]


@pytest.mark.parametrize("content", TITLE_LIKE_CONTENT)
@pytest.mark.parametrize("lines", FILES)
def test_insert_with_title_like_content_is_idempotent(lines: list, content: list) -> None:
    once = insert_block(lines, "# T", content).lines
    twice = insert_block(once, "# T", content)
    assert twice.lines == once
    assert not twice.changed


@pytest.mark.parametrize("content", TITLE_LIKE_CONTENT)
@pytest.mark.parametrize("lines", FILES)
def test_insert_then_remove_title_like_content_restores(lines: list, content: list) -> None:
    inserted = insert_block(lines, "# T", content).lines
    assert remove_block(inserted, "# T", content).lines == lines
