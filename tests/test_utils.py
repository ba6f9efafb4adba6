import random

import pytest

from dagsched.utils import (
    DOTLineType,
    SimpleTimer,
    TimeUnit,
    are_equal,
    float_rand_max_min,
    int_rand_max_min,
    parse_dot_line,
    remove_path_and_extension,
    separate_on_comma,
)


@pytest.mark.parametrize(
    "full, expected",
    [
        ("/path/to/file.dot", "file"),
        ("dir/task.a.b", "task"),
        ("plain", "plain"),
        ("name.yaml", "name"),
    ],
)
def test_remove_path_and_extension(full, expected):
    assert remove_path_and_extension(full) == expected


def test_separate_on_comma_strips_quotes_and_spaces():
    assert separate_on_comma('label="3", p=1') == [("label", "3"), ("p", "1")]


@pytest.mark.parametrize("bad", ["a=", "=b", "a,b=c", "abc", "a=1,"])
def test_separate_on_comma_rejects_malformed(bad):
    with pytest.raises(ValueError, match="Weird DOT file!"):
        separate_on_comma(bad)


def test_parse_begin_and_end_lines():
    begin = parse_dot_line("digraph Task {")
    assert begin.line_type is DOTLineType.DOT_BEGIN
    assert begin.id == -1
    assert parse_dot_line("}").line_type is DOTLineType.DOT_END


def test_parse_edge_line():
    info = parse_dot_line("1 -> 2;")
    assert info.line_type is DOTLineType.DOT_EDGE
    assert (info.id_from, info.id_to) == (1, 2)


def test_parse_node_line():
    info = parse_dot_line('3 [label="4.5", p=1, s=2];')
    assert info.line_type is DOTLineType.DOT_NODE
    assert info.id == 3
    assert info.wcet == 4.5
    assert (info.p, info.s) == (1, 2)


def test_parse_info_line():
    info = parse_dot_line("info [shape=box, D=100, T=200];")
    assert info.line_type is DOTLineType.DAG_INFO
    assert info.deadline == 100.0
    assert info.period == 200.0


def test_parse_void_line():
    assert parse_dot_line("").line_type is DOTLineType.VOID_LINE
    assert parse_dot_line("rankdir=LR;").line_type is DOTLineType.VOID_LINE


def test_parse_node_line_with_bad_attributes_raises():
    with pytest.raises(ValueError):
        parse_dot_line("3 [label];")


def test_are_equal():
    assert are_equal(0.1 + 0.2, 0.3)
    assert not are_equal(1.0, 1.001)


def test_int_rand_stays_in_range():
    rng = random.Random(7)
    values = [int_rand_max_min(3, 9, rng) for _ in range(200)]
    assert all(3 <= v < 9 for v in values)


def test_int_rand_degenerate_range_returns_min():
    rng = random.Random(1)
    assert int_rand_max_min(5, 5, rng) == 5
    assert int_rand_max_min(5, 2, rng) == 5


def test_float_rand_stays_in_range():
    rng = random.Random(3)
    values = [float_rand_max_min(2.0, 10.0, rng) for _ in range(200)]
    assert all(2.0 <= v < 10.0 for v in values)


def test_float_rand_degenerate_range():
    rng = random.Random(3)
    values = [float_rand_max_min(4.0, 4.0, rng) for _ in range(50)]
    assert all(4.0 <= v < 5.0 for v in values)


def test_timer_requires_tic():
    with pytest.raises(RuntimeError):
        SimpleTimer().toc()


def test_timer_units_are_consistent():
    timer = SimpleTimer()
    timer.tic()
    ns = timer.toc(TimeUnit.NANOSECOND)
    sec = timer.toc(TimeUnit.SECOND)
    assert ns >= 0
    assert sec * 1e9 >= ns