"""Assorted helpers: timing, random ranges and parsing of DAG DOT lines."""

from __future__ import annotations

import math
import random
import re
import time
from dataclasses import dataclass
from enum import Enum

FLT_EPSILON = 1.1920928955078125e-07
RAND_MAX = 2**31 - 1

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class DOTLineType(Enum):
    """Kind of a single line in a DAG DOT description."""

    DOT_BEGIN = 0
    DOT_END = 1
    DOT_NODE = 2
    DOT_EDGE = 3
    DAG_INFO = 4
    VOID_LINE = 5


@dataclass
class DotInfo:
    """What was read from one DOT line."""

    line_type: DOTLineType = DOTLineType.VOID_LINE
    p: int = -1
    s: int = -1
    id: int = -1
    id_from: int = -1
    id_to: int = -1
    wcet: float = 0.0
    period: float = 0.0
    deadline: float = 0.0


class TimeUnit(Enum):
    """Unit of a measured interval, valued by nanoseconds per unit."""

    SECOND = 1e9
    MILLISECOND = 1e6
    MICROSECOND = 1e3
    NANOSECOND = 1.0


class SimpleTimer:
    """Monotonic stopwatch."""

    def __init__(self) -> None:
        self._start: int | None = None

    def tic(self) -> None:
        """Start (or restart) the measurement."""
        self._start = time.monotonic_ns()

    def toc(self, unit: TimeUnit = TimeUnit.MICROSECOND) -> float:
        """Time elapsed since the last tic, in the given unit."""
        if self._start is None:
            raise RuntimeError("toc() called before tic()")
        return (time.monotonic_ns() - self._start) / unit.value


def are_equal(a: float, b: float) -> bool:
    """True when a and b differ by less than the single-precision epsilon."""
    return abs(a - b) < FLT_EPSILON


def int_rand_max_min(v_min: int, v_max: int, rng: random.Random | None = None) -> int:
    """Random integer in [v_min, v_min + max(v_max - v_min, 1))."""
    rng = rng or random
    return rng.randrange(max(v_max - v_min, 1)) + v_min


def float_rand_max_min(
    v_min: float, v_max: float, rng: random.Random | None = None
) -> float:
    """Random value in [v_min, v_min + max(v_max - v_min, 1)).

    The offset is a random integer reduced modulo the span.
    """
    rng = rng or random
    return math.fmod(rng.randint(0, RAND_MAX), max(v_max - v_min, 1.0)) + v_min


def remove_path_and_extension(full_string: str) -> str:
    """Strip leading directories and everything from the first dot."""
    name = full_string.rsplit("/", 1)[-1]
    return name.split(".", 1)[0]


def separate_on_comma(line: str) -> list[tuple[str, str]]:
    """Split 'key=value, key="value"' into pairs, dropping quotes and spaces."""
    pairs: list[tuple[str, str]] = []
    left: list[str] = []
    right: list[str] = []
    read_equal = False

    def close() -> None:
        if not read_equal or not left or not right:
            raise ValueError("Weird DOT file!")
        pairs.append(("".join(left), "".join(right)))

    for ch in line:
        if ch == ",":
            close()
            left, right, read_equal = [], [], False
        elif ch == "=":
            read_equal = True
        elif ch in '" ':
            continue
        elif read_equal:
            right.append(ch)
        else:
            left.append(ch)
    close()
    return pairs


def _to_int(text: str) -> int:
    match = _INT_RE.match(text)
    if match is None:
        raise ValueError(f"no integer in {text!r}")
    return int(match.group(1))


def _to_float(text: str) -> float:
    match = _FLOAT_RE.match(text)
    if match is None:
        raise ValueError(f"no number in {text!r}")
    return float(match.group(1))


def _bracket_content(line: str, start: int, end: int) -> str:
    begin = start + 1
    return line[begin:end] if end >= begin else line[begin:]


def parse_dot_line(line: str) -> DotInfo:
    """Classify one DOT line and read the ids and attributes it carries."""
    info = DotInfo()
    arrow = line.find("->")
    start_node = line.find("[")
    end_node = line.find("]")

    if "{" in line:
        info.line_type = DOTLineType.DOT_BEGIN
    elif "}" in line:
        info.line_type = DOTLineType.DOT_END
    elif arrow != -1:
        info.line_type = DOTLineType.DOT_EDGE
        info.id_from = _to_int(line[:arrow])
        semi = line.find(";")
        target = line[arrow + 2 : semi] if semi >= arrow + 2 else line[arrow + 2 :]
        info.id_to = _to_int(target)
    elif "box" in line:
        info.line_type = DOTLineType.DAG_INFO
        for key, value in separate_on_comma(_bracket_content(line, start_node, end_node)):
            if key == "D":
                info.deadline = _to_float(value)
            if key == "T":
                info.period = _to_float(value)
    elif start_node != -1 and end_node != -1:
        info.line_type = DOTLineType.DOT_NODE
        info.id = _to_int(line[:start_node])
        for key, value in separate_on_comma(_bracket_content(line, start_node, end_node)):
            if key == "label":
                info.wcet = _to_float(value)
            if key == "p":
                info.p = int(_to_float(value))
            if key == "s":
                info.s = int(_to_float(value))
    else:
        info.line_type = DOTLineType.VOID_LINE
    return info