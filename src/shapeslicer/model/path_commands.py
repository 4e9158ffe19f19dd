"""
Path Command Interpreter
========================
Reads the compact curve-command language used by vector paths
("M 0,0 L 10,0 Q 15,5 10,10 Z") and replays it into a single polyline.

Why is this file needed?
------------------------
1. Parsing: A hand-written scanner splits the command string into typed
   commands, tolerating commas / spaces / packed numbers, and skips anything
   it does not understand instead of failing the whole path.
2. Interpretation: Commands are folded left to right over an explicit pen
   state (current point, last control point) and every curve is flattened
   through the curve approximators.
3. Export: Polylines can be written back as straight-segment commands.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import StrEnum
from functools import reduce
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from shapeslicer.config import BEZIER_SPLIT_COUNT
from shapeslicer.model.curves import approximate_bezier, approximate_arc_with_endpoints
from shapeslicer.model.geometry_primitives import ORIGIN, Point2D, Polygon, Polyline
from shapeslicer.utils import deg2rad, format_number

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------
class PathCommandKind(StrEnum):
    MOVE_TO = "M"
    LINE_TO = "L"
    HORIZONTAL_TO = "H"
    VERTICAL_TO = "V"
    QUADRATIC_TO = "Q"
    SMOOTH_QUADRATIC_TO = "T"
    CUBIC_TO = "C"
    SMOOTH_CUBIC_TO = "S"
    ARC_TO = "A"
    CLOSE_PATH = "Z"


OPERAND_COUNTS: Dict[PathCommandKind, int] = {
    PathCommandKind.MOVE_TO: 2,
    PathCommandKind.LINE_TO: 2,
    PathCommandKind.HORIZONTAL_TO: 1,
    PathCommandKind.VERTICAL_TO: 1,
    PathCommandKind.QUADRATIC_TO: 4,
    PathCommandKind.SMOOTH_QUADRATIC_TO: 2,
    PathCommandKind.CUBIC_TO: 6,
    PathCommandKind.SMOOTH_CUBIC_TO: 4,
    # rx ry x-axis-rotation large-arc-flag sweep-flag x y
    PathCommandKind.ARC_TO: 7,
    PathCommandKind.CLOSE_PATH: 0,
}

_COMMAND_LETTERS = frozenset("MmLlHhVvQqTtCcSsAaZz")
_DIGITS = "0123456789"
_NUMBER_START = frozenset(_DIGITS + "+-.")
_SEPARATORS = frozenset(" ,\t\r\n\f")
# Operand positions of the arc command that hold single-digit flags
_ARC_FLAG_POSITIONS = (3, 4)


@dataclass(frozen=True)
class PathCommand:
    """One command with exactly the operands its kind requires."""
    kind: PathCommandKind
    relative: bool = False
    operands: Tuple[float, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "operands", tuple(float(v) for v in self.operands))
        expected = OPERAND_COUNTS[self.kind]
        if len(self.operands) != expected:
            raise ValueError(
                f"Command '{self.letter}' takes {expected} operands, got {len(self.operands)}."
            )

    @classmethod
    def from_letter(cls, letter: str, operands: Sequence[float] = ()) -> PathCommand:
        return cls(PathCommandKind(letter.upper()), letter.islower(), tuple(operands))

    @property
    def letter(self) -> str:
        return self.kind.value.lower() if self.relative else self.kind.value


# ------------------------------------------------------------------------------
# Tokenizer
# ------------------------------------------------------------------------------
class _Scanner:
    """Character cursor over a command string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos]

    def advance(self) -> str:
        ch = self.text[self.pos]
        self.pos += 1
        return ch

    def skip_separators(self) -> None:
        while not self.at_end() and self.peek() in _SEPARATORS:
            self.pos += 1

    def _skip_digits(self, i: int) -> int:
        while i < len(self.text) and self.text[i] in _DIGITS:
            i += 1
        return i

    def read_number(self) -> Optional[float]:
        """
        Read one number: [sign] digits [. digits] [e [sign] digits].
        A sign or a second decimal point ends the number ("1-2" and "1.5.5"
        are two numbers each). Returns None, consuming nothing, if no number
        starts here.
        """
        self.skip_separators()
        text = self.text
        start = i = self.pos

        if i < len(text) and text[i] in "+-":
            i += 1
        int_end = self._skip_digits(i)
        has_int = int_end > i
        i = int_end

        has_frac = False
        if i < len(text) and text[i] == ".":
            frac_end = self._skip_digits(i + 1)
            has_frac = frac_end > i + 1
            if has_int or has_frac:
                i = frac_end

        if not (has_int or has_frac):
            return None

        if i < len(text) and text[i] in "eE":
            j = i + 1
            if j < len(text) and text[j] in "+-":
                j += 1
            exp_end = self._skip_digits(j)
            if exp_end > j:
                i = exp_end

        self.pos = i
        return float(text[start:i])

    def read_flag(self) -> Optional[float]:
        """Arc flags are a single '0' or '1' and may be packed without separators."""
        self.skip_separators()
        if not self.at_end() and self.peek() in "01":
            return float(self.advance())
        return None


def _read_operands(scanner: _Scanner, kind: PathCommandKind) -> Optional[Tuple[float, ...]]:
    operands = []
    for position in range(OPERAND_COUNTS[kind]):
        if kind == PathCommandKind.ARC_TO and position in _ARC_FLAG_POSITIONS:
            value = scanner.read_flag()
        else:
            value = scanner.read_number()
        if value is None:
            return None
        operands.append(value)
    return tuple(operands)


def parse_commands(text: str) -> List[PathCommand]:
    """
    Split a path command string into typed commands.

    A command letter followed by several operand groups is repeated for every
    group (after a moveto the repeats are linetos). Unknown letters with their
    operands and incomplete operand groups are skipped.

    Args:
        text: Raw command string, e.g. "M0,0 L10,0 10,10z".

    Returns:
        The recognized commands, in order.
    """
    commands: List[PathCommand] = []
    scanner = _Scanner(text or "")
    # Letter applied to operand groups that are not preceded by a letter
    remembered: Optional[str] = None

    while True:
        scanner.skip_separators()
        if scanner.at_end():
            break
        ch = scanner.peek()

        if ch in _COMMAND_LETTERS:
            scanner.advance()
            letter = ch
        elif ch in _NUMBER_START and remembered is not None:
            letter = remembered
        else:
            if ch in _NUMBER_START:
                if scanner.read_number() is None:
                    scanner.advance()
                logger.debug(f"Skipping operand without a command at offset {scanner.pos}.")
            else:
                scanner.advance()
                # Operands of an unknown command are dropped with it
                remembered = None
                logger.debug(f"Skipping unknown command '{ch}'.")
            continue

        kind = PathCommandKind(letter.upper())
        if OPERAND_COUNTS[kind] == 0:
            commands.append(PathCommand.from_letter(letter))
            remembered = None
            continue

        operands = _read_operands(scanner, kind)
        if operands is None:
            logger.debug(f"Dropping command '{letter}' with missing operands.")
            remembered = None
            continue

        commands.append(PathCommand.from_letter(letter, operands))
        if kind == PathCommandKind.MOVE_TO:
            remembered = "l" if letter.islower() else "L"
        else:
            remembered = letter

    return commands


# ------------------------------------------------------------------------------
# Interpreter
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class _PenState:
    """Accumulator threaded through the fold over the commands."""
    current: Point2D = field(default_factory=lambda: ORIGIN)
    # Second-to-last point of the previous curve, mirrored by smooth commands
    last_control: Point2D = field(default_factory=lambda: ORIGIN)
    subpath_start: Point2D = field(default_factory=lambda: ORIGIN)
    points: Tuple[Point2D, ...] = field(default_factory=tuple)
    closed: bool = False


def _flatten_command(
    state: _PenState,
    command: PathCommand,
    segment_count: int
) -> List[Point2D]:
    """Points a drawing command contributes (the current point excluded)."""
    cur = state.current
    ops = command.operands
    base = cur if command.relative else ORIGIN

    def pt(i: int) -> Point2D:
        return Point2D(base.x + ops[i], base.y + ops[i + 1])

    match command.kind:
        case PathCommandKind.MOVE_TO | PathCommandKind.LINE_TO:
            return [pt(0)]
        case PathCommandKind.HORIZONTAL_TO:
            return [Point2D(base.x + ops[0], cur.y)]
        case PathCommandKind.VERTICAL_TO:
            return [Point2D(cur.x, base.y + ops[0])]
        case PathCommandKind.QUADRATIC_TO:
            end = pt(2)
            curve = approximate_bezier([cur, pt(0), end], segment_count)
        case PathCommandKind.SMOOTH_QUADRATIC_TO:
            end = pt(0)
            control = state.last_control.reflect_about(cur)
            curve = approximate_bezier([cur, control, end], segment_count)
        case PathCommandKind.CUBIC_TO:
            end = pt(4)
            curve = approximate_bezier([cur, pt(0), pt(2), end], segment_count)
        case PathCommandKind.SMOOTH_CUBIC_TO:
            end = pt(2)
            control = state.last_control.reflect_about(cur)
            curve = approximate_bezier([cur, control, pt(0), end], segment_count)
        case PathCommandKind.ARC_TO:
            rx, ry, rotation, large_arc, sweep = ops[:5]
            end = pt(5)
            curve = approximate_arc_with_endpoints(
                rx, ry, cur, end,
                bool(large_arc), bool(sweep),
                deg2rad(rotation), segment_count
            )
        case _:
            return []

    # The first sample repeats the current point; the last is snapped onto
    # the exact end point to avoid drift
    produced = list(curve.points[1:])
    produced[-1] = end
    return produced


def _step(state: _PenState, command: PathCommand, segment_count: int) -> _PenState:
    if command.kind == PathCommandKind.CLOSE_PATH:
        return replace(state, current=state.subpath_start, closed=True)

    produced = _flatten_command(state, command, segment_count)
    if not produced:
        return state

    new_state = replace(
        state,
        current=produced[-1],
        points=state.points + tuple(produced),
    )
    if len(produced) > 1:
        new_state = replace(new_state, last_control=produced[-2])
    if command.kind == PathCommandKind.MOVE_TO:
        new_state = replace(new_state, subpath_start=produced[-1])
    return new_state


def interpret(
    commands: Iterable[PathCommand],
    segment_count: int = BEZIER_SPLIT_COUNT
) -> Polyline:
    """
    Replay commands into one polyline.

    Args:
        commands: Output of `parse_commands` (or hand-built commands).
        segment_count: Segments used for every curve or arc command.

    Returns:
        The flattened polyline; `closed` is set if any close command was seen.
    """
    final = reduce(
        lambda state, command: _step(state, command, segment_count),
        commands,
        _PenState()
    )
    return Polyline(final.points, closed=final.closed)


def parse_path(text: str, segment_count: int = BEZIER_SPLIT_COUNT) -> Polyline:
    """Parse and interpret a command string in one go."""
    return interpret(parse_commands(text), segment_count)


def serialize_polyline(polyline: Union[Polyline, Polygon, Sequence[Point2D]]) -> str:
    """
    Write a polyline back as "M x,y L x,y ... Z".

    Curvature is never re-emitted, every segment becomes a lineto. Polygons
    are always closed; plain sequences are treated as open.
    """
    if isinstance(polyline, Polygon):
        closed = True
    else:
        closed = getattr(polyline, "closed", False)

    parts = []
    for i, p in enumerate(polyline):
        prefix = "M" if i == 0 else "L"
        parts.append(f"{prefix} {format_number(p.x)},{format_number(p.y)}")
    if closed and parts:
        parts.append("Z")
    return " ".join(parts)
