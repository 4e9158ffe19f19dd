"""Style attributes consumed by downstream collaborators (fill, stroke, dashes)."""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from shapeslicer.config import DEFAULT_STYLE
from shapeslicer.utils import format_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StyleAttributes:
    """
    Flat, typed view of the recognized style keys.
    A field left as None was not specified by the source.
    """
    fill: Optional[bool] = None
    fill_color: Optional[str] = None
    stroke: Optional[bool] = None
    stroke_color: Optional[str] = None
    line_width: Optional[float] = None
    stroke_opacity: Optional[float] = None
    fill_opacity: Optional[float] = None
    line_cap: Optional[str] = None
    line_join: Optional[str] = None
    line_dash: Optional[Tuple[float, ...]] = None

    def merged_over(self, base: StyleAttributes) -> StyleAttributes:
        """Fields set here win, the rest are taken from `base`."""
        overrides = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
        return replace(base, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    @classmethod
    def default(cls) -> StyleAttributes:
        return cls(**DEFAULT_STYLE)


def _parse_paint(style: Dict[str, Any], value: str, flag: str, color: str) -> None:
    if value.lower() == "none":
        style[flag] = False
        style[color] = None
    else:
        style[flag] = True
        style[color] = value


def _parse_dash(value: str) -> Tuple[float, ...]:
    if value.lower() == "none":
        return ()
    parts = value.replace(",", " ").split()
    return tuple(float(p) for p in parts)


# Recognized key -> (field name, value parser)
_VALUE_KEYS: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    "stroke-width": ("line_width", float),
    "stroke-opacity": ("stroke_opacity", float),
    "fill-opacity": ("fill_opacity", float),
    "stroke-linecap": ("line_cap", str),
    "stroke-linejoin": ("line_join", str),
    "stroke-dasharray": ("line_dash", _parse_dash),
}


def _split_style_string(raw: str) -> Dict[str, str]:
    ret = {}
    for element in raw.split(";"):
        if ":" not in element:
            continue
        key, value = element.split(":", 1)
        ret[key.strip()] = value.strip()
    return ret


def parse_style(raw: Union[str, Mapping[str, str], None]) -> StyleAttributes:
    """
    Build StyleAttributes from "key:value;..." text or from an attribute map.

    Unrecognized keys are ignored; values that do not parse are skipped.
    """
    if raw is None:
        return StyleAttributes()
    entries = _split_style_string(raw) if isinstance(raw, str) else dict(raw)

    style: Dict[str, Any] = {}
    for key, value in entries.items():
        key = key.strip().lower()
        value = str(value).strip()

        if key == "fill":
            _parse_paint(style, value, "fill", "fill_color")
        elif key == "stroke":
            _parse_paint(style, value, "stroke", "stroke_color")
        elif key in _VALUE_KEYS:
            name, parser = _VALUE_KEYS[key]
            try:
                style[name] = parser(value)
            except ValueError:
                logger.debug(f"Ignoring unparsable style value {key}:{value!r}")

    return StyleAttributes(**style)


def serialize_style(style: StyleAttributes) -> str:
    """Inverse of `parse_style` for the fields that are set."""
    ret = ""

    if style.fill is not None:
        ret += "fill:none;" if not style.fill else f"fill:{style.fill_color};"
    if style.fill_opacity is not None:
        ret += f"fill-opacity:{format_number(style.fill_opacity)};"

    if style.stroke is not None:
        ret += "stroke:none;" if not style.stroke else f"stroke:{style.stroke_color};"
    if style.line_width is not None:
        ret += f"stroke-width:{format_number(style.line_width)};"
    if style.stroke_opacity is not None:
        ret += f"stroke-opacity:{format_number(style.stroke_opacity)};"
    if style.line_cap is not None:
        ret += f"stroke-linecap:{style.line_cap};"
    if style.line_join is not None:
        ret += f"stroke-linejoin:{style.line_join};"
    if style.line_dash is not None:
        if style.line_dash:
            ret += "stroke-dasharray:" + ",".join(format_number(v) for v in style.line_dash) + ";"
        else:
            ret += "stroke-dasharray:none;"

    return ret
