"""Resolve the effective presentation style of a proposal section.

Resolution is a two-level cascade. For each property the section's override
wins when it is set; otherwise a fixed default applies. The template's global
styling is consulted for one property only, ``font_family``. Sections never
nest, so nothing else inherits.

Pixel properties are kept as bare numbers on :class:`ResolvedStyle` and only
gain their ``px`` unit in :func:`css_declarations`.

Example
-------
>>> from proposal_builder.document import GlobalStyling, Section, StyleOverrides
>>> from proposal_builder.styles import resolve_style
>>> section = Section(
...     id="s", kind="custom", title="S", style=StyleOverrides(padding=0)
... )
>>> resolved = resolve_style(section, GlobalStyling(font_family="Georgia"))
>>> (resolved.font_size, resolved.padding, resolved.font_family)
(16, 0, 'Georgia')
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ
from html import escape

from ._constants import EDIT_PLACEHOLDER, STYLE_RANGES

if typ.TYPE_CHECKING:
    from .document import GlobalStyling, Section, StyleOverrides

DEFAULT_FONT_SIZE = 16
DEFAULT_PADDING = 16
DEFAULT_MARGIN = 0
INHERIT = "inherit"

# property -> (active value, inactive value) for the toolbar toggles.
STYLE_TOGGLES: dict[str, tuple[str, str]] = {
    "font_weight": ("bold", "normal"),
    "font_style": ("italic", "normal"),
    "text_decoration": ("underline", "none"),
}


class RenderMode(enum.StrEnum):
    """Canvas rendering mode."""

    EDIT = "edit"
    PREVIEW = "preview"


@dc.dataclass(slots=True, frozen=True)
class ResolvedStyle:
    """Concrete style for one section after the cascade has been applied."""

    background_color: str
    text_color: str
    font_family: str
    font_size: int | float
    padding: int | float
    margin: int | float
    alignment: str
    font_weight: str
    font_style: str
    text_decoration: str


def _pick(value: typ.Any, default: typ.Any) -> typ.Any:
    return default if value is None else value


def resolve_style(section: Section, global_styling: GlobalStyling) -> ResolvedStyle:
    """Apply the section's overrides over the documented defaults.

    Parameters
    ----------
    section : Section
        Section whose ``style`` overrides are read.
    global_styling : GlobalStyling
        Template-wide defaults; only ``font_family`` is used.

    Returns
    -------
    ResolvedStyle
        The style to render. ``0`` overrides are kept as ``0``.
    """
    style = section.style
    font_family = style.font_family
    if font_family is None or font_family == INHERIT:
        font_family = global_styling.font_family
    return ResolvedStyle(
        background_color=_pick(style.background_color, "transparent"),
        text_color=_pick(style.text_color, INHERIT),
        font_family=font_family,
        font_size=_pick(style.font_size, DEFAULT_FONT_SIZE),
        padding=_pick(style.padding, DEFAULT_PADDING),
        margin=_pick(style.margin, DEFAULT_MARGIN),
        alignment=_pick(style.alignment, "left"),
        font_weight=_pick(style.font_weight, "normal"),
        font_style=_pick(style.font_style, "normal"),
        text_decoration=_pick(style.text_decoration, "none"),
    )


def css_declarations(resolved: ResolvedStyle) -> dict[str, str]:
    """Return CSS property/value pairs for ``resolved`` with ``px`` units applied."""
    return {
        "background-color": resolved.background_color,
        "color": resolved.text_color,
        "font-family": resolved.font_family,
        "font-size": f"{resolved.font_size}px",
        "padding": f"{resolved.padding}px",
        "margin": f"{resolved.margin}px 0",
        "text-align": resolved.alignment,
        "font-weight": resolved.font_weight,
        "font-style": resolved.font_style,
        "text-decoration": resolved.text_decoration,
    }


def inline_style(resolved: ResolvedStyle) -> str:
    """Join the CSS declarations into a ``style`` attribute value."""
    return "; ".join(
        f"{prop}: {value}" for prop, value in css_declarations(resolved).items()
    )


def section_body(section: Section, mode: RenderMode | str) -> str:
    """Return the markup to render for ``section`` in ``mode``.

    Edit mode replaces empty content with a placeholder built from the
    section title so the block stays visible on the canvas. Preview mode
    returns the stored content untouched, empty or not.
    """
    if RenderMode(mode) is RenderMode.EDIT and not section.content:
        return EDIT_PLACEHOLDER.format(title=escape(section.title))
    return section.content


def toggle_style(style: StyleOverrides, prop: str) -> StyleOverrides:
    """Flip a bold/italic/underline toggle on ``style``.

    Raises
    ------
    KeyError
        If ``prop`` is not one of :data:`STYLE_TOGGLES`.
    """
    active, inactive = STYLE_TOGGLES[prop]
    current = getattr(style, prop)
    return dc.replace(style, **{prop: inactive if current == active else active})


def check_style_range(prop: str, value: int | float) -> int | float:
    """Validate a slider-backed style value against the style panel range.

    Raises
    ------
    ValueError
        If ``value`` falls outside the slider bounds for ``prop``.
    """
    bounds = STYLE_RANGES.get(prop)
    if bounds is None:
        return value
    minimum, maximum, _step = bounds
    if not minimum <= value <= maximum:
        msg = f"{prop} must be between {minimum} and {maximum}, got {value}."
        raise ValueError(msg)
    return value


__all__ = [
    "DEFAULT_FONT_SIZE",
    "DEFAULT_MARGIN",
    "DEFAULT_PADDING",
    "STYLE_TOGGLES",
    "RenderMode",
    "ResolvedStyle",
    "check_style_range",
    "css_declarations",
    "inline_style",
    "resolve_style",
    "section_body",
    "toggle_style",
]
