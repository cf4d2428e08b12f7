"""Typed dataclasses describing a proposal template and its sections."""

from __future__ import annotations

import dataclasses as dc


class TemplateError(ValueError):
    """Raised when a proposal template document is invalid or incomplete."""


@dc.dataclass(slots=True, frozen=True)
class StyleOverrides:
    """Sparse presentation overrides for a single section.

    Every attribute defaults to ``None``, meaning "unset"; the style resolver
    substitutes the documented default for unset values. ``0`` is an explicit
    value and is never treated as unset.

    Attributes
    ----------
    background_color : str | None
        CSS colour for the section background.
    text_color : str | None
        CSS colour for the section text.
    font_family : str | None
        Font family; ``"inherit"`` behaves like ``None``.
    font_size : int | float | None
        Font size in pixels.
    padding : int | float | None
        Padding on every side, in pixels.
    margin : int | float | None
        Vertical margin in pixels.
    alignment : str | None
        ``"left"``, ``"center"`` or ``"right"``.
    font_weight : str | None
        ``"normal"`` or ``"bold"``.
    font_style : str | None
        ``"normal"`` or ``"italic"``.
    text_decoration : str | None
        ``"none"`` or ``"underline"``.
    """

    background_color: str | None = None
    text_color: str | None = None
    font_family: str | None = None
    font_size: int | float | None = None
    padding: int | float | None = None
    margin: int | float | None = None
    alignment: str | None = None
    font_weight: str | None = None
    font_style: str | None = None
    text_decoration: str | None = None


@dc.dataclass(slots=True, frozen=True)
class SectionLayout:
    """Advisory positioning hints; nothing enforces them."""

    width: str | None = None
    height: str | None = None
    position: str | None = None
    top: int | float | None = None
    left: int | float | None = None
    z_index: int | None = None


@dc.dataclass(slots=True, frozen=True)
class Section:
    """One content block of a proposal.

    The ``id`` stays stable across reorders; document order is the section's
    index inside :attr:`Template.sections`.
    """

    id: str
    kind: str
    title: str
    content: str = ""
    style: StyleOverrides = dc.field(default_factory=StyleOverrides)
    layout: SectionLayout = dc.field(default_factory=SectionLayout)
    is_visible: bool = True
    is_locked: bool = False


@dc.dataclass(slots=True, frozen=True)
class PageMargins:
    """Four-sided page margins in pixels."""

    top: int | float = 20
    right: int | float = 20
    bottom: int | float = 20
    left: int | float = 20


@dc.dataclass(slots=True, frozen=True)
class GlobalStyling:
    """Document-wide styling defaults."""

    primary_color: str = "#0066CC"
    secondary_color: str = "#4A90E2"
    accent_color: str = "#FF6B35"
    font_family: str = "Inter"
    header_font: str = "Inter"
    logo_url: str | None = None
    background_image: str | None = None
    page_margins: PageMargins = dc.field(default_factory=PageMargins)


@dc.dataclass(slots=True, frozen=True)
class Template:
    """A proposal document: metadata, ordered sections, and global styling."""

    id: str
    name: str
    description: str = ""
    sections: tuple[Section, ...] = ()
    global_styling: GlobalStyling = dc.field(default_factory=GlobalStyling)

    @property
    def section_ids(self) -> tuple[str, ...]:
        """Return section ids in document order."""
        return tuple(section.id for section in self.sections)

    def visible_sections(self) -> tuple[Section, ...]:
        """Return the sections shown on the canvas and in the preview."""
        return tuple(section for section in self.sections if section.is_visible)

    def get_section(self, section_id: str) -> Section | None:
        """Return the section with ``section_id`` or ``None``."""
        for section in self.sections:
            if section.id == section_id:
                return section
        return None


__all__ = [
    "GlobalStyling",
    "PageMargins",
    "Section",
    "SectionLayout",
    "StyleOverrides",
    "Template",
    "TemplateError",
]
