"""Shared dataclasses used by the proposal rendering pipeline."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(slots=True)
class SectionView:
    """Structured data passed to the section macro.

    Attributes
    ----------
    id : str
        Section id, emitted as ``data-section-id``.
    kind : str
        Raw section kind.
    kind_label : str
        Kind with underscores shown as spaces, used for the edit-mode badge.
    title : str
        Section title.
    body_html : str
        Sanitized markup for the section body (placeholder included in edit
        mode).
    style : str
        Inline ``style`` attribute value from the resolved section style.
    is_selected : bool
        Whether the editor currently has this section selected.
    is_locked : bool
        Whether the section is locked; locked sections get no drag handle.
    """

    id: str
    kind: str
    kind_label: str
    title: str
    body_html: str
    style: str
    is_selected: bool = False
    is_locked: bool = False


@dc.dataclass(slots=True)
class CanvasView:
    """Page-level values for the A4 canvas."""

    width_px: int
    padding: str
    font_family: str
    header_font: str
    primary_color: str
    logo_url: str | None = None
    background_image: str | None = None


__all__ = ["CanvasView", "SectionView"]
