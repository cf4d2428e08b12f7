"""Utility helpers shared by the template loader, serializer, and store."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
import uuid

from .models import (
    GlobalStyling,
    PageMargins,
    Section,
    SectionLayout,
    StyleOverrides,
    TemplateError,
)

SECTION_ID_PREFIX = "section-"


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _kind_label(kind: str) -> str:
    """Return ``kind`` with underscores shown as spaces."""
    return kind.replace("_", " ")


def _kind_title(kind: str) -> str:
    """Return the default upper-case title for a new section of ``kind``."""
    return _kind_label(kind).upper()


def _unique_section_id(used: typ.Collection[str]) -> str:
    """Generate a section id that does not collide with ``used``."""
    candidate = f"{SECTION_ID_PREFIX}{uuid.uuid4().hex[:12]}"
    while candidate in used:
        candidate = f"{SECTION_ID_PREFIX}{uuid.uuid4().hex[:12]}"
    return candidate


def _field_names(cls: type) -> frozenset[str]:
    return frozenset(field.name for field in dc.fields(cls))


def _pick_fields(cls: type, payload: typ.Mapping[str, typ.Any]) -> dict[str, typ.Any]:
    """Keep only the keys of ``payload`` that name a field of ``cls``."""
    names = _field_names(cls)
    return {key: value for key, value in payload.items() if key in names}


def _build_style(payload: typ.Mapping[str, typ.Any] | None) -> StyleOverrides:
    """Build StyleOverrides from a mapping, ignoring unknown keys."""
    if not payload:
        return StyleOverrides()
    return StyleOverrides(**_pick_fields(StyleOverrides, payload))


def _build_layout(payload: typ.Mapping[str, typ.Any] | None) -> SectionLayout:
    """Build SectionLayout from a mapping, ignoring unknown keys."""
    if not payload:
        return SectionLayout()
    return SectionLayout(**_pick_fields(SectionLayout, payload))


def _merge_style(
    base: StyleOverrides, override: StyleOverrides | typ.Mapping[str, typ.Any] | None
) -> StyleOverrides:
    """Merge an override mapping into ``base``; a StyleOverrides replaces it.

    ``None`` clears every override.
    """
    if override is None:
        return StyleOverrides()
    if isinstance(override, StyleOverrides):
        return override
    return dc.replace(base, **_pick_fields(StyleOverrides, override))


def _merge_layout(
    base: SectionLayout, override: SectionLayout | typ.Mapping[str, typ.Any] | None
) -> SectionLayout:
    """Merge an override mapping into ``base``; a SectionLayout replaces it."""
    if override is None:
        return SectionLayout()
    if isinstance(override, SectionLayout):
        return override
    return dc.replace(base, **_pick_fields(SectionLayout, override))


def _merge_margins(
    base: PageMargins, override: PageMargins | typ.Mapping[str, typ.Any]
) -> PageMargins:
    """Merge margin overrides side by side into ``base``."""
    if isinstance(override, PageMargins):
        return override
    if not isinstance(override, typ.Mapping):
        return base
    return dc.replace(base, **_pick_fields(PageMargins, override))


def _build_global_styling(payload: typ.Mapping[str, typ.Any] | None) -> GlobalStyling:
    """Build GlobalStyling from a mapping, applying defaults for missing keys."""
    if not payload:
        return GlobalStyling()
    values = _pick_fields(GlobalStyling, payload)
    margins = values.pop("page_margins", None)
    styling = GlobalStyling(**values)
    if isinstance(margins, typ.Mapping):
        styling = dc.replace(
            styling, page_margins=_merge_margins(styling.page_margins, margins)
        )
    return styling


def _build_section(payload: typ.Mapping[str, typ.Any], *, position: int) -> Section:
    """Build a Section from a snake_case mapping.

    Raises
    ------
    TemplateError
        If the entry has no ``id``.
    """
    section_id = _optional_str(payload.get("id"))
    if not section_id:
        msg = f"Section at position {position} is missing an 'id'."
        raise TemplateError(msg)
    kind = _optional_str(payload.get("kind")) or "custom"
    title = payload.get("title")
    if title is None:
        title = _kind_label(kind).title()
    return Section(
        id=section_id,
        kind=kind,
        title=str(title),
        content=str(payload.get("content") or ""),
        style=_build_style(payload.get("style")),
        layout=_build_layout(payload.get("layout")),
        is_visible=bool(payload.get("is_visible", True)),
        is_locked=bool(payload.get("is_locked", False)),
    )


def _build_sections(entries: typ.Iterable[object]) -> tuple[Section, ...]:
    """Build sections in order, rejecting malformed entries and duplicate ids."""
    sections: list[Section] = []
    seen: set[str] = set()
    for position, entry in enumerate(entries):
        if not isinstance(entry, typ.Mapping):
            msg = f"Section at position {position} must be a mapping."
            raise TemplateError(msg)
        section = _build_section(entry, position=position)
        if section.id in seen:
            msg = f"Duplicate section id '{section.id}'."
            raise TemplateError(msg)
        seen.add(section.id)
        sections.append(section)
    return tuple(sections)


def _compact(values: typ.Mapping[str, typ.Any]) -> dict[str, typ.Any]:
    """Drop ``None`` values so sparse records stay sparse when serialized."""
    return {key: value for key, value in values.items() if value is not None}


__all__ = [
    "SECTION_ID_PREFIX",
    "_build_global_styling",
    "_build_layout",
    "_build_section",
    "_build_sections",
    "_build_style",
    "_compact",
    "_kind_label",
    "_kind_title",
    "_merge_layout",
    "_merge_margins",
    "_merge_style",
    "_optional_str",
    "_pick_fields",
    "_unique_section_id",
]
